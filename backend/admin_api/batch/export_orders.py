"""
Export all orders to assets/csv/orders/<Y>/<M>/<D>/<YYYYMMDD>_orders.csv.

Usage:
    admin-api-export-orders [--assets-dir DIR]
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from sqlalchemy import select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from ..db.engine import build_engine, build_sessionmaker
from ..db.models import Order
from ..observability.logging import configure_logging, get_logger
from ..services.csv_export import export_orders
from ..settings import Settings, get_settings

log = get_logger("export_orders")


def run_once(settings: Settings, engine: Engine) -> Path:
    db = build_sessionmaker(engine)()
    try:
        orders = db.scalars(select(Order).order_by(Order.created_at)).all()
        path, count = export_orders(settings, orders)
    finally:
        db.close()
    log.info("orders_csv_exported", path=str(path), rows=count)
    return path


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Export the order list to CSV")
    parser.add_argument("--assets-dir", default=None, help="Override ASSETS_DIR")
    args = parser.parse_args(argv)

    settings = get_settings()
    if args.assets_dir:
        settings = settings.model_copy(update={"assets_dir": args.assets_dir})
    configure_logging(level=settings.log_level)

    log.info("orders_csv_export_started")
    try:
        run_once(settings, build_engine(settings))
    except (SQLAlchemyError, OSError):
        log.exception("orders_csv_export_failed")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
