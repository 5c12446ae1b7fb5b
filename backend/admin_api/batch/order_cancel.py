"""
Cancel every order still in `new`, together with its line items.

Usage:
    admin-api-order-cancel
"""

from __future__ import annotations

import argparse
import sys
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from ..db.engine import build_engine, build_sessionmaker
from ..observability.logging import configure_logging, get_logger
from ..repositories.orders_repo import cancel_new_orders
from ..settings import get_settings

log = get_logger("order_cancel")


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def run_once(engine: Engine) -> dict[str, Any]:
    started_at = _now_iso()
    log.info("order_cancel_started")

    db = build_sessionmaker(engine)()
    try:
        orders, details = cancel_new_orders(db)
    finally:
        db.close()

    out = {
        "ok": True,
        "startedAt": started_at,
        "finishedAt": _now_iso(),
        "ordersCanceled": orders,
        "detailsCanceled": details,
    }
    log.info("order_cancel_done", **out)
    return out


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Cancel all orders in status 'new'")
    parser.parse_args(argv)

    settings = get_settings()
    configure_logging(level=settings.log_level)
    try:
        run_once(build_engine(settings))
    except SQLAlchemyError:
        log.exception("order_cancel_failed")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
