"""
Import products from a Shift-JIS CSV (`id,name,price,remarks,quantity`).

Usage:
    admin-api-import-products [--file product.CSV] [--encoding shift_jis]
"""

from __future__ import annotations

import argparse
import sys

from sqlalchemy.exc import SQLAlchemyError

from ..db.engine import build_engine, build_sessionmaker
from ..observability.logging import configure_logging, get_logger
from ..services.product_import import DEFAULT_ENCODING, import_products
from ..settings import get_settings

log = get_logger("import_products")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Import products from CSV")
    parser.add_argument("--file", default="product.CSV", help="CSV file to import")
    parser.add_argument("--encoding", default=DEFAULT_ENCODING, help="File encoding")
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(level=settings.log_level)

    log.info("product_import_started", file=args.file)
    db = build_sessionmaker(build_engine(settings))()
    try:
        count = import_products(db, args.file, encoding=args.encoding)
    except (SQLAlchemyError, OSError, UnicodeDecodeError):
        db.rollback()
        log.exception("product_import_failed", file=args.file)
        return 1
    finally:
        db.close()

    log.info("product_import_done", file=args.file, rows=count)
    return 0


if __name__ == "__main__":
    sys.exit(main())
