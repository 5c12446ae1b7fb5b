from __future__ import annotations

import csv
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from sqlalchemy.orm import Session

from ..db.models import Product, new_uuid

DEFAULT_ENCODING = "shift_jis"


def _to_int(v: str) -> int:
    # Unparseable numbers import as 0.
    try:
        return int(str(v).strip())
    except ValueError:
        return 0


def parse_record(record: list[str]) -> dict[str, Any]:
    """`id,name,price,remarks,quantity` -> Product column values."""
    padded = (record + [""] * 5)[:5]
    pid, name, price, remarks, quantity = padded
    return {
        "id": pid.strip() or new_uuid(),
        "name": name,
        "price": _to_int(price),
        "remarks": remarks,
        "quantity": _to_int(quantity),
    }


def read_products(path: str | Path, *, encoding: str = DEFAULT_ENCODING) -> Iterator[dict[str, Any]]:
    with open(path, encoding=encoding, newline="") as f:
        for record in csv.reader(f):
            if not record:
                continue
            yield parse_record(record)


def import_products(db: Session, path: str | Path, *, encoding: str = DEFAULT_ENCODING) -> int:
    count = 0
    for values in read_products(path, encoding=encoding):
        db.add(Product(**values))
        count += 1
    db.commit()
    return count
