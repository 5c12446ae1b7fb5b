"""
Typed list-query specification.

A `FilterSpec` is a tuple of `Predicate` descriptors. `apply_filters` walks it
and appends one WHERE clause per non-empty request parameter, then
OFFSET/LIMIT. Parameter values arrive as strings (`""` = unset) and are
already validated by the filter model, so the builder never raises.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Literal

from sqlalchemy import Select

Op = Literal["eq", "like", "gt", "lt", "gte", "lte"]

TRUE_VALUES = frozenset({"1", "t", "T", "TRUE", "true", "True"})


def as_int(v: str) -> int:
    return int(v)


def as_bool(v: str) -> bool:
    return v in TRUE_VALUES


def to_naive(dt: datetime) -> datetime:
    """Aware datetimes become naive local time (columns are stored naive)."""
    if dt.tzinfo is not None:
        return dt.astimezone().replace(tzinfo=None)
    return dt


def as_datetime(v: str) -> datetime:
    raw = v.strip()
    if raw.endswith(("Z", "z")):
        raw = raw[:-1] + "+00:00"
    return to_naive(datetime.fromisoformat(raw))


def as_str(v: str) -> str:
    return v


@dataclass(frozen=True)
class Predicate:
    param: str
    column: str
    op: Op = "eq"
    cast: Callable[[str], Any] = as_str


@dataclass(frozen=True)
class FilterSpec:
    predicates: tuple[Predicate, ...] = ()
    order_by: str | None = None
    descending: bool = False
    paginate: bool = True


def _params_dict(params: Any) -> dict[str, Any]:
    if params is None:
        return {}
    if hasattr(params, "model_dump"):
        return params.model_dump()
    return dict(params)


def _clause(column: Any, op: Op, value: Any):
    if op == "like":
        return column.like(f"%{value}%")
    if op == "gt":
        return column > value
    if op == "lt":
        return column < value
    if op == "gte":
        return column >= value
    if op == "lte":
        return column <= value
    return column == value


def apply_filters(stmt: Select, model: type, spec: FilterSpec, params: Any) -> Select:
    values = _params_dict(params)

    for p in spec.predicates:
        raw = values.get(p.param)
        if raw is None or str(raw) == "":
            continue
        column = getattr(model, p.column)
        stmt = stmt.where(_clause(column, p.op, p.cast(str(raw))))

    if spec.order_by:
        column = getattr(model, spec.order_by)
        stmt = stmt.order_by(column.desc() if spec.descending else column.asc())

    if spec.paginate:
        offset = str(values.get("offset") or "")
        limit = str(values.get("limit") or "")
        if offset:
            stmt = stmt.offset(int(offset))
        if limit:
            stmt = stmt.limit(int(limit))

    return stmt
