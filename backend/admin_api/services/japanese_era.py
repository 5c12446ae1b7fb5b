from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime


@dataclass(frozen=True)
class Era:
    name: str
    start: date


# Newest first.
ERAS: tuple[Era, ...] = (
    Era("令和", date(2019, 5, 1)),
    Era("平成", date(1989, 1, 8)),
    Era("昭和", date(1926, 12, 25)),
    Era("大正", date(1912, 7, 30)),
    Era("明治", date(1868, 1, 25)),
)


def era_of(d: date | datetime) -> tuple[str, int]:
    day = d.date() if isinstance(d, datetime) else d
    for era in ERAS:
        if day >= era.start:
            return era.name, day.year - era.start.year + 1
    raise ValueError(f"date before supported eras: {day.isoformat()}")


def era_year_text(year: int) -> str:
    return "元" if year == 1 else str(year)


def to_japanese_date(d: date | datetime) -> tuple[str, str, str]:
    """(era year, month, day) as printed on receipts, e.g. ("5", "4", "1")."""
    _, year = era_of(d)
    return era_year_text(year), str(d.month), str(d.day)


def format_japanese_date(d: date | datetime) -> str:
    name, year = era_of(d)
    return f"{name}{era_year_text(year)}年{d.month}月{d.day}日"
