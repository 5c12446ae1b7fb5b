from __future__ import annotations

import csv
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path

from ..db.models import Order, User
from ..settings import Settings
from .assets import asset_path

TIME_FORMAT = "%Y-%m-%d %H:%M:%S"

ORDER_HEADER = [
    "注文ID",
    "ユーザID",
    "数量",
    "合計金額",
    "注文ステータス",
    "注文備考",
    "作成日時",
    "更新日時",
]

USER_HEADER = ["ID", "LastName", "FirstName", "Email", "Age"]


def _fmt_time(v: datetime | None) -> str:
    return v.strftime(TIME_FORMAT) if v else ""


def order_row(order: Order) -> list[str]:
    return [
        order.id,
        order.user_id,
        str(order.quantity),
        str(order.total_price),
        str(order.order_status),
        order.remarks or "",
        _fmt_time(order.created_at),
        _fmt_time(order.updated_at),
    ]


def user_row(user: User) -> list[str]:
    return [user.id, user.last_name, user.first_name, user.email, str(user.age)]


def orders_csv_path(settings: Settings, day: datetime) -> Path:
    # assets/csv/orders/2024/1/5/20240105_orders.csv
    return asset_path(
        settings,
        "csv",
        "orders",
        str(day.year),
        str(day.month),
        str(day.day),
        f"{day:%Y%m%d}_orders.csv",
    )


def users_csv_path(settings: Settings, at: datetime) -> Path:
    return asset_path(settings, "csv", "users", f"{at:%Y%m%d%H%M}_users.csv")


def write_csv(path: Path, header: list[str], rows: Iterable[list[str]]) -> int:
    count = 0
    with path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        for row in rows:
            writer.writerow(row)
            count += 1
    return count


def export_orders(settings: Settings, orders: Iterable[Order], *, day: datetime | None = None) -> tuple[Path, int]:
    path = orders_csv_path(settings, day or datetime.now())
    return path, write_csv(path, ORDER_HEADER, (order_row(o) for o in orders))


def export_users(settings: Settings, users: Iterable[User], *, at: datetime | None = None) -> tuple[Path, int]:
    path = users_csv_path(settings, at or datetime.now())
    return path, write_csv(path, USER_HEADER, (user_row(u) for u in users))
