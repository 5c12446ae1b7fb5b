from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..db.models import (
    Order,
    OrderDetail,
    OrderDetailStatus,
    OrderStatus,
    new_uuid,
    now,
)
from ..errors import InternalServerError
from ..observability.logging import get_logger
from .base_repository import SqlRepository

log = get_logger("orders_repo")


def total_quantity(details: Iterable[Mapping[str, Any]]) -> int:
    return sum(int(d["quantity"]) for d in details)


def total_price(details: Iterable[Mapping[str, Any]]) -> int:
    return sum(int(d["quantity"]) * int(d["price"]) for d in details)


class OrdersRepository(SqlRepository[Order]):
    model = Order
    label = "order"

    def create_order(
        self,
        *,
        user_id: str,
        order_details: list[dict[str, Any]],
        order_status: str = OrderStatus.NEW.value,
        remarks: str = "",
    ) -> Order:
        """
        Insert an order and its line items in one transaction.

        The order's quantity/total_price are computed here from the line items;
        nothing is written unless every insert succeeds.
        """
        ts = now()
        order = Order(
            id=new_uuid(),
            user_id=user_id,
            quantity=total_quantity(order_details),
            total_price=total_price(order_details),
            order_status=order_status or OrderStatus.NEW.value,
            remarks=remarks or "",
            created_at=ts,
            updated_at=ts,
        )
        try:
            self.db.add(order)
            self.db.flush()
            for d in order_details:
                order.order_details.append(
                    OrderDetail(
                        id=new_uuid(),
                        order_id=order.id,
                        product_id=d["product_id"],
                        quantity=int(d["quantity"]),
                        price=int(d["price"]),
                        order_detail_status=OrderDetailStatus.NEW.value,
                    )
                )
            self.db.flush()
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            log.error("failed_to_create_order", user_id=user_id, error=str(e))
            raise InternalServerError.wrap("failed to create order", e) from e

        log.info(
            "order_created",
            order_id=order.id,
            quantity=order.quantity,
            total_price=order.total_price,
            details=len(order_details),
        )
        return order


def cancel_new_orders(db: Session) -> tuple[int, int]:
    """
    Move every `new` order and its line items to `canceled`.

    Both updates share the session's transaction; returns
    (orders_canceled, details_canceled).
    """
    order_ids = list(
        db.scalars(select(Order.id).where(Order.order_status == OrderStatus.NEW.value)).all()
    )
    if not order_ids:
        db.rollback()
        return 0, 0
    return cancel_orders(db, order_ids)


def cancel_orders(db: Session, order_ids: list[str]) -> tuple[int, int]:
    """Cancel those of `order_ids` still in `new`, with their line items."""
    ts = now()
    # Orders this call moved to `canceled`, identified by the shared timestamp.
    canceled_here = select(Order.id).where(
        Order.id.in_(order_ids),
        Order.order_status == OrderStatus.CANCELED.value,
        Order.updated_at == ts,
    )
    try:
        orders_res = db.execute(
            update(Order)
            .where(Order.id.in_(order_ids), Order.order_status == OrderStatus.NEW.value)
            .values(order_status=OrderStatus.CANCELED.value, updated_at=ts)
        )
        details_res = db.execute(
            update(OrderDetail)
            .where(OrderDetail.order_id.in_(canceled_here))
            .values(order_detail_status=OrderDetailStatus.CANCELED.value)
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    return int(orders_res.rowcount or 0), int(details_res.rowcount or 0)
