from __future__ import annotations

from typing import Annotated, ClassVar, Literal

from fastapi import APIRouter, Depends, Query, Request, Response
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from ..db.engine import get_db
from ..db.models import User
from ..db.query_spec import FilterSpec, Predicate, as_int
from ..errors import NotFoundError
from ..observability.logging import get_logger
from ..repositories.orders_repo import OrdersRepository
from ..services.receipt_pdf import ReceiptData, write_receipt
from .params import Numeric, PageParams, UUID4Text

router = APIRouter(tags=["orders"])
log = get_logger("orders")

OrderStatusText = Literal[
    "new",
    "paid",
    "canceled",
    "delivered",
    "refunded",
    "returned",
    "partially",
    "partially_paid",
]


class OrderFilters(PageParams):
    user_id: UUID4Text = ""
    quantity: Numeric = ""
    total_price: Numeric = ""
    order_status: Literal["", OrderStatusText] = ""

    spec: ClassVar[FilterSpec] = FilterSpec(
        predicates=(
            Predicate("user_id", "user_id"),
            Predicate("quantity", "quantity", cast=as_int),
            Predicate("total_price", "total_price", cast=as_int),
            Predicate("order_status", "order_status"),
        ),
        order_by="created_at",
        descending=True,
    )


class OrderDetailItem(BaseModel):
    product_id: str = Field(..., min_length=1, max_length=36)
    quantity: int = Field(..., ge=1)
    price: int = Field(..., ge=1)


class CreateOrderRequest(BaseModel):
    user_id: str = Field(..., min_length=1, max_length=36)
    order_status: OrderStatusText = "new"
    remarks: str = Field("", max_length=255)
    order_details: list[OrderDetailItem] = Field(..., min_length=1)


class UpdateOrderRequest(BaseModel):
    user_id: str = Field(..., min_length=1, max_length=36)
    order_status: OrderStatusText
    remarks: str = Field("", max_length=255)


class ExportPdfRequest(BaseModel):
    order_id: UUID4Text = Field(..., min_length=1)


def _order_out(order) -> dict:
    return order.to_dict(include=("order_details",))


@router.get("/orders")
def list_orders(params: Annotated[OrderFilters, Query()], db: Session = Depends(get_db)):
    orders = OrdersRepository(db).list(OrderFilters.spec, params)
    return {"total": len(orders), "orders": [_order_out(o) for o in orders]}


@router.get("/orders/{order_id}")
def get_order(order_id: str, db: Session = Depends(get_db)):
    return _order_out(OrdersRepository(db).get(order_id))


@router.post("/orders", status_code=201)
def create_order(body: CreateOrderRequest, db: Session = Depends(get_db)):
    order = OrdersRepository(db).create_order(
        user_id=body.user_id,
        order_status=body.order_status,
        remarks=body.remarks,
        order_details=[d.model_dump() for d in body.order_details],
    )
    return _order_out(order)


@router.put("/orders/{order_id}", status_code=202)
def update_order(order_id: str, body: UpdateOrderRequest, db: Session = Depends(get_db)):
    return _order_out(OrdersRepository(db).update(order_id, body.model_dump()))


@router.delete("/orders/{order_id}", status_code=204)
def delete_order(order_id: str, db: Session = Depends(get_db)):
    OrdersRepository(db).delete(order_id)
    return Response(status_code=204)


@router.post("/orders/exportPdf")
def export_order_pdf(body: ExportPdfRequest, request: Request, db: Session = Depends(get_db)):
    order = OrdersRepository(db).get(body.order_id)
    user = db.get(User, order.user_id)
    if user is None:
        raise NotFoundError("user not found")

    path = write_receipt(
        request.app.state.settings,
        ReceiptData(
            order_id=order.id,
            recipient=f"{user.last_name}{user.first_name}",
            ordered_at=order.created_at,
            total_price=order.total_price,
        ),
    )
    log.info("receipt_pdf_written", order_id=order.id, path=str(path))
    return {"message": "PDFを出力しました", "path": str(path)}
