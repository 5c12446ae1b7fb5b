from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from ..db.engine import get_db
from ..repositories.resources_repo import OrderDetailsRepository

router = APIRouter(tags=["order_details"])


class OrderDetailRequest(BaseModel):
    order_id: str = Field(..., min_length=36, max_length=36)
    product_id: str = Field(..., min_length=36, max_length=36)
    quantity: int = Field(..., ge=1)
    price: int = Field(..., ge=1)
    order_detail_status: Literal[
        "new", "paid", "canceled", "delivered", "refunded", "returned"
    ] = "new"


@router.get("/orderDetails/{detail_id}")
def get_order_detail(detail_id: str, db: Session = Depends(get_db)):
    return OrderDetailsRepository(db).get(detail_id).to_dict()


@router.post("/orderDetails", status_code=201)
def create_order_detail(body: OrderDetailRequest, db: Session = Depends(get_db)):
    return OrderDetailsRepository(db).create(body.model_dump()).to_dict()


@router.put("/orderDetails/{detail_id}", status_code=202)
def update_order_detail(detail_id: str, body: OrderDetailRequest, db: Session = Depends(get_db)):
    return OrderDetailsRepository(db).update(detail_id, body.model_dump()).to_dict()


@router.delete("/orderDetails/{detail_id}", status_code=204)
def delete_order_detail(detail_id: str, db: Session = Depends(get_db)):
    OrderDetailsRepository(db).delete(detail_id)
    return Response(status_code=204)
