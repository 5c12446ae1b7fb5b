from __future__ import annotations

from datetime import datetime
from typing import Annotated, ClassVar

from fastapi import APIRouter, Depends, Query, Response
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from ..db.engine import get_db
from ..db.query_spec import (
    FilterSpec,
    Predicate,
    as_bool,
    as_datetime,
    as_int,
    to_naive,
)
from ..repositories.coupons_repo import CouponUsersRepository
from ..repositories.resources_repo import CouponsRepository
from .params import BoolText, DateTimeText, Numeric, PageParams, Text64

router = APIRouter(tags=["coupons"])


def _range(param: str, column: str) -> tuple[Predicate, Predicate]:
    # Exclusive bounds on both ends.
    return (
        Predicate(f"{param}_from", column, "gt", as_datetime),
        Predicate(f"{param}_to", column, "lt", as_datetime),
    )


class CouponFilters(PageParams):
    title: Text64 = ""
    discount_amount: Numeric = ""
    discount_rate: Numeric = ""
    max_discount_amount: Numeric = ""
    use_start_at_from: DateTimeText = ""
    use_start_at_to: DateTimeText = ""
    use_end_at_from: DateTimeText = ""
    use_end_at_to: DateTimeText = ""
    public_start_at_from: DateTimeText = ""
    public_start_at_to: DateTimeText = ""
    public_end_at_from: DateTimeText = ""
    public_end_at_to: DateTimeText = ""
    is_public: BoolText = ""
    is_premium: BoolText = ""

    spec: ClassVar[FilterSpec] = FilterSpec(
        predicates=(
            Predicate("title", "title", "like"),
            Predicate("discount_amount", "discount_amount", cast=as_int),
            Predicate("discount_rate", "discount_rate", cast=as_int),
            Predicate("max_discount_amount", "max_discount_amount", cast=as_int),
            *_range("use_start_at", "use_start_at"),
            *_range("use_end_at", "use_end_at"),
            *_range("public_start_at", "public_start_at"),
            *_range("public_end_at", "public_end_at"),
            Predicate("is_public", "is_public", cast=as_bool),
            Predicate("is_premium", "is_premium", cast=as_bool),
        )
    )


class CouponRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=64)
    remarks: str = Field("", max_length=255)
    discount_amount: int = Field(0, ge=0)
    discount_rate: int = Field(0, ge=0, le=100)
    max_discount_amount: int = Field(0, ge=0)
    use_start_at: datetime
    use_end_at: datetime
    public_start_at: datetime
    public_end_at: datetime
    is_public: bool = False
    is_premium: bool = False


def _naive(values: dict) -> dict:
    return {k: to_naive(v) if isinstance(v, datetime) else v for k, v in values.items()}


@router.get("/coupons")
def list_coupons(params: Annotated[CouponFilters, Query()], db: Session = Depends(get_db)):
    coupons = CouponsRepository(db).list(CouponFilters.spec, params)
    return {"total": len(coupons), "coupons": [c.to_dict() for c in coupons]}


@router.get("/coupons/{coupon_id}")
def get_coupon(coupon_id: str, db: Session = Depends(get_db)):
    return CouponsRepository(db).get(coupon_id).to_dict()


@router.post("/coupons", status_code=201)
def create_coupon(body: CouponRequest, db: Session = Depends(get_db)):
    return CouponsRepository(db).create(_naive(body.model_dump())).to_dict()


@router.put("/coupons/{coupon_id}", status_code=202)
def update_coupon(coupon_id: str, body: CouponRequest, db: Session = Depends(get_db)):
    return CouponsRepository(db).update(coupon_id, _naive(body.model_dump())).to_dict()


@router.delete("/coupons/{coupon_id}", status_code=204)
def delete_coupon(coupon_id: str, db: Session = Depends(get_db)):
    CouponsRepository(db).delete(coupon_id)
    return Response(status_code=204)


@router.post("/coupons/{coupon_id}/users/{user_id}", status_code=201)
def acquire_coupon(coupon_id: str, user_id: str, db: Session = Depends(get_db)):
    row = CouponUsersRepository(db).acquire(coupon_id=coupon_id, user_id=user_id)
    return row.to_dict()
