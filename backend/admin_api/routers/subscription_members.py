from __future__ import annotations

from datetime import datetime
from typing import Annotated, ClassVar, Literal

from fastapi import APIRouter, Depends, Query, Response
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from ..db.engine import get_db
from ..db.query_spec import FilterSpec, Predicate, as_datetime, to_naive
from ..repositories.resources_repo import SubscriptionMembersRepository
from .params import DateTimeText, PageParams, UUID4Text

router = APIRouter(tags=["subscription_members"])

MemberStatusText = Literal["premium", "basic", "inactive", "stopped"]


class SubscriptionMemberFilters(PageParams):
    user_id: UUID4Text = ""
    member_status: Literal["", MemberStatusText] = ""
    member_start_date_from: DateTimeText = ""
    member_end_date_to: DateTimeText = ""
    member_stop_start_date_from: DateTimeText = ""
    member_stop_end_date_to: DateTimeText = ""

    # Membership date bounds are inclusive.
    spec: ClassVar[FilterSpec] = FilterSpec(
        predicates=(
            Predicate("user_id", "user_id"),
            Predicate("member_status", "member_status"),
            Predicate("member_start_date_from", "member_start_date", "gte", as_datetime),
            Predicate("member_end_date_to", "member_end_date", "lte", as_datetime),
            Predicate("member_stop_start_date_from", "member_stop_start_date", "gte", as_datetime),
            Predicate("member_stop_end_date_to", "member_stop_end_date", "lte", as_datetime),
        )
    )


class SubscriptionMemberRequest(BaseModel):
    user_id: str = Field(..., min_length=1, max_length=36)
    member_status: MemberStatusText = "basic"
    member_start_date: datetime
    member_end_date: datetime | None = None
    member_stop_start_date: datetime | None = None
    member_stop_end_date: datetime | None = None


def _values(body: SubscriptionMemberRequest) -> dict:
    return {k: to_naive(v) if isinstance(v, datetime) else v for k, v in body.model_dump().items()}


@router.get("/subscriptionMembers")
def list_subscription_members(
    params: Annotated[SubscriptionMemberFilters, Query()],
    db: Session = Depends(get_db),
):
    members = SubscriptionMembersRepository(db).list(SubscriptionMemberFilters.spec, params)
    return {"total": len(members), "subscription_members": [m.to_dict() for m in members]}


@router.get("/subscriptionMembers/{member_id}")
def get_subscription_member(member_id: str, db: Session = Depends(get_db)):
    return SubscriptionMembersRepository(db).get(member_id).to_dict()


@router.post("/subscriptionMembers", status_code=201)
def create_subscription_member(body: SubscriptionMemberRequest, db: Session = Depends(get_db)):
    return SubscriptionMembersRepository(db).create(_values(body)).to_dict()


@router.put("/subscriptionMembers/{member_id}", status_code=202)
def update_subscription_member(
    member_id: str,
    body: SubscriptionMemberRequest,
    db: Session = Depends(get_db),
):
    return SubscriptionMembersRepository(db).update(member_id, _values(body)).to_dict()


@router.delete("/subscriptionMembers/{member_id}", status_code=204)
def delete_subscription_member(member_id: str, db: Session = Depends(get_db)):
    SubscriptionMembersRepository(db).delete(member_id)
    return Response(status_code=204)
