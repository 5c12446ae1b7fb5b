from __future__ import annotations

from typing import Annotated, ClassVar

from fastapi import APIRouter, Depends, Query, Response
from pydantic import BaseModel, Field
from sqlalchemy import select
from sqlalchemy.orm import Session

from ..db.engine import get_db
from ..db.models import User, UserGroup
from ..db.query_spec import FilterSpec, Predicate
from ..errors import NotFoundError
from ..repositories.resources_repo import UserGroupsRepository
from .params import PageParams, Text64

router = APIRouter(tags=["user_groups"])


class UserGroupFilters(PageParams):
    group_name: Text64 = ""

    spec: ClassVar[FilterSpec] = FilterSpec(
        predicates=(Predicate("group_name", "group_name", "like"),)
    )


class UserGroupRequest(BaseModel):
    group_name: str = Field(..., min_length=1, max_length=64)
    user_ids: list[str] = Field(default_factory=list)


def _members(db: Session, user_ids: list[str]) -> list[User]:
    if not user_ids:
        return []
    wanted = set(user_ids)
    users = list(db.scalars(select(User).where(User.id.in_(wanted))).all())
    if len(users) != len(wanted):
        raise NotFoundError("user not found")
    return users


def _group_out(group: UserGroup) -> dict:
    return group.to_dict(include=("users",))


@router.get("/userGroups")
def list_user_groups(params: Annotated[UserGroupFilters, Query()], db: Session = Depends(get_db)):
    groups = UserGroupsRepository(db).list(UserGroupFilters.spec, params)
    return {"total": len(groups), "user_groups": [_group_out(g) for g in groups]}


@router.get("/userGroups/{group_id}")
def get_user_group(group_id: str, db: Session = Depends(get_db)):
    return _group_out(UserGroupsRepository(db).get(group_id))


@router.post("/userGroups", status_code=201)
def create_user_group(body: UserGroupRequest, db: Session = Depends(get_db)):
    users = _members(db, body.user_ids)
    group = UserGroupsRepository(db).create({"group_name": body.group_name, "users": users})
    return _group_out(group)


@router.put("/userGroups/{group_id}", status_code=202)
def update_user_group(group_id: str, body: UserGroupRequest, db: Session = Depends(get_db)):
    users = _members(db, body.user_ids)
    group = UserGroupsRepository(db).update(group_id, {"group_name": body.group_name, "users": users})
    return _group_out(group)


@router.delete("/userGroups/{group_id}", status_code=204)
def delete_user_group(group_id: str, db: Session = Depends(get_db)):
    UserGroupsRepository(db).delete(group_id)
    return Response(status_code=204)
