from __future__ import annotations

from typing import Annotated, ClassVar

from fastapi import APIRouter, Depends, Query, Response
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from ..db.engine import get_db
from ..db.query_spec import FilterSpec, Predicate, as_bool
from ..repositories.resources_repo import EpicsRepository
from .params import BoolText, PageParams, Text64

router = APIRouter(tags=["epics"])


class EpicFilters(PageParams):
    epic_title: Text64 = ""
    label: Text64 = ""
    is_open: BoolText = ""
    author_id: Text64 = ""
    assignee_id: Text64 = ""
    milestone_id: Text64 = ""
    project_id: Text64 = ""

    spec: ClassVar[FilterSpec] = FilterSpec(
        predicates=(
            Predicate("epic_title", "epic_title", "like"),
            Predicate("label", "label"),
            Predicate("is_open", "is_open", cast=as_bool),
            Predicate("author_id", "author_id"),
            Predicate("assignee_id", "assignee_id"),
            Predicate("milestone_id", "milestone_id"),
            Predicate("project_id", "project_id"),
        )
    )


class EpicRequest(BaseModel):
    is_open: bool = True
    author_id: str = Field(..., min_length=1, max_length=36)
    epic_title: str = Field(..., min_length=1, max_length=64)
    epic_description: str = ""
    label: str = Field("", max_length=64)
    milestone_id: str = Field("", max_length=36)
    assignee_id: str = Field("", max_length=36)
    project_id: str = Field(..., min_length=1, max_length=36)


@router.get("/epics")
def list_epics(params: Annotated[EpicFilters, Query()], db: Session = Depends(get_db)):
    epics = EpicsRepository(db).list(EpicFilters.spec, params)
    return {"total": len(epics), "epics": [e.to_dict() for e in epics]}


@router.get("/epics/{epic_id}")
def get_epic(epic_id: str, db: Session = Depends(get_db)):
    return EpicsRepository(db).get(epic_id).to_dict()


@router.post("/epics", status_code=201)
def create_epic(body: EpicRequest, db: Session = Depends(get_db)):
    return EpicsRepository(db).create(body.model_dump()).to_dict()


@router.put("/epics/{epic_id}", status_code=202)
def update_epic(epic_id: str, body: EpicRequest, db: Session = Depends(get_db)):
    return EpicsRepository(db).update(epic_id, body.model_dump()).to_dict()


@router.delete("/epics/{epic_id}", status_code=204)
def delete_epic(epic_id: str, db: Session = Depends(get_db)):
    EpicsRepository(db).delete(epic_id)
    return Response(status_code=204)
