from __future__ import annotations

from typing import Annotated, ClassVar

from fastapi import APIRouter, Depends, Query, Response
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from ..db.engine import get_db
from ..db.query_spec import FilterSpec, Predicate
from ..repositories.resources_repo import MilestonesRepository
from .params import PageParams, Text64

router = APIRouter(tags=["milestones"])


class MilestoneFilters(PageParams):
    milestone_title: Text64 = ""
    project_id: Text64 = ""

    spec: ClassVar[FilterSpec] = FilterSpec(
        predicates=(
            Predicate("milestone_title", "milestone_title", "like"),
            Predicate("project_id", "project_id"),
        )
    )


class MilestoneRequest(BaseModel):
    milestone_title: str = Field(..., min_length=1, max_length=64)
    milestone_description: str = Field("", max_length=255)
    project_id: str = Field(..., min_length=1, max_length=36)


@router.get("/milestones")
def list_milestones(params: Annotated[MilestoneFilters, Query()], db: Session = Depends(get_db)):
    milestones = MilestonesRepository(db).list(MilestoneFilters.spec, params)
    return {"total": len(milestones), "milestones": [m.to_dict() for m in milestones]}


@router.get("/milestones/{milestone_id}")
def get_milestone(milestone_id: str, db: Session = Depends(get_db)):
    return MilestonesRepository(db).get(milestone_id).to_dict()


@router.post("/milestones", status_code=201)
def create_milestone(body: MilestoneRequest, db: Session = Depends(get_db)):
    return MilestonesRepository(db).create(body.model_dump()).to_dict()


@router.put("/milestones/{milestone_id}", status_code=202)
def update_milestone(milestone_id: str, body: MilestoneRequest, db: Session = Depends(get_db)):
    return MilestonesRepository(db).update(milestone_id, body.model_dump()).to_dict()


@router.delete("/milestones/{milestone_id}", status_code=204)
def delete_milestone(milestone_id: str, db: Session = Depends(get_db)):
    MilestonesRepository(db).delete(milestone_id)
    return Response(status_code=204)
