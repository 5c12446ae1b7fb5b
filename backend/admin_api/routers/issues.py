from __future__ import annotations

from typing import Annotated, ClassVar

from fastapi import APIRouter, Depends, Query, Response
from pydantic import BaseModel, Field, StringConstraints
from sqlalchemy.orm import Session

from ..db.engine import get_db
from ..db.query_spec import FilterSpec, Predicate
from ..repositories.resources_repo import IssuesRepository
from .params import PageParams, Text64, Text255

router = APIRouter(tags=["issues"])

# Empty or a full 36-char id.
IdText = Annotated[str, StringConstraints(pattern=r"^(.{36})?$")]


class IssueFilters(PageParams):
    id: Text64 = ""
    title: Text64 = ""
    description: Text255 = ""
    assignee_id: IdText = ""
    milestone_id: IdText = ""

    spec: ClassVar[FilterSpec] = FilterSpec(
        predicates=(
            Predicate("id", "id"),
            Predicate("title", "title", "like"),
            Predicate("description", "description", "like"),
            Predicate("assignee_id", "user_id"),
            Predicate("milestone_id", "milestone_id"),
        )
    )


class IssueRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=64)
    description: str = Field("", max_length=255)
    user_id: str = Field("", max_length=36)
    milestone_id: str = Field("", max_length=36)
    issue_status: str = Field(..., min_length=1, max_length=32)


def _values(body: IssueRequest) -> dict:
    values = body.model_dump()
    values["milestone_id"] = values["milestone_id"] or None
    return values


def _issue_out(issue) -> dict:
    return issue.to_dict(include=("milestone",))


@router.get("/issues")
def list_issues(params: Annotated[IssueFilters, Query()], db: Session = Depends(get_db)):
    issues = IssuesRepository(db).list(IssueFilters.spec, params)
    return {"total": len(issues), "issues": [_issue_out(i) for i in issues]}


@router.get("/issues/{issue_id}")
def get_issue(issue_id: str, db: Session = Depends(get_db)):
    return _issue_out(IssuesRepository(db).get(issue_id))


@router.post("/issues", status_code=201)
def create_issue(body: IssueRequest, db: Session = Depends(get_db)):
    return _issue_out(IssuesRepository(db).create(_values(body)))


@router.put("/issues/{issue_id}", status_code=202)
def update_issue(issue_id: str, body: IssueRequest, db: Session = Depends(get_db)):
    return _issue_out(IssuesRepository(db).update(issue_id, _values(body)))


@router.delete("/issues/{issue_id}", status_code=204)
def delete_issue(issue_id: str, db: Session = Depends(get_db)):
    IssuesRepository(db).delete(issue_id)
    return Response(status_code=204)
