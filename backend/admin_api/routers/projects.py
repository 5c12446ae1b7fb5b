from __future__ import annotations

from typing import Annotated, ClassVar

from fastapi import APIRouter, Depends, Query, Response
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from ..db.engine import get_db
from ..db.query_spec import FilterSpec, Predicate
from ..repositories.resources_repo import ProjectsRepository
from .params import PageParams, Text64

router = APIRouter(tags=["projects"])


class ProjectFilters(PageParams):
    project_title: Text64 = ""

    spec: ClassVar[FilterSpec] = FilterSpec(
        predicates=(Predicate("project_title", "project_title", "like"),)
    )


class ProjectRequest(BaseModel):
    project_title: str = Field(..., min_length=1, max_length=64)
    project_description: str = Field("", max_length=255)


@router.get("/projects")
def list_projects(params: Annotated[ProjectFilters, Query()], db: Session = Depends(get_db)):
    projects = ProjectsRepository(db).list(ProjectFilters.spec, params)
    return {"total": len(projects), "projects": [p.to_dict() for p in projects]}


@router.get("/projects/{project_id}")
def get_project(project_id: str, db: Session = Depends(get_db)):
    return ProjectsRepository(db).get(project_id).to_dict(include=("epics",))


@router.post("/projects", status_code=201)
def create_project(body: ProjectRequest, db: Session = Depends(get_db)):
    return ProjectsRepository(db).create(body.model_dump()).to_dict()


@router.put("/projects/{project_id}", status_code=202)
def update_project(project_id: str, body: ProjectRequest, db: Session = Depends(get_db)):
    return ProjectsRepository(db).update(project_id, body.model_dump()).to_dict()


@router.delete("/projects/{project_id}", status_code=204)
def delete_project(project_id: str, db: Session = Depends(get_db)):
    ProjectsRepository(db).delete(project_id)
    return Response(status_code=204)
