from __future__ import annotations

from typing import Annotated, ClassVar, Literal

from fastapi import APIRouter, Depends, Query, Response
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from ..db.engine import get_db
from ..db.query_spec import FilterSpec, Predicate, as_datetime
from ..repositories.resources_repo import TodosRepository
from .params import DateTimeText, PageParams, Text64

router = APIRouter(tags=["todos"])


class TodoFilters(PageParams):
    title: Text64 = ""
    body: Text64 = ""
    status: Literal["", "success", "waiting", "canceled", "processing", "done", "new"] = ""
    user_id: Text64 = ""
    created_at: DateTimeText = ""

    spec: ClassVar[FilterSpec] = FilterSpec(
        predicates=(
            Predicate("title", "title", "like"),
            Predicate("body", "body", "like"),
            Predicate("status", "status"),
            Predicate("user_id", "user_id"),
            Predicate("created_at", "created_at", cast=as_datetime),
        )
    )


class TodoRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=64)
    body: str = Field(..., min_length=1, max_length=64)
    status: str = Field(..., min_length=1, max_length=64)
    user_id: str = Field(..., min_length=1, max_length=64)


@router.get("/todos")
def list_todos(params: Annotated[TodoFilters, Query()], db: Session = Depends(get_db)):
    todos = TodosRepository(db).list(TodoFilters.spec, params)
    return {"total": len(todos), "todos": [t.to_dict() for t in todos]}


@router.get("/todos/{todo_id}")
def get_todo(todo_id: str, db: Session = Depends(get_db)):
    return TodosRepository(db).get(todo_id).to_dict()


@router.post("/todos", status_code=201)
def create_todo(body: TodoRequest, db: Session = Depends(get_db)):
    return TodosRepository(db).create(body.model_dump()).to_dict()


@router.put("/todos/{todo_id}", status_code=202)
def update_todo(todo_id: str, body: TodoRequest, db: Session = Depends(get_db)):
    return TodosRepository(db).update(todo_id, body.model_dump()).to_dict()


@router.delete("/todos/{todo_id}", status_code=204)
def delete_todo(todo_id: str, db: Session = Depends(get_db)):
    TodosRepository(db).delete(todo_id)
    return Response(status_code=204)
