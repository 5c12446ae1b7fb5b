from __future__ import annotations

import uuid
from pathlib import Path
from typing import Annotated, ClassVar

from fastapi import APIRouter, Depends, File, Query, Request, Response, UploadFile
from pydantic import BaseModel, EmailStr, Field
from sqlalchemy.orm import Session

from ..auth.passwords import hash_password
from ..db.engine import get_db
from ..db.query_spec import FilterSpec, Predicate, as_int
from ..errors import BadRequestError
from ..observability.logging import get_logger
from ..repositories.users_repo import UsersRepository
from ..services.assets import asset_path
from ..services.csv_export import export_users
from .params import Numeric, PageParams, Text64

router = APIRouter(tags=["users"])
log = get_logger("users")

# Users created by an admin get this password until they change it.
DEFAULT_PASSWORD = "123456"

_IMAGE_SUFFIXES = {".png", ".jpg", ".jpeg", ".gif", ".webp"}


class UserFilters(PageParams):
    first_name: Text64 = ""
    last_name: Text64 = ""
    email: Text64 = ""
    age: Numeric = ""

    spec: ClassVar[FilterSpec] = FilterSpec(
        predicates=(
            Predicate("first_name", "first_name", "like"),
            Predicate("last_name", "last_name", "like"),
            Predicate("email", "email", "like"),
            Predicate("age", "age", cast=as_int),
        )
    )


class UserRequest(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=64)
    last_name: str = Field(..., min_length=1, max_length=64)
    email: EmailStr
    age: int = Field(0, ge=0, le=255)
    image: str = Field("", max_length=255)


@router.get("/users")
def list_users(params: Annotated[UserFilters, Query()], db: Session = Depends(get_db)):
    users = UsersRepository(db).list(UserFilters.spec, params)
    return {"total": len(users), "users": [u.to_dict() for u in users]}


@router.get("/users/{user_id}")
def get_user(user_id: str, db: Session = Depends(get_db)):
    return UsersRepository(db).get(user_id).to_dict(include=("todos",))


@router.post("/users", status_code=201)
def create_user(body: UserRequest, db: Session = Depends(get_db)):
    values = body.model_dump()
    values["password"] = hash_password(DEFAULT_PASSWORD)
    return UsersRepository(db).create(values).to_dict()


@router.put("/users/{user_id}", status_code=202)
def update_user(user_id: str, body: UserRequest, db: Session = Depends(get_db)):
    return UsersRepository(db).update(user_id, body.model_dump()).to_dict()


@router.delete("/users/{user_id}", status_code=204)
def delete_user(user_id: str, db: Session = Depends(get_db)):
    UsersRepository(db).delete(user_id)
    return Response(status_code=204)


@router.put("/users/{user_id}/uploadImage", status_code=202)
def upload_user_image(
    user_id: str,
    request: Request,
    image: UploadFile = File(...),
    db: Session = Depends(get_db),
):
    repo = UsersRepository(db)
    repo.get(user_id)

    suffix = Path(image.filename or "").suffix.lower()
    if suffix not in _IMAGE_SUFFIXES:
        raise BadRequestError("unsupported image type")

    settings = request.app.state.settings
    name = f"{user_id}_{uuid.uuid4().hex}{suffix}"
    path = asset_path(settings, "images", "users", name)
    path.write_bytes(image.file.read())

    relative = str(Path("images", "users", name).as_posix())
    log.info("user_image_uploaded", user_id=user_id, path=relative)
    return repo.update(user_id, {"image": relative}).to_dict()


@router.post("/users/exportCsv")
def export_users_csv(request: Request, db: Session = Depends(get_db)):
    path, count = export_users(request.app.state.settings, UsersRepository(db).all())
    log.info("users_csv_exported", path=str(path), rows=count)
    return {"message": "CSVを出力しました", "path": str(path)}
