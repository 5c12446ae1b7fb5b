from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response
from pydantic import BaseModel, EmailStr, Field
from sqlalchemy.orm import Session

from ..auth.current_user import current_user, session_key
from ..auth.passwords import check_password, hash_password
from ..auth.session_store import new_session_key
from ..auth.tokens import mint_token
from ..db.engine import get_db
from ..db.models import User
from ..errors import BadRequestError, NotFoundError
from ..observability.logging import get_logger
from ..repositories.users_repo import UsersRepository

router = APIRouter(tags=["auth"])
log = get_logger("auth")


class RegisterRequest(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=64)
    last_name: str = Field(..., min_length=1, max_length=64)
    email: EmailStr
    age: int = Field(0, ge=0, le=255)
    image: str = Field("", max_length=255)
    password: str = Field(..., min_length=6)
    password_confirmation: str = Field(..., min_length=6)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


@router.post("/auth/register")
def register(body: RegisterRequest, db: Session = Depends(get_db)):
    if body.password != body.password_confirmation:
        raise BadRequestError("パスワードが一致しません")

    user = UsersRepository(db).create(
        {
            "first_name": body.first_name,
            "last_name": body.last_name,
            "email": str(body.email),
            "age": body.age,
            "image": body.image,
            "password": hash_password(body.password),
        }
    )
    log.info("user_registered", user_id=user.id)
    return {"data": user.to_dict()}


@router.post("/auth/login")
def login(body: LoginRequest, request: Request, response: Response, db: Session = Depends(get_db)):
    user = UsersRepository(db).get_by_email(str(body.email))
    if user is None:
        raise NotFoundError("ユーザが見つかりませんでした")
    if not check_password(body.password, user.password):
        log.info("login_failed", user_id=user.id)
        raise BadRequestError("パスワードが間違っています")

    settings = request.app.state.settings
    token = mint_token(
        user_id=user.id,
        secret=settings.signing_key,
        ttl_seconds=settings.jwt_ttl_seconds,
    )
    key = new_session_key()
    request.app.state.session_store.set(key, token, ttl_seconds=settings.session_ttl_seconds)

    response.set_cookie(
        key=settings.session_cookie_name,
        value=key,
        max_age=settings.session_ttl_seconds,
        domain=settings.cookie_domain or None,
        secure=bool(settings.cookie_secure),
        httponly=True,
        samesite="lax",
    )
    request.state.user_id = user.id
    log.info("login_succeeded", user_id=user.id)
    return {"message": "認証に成功しました", "token": token}


@router.get("/auth/me")
def me(user: User = Depends(current_user)):
    return {"message": "its me!", "user": user.to_dict()}


@router.post("/auth/logout")
def logout(request: Request, response: Response, user: User = Depends(current_user)):
    settings = request.app.state.settings
    key = session_key(request)
    if key:
        request.app.state.session_store.delete(key)
    response.delete_cookie(
        key=settings.session_cookie_name,
        domain=settings.cookie_domain or None,
    )
    log.info("logout", user_id=user.id)
    return {"message": "ログアウトしました"}
