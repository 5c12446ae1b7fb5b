from __future__ import annotations

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from ..db.engine import get_db
from ..db.models import User
from ..errors import UnauthorizedError
from .tokens import TokenError, verify_token

UNAUTHORIZED_MESSAGE = "unauthorized!"


def bearer_token(request: Request) -> str | None:
    auth = request.headers.get("authorization")
    if not auth:
        return None
    parts = str(auth).split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1].strip() or None


def session_key(request: Request) -> str | None:
    name = request.app.state.settings.session_cookie_name
    return request.cookies.get(name) or None


def request_token(request: Request) -> str | None:
    """Bearer header first, else the token the session cookie points at."""
    token = bearer_token(request)
    if token:
        return token
    key = session_key(request)
    if not key:
        return None
    return request.app.state.session_store.get(key)


def authenticate(request: Request, db: Session) -> User:
    token = request_token(request)
    if not token:
        raise UnauthorizedError(UNAUTHORIZED_MESSAGE)
    try:
        user_id = verify_token(token, secret=request.app.state.settings.signing_key)
    except TokenError as e:
        raise UnauthorizedError(UNAUTHORIZED_MESSAGE) from e

    user = db.get(User, user_id)
    if user is None:
        raise UnauthorizedError(UNAUTHORIZED_MESSAGE)
    request.state.user_id = user.id
    return user


def current_user(request: Request, db: Session = Depends(get_db)) -> User:
    """Dependency for routes that always need a logged-in user."""
    return authenticate(request, db)
