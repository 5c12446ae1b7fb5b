from __future__ import annotations

from fastapi import Request
from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware

from ..auth.current_user import authenticate
from ..error_response import rest_error_response
from ..errors import RestError
from ..observability.logging import get_logger

PUBLIC_PATHS = frozenset(
    {
        "/",
        "/auth/register",
        "/auth/login",
        "/docs",
        "/docs/oauth2-redirect",
        "/openapi.json",
        "/redoc",
    }
)


def is_public_path(path: str) -> bool:
    return path in PUBLIC_PATHS


def _authenticate_sync(request: Request) -> None:
    db = request.app.state.sessionmaker()
    try:
        authenticate(request, db)
    finally:
        db.close()


async def require_auth(request: Request) -> None:
    # Let CORS preflight through without auth.
    if request.method.upper() == "OPTIONS":
        return
    if is_public_path(request.url.path):
        return
    await run_in_threadpool(_authenticate_sync, request)


class AuthMiddleware(BaseHTTPMiddleware):
    """
    Session enforcement as ASGI middleware.

    Added *before* CORSMiddleware so CORS wraps auth failures too.
    """

    async def dispatch(self, request: Request, call_next):
        if not request.app.state.settings.auth_enabled:
            return await call_next(request)

        log = get_logger("auth_middleware")
        try:
            await require_auth(request)
        except RestError as exc:
            log.info(
                "auth_middleware_denied",
                status_code=exc.status_code,
                path=request.url.path,
            )
            return rest_error_response(request, exc)
        return await call_next(request)
