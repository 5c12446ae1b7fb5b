from __future__ import annotations

from typing import Any

from fastapi import Request
from fastapi.responses import ORJSONResponse

from .errors import RestError


def _error_slug(status_code: int) -> str:
    if status_code == 400:
        return "bad_request"
    if status_code == 401:
        return "unauthorized"
    if status_code == 403:
        return "forbidden"
    if status_code == 404:
        return "not_found"
    if status_code == 405:
        return "method_not_allowed"
    if status_code == 409:
        return "conflict"
    if status_code >= 500:
        return "internal_server_error"
    return "error"


def _hide_internal_details(request: Request) -> bool:
    settings = getattr(getattr(request, "app", None), "state", None)
    settings = getattr(settings, "settings", None)
    return bool(getattr(settings, "is_production", False))


def error_payload(
    *,
    status_code: int,
    message: str,
    error: str | None = None,
    causes: list[Any] | None = None,
) -> dict[str, Any]:
    return {
        "message": str(message),
        "status": int(status_code),
        "error": error or _error_slug(int(status_code)),
        "causes": causes,
    }


def error_response(
    *,
    request: Request,
    status_code: int,
    message: str,
    error: str | None = None,
    causes: list[Any] | None = None,
    headers: dict[str, str] | None = None,
) -> ORJSONResponse:
    # Never leak driver text in production for server errors.
    safe_causes = causes
    if int(status_code) >= 500 and _hide_internal_details(request):
        safe_causes = None

    return ORJSONResponse(
        status_code=int(status_code),
        content=error_payload(
            status_code=int(status_code),
            message=message,
            error=error,
            causes=safe_causes,
        ),
        headers=headers,
    )


def rest_error_response(request: Request, exc: RestError) -> ORJSONResponse:
    return error_response(
        request=request,
        status_code=exc.status_code,
        message=exc.message,
        error=exc.error,
        causes=exc.causes,
    )
