from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(eq=False)
class RestError(Exception):
    """Base error for request handling.

    Raised from routers/repositories and rendered by a single FastAPI
    exception handler into `{message, status, error, causes}`.
    """

    message: str
    causes: list[Any] | None = field(default=None)

    status_code = 500
    error = "internal_server_error"

    def __str__(self) -> str:
        return self.message


@dataclass(eq=False)
class BadRequestError(RestError):
    status_code = 400
    error = "bad_request"


@dataclass(eq=False)
class UnauthorizedError(RestError):
    status_code = 401
    error = "unauthorized"


@dataclass(eq=False)
class NotFoundError(RestError):
    status_code = 404
    error = "not_found"


@dataclass(eq=False)
class InternalServerError(RestError):
    status_code = 500
    error = "internal_server_error"

    @classmethod
    def wrap(cls, message: str, exc: BaseException) -> "InternalServerError":
        return cls(message=message, causes=[str(exc)])
