from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response

from .auth.session_store import SessionStore, build_session_store
from .db.engine import build_engine, build_sessionmaker, create_all
from .error_response import error_response, rest_error_response
from .errors import RestError
from .middleware.access_log import AccessLogMiddleware
from .middleware.auth import AuthMiddleware
from .middleware.cors import build_allowed_origins
from .middleware.trace_context import TraceContextMiddleware
from .observability.logging import configure_logging, get_logger
from .observability.otel import configure_otel, instrument_app
from .routers.auth import router as auth_router
from .routers.coupons import router as coupons_router
from .routers.epics import router as epics_router
from .routers.health import router as health_router
from .routers.issues import router as issues_router
from .routers.milestones import router as milestones_router
from .routers.order_details import router as order_details_router
from .routers.orders import router as orders_router
from .routers.products import router as products_router
from .routers.projects import router as projects_router
from .routers.qrcode import router as qrcode_router
from .routers.subscription_members import router as subscription_members_router
from .routers.todos import router as todos_router
from .routers.user_groups import router as user_groups_router
from .routers.users import router as users_router
from .settings import Settings, get_settings
from .validation import build_validation_error_body


def create_app(
    settings: Settings | None = None,
    *,
    engine: Engine | None = None,
    session_store: SessionStore | None = None,
) -> FastAPI:
    settings = settings or get_settings()

    # Logging must be configured before the app starts handling requests.
    configure_logging(level=settings.log_level)
    log = get_logger("startup")

    # Optional tracing (no-op unless OTEL_ENABLED=true)
    configure_otel(settings)

    app = FastAPI(
        title="Admin API",
        version="1.0.0",
        default_response_class=ORJSONResponse,
        redirect_slashes=False,
    )

    log.info("app_starting", settings=settings.to_log_safe_dict())

    engine = engine or build_engine(settings)
    if settings.db_auto_create:
        create_all(engine)

    app.state.settings = settings
    app.state.engine = engine
    app.state.sessionmaker = build_sessionmaker(engine)
    app.state.session_store = session_store or build_session_store(settings)

    # Middlewares (order matters; last added is outermost)
    # Auth runs inside CORS so auth failures still get CORS headers.
    app.add_middleware(AuthMiddleware)
    app.add_middleware(AccessLogMiddleware, exclude_paths={"/"})
    app.add_middleware(
        CORSMiddleware,
        allow_origins=build_allowed_origins(cors_origins=settings.cors_origins),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With", "X-Trace-Id"],
        expose_headers=["X-Trace-Id"],
        max_age=3000,
    )
    # Outermost: trace id wraps everything.
    app.add_middleware(TraceContextMiddleware)

    # Error handlers
    app.add_exception_handler(RestError, _rest_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(IntegrityError, _integrity_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(SQLAlchemyError, _db_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _unhandled_exception_handler)

    # Routes
    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(todos_router)
    app.include_router(users_router)
    app.include_router(products_router)
    app.include_router(orders_router)
    app.include_router(order_details_router)
    app.include_router(coupons_router)
    app.include_router(milestones_router)
    app.include_router(epics_router)
    app.include_router(projects_router)
    app.include_router(user_groups_router)
    app.include_router(subscription_members_router)
    app.include_router(issues_router)
    app.include_router(qrcode_router)

    # Instrument after routers/middleware are attached.
    instrument_app(app, engine, settings)

    return app


def _rest_error_handler(request: Request, exc: RestError) -> Response:
    return rest_error_response(request, exc)


def _validation_error_handler(request: Request, exc: RequestValidationError) -> Response:
    body = build_validation_error_body(exc.errors())
    get_logger("validation").info(
        "validation_failed",
        path=request.url.path,
        attributes=[d["attribute"] for d in body["details"]],
    )
    return ORJSONResponse(status_code=400, content=body)


def _integrity_error_handler(request: Request, exc: IntegrityError) -> Response:
    get_logger("db").warning("db_constraint_violation", path=request.url.path)
    return error_response(
        request=request,
        status_code=400,
        message="invalid request",
        causes=[str(exc.orig)],
    )


def _db_error_handler(request: Request, exc: SQLAlchemyError) -> Response:
    get_logger("db").exception("db_error", path=request.url.path)
    return error_response(
        request=request,
        status_code=500,
        message="database error",
        causes=[str(exc)],
    )


def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> Response:
    status_code = int(getattr(exc, "status_code", 500) or 500)
    detail = getattr(exc, "detail", None)
    message = str(detail) if detail else ""

    if status_code == 404 and (not message or message == "Not Found"):
        message = "Route not found"

    return error_response(
        request=request,
        status_code=status_code,
        message=message or "error",
        headers=getattr(exc, "headers", None),
    )


def _unhandled_exception_handler(request: Request, exc: Exception) -> Response:
    # Keep the HTTP response generic in production; operators need the traceback.
    log = get_logger("unhandled")
    log.exception(
        "unhandled_exception",
        http_method=str(getattr(request, "method", "") or "").upper() or None,
        path=str(getattr(getattr(request, "url", None), "path", "") or ""),
    )
    return error_response(
        request=request,
        status_code=500,
        message="internal server error",
        causes=[str(exc)] if exc else None,
    )
