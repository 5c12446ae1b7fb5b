from __future__ import annotations

import logging
import sys

import structlog

from .context import get_trace_id


def _add_trace_id(_: logging.Logger, __: str, event_dict: dict) -> dict:
    tid = get_trace_id()
    if tid:
        event_dict["trace_id"] = tid
    return event_dict


# Shared by structlog loggers and foreign (stdlib) records.
_BASE_PROCESSORS = (
    _add_trace_id,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
)

_FOREIGN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "sqlalchemy.engine")

_CONFIGURED = False


def configure_logging(*, level: str | int = "INFO") -> None:
    """
    One JSON object per line on stdout, for both structlog and stdlib loggers.

    Idempotent: the app factory and every batch entry point call it.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=structlog.processors.JSONRenderer(ensure_ascii=False),
            foreign_pre_chain=list(_BASE_PROCESSORS),
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)

    for name in _FOREIGN_LOGGERS:
        foreign = logging.getLogger(name)
        foreign.handlers = []
        foreign.propagate = True

    structlog.configure(
        processors=[
            *_BASE_PROCESSORS,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    _CONFIGURED = True


def get_logger(name: str | None = None):
    return structlog.get_logger(name)
