"""
Optional OpenTelemetry wiring, enabled with OTEL_ENABLED=true.

Needs the `otel` extra; without it start-up logs a warning and carries on.
"""

from __future__ import annotations

from fastapi import FastAPI
from sqlalchemy.engine import Engine

from ..settings import Settings
from .logging import get_logger

log = get_logger("otel")


def configure_otel(settings: Settings) -> None:
    if not settings.otel_enabled:
        return

    try:
        from opentelemetry import trace
        from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
        from opentelemetry.sdk.resources import Resource
        from opentelemetry.sdk.trace import TracerProvider
        from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
    except ImportError:
        log.warning("otel_disabled_missing_deps")
        return

    provider = TracerProvider(
        resource=Resource.create({"service.name": settings.otel_service_name or "admin-api"})
    )

    endpoint = (settings.otel_exporter_otlp_endpoint or "").strip()
    exporter = OTLPSpanExporter(endpoint=endpoint) if endpoint else ConsoleSpanExporter()
    provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)

    log.info("otel_configured", exporter="otlp_http" if endpoint else "console", endpoint=endpoint or None)


def instrument_app(app: FastAPI, engine: Engine, settings: Settings) -> None:
    """Trace inbound requests and every statement on `engine`."""
    if not settings.otel_enabled:
        return

    try:
        from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
        from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
    except ImportError:
        log.warning("otel_instrumentation_missing_deps")
        return

    FastAPIInstrumentor.instrument_app(app)
    SQLAlchemyInstrumentor().instrument(engine=engine)
    log.info("otel_instrumented", targets=["fastapi", "sqlalchemy"])
