from __future__ import annotations

from collections.abc import Iterator

from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ..observability.logging import get_logger
from ..settings import Settings
from .models import Base

log = get_logger("db")


def _enable_sqlite_foreign_keys(dbapi_conn, _record) -> None:
    cur = dbapi_conn.cursor()
    cur.execute("PRAGMA foreign_keys=ON")
    cur.close()


def build_engine(settings: Settings, *, url: str | None = None) -> Engine:
    """
    Create the process-wide engine.

    SQLite URLs (local runs and tests) get a single shared connection so an
    in-memory database survives across sessions.
    """
    db_url = str(url or settings.database_url)
    if db_url.startswith("sqlite"):
        engine = create_engine(
            db_url,
            echo=bool(settings.db_echo),
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    return create_engine(
        db_url,
        echo=bool(settings.db_echo),
        pool_pre_ping=True,
        pool_recycle=3600,
    )


def build_sessionmaker(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def create_all(engine: Engine) -> None:
    Base.metadata.create_all(engine)
    log.info("db_schema_ready", tables=len(Base.metadata.tables))


def get_db(request: Request) -> Iterator[Session]:
    """FastAPI dependency: one session per request, closed afterwards."""
    factory: sessionmaker[Session] = request.app.state.sessionmaker
    db = factory()
    try:
        yield db
    finally:
        db.close()
