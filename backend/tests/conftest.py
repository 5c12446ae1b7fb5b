from __future__ import annotations

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Ensure `backend/` is on sys.path so `import admin_api.*` works in tests.
BACKEND_DIR = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(BACKEND_DIR))

from admin_api.auth.session_store import MemorySessionStore  # noqa: E402
from admin_api.db.engine import build_engine, build_sessionmaker  # noqa: E402
from admin_api.main import create_app  # noqa: E402
from admin_api.settings import Settings  # noqa: E402


def make_settings(tmp_path: Path, **overrides) -> Settings:
    values = {
        "environment": "test",
        "database_url": "sqlite://",
        "redis_url": "memory://",
        "jwt_secret": "test-secret",
        "cookie_domain": None,
        "auth_enabled": False,
        "assets_dir": str(tmp_path / "assets"),
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return make_settings(tmp_path)


@pytest.fixture
def engine(settings):
    eng = build_engine(settings)
    yield eng
    eng.dispose()


@pytest.fixture
def app(settings, engine):
    return create_app(
        settings,
        engine=engine,
        session_store=MemorySessionStore(),
    )


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def db_session(app):
    db = build_sessionmaker(app.state.engine)()
    yield db
    db.close()
