"""
tests/conftest.py -- Shared test fixtures for ClientDesk.

This module provides:
  - make_settings(): Settings with a fixed secret, cheap bcrypt rounds, and an
    isolated database URL
  - _patch_lifespan(): wires test stores into app.state, bypassing real startup
  - engine: fresh in-memory engine with the schema applied (store unit tests)
  - api_client: TestClient plus a valid token for API integration tests

Design: Named shared-memory SQLite URIs (not plain :memory:) are required for
the API fixture because TestClient runs sync route handlers in a thread pool.
Plain :memory: DBs are per-connection and would present a blank schema to each
worker thread. The named URI format (file:name?mode=memory&cache=shared&uri=true)
shares one in-memory instance across all connections in the same process.

The DEBUG env var must be set before any application import so get_settings()
auto-generates SECRET_KEY in dev mode rather than raising ValueError.
"""

from __future__ import annotations

import os
from collections.abc import Generator
from contextlib import asynccontextmanager

# Set DEBUG before any app import so get_settings() can auto-generate
# SECRET_KEY in dev mode instead of raising ValueError.
os.environ.setdefault("DEBUG", "true")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine

from api.main import app
from auth.models import User
from auth.store import UserStore
from auth.tokens import create_access_token, hash_password
from core.config import Settings
from core.database import create_db_engine, migrate
from crm.store import ClientStore

TEST_SECRET = "test-secret-key-for-clientdesk-0123456789"


def make_settings(database_url: str = "sqlite:///:memory:") -> Settings:
    return Settings(
        debug=True,
        secret_key=TEST_SECRET,
        bcrypt_rounds=4,  # bcrypt minimum -- keeps the suite fast
        database_url=database_url,
    )


def _patch_lifespan(settings: Settings, engine: Engine):
    """Return an async context manager that replaces the real lifespan.

    Wires the test settings, engine and stores into app.state so TestClient
    routes see an isolated database rather than the configured one.
    """

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.settings = settings
        app.state.engine = engine
        app.state.user_store = UserStore(engine)
        app.state.client_store = ClientStore(engine)
        yield

    return test_lifespan


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    """Fresh single-connection in-memory database with the schema applied."""
    eng = create_db_engine(make_settings())
    migrate(eng)
    yield eng
    eng.dispose()


@pytest.fixture(scope="module")
def api_client(request) -> Generator[tuple[TestClient, str, int], None, None]:
    """Yield (client, token, user_id) for API integration tests.

    Each test module gets its own named in-memory database. A user is created
    before the client starts and a token is minted for it; tests send it as
    the raw `authorization` header value.
    """
    db_name = request.module.__name__.replace(".", "_")
    settings = make_settings(f"sqlite:///file:{db_name}?mode=memory&cache=shared&uri=true")
    eng = create_db_engine(settings)
    migrate(eng)

    created = UserStore(eng).create_user(User(username="fixture-user", password=hash_password("fixture-pass", rounds=4)))
    uid = created.value.id
    token = create_access_token(uid, settings.secret_key)

    app.router.lifespan_context = _patch_lifespan(settings, eng)

    with TestClient(app, raise_server_exceptions=True) as client:
        yield client, token, uid

    eng.dispose()
