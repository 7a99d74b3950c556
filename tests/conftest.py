"""
tests/conftest.py -- Shared test fixtures for employee directory integration tests.

This module provides:
  - memory_db_url(): a unique named shared-memory SQLite URL
  - _make_test_stores(): creates isolated in-memory DBs for users + employees
  - _patch_lifespan(): wires test stores into app.state, bypassing real startup
  - api_client: module-scoped TestClient plus a registered user's token and id
  - fresh_client: function-scoped TestClient over empty stores

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
because TestClient runs route handlers in a thread pool. Plain :memory: DBs
are per-connection and would present a blank schema to each worker thread.
The named URI format (file:name?mode=memory&cache=shared&uri=true) shares
one in-memory instance across all connections in the same process.

The DEBUG env var must be set before any auth/core import so get_settings()
auto-generates SECRET_KEY in dev mode rather than raising ValueError.
"""

from __future__ import annotations

import os
import uuid
from collections.abc import Generator
from contextlib import asynccontextmanager

# CRITICAL: Set before any auth/core import. DEBUG lets get_settings()
# auto-generate SECRET_KEY; the minimum bcrypt cost keeps the suite fast.
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.models import User
from auth.store import UserStore
from auth.tokens import create_access_token, hash_password
from directory.store import EmployeeStore

TEST_USERNAME = "testadmin"
TEST_EMAIL = "testadmin@example.com"
TEST_PASSWORD = "testpass123"


# ---------------------------------------------------------------------------
# Store helpers
# ---------------------------------------------------------------------------


def memory_db_url(name: str) -> str:
    """Return a named shared-memory SQLite URL unique to this call."""
    return f"sqlite:///file:test_{name}_{uuid.uuid4().hex}?mode=memory&cache=shared&uri=true"


def _make_test_stores(db_suffix: str) -> tuple[UserStore, EmployeeStore]:
    """Create isolated shared-memory stores that live in one database.

    Args:
        db_suffix: Human-readable part of the DB name (e.g. 'api', 'session').
                   A uuid is appended so modules never share state.
    """
    url = memory_db_url(db_suffix)
    return UserStore(db_url=url), EmployeeStore(db_url=url)


def _patch_lifespan(user_store: UserStore, employee_store: EmployeeStore):
    """Return an async context manager that replaces the real lifespan.

    Wires pre-created test stores into app.state so TestClient routes see
    isolated test DBs rather than the configured database.
    """

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.user_store = user_store
        app.state.employee_store = employee_store
        yield

    return test_lifespan


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def db_url() -> str:
    return memory_db_url("unit")


@pytest.fixture(scope="module")
def api_client() -> Generator[tuple[TestClient, str, int], None, None]:
    """Yield (client, token, user_id) for API integration tests.

    The TestClient uses the real FastAPI app with a patched lifespan so
    tests hit real route handlers but use isolated in-memory stores.
    The user is created before the client starts and the token is issued
    with the configured secret.
    """
    user_store, employee_store = _make_test_stores("api")

    user = User(username=TEST_USERNAME, email=TEST_EMAIL, hashed_password=hash_password(TEST_PASSWORD))
    uid = user_store.create_user(user)
    token = create_access_token(uid)

    app.router.lifespan_context = _patch_lifespan(user_store, employee_store)

    with TestClient(app, raise_server_exceptions=True) as client:
        yield client, token, uid

    employee_store.close()
    user_store.close()


@pytest.fixture
def fresh_client() -> Generator[TestClient, None, None]:
    """Yield a TestClient over empty stores. Use when a test needs exact ids.

    Replaces app.state stores, so do not combine with api_client in one module.
    """
    user_store, employee_store = _make_test_stores("fresh")
    app.router.lifespan_context = _patch_lifespan(user_store, employee_store)

    with TestClient(app, raise_server_exceptions=True) as client:
        yield client

    employee_store.close()
    user_store.close()
