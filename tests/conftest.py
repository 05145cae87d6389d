"""
tests/conftest.py -- Shared test fixtures for catalogue tests.

This module provides:
  - make_database(): isolated named shared-memory SQLite database
  - _patch_lifespan(): wires test stores into app.state, bypassing real startup
  - api_client: TestClient plus admin and student tokens
  - user_store / catalogue: fresh stores for unit tests

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
because TestClient runs sync route handlers in a thread pool. Plain :memory:
DBs are per-connection and would present a blank schema to each worker
thread. The named URI format (file:name?mode=memory&cache=shared&uri=true)
shares one in-memory instance across all connections in the same process.

DEBUG must be set before any auth/core import so get_settings() auto-generates
SECRET_KEY in dev mode rather than raising ValueError. BCRYPT_ROUNDS is
lowered to keep hashing fast.
"""

from __future__ import annotations

import os
import uuid
from collections.abc import Generator
from contextlib import asynccontextmanager

# Must run before any project import -- see module docstring.
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.models import ROLE_ADMIN, ROLE_STUDENT, User
from auth.store import UserStore
from auth.tokens import create_access_token, hash_password
from catalogue.store import CatalogueStore
from core.database import Database


def make_database(name: str) -> Database:
    """Return a Database on a uniquely named shared-memory SQLite instance.

    A random suffix keeps tests from seeing each other's rows; the database
    lives as long as at least one pooled connection stays open.
    """
    return Database(f"sqlite:///file:test_{name}_{uuid.uuid4().hex}?mode=memory&cache=shared&uri=true")


def _patch_lifespan(db: Database, user_store: UserStore, catalogue: CatalogueStore):
    """Return an async context manager that replaces the real lifespan."""

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.db = db
        app.state.user_store = user_store
        app.state.catalogue = catalogue
        yield

    return test_lifespan


@pytest.fixture
def database() -> Generator[Database, None, None]:
    db = make_database("unit")
    yield db
    db.close()


@pytest.fixture
def user_store(database: Database) -> UserStore:
    return UserStore(database)


@pytest.fixture
def catalogue(database: Database) -> CatalogueStore:
    return CatalogueStore(database)


@pytest.fixture(scope="module")
def api_client() -> Generator[tuple[TestClient, str, str], None, None]:
    """Yield (client, admin_token, student_token) for API integration tests.

    The TestClient uses the real FastAPI app with a patched lifespan so
    tests hit real route handlers but use an isolated in-memory database.
    The admin account uses email "admin@example.com" / password "adminpass123".
    """
    db = make_database("api")
    user_store = UserStore(db)
    catalogue = CatalogueStore(db)

    admin_id = user_store.create_user(
        User(name="Test Admin", email="admin@example.com", role=ROLE_ADMIN, password_hash=hash_password("adminpass123"))
    )
    student_id = user_store.create_user(
        User(
            name="Test Student",
            email="student@example.com",
            role=ROLE_STUDENT,
            password_hash=hash_password("studentpass123"),
        )
    )
    admin_token = create_access_token(admin_id, ROLE_ADMIN)
    student_token = create_access_token(student_id, ROLE_STUDENT)

    app.router.lifespan_context = _patch_lifespan(db, user_store, catalogue)

    with TestClient(app, raise_server_exceptions=True) as client:
        yield client, admin_token, student_token

    db.close()
