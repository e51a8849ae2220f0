"""
Shared pytest fixtures.

Stores and services run against mongomock-motor's in-memory database, handed
to them exactly like the real motor database handle.
"""

import os
import tempfile
import uuid

# Ensure test environment before helpmate.config is imported
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="helpmate-uploads-")
os.environ["JWT_SECRET"] = "test-secret"
os.environ["SEED_DEMO_DATA"] = "false"

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from helpmate.db import ensure_indexes
from helpmate.main import create_app
from helpmate.models import Actor, Role
from helpmate.services.tickets import TicketService
from helpmate.stores.comments import CommentStore
from helpmate.stores.tickets import TicketStore
from helpmate.stores.users import UserStore


# ============================================================================
# DATABASE FIXTURES
# ============================================================================


@pytest.fixture
def mock_db():
    """A fresh, empty in-memory database per test."""
    client = AsyncMongoMockClient()
    return client[f"helpmate_test_{uuid.uuid4().hex}"]


@pytest_asyncio.fixture
async def db(mock_db):
    await ensure_indexes(mock_db)
    return mock_db


@pytest.fixture
def user_store(db):
    return UserStore(db)


@pytest.fixture
def ticket_store(db, user_store):
    return TicketStore(db, user_store)


@pytest.fixture
def comment_store(db, user_store):
    return CommentStore(db, user_store)


@pytest.fixture
def service(user_store, ticket_store, comment_store):
    return TicketService(user_store, ticket_store, comment_store)


# ============================================================================
# USER FIXTURES
# ============================================================================


@pytest.fixture
def as_actor():
    def _as_actor(user) -> Actor:
        return Actor(id=user.id, email=user.email, role=user.role)

    return _as_actor


@pytest_asyncio.fixture
async def alice(user_store):
    return await user_store.create("Alice", "alice@example.com", "hash", Role.USER)


@pytest_asyncio.fixture
async def bob(user_store):
    return await user_store.create("Bob", "bob@example.com", "hash", Role.USER)


@pytest_asyncio.fixture
async def admin(user_store):
    return await user_store.create("Admin", "admin@example.com", "hash", Role.ADMIN)


# ============================================================================
# API FIXTURES
# ============================================================================


@pytest.fixture
def client(mock_db):
    app = create_app(db_factory=lambda: mock_db)
    with TestClient(app) as test_client:
        yield test_client
