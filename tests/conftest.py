"""
Happy Thoughts API — Test Configuration (conftest.py)
=======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── db_engine:          SQLite file database in tmp_path, tables created
    ├── session_factory:    async_sessionmaker bound to db_engine
    ├── test_client:        HTTPX AsyncClient on a fresh app whose
    │                       get_db_session is overridden to use db_engine
    ├── register_user:      POST /users helper → (id, accessToken)
    ├── post_thought:       POST /thoughts helper → thought dict
    ├── memory_repository:  InMemoryThoughtRepository (service unit tests)
    └── unique_likes:       settings.unique_likes switched on for one test

A file database (not :memory:) is used so concurrent requests get their own
connections, which is what the concurrent-like test needs.
"""

import os

# Override settings for testing BEFORE any app imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["BCRYPT_ROUNDS"] = "4"  # minimum work factor keeps the suite fast
os.environ["ENFORCE_OWNERSHIP"] = "true"
os.environ["UNIQUE_LIKES"] = "false"

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Set, Tuple

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from happy_thoughts.config import settings
from happy_thoughts.database import Base, get_db_session, request_transaction
from happy_thoughts.main import create_app
from happy_thoughts.models.like import Like  # noqa: F401
from happy_thoughts.models.thought import Thought, ThoughtTag
from happy_thoughts.models.user import User  # noqa: F401
from happy_thoughts.repositories.thought_repository import (
    SortField,
    ThoughtFilter,
    ThoughtRepository,
)


# ══════════════════════════════════════════════════════════════════════════
# In-memory repository double
# ══════════════════════════════════════════════════════════════════════════

class InMemoryThoughtRepository(ThoughtRepository):
    """
    Dict-backed ThoughtRepository for service unit tests.

    Rows are transient Thought objects, so ThoughtOut.model_validate() reads
    them exactly as it reads ORM rows.
    """

    def __init__(self):
        self.thoughts: Dict[uuid.UUID, Thought] = {}
        self.likes: Set[Tuple[uuid.UUID, uuid.UUID]] = set()

    @staticmethod
    def _matches(thought: Thought, thought_filter: ThoughtFilter) -> bool:
        if thought_filter.tag is not None and thought_filter.tag not in thought.tags:
            return False
        if thought_filter.min_hearts is not None and thought.hearts < thought_filter.min_hearts:
            return False
        if thought_filter.author_id is not None and thought.author_id != thought_filter.author_id:
            return False
        return True

    async def find(
        self,
        thought_filter: ThoughtFilter,
        sort: Sequence[SortField],
        skip: int,
        limit: int,
    ) -> List[Thought]:
        rows = [t for t in self.thoughts.values() if self._matches(t, thought_filter)]
        # Stable sorts, least significant key first
        rows.sort(key=lambda t: t.id)
        for field in reversed(list(sort)):
            rows.sort(key=lambda t: getattr(t, field.name), reverse=field.descending)
        return rows[skip:skip + limit]

    async def count_matching(self, thought_filter: ThoughtFilter) -> int:
        return sum(1 for t in self.thoughts.values() if self._matches(t, thought_filter))

    async def find_by_id(self, thought_id: uuid.UUID) -> Optional[Thought]:
        return self.thoughts.get(thought_id)

    async def insert(
        self,
        message: str,
        tags: List[str],
        author_id: Optional[uuid.UUID],
        created_at: datetime,
        hearts: int = 0,
    ) -> Thought:
        thought = Thought(
            id=uuid.uuid4(),
            message=message,
            hearts=hearts,
            author_id=author_id,
            created_at=created_at,
        )
        thought.tag_links = [ThoughtTag(tag=tag) for tag in tags]
        self.thoughts[thought.id] = thought
        return thought

    def _scoped(self, thought_id: uuid.UUID, author_id: Optional[uuid.UUID]) -> Optional[Thought]:
        thought = self.thoughts.get(thought_id)
        if thought is None or (author_id is not None and thought.author_id != author_id):
            return None
        return thought

    async def update_by_id(
        self,
        thought_id: uuid.UUID,
        values: Dict[str, Any],
        author_id: Optional[uuid.UUID] = None,
    ) -> Optional[Thought]:
        thought = self._scoped(thought_id, author_id)
        if thought is not None:
            for key, value in values.items():
                setattr(thought, key, value)
        return thought

    async def delete_by_id(
        self,
        thought_id: uuid.UUID,
        author_id: Optional[uuid.UUID] = None,
    ) -> Optional[Thought]:
        thought = self._scoped(thought_id, author_id)
        if thought is not None:
            del self.thoughts[thought_id]
        return thought

    async def increment_hearts(self, thought_id: uuid.UUID) -> Optional[Thought]:
        thought = self.thoughts.get(thought_id)
        if thought is not None:
            thought.hearts += 1
        return thought

    async def add_like(self, user_id: uuid.UUID, thought_id: uuid.UUID) -> None:
        if (user_id, thought_id) in self.likes:
            raise IntegrityError(
                "INSERT INTO likes", {}, Exception("UNIQUE constraint failed")
            )
        self.likes.add((user_id, thought_id))


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures (created fresh for each test)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def memory_repository():
    return InMemoryThoughtRepository()


@pytest.fixture
def unique_likes(monkeypatch):
    """Switch on one-like-per-user mode for the duration of a test."""
    monkeypatch.setattr(settings, "unique_likes", True)


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    """
    A fresh SQLite database file per test with every table created.

    Why not Alembic here: create_all() builds the same schema from the ORM
    metadata without spawning the migration environment.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'happy_thoughts.db'}")

    # Take the write lock when a transaction starts; deferred transactions that
    # upgrade later can fail with "database is locked" under concurrent likes
    @event.listens_for(engine.sync_engine, "connect")
    def disable_driver_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def test_client(session_factory):
    """
    HTTPX AsyncClient talking to a fresh app through ASGITransport.

    The app's get_db_session is replaced by the same request_transaction
    bound to the test database.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    app = create_app()

    async def override_get_db_session():
        async with request_transaction(session_factory) as session:
            yield session

    app.dependency_overrides[get_db_session] = override_get_db_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def register_user(test_client):
    """Registers a user and returns (user_id, access_token)."""

    async def _register(user_name: str = "alice", password: str = "correct horse"):
        response = await test_client.post(
            "/users", json={"userName": user_name, "password": password}
        )
        assert response.status_code == 200, response.text
        body = response.json()["response"]
        return body["id"], body["accessToken"]

    return _register


@pytest.fixture
def post_thought(test_client):
    """Posts a thought as the token's owner and returns the created thought."""

    async def _post(token: str, message: str = "Sunny day at the lake", tags=None):
        payload: Dict[str, Any] = {"message": message}
        if tags is not None:
            payload["tags"] = tags
        response = await test_client.post(
            "/thoughts", json=payload, headers={"Authorization": token}
        )
        assert response.status_code == 201, response.text
        return response.json()["response"]

    return _post
