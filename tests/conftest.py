"""
Snippetbox - Test Configuration (conftest.py)
==============================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── test_settings:  Settings pointing at an in-memory SQLite database
    ├── memory_store:   In-memory SnippetStore test double
    ├── test_client:    HTTPX AsyncClient talking to the full app over ASGI
    ├── sqlite_engine:  Async SQLite engine with the schema created
    └── service:        SnippetService over sqlite_engine
"""

import os

# Override settings for testing BEFORE any snippetbox imports
# Why: `snippetbox.config.settings` is read once at import time
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["LOG_LEVEL"] = "WARNING"

from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from snippetbox.config import Settings
from snippetbox.database import Base, session_factory
from snippetbox.exceptions import ErrorKind, ModelError, RecordNotFoundError
from snippetbox.models.snippet import SnippetRecord  # noqa: F401  (registers the table)
from snippetbox.schemas.snippet import Snippet
from snippetbox.services.snippet_service import SnippetService, utcnow


class InMemorySnippetStore:
    """
    SnippetStore test double with the same visible semantics as SnippetService.

    Set `failing = True` to make every call raise a storage error.
    """

    def __init__(self, clock: Callable[[], datetime] = utcnow):
        self.clock = clock
        self.failing = False
        self.rows: Dict[int, Snippet] = {}

    def _check(self) -> None:
        if self.failing:
            raise ModelError(ErrorKind.STORAGE, message="connection refused")

    async def insert(self, title: str, content: str, expires: int) -> int:
        self._check()
        created = self.clock()
        snippet_id = len(self.rows) + 1
        self.rows[snippet_id] = Snippet(
            id=snippet_id,
            title=title,
            content=content,
            created=created,
            expires=created + timedelta(days=expires),
        )
        return snippet_id

    async def get(self, snippet_id: int) -> Snippet:
        self._check()
        snippet = self.rows.get(snippet_id)
        if snippet is None or not snippet.is_live(self.clock()):
            raise RecordNotFoundError(resource_id=snippet_id)
        return snippet

    async def latest(self) -> List[Snippet]:
        self._check()
        now = self.clock()
        live = [s for s in self.rows.values() if s.is_live(now)]
        live.sort(key=lambda s: (s.created, s.id), reverse=True)
        return live[:10]


# ══════════════════════════════════════════════════════════════════════════
# HTTP Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def test_settings():
    return Settings(database_url="sqlite+aiosqlite://", log_level="WARNING")


@pytest.fixture
def memory_store():
    return InMemorySnippetStore()


@pytest_asyncio.fixture
async def test_client(test_settings, memory_store):
    """
    Full application (middleware, mux, handlers) over the in-memory store.

    ASGITransport does not run the lifespan, so no database is pinged.

    Usage:
        async def test_home(test_client):
            response = await test_client.get("/")
            assert response.status_code == 200
    """
    from snippetbox.main import create_app

    app = create_app(test_settings, snippets=memory_store)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def sqlite_engine():
    """
    In-memory SQLite engine with the snippets table created.

    StaticPool keeps the one in-memory database alive across sessions.
    """
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def bare_engine():
    """In-memory SQLite engine WITHOUT the schema: every query fails."""
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    yield engine
    await engine.dispose()


@pytest.fixture
def service(sqlite_engine):
    return SnippetService(session_factory(sqlite_engine))


@pytest.fixture
def fixed_now():
    return datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)
