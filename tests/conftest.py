"""Shared test fixtures.

Each test gets its own SQLite database file and HS256 token settings; Redis
is disabled, so rate limiting and the completion broadcast are skipped.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Generator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from peerlearn.auth.jwt import reset_keys
from peerlearn.config import get_settings
from peerlearn.database import close_db, get_engine, get_session_factory, init_db
from peerlearn.db import models  # noqa: F401
from peerlearn.db.base import Base
from peerlearn.main import create_app
from peerlearn.progression.badge_service import clear_badge_hooks
from peerlearn.progression.seed import seed_badges

TEST_JWT_SECRET = "peerlearn-test-secret-with-at-least-32-bytes"


@pytest.fixture(autouse=True)
def _test_settings(tmp_path, monkeypatch) -> Generator[None, None, None]:
    """Point settings at a per-test database and a shared HS256 secret."""
    monkeypatch.setenv("PEERLEARN_DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'peerlearn.db'}")
    monkeypatch.setenv("PEERLEARN_REDIS_URL", "")
    monkeypatch.setenv("PEERLEARN_JWT_ALGORITHM", "HS256")
    monkeypatch.setenv("PEERLEARN_JWT_SECRET", TEST_JWT_SECRET)
    monkeypatch.setenv("PEERLEARN_LOG_FORMAT", "console")
    get_settings.cache_clear()
    reset_keys()
    yield
    clear_badge_hooks()
    get_settings.cache_clear()
    reset_keys()


@pytest_asyncio.fixture
async def database() -> AsyncGenerator[None, None]:
    """Create the schema and seed the badge catalog."""
    await init_db(get_settings().database_url)
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async with get_session_factory()() as db:
        await seed_badges(db)
    yield
    await close_db()


@pytest_asyncio.fixture
async def db_session(database: None) -> AsyncGenerator[AsyncSession, None]:
    """Get a direct database session for setup and assertions."""
    async with get_session_factory()() as session:
        yield session


@pytest_asyncio.fixture
async def client(database: None) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client against a fresh app."""
    app = create_app()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
