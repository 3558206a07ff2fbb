"""
iNote Backend - Test Configuration (conftest.py)
================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Each test gets a fresh file-backed SQLite database (aiosqlite) under
       pytest's tmp_path, fresh cache regions, and fresh services.

Fixture Hierarchy (all function-scoped):
    engine ─→ session_factory ─→ db_session
                              └→ test_client (app with the session overridden)
    note_cache ─→ note_service
    user_cache ─→ user_service
"""

import os

# Override settings for testing BEFORE any inote imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["CACHE_ENABLED"] = "true"
os.environ["CACHE_TTL_SECONDS"] = "0"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from inote.cache import InMemoryCache
from inote.database import build_engine, create_tables, get_db_session
from inote.services import NoteService, UserService


# ══════════════════════════════════════════════════════════════════════════
# Database
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def engine(tmp_path):
    """
    Async engine over a throwaway SQLite file.

    A file (not :memory:) lets concurrent sessions use separate connections,
    the way they would against PostgreSQL.
    """
    test_engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'inote_test.db'}")
    await create_tables(test_engine)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


# ══════════════════════════════════════════════════════════════════════════
# Services
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def note_cache():
    return InMemoryCache("notes")


@pytest.fixture
def user_cache():
    return InMemoryCache("users")


@pytest.fixture
def note_service(note_cache):
    return NoteService(note_cache)


@pytest.fixture
def user_service(user_cache):
    return UserService(user_cache)


# ══════════════════════════════════════════════════════════════════════════
# HTTP
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client(session_factory):
    """
    HTTPX AsyncClient talking to a freshly built app.

    The request session dependency is swapped for one bound to the test
    database; everything else (services, caches, middleware, handlers) is
    the real wiring from create_app().

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from inote.main import create_app

    app = create_app()

    async def override_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_db_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
