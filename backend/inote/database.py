"""
iNote Backend - Database Session Management
===========================================

What:  Async SQLAlchemy engine, session factory, declarative base, and the
       request-scoped session dependency.
How:   `build_engine()` creates an async engine for the configured URL; the
       session dependency opens one session per request, commits on success,
       rolls back on error, and always closes.
Who:   Route handlers via FastAPI's dependency injection; Alembic via `Base`.

Connection Pooling:
    pool_size=20, max_overflow=10, pool_pre_ping, pool_recycle=3600 for
    server databases. SQLite URLs skip pool sizing; in-memory SQLite uses a
    StaticPool so every session sees the same database.
"""

from datetime import datetime, timezone
from typing import Any, AsyncGenerator, Dict

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from inote.config import settings


def utcnow() -> datetime:
    """Naive UTC timestamp, the representation stored in every timestamp column."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _is_memory_sqlite(url: str) -> bool:
    return url.startswith("sqlite") and (url.endswith("://") or ":memory:" in url)


def build_engine(url: str, echo: bool = False) -> AsyncEngine:
    """
    Create an async engine for `url`.

    PostgreSQL (asyncpg) gets the pool settings from configuration.
    SQLite gets foreign key enforcement switched on for every connection,
    which it otherwise leaves off.
    """
    kwargs: Dict[str, Any] = {"echo": echo}

    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if _is_memory_sqlite(url):
            kwargs["poolclass"] = StaticPool
    else:
        kwargs.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )

    async_engine = create_async_engine(url, **kwargs)

    if url.startswith("sqlite"):
        @event.listens_for(async_engine.sync_engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return async_engine


# ── Engine & Session Factory ──────────────────────────────────────────────
engine = build_engine(settings.database_url, echo=settings.log_level == "DEBUG")

# expire_on_commit=False: services convert rows to schemas after commit
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Every model registers with the shared metadata, which Alembic reads for
    autogenerate and tests use for `create_all`.
    """
    pass


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the route handler
        3. On success: commits whatever the services left pending
        4. On error: rolls back
        5. Always: closes the session (returns connection to pool)

    Services commit their own writes inside the cache critical section, so
    the commit here is usually a no-op.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def create_tables(target: AsyncEngine = engine) -> None:
    """Create all tables from ORM metadata (local development and tests)."""
    # Register models with Base.metadata before create_all
    import inote.models  # noqa: F401

    async with target.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    """
    Gracefully close all connections in the pool.
    Called during application shutdown (lifespan handler).
    """
    await engine.dispose()
