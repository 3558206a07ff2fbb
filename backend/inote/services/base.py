"""
iNote Backend - Cached Service Base
===================================

What:  Shared machinery for the entity services: cache region, write lock,
       write generation, cache key conventions and database error translation.
How:   Subclasses call `_cached()` for reads and wrap every write in
       `async with self._write(db, "update") as pending:`. The body runs the
       repository calls and records cache changes on `pending`; the context
       commits, then applies them, all while holding the lock.

Cache Key Conventions:
    ("id", <id>)            single entity, refreshed on writes
    ("all",)                full listing
    (<lookup>, *params)     any other lookup, e.g. ("title", "Groceries")

    Every key whose first element is not "id" is a query key. A write puts
    the affected ("id", ...) entry and drops all query keys, so listings are
    never served stale after a write in this process.

Critical Section:
    ┌─────────────── asyncio.Lock ───────────────┐
    │ repository write → commit → cache changes  │
    └────────────────────────────────────────────┘
    A failed commit rolls back and leaves the cache untouched. Each applied
    write bumps the service's generation counter.

Reads never take the lock. A cache miss notes the generation before loading
and fills the cache only if it is unchanged afterwards, so a slow read cannot
overwrite a newer value written by a concurrent request, and misses on any
keys run concurrently.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable, List, Optional, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from inote.cache import Cache, CacheKey
from inote.exceptions import ConflictError, DatabaseError

logger = logging.getLogger(__name__)

T = TypeVar("T")

ALL_KEY: CacheKey = ("all",)


def id_key(entity_id: int) -> CacheKey:
    return ("id", entity_id)


def is_query_key(key: CacheKey) -> bool:
    return not key or key[0] != "id"


class PendingCacheChanges:
    """Cache changes recorded during a write, applied only after commit."""

    def __init__(self, cache: Cache):
        self._cache = cache
        self._changes: List[Callable[[], None]] = []

    def refresh(self, entity_id: int, value: object) -> None:
        """Put the fresh entity under its id."""
        self._changes.append(lambda: self._cache.put(id_key(entity_id), value))

    def forget(self, entity_id: int) -> None:
        self._changes.append(lambda: self._cache.evict(id_key(entity_id)))

    def apply(self) -> None:
        if not self._changes:
            return
        for change in self._changes:
            change()
        # Every write may change the membership of any listing
        self._cache.evict_where(is_query_key)


class CachedEntityService:
    """Base class for NoteService and UserService."""

    resource = "entity"

    def __init__(self, cache: Cache):
        self.cache = cache
        self._lock = asyncio.Lock()
        # Bumped each time a committed write is applied to the cache
        self._generation = 0

    # ── Reads ─────────────────────────────────────────────────────────────

    async def _cached(
        self,
        key: CacheKey,
        load: Callable[[], Awaitable[Optional[T]]],
    ) -> Optional[T]:
        """
        Read-through lookup.

        Returns the cached value when present; otherwise runs `load` without
        any lock and caches a non-None result, unless a write was applied
        while `load` ran. None (absent entity) is never cached.
        """
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        generation = self._generation
        try:
            value = await load()
        except SQLAlchemyError as e:
            logger.error("Database error loading %s %s: %s", self.resource, key, e, exc_info=True)
            raise DatabaseError(
                message=f"Could not retrieve {self.resource} data. Please try again.",
                context={"key": repr(key), "error_type": type(e).__name__},
            ) from e

        if value is not None:
            if generation == self._generation:
                self.cache.put(key, value)
            else:
                logger.debug("Skipping cache fill [%s] %s: written meanwhile", self.cache.name, key)
        return value

    # ── Writes ────────────────────────────────────────────────────────────

    @asynccontextmanager
    async def _write(
        self, db: AsyncSession, operation: str
    ) -> AsyncIterator[PendingCacheChanges]:
        """
        Critical section for a store write.

        Commits the session when the body finishes, then applies the recorded
        cache changes. Integrity violations become ConflictError, other
        database failures DatabaseError; the session is rolled back and the
        cache left as it was in both cases.
        """
        async with self._lock:
            pending = PendingCacheChanges(self.cache)
            try:
                yield pending
                await db.commit()
            except IntegrityError as e:
                await db.rollback()
                logger.warning("Constraint violation during %s %s: %s", operation, self.resource, e.orig)
                raise ConflictError(
                    message=f"Could not {operation} {self.resource}: it conflicts with existing data.",
                    context={"error_type": type(e).__name__},
                ) from e
            except SQLAlchemyError as e:
                await db.rollback()
                logger.error("Database error during %s %s: %s", operation, self.resource, e, exc_info=True)
                raise DatabaseError(
                    message=f"Could not {operation} {self.resource}. Please try again.",
                    context={"error_type": type(e).__name__},
                ) from e
            pending.apply()
            self._generation += 1
