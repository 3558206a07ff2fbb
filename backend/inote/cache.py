"""
iNote Backend - Cache Regions
=============================

What:  Named key-value cache regions used by the services for read-through
       caching ("notes", "users").
How:   `Cache` defines the interface; `InMemoryCache` keeps entries in an
       OrderedDict with LRU eviction and optional TTL; `NullCache` never
       stores anything and is used when caching is disabled.
Who:   Built once per application by `CacheRegistry.from_settings()` and
       passed to each service through its constructor.

Keys are tuples whose first element names the lookup, e.g. ("id", 7),
("all",), ("title", "Groceries"). Services treat every key that is not an
("id", ...) key as a query key and drop those on each write.

Consistency:
    The cache itself does no locking. Services serialize writes behind
    their own asyncio.Lock, which makes the store write and the cache update
    one critical section inside a process. Cache-miss fills are checked
    against the service's write generation instead of locking.
    Multiple worker processes each hold their own regions.
"""

import logging
import time
from abc import ABC, abstractmethod
from collections import OrderedDict
from typing import Any, Callable, Dict, Hashable, Optional, Tuple

from inote.config import settings

logger = logging.getLogger(__name__)

CacheKey = Tuple[Hashable, ...]


class Cache(ABC):
    """Interface for a single named cache region."""

    def __init__(self, name: str):
        self.name = name

    @abstractmethod
    def get(self, key: CacheKey) -> Optional[Any]:
        """Return the cached value or None on a miss."""
        ...

    @abstractmethod
    def put(self, key: CacheKey, value: Any) -> None:
        ...

    @abstractmethod
    def evict(self, key: CacheKey) -> None:
        ...

    @abstractmethod
    def evict_where(self, predicate: Callable[[CacheKey], bool]) -> int:
        """Drop every key matching `predicate`; returns how many were dropped."""
        ...

    @abstractmethod
    def clear(self) -> None:
        ...

    @abstractmethod
    def __len__(self) -> int:
        ...


class InMemoryCache(Cache):
    """
    Process-local LRU cache with optional expiry.

    Args:
        name:         Region name, used in log lines and health output
        max_entries:  Least recently used entries are dropped beyond this size
        ttl_seconds:  Entry lifetime; 0 keeps entries until evicted
        clock:        Monotonic time source, replaceable in tests
    """

    def __init__(
        self,
        name: str,
        max_entries: int = 1024,
        ttl_seconds: float = 0,
        clock: Callable[[], float] = time.monotonic,
    ):
        super().__init__(name)
        self.max_entries = max_entries
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        # key → (value, stored_at)
        self._entries: "OrderedDict[CacheKey, Tuple[Any, float]]" = OrderedDict()

    def get(self, key: CacheKey) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            logger.debug("Cache miss [%s] %s", self.name, key)
            return None

        value, stored_at = entry
        if self.ttl_seconds and self._clock() - stored_at >= self.ttl_seconds:
            del self._entries[key]
            logger.debug("Cache expired [%s] %s", self.name, key)
            return None

        self._entries.move_to_end(key)
        logger.debug("Cache hit [%s] %s", self.name, key)
        return value

    def put(self, key: CacheKey, value: Any) -> None:
        self._entries[key] = (value, self._clock())
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_entries:
            dropped, _ = self._entries.popitem(last=False)
            logger.debug("Cache full [%s], dropped %s", self.name, dropped)

    def evict(self, key: CacheKey) -> None:
        if self._entries.pop(key, None) is not None:
            logger.debug("Cache evict [%s] %s", self.name, key)

    def evict_where(self, predicate: Callable[[CacheKey], bool]) -> int:
        doomed = [key for key in self._entries if predicate(key)]
        for key in doomed:
            del self._entries[key]
        if doomed:
            logger.debug("Cache evicted %d entries from [%s]", len(doomed), self.name)
        return len(doomed)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class NullCache(Cache):
    """Cache region that stores nothing; every read is a miss."""

    def get(self, key: CacheKey) -> Optional[Any]:
        return None

    def put(self, key: CacheKey, value: Any) -> None:
        pass

    def evict(self, key: CacheKey) -> None:
        pass

    def evict_where(self, predicate: Callable[[CacheKey], bool]) -> int:
        return 0

    def clear(self) -> None:
        pass

    def __len__(self) -> int:
        return 0


class CacheRegistry:
    """Holds the named regions of one application instance."""

    def __init__(self, factory: Callable[[str], Cache]):
        self._factory = factory
        self._regions: Dict[str, Cache] = {}

    @classmethod
    def from_settings(cls) -> "CacheRegistry":
        if not settings.cache_enabled:
            logger.info("Caching disabled; using NullCache regions")
            return cls(NullCache)
        return cls(
            lambda name: InMemoryCache(
                name,
                max_entries=settings.cache_max_entries,
                ttl_seconds=settings.cache_ttl_seconds,
            )
        )

    def region(self, name: str) -> Cache:
        """Return the region called `name`, creating it on first use."""
        if name not in self._regions:
            self._regions[name] = self._factory(name)
        return self._regions[name]

    def stats(self) -> Dict[str, int]:
        return {name: len(region) for name, region in self._regions.items()}

    def clear(self) -> None:
        for region in self._regions.values():
            region.clear()
