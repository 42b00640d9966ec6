"""
Caching primitives for market data lookups.

- TTLCache: read-through cache with per-entry expiry and an LRU size bound
- PendingRequestRegistry: one in-flight fetch per key
"""

import asyncio
import logging
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class CacheEntry(Generic[T]):
    value: T
    expires_at: float


class TTLCache:
    """
    In-memory cache whose entries expire ``ttl_seconds`` after being set.

    Expired entries are dropped when read. Once ``maxsize`` entries are held
    the least recently used one is evicted.
    """

    def __init__(
        self,
        ttl_seconds: float = 3600,
        maxsize: int = 1024,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self.maxsize = maxsize
        self._clock = clock
        self._cache: "OrderedDict[str, CacheEntry[Any]]" = OrderedDict()
        self.hits = 0
        self.misses = 0

    def get(self, key: str) -> Optional[Any]:
        entry = self._cache.get(key)
        if entry is None:
            self.misses += 1
            return None
        if entry.expires_at <= self._clock():
            del self._cache[key]
            self.misses += 1
            return None
        self._cache.move_to_end(key)
        self.hits += 1
        return entry.value

    def set(self, key: str, value: Any) -> None:
        if key in self._cache:
            self._cache.move_to_end(key)
        elif len(self._cache) >= self.maxsize:
            self._cache.popitem(last=False)
        self._cache[key] = CacheEntry(value=value, expires_at=self._clock() + self.ttl_seconds)

    def __contains__(self, key: str) -> bool:
        entry = self._cache.get(key)
        return entry is not None and entry.expires_at > self._clock()

    def __len__(self) -> int:
        return len(self._cache)

    def clear(self) -> None:
        self._cache.clear()

    def stats(self) -> Dict[str, int]:
        return {"size": len(self._cache), "hits": self.hits, "misses": self.misses}


class PendingRequestRegistry:
    """
    Registry of in-flight fetches keyed by cache key.

    Concurrent callers for the same key await the same task. The key is
    released as soon as the task settles, whether it succeeded or failed.
    """

    def __init__(self):
        self._pending: Dict[str, "asyncio.Task[Any]"] = {}

    def __contains__(self, key: str) -> bool:
        return key in self._pending

    def __len__(self) -> int:
        return len(self._pending)

    async def run(self, key: str, fetch: Callable[[], Awaitable[T]]) -> T:
        """
        Await the in-flight fetch for ``key``, starting ``fetch()`` if none exists.

        Args:
            key: Cache key identifying the remote resource
            fetch: Zero-argument coroutine factory for the origin fetch

        Returns:
            Result of the shared fetch
        """
        task = self._pending.get(key)
        if task is not None:
            logger.debug(f"Awaiting existing request for {key}")
            return await asyncio.shield(task)

        async def _guarded() -> T:
            try:
                return await fetch()
            finally:
                self._pending.pop(key, None)

        task = asyncio.ensure_future(_guarded())
        self._pending[key] = task
        return await asyncio.shield(task)
