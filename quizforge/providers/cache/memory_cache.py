"""In-memory cache provider using cachetools.TLRUCache.

Fast, process-local store used as Tier-1 of the cache coordinator.  Unlike a
plain ``TTLCache`` each entry carries its own time-to-live, computed by the
``ttu`` (time-to-use) hook from the TTL recorded alongside the value.
Expired entries are hidden from reads immediately and physically removed by
:meth:`MemoryCacheProvider.purge_expired`, which the coordinator calls on a
timer.

The provider is safe to share across threads: every access to the
underlying cache happens under a re-entrant lock.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from typing import Any, NamedTuple

import structlog
from cachetools import TLRUCache

from quizforge.interfaces.cache_provider import ICacheProvider
from quizforge.utils.patterns import wildcard_to_regex

logger = structlog.get_logger(logger_name=__name__)


class _Entry(NamedTuple):
    value: Any
    ttl: float


def _time_to_use(_key: str, entry: _Entry, now: float) -> float:
    return now + entry.ttl


class MemoryCacheProvider(ICacheProvider):
    """Bounded in-memory cache with per-key expiry.

    Parameters
    ----------
    max_size:
        Maximum number of entries.  When full, expired entries are dropped
        first, then the least-recently-used live entry is evicted.
    ttl:
        Default time-to-live in seconds, applied when ``set`` is called
        with ``ttl=None`` or ``ttl=0``.  Tier-1 entries always expire.
    timer:
        Monotonic clock returning seconds; injectable for tests.
    """

    def __init__(
        self,
        max_size: int = 10000,
        ttl: int = 300,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl <= 0:
            raise ValueError("Tier-1 default TTL must be positive")
        self._default_ttl = ttl
        self._lock = threading.RLock()
        self._cache: TLRUCache[str, _Entry] = TLRUCache(
            maxsize=max_size, ttu=_time_to_use, timer=timer
        )

    def _effective_ttl(self, ttl: int | None) -> int:
        return ttl if ttl and ttl > 0 else self._default_ttl

    # ------------------------------------------------------------------
    # ICacheProvider implementation
    # ------------------------------------------------------------------

    async def get(self, key: str) -> Any | None:
        with self._lock:
            entry = self._cache.get(key)
        return entry.value if entry is not None else None

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        with self._lock:
            self._cache[key] = _Entry(value, self._effective_ttl(ttl))

    async def delete(self, key: str) -> bool:
        with self._lock:
            return self._cache.pop(key, None) is not None

    async def exists(self, key: str) -> bool:
        with self._lock:
            return key in self._cache

    async def keys(self, pattern: str = "*") -> list[str]:
        regex = wildcard_to_regex(pattern)
        with self._lock:
            return [k for k in list(self._cache) if k in self._cache and regex.fullmatch(k)]

    async def expire(self, key: str, ttl: int) -> bool:
        """Re-insert *key* so its lifetime restarts at *ttl* seconds from now."""
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                return False
            self._cache[key] = _Entry(entry.value, self._effective_ttl(ttl))
            return True

    async def clear(self) -> None:
        with self._lock:
            self._cache.clear()
        logger.debug("memory_cache_cleared")

    async def purge_expired(self) -> int:
        return self.sweep()

    def sweep(self) -> int:
        """Synchronously remove expired entries and return how many were dropped."""
        with self._lock:
            removed = len(self._cache.expire())
        if removed:
            logger.debug("memory_cache_swept", removed=removed)
        return removed

    def is_available(self) -> bool:
        return True

    def get_provider_name(self) -> str:
        return "memory"

    def __len__(self) -> int:
        with self._lock:
            return sum(1 for k in list(self._cache) if k in self._cache)
