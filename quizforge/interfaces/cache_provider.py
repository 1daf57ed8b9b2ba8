"""Abstract base class for cache store providers.

Defines the contract for the key-value stores that back the two cache
tiers: the in-process memory tier and the shared network tier (Redis).
The :class:`~quizforge.services.cache_coordinator.CacheCoordinator` talks
only to this interface, so either tier can be swapped without touching
selection logic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


# Concrete implementations: MemoryCacheProvider, RedisCacheProvider
# Located in: quizforge/providers/cache/
class ICacheProvider(ABC):
    """Contract for key-value cache stores.

    All operations are async to allow for network-backed stores (e.g. Redis)
    without blocking the event loop.  Values are JSON-compatible Python
    objects (dict, list, str, int, float, bool, None).
    """

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        """Retrieve the value stored under *key*.

        Returns
        -------
        Any or None
            The cached value if present and not expired; ``None`` otherwise.

        Raises
        ------
        quizforge.utils.errors.StoreUnavailableError
            If a network-backed store cannot be reached.
        """

    @abstractmethod
    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        """Store *value* under *key* with an optional time-to-live.

        Parameters
        ----------
        key:
            The cache key.
        value:
            The value to store.
        ttl:
            Time-to-live in seconds.  ``None`` lets the store apply its own
            default (the memory tier) or keep the entry until evicted (the
            shared tier).
        """

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Remove the entry stored under *key*.

        Returns ``True`` if an entry was removed.  Missing keys are a no-op.
        """

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """Return ``True`` if *key* is present in the cache and not expired."""

    @abstractmethod
    async def keys(self, pattern: str = "*") -> list[str]:
        """Return the live keys matching a ``*`` wildcard *pattern*."""

    @abstractmethod
    async def expire(self, key: str, ttl: int) -> bool:
        """Reset the remaining lifetime of *key* to *ttl* seconds.

        Returns ``False`` if the key does not exist.
        """

    @abstractmethod
    async def clear(self) -> None:
        """Remove every entry from the store."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the store can currently accept operations."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier for logs (e.g. ``"memory"``, ``"redis"``)."""

    # ------------------------------------------------------------------
    # Optional operations with sensible defaults
    # ------------------------------------------------------------------

    async def delete_many(self, keys: list[str]) -> int:
        """Delete several keys, returning how many were actually removed."""
        removed = 0
        for key in keys:
            if await self.delete(key):
                removed += 1
        return removed

    async def purge_expired(self) -> int:
        """Eagerly drop expired entries and return how many were removed.

        Stores that expire entries natively (Redis) have nothing to do.
        """
        return 0

    async def close(self) -> None:
        """Release any connections held by the store."""
        return None
