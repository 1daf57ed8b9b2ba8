"""Redis cache provider (Tier-2, shared across processes).

Values are stored as JSON strings with native Redis expiry.  The provider
is optional: an empty ``redis_url`` or a failed connection leaves it
unavailable, and the cache coordinator then runs on the memory tier alone.

Every Redis failure is surfaced as :class:`StoreUnavailableError` so the
coordinator can log it and treat the lookup as a miss.
"""

from __future__ import annotations

import json
from typing import Any

import structlog
from redis import asyncio as aioredis
from redis.exceptions import RedisError

from quizforge.interfaces.cache_provider import ICacheProvider
from quizforge.utils.errors import StoreUnavailableError
from quizforge.utils.patterns import to_redis_glob

logger = structlog.get_logger(logger_name=__name__)

_SCAN_BATCH = 100


class RedisCacheProvider(ICacheProvider):
    """Async Redis-backed cache.

    Parameters
    ----------
    url:
        Redis connection URL (``redis://`` or ``rediss://``).  Empty
        disables the provider.
    socket_timeout:
        Connect and read timeout in seconds.
    """

    def __init__(self, url: str = "", socket_timeout: float = 2.0) -> None:
        self._url = url
        self._socket_timeout = socket_timeout
        self._client: aioredis.Redis | None = None
        self._connected = False

    async def connect(self) -> bool:
        """Create the client and verify the server answers ``PING``.

        Returns ``True`` when the store is usable.  Failure is logged and
        leaves the provider unavailable; it never raises.
        """
        if not self._url:
            logger.info("redis_disabled", reason="no REDIS_URL configured")
            return False
        try:
            self._client = aioredis.from_url(
                self._url,
                decode_responses=True,
                socket_connect_timeout=self._socket_timeout,
                socket_timeout=self._socket_timeout,
            )
            await self._client.ping()
        except (RedisError, OSError) as exc:
            logger.warning("redis_connect_failed", error=str(exc))
            self._connected = False
            return False
        self._connected = True
        logger.info("redis_connected")
        return True

    def _require_client(self) -> aioredis.Redis:
        if self._client is None or not self._connected:
            raise StoreUnavailableError(
                message="Redis is not connected", provider_name=self.get_provider_name()
            )
        return self._client

    def _unavailable(self, op: str, exc: Exception) -> StoreUnavailableError:
        return StoreUnavailableError(
            message=f"{op} failed: {exc}", provider_name=self.get_provider_name()
        )

    # ------------------------------------------------------------------
    # ICacheProvider implementation
    # ------------------------------------------------------------------

    async def get(self, key: str) -> Any | None:
        client = self._require_client()
        try:
            raw = await client.get(key)
        except (RedisError, OSError) as exc:
            raise self._unavailable("GET", exc) from exc
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            # Written by something other than this provider.
            return raw

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        client = self._require_client()
        try:
            payload = json.dumps(value)
        except (TypeError, ValueError) as exc:
            raise self._unavailable("SET", exc) from exc
        try:
            if ttl and ttl > 0:
                await client.setex(key, ttl, payload)
            else:
                await client.set(key, payload)
        except (RedisError, OSError) as exc:
            raise self._unavailable("SET", exc) from exc

    async def delete(self, key: str) -> bool:
        client = self._require_client()
        try:
            return bool(await client.delete(key))
        except (RedisError, OSError) as exc:
            raise self._unavailable("DEL", exc) from exc

    async def delete_many(self, keys: list[str]) -> int:
        if not keys:
            return 0
        client = self._require_client()
        try:
            return int(await client.delete(*keys))
        except (RedisError, OSError) as exc:
            raise self._unavailable("DEL", exc) from exc

    async def exists(self, key: str) -> bool:
        client = self._require_client()
        try:
            return bool(await client.exists(key))
        except (RedisError, OSError) as exc:
            raise self._unavailable("EXISTS", exc) from exc

    async def keys(self, pattern: str = "*") -> list[str]:
        """Collect matching keys with incremental ``SCAN`` (never ``KEYS``)."""
        client = self._require_client()
        found: list[str] = []
        try:
            async for key in client.scan_iter(match=to_redis_glob(pattern), count=_SCAN_BATCH):
                found.append(key)
        except (RedisError, OSError) as exc:
            raise self._unavailable("SCAN", exc) from exc
        return found

    async def expire(self, key: str, ttl: int) -> bool:
        client = self._require_client()
        try:
            if ttl and ttl > 0:
                return bool(await client.expire(key, ttl))
            return bool(await client.persist(key)) or bool(await client.exists(key))
        except (RedisError, OSError) as exc:
            raise self._unavailable("EXPIRE", exc) from exc

    async def clear(self) -> None:
        client = self._require_client()
        try:
            await client.flushdb()
        except (RedisError, OSError) as exc:
            raise self._unavailable("FLUSHDB", exc) from exc

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
        self._client = None
        self._connected = False

    def is_available(self) -> bool:
        return self._connected

    def get_provider_name(self) -> str:
        return "redis"
