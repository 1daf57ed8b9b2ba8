"""Two-tier cache coordinator.

Sits in front of a process-local store (Tier-1) and an optional shared
store (Tier-2, usually Redis) and presents them as one cache:

    get   Tier-1 -> Tier-2 -> fallback (compute-on-miss)
    set   write-through to both tiers
    del   both tiers

A live Tier-2 hit is promoted into Tier-1 so the next read is local.
Tier-2 failures never reach the caller; they are logged and the lookup
counts as a miss, so the process keeps serving from memory when Redis is
down.

The coordinator also owns two background tasks, started with
:meth:`CacheCoordinator.start`: a periodic Tier-1 sweep that physically
drops expired entries, and a periodic statistics report that logs the
hit/miss counters and resets them for the next window.
"""

from __future__ import annotations

import asyncio
import contextlib
import inspect
import threading
from collections.abc import Callable
from typing import Any

import structlog

from quizforge.interfaces.cache_provider import ICacheProvider
from quizforge.models.cache import CacheStatistics
from quizforge.utils.errors import StoreUnavailableError
from quizforge.utils.patterns import wildcard_to_regex

logger = structlog.get_logger(logger_name=__name__)

# May return the value directly or an awaitable resolving to it.
Fallback = Callable[[], Any]

_COUNTERS = (
    "tier1_hits",
    "tier1_misses",
    "tier2_hits",
    "tier2_misses",
    "tier1_writes",
    "tier2_writes",
    "total_misses",
)


class CacheCoordinator:
    """Unified read/write access to the memory and shared cache tiers.

    Parameters
    ----------
    tier1:
        Process-local store.  Always present.
    tier2:
        Shared store, or ``None`` when running single-process.  Its
        ``is_available()`` flag is checked at the top of each operation.
    default_ttl:
        Seconds applied when an operation passes ``ttl=None``.
    sweep_interval:
        Seconds between Tier-1 sweeps once started; 0 disables.
    stats_interval:
        Seconds between statistics reports once started; 0 disables.
    """

    def __init__(
        self,
        tier1: ICacheProvider,
        tier2: ICacheProvider | None = None,
        *,
        default_ttl: int = 300,
        sweep_interval: float = 60.0,
        stats_interval: float = 300.0,
    ) -> None:
        self._tier1 = tier1
        self._tier2 = tier2
        self._default_ttl = default_ttl
        self._sweep_interval = sweep_interval
        self._stats_interval = stats_interval
        self._stats_lock = threading.Lock()
        self._counters: dict[str, int] = dict.fromkeys(_COUNTERS, 0)
        self._tasks: list[asyncio.Task[None]] = []

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _bump(self, counter: str) -> None:
        with self._stats_lock:
            self._counters[counter] += 1

    def _tier2_ready(self) -> bool:
        return self._tier2 is not None and self._tier2.is_available()

    def _log_tier2_error(self, op: str, exc: StoreUnavailableError, **context: Any) -> None:
        logger.warning("cache_tier2_error", op=op, error=str(exc), **context)

    @property
    def tier2_enabled(self) -> bool:
        return self._tier2_ready()

    # ------------------------------------------------------------------
    # Core operations
    # ------------------------------------------------------------------

    async def get(
        self,
        key: str,
        *,
        skip_tier1: bool = False,
        skip_tier2: bool = False,
        ttl: int | None = None,
        refresh_on_access: bool = False,
        fallback: Fallback | None = None,
    ) -> Any | None:
        """Look *key* up in each tier in turn.

        On a full miss with *fallback* given, the fallback is called once
        (it may be a plain function or return an awaitable) and a non-None
        result is written through :meth:`set` with the same *ttl* and skip
        flags.  Exceptions raised by the fallback propagate.
        """
        effective_ttl = self._default_ttl if ttl is None else ttl
        use_tier2 = not skip_tier2 and self._tier2_ready()

        if not skip_tier1:
            value = await self._tier1.get(key)
            if value is not None:
                self._bump("tier1_hits")
                if refresh_on_access:
                    await self._tier1.expire(key, effective_ttl)
                return value
            self._bump("tier1_misses")

        if use_tier2:
            value = await self._get_tier2(key, effective_ttl, refresh_on_access)
            if value is not None:
                self._bump("tier2_hits")
                if not skip_tier1:
                    await self._tier1.set(key, value, effective_ttl)
                    self._bump("tier1_writes")
                return value
            self._bump("tier2_misses")

        self._bump("total_misses")

        if fallback is None:
            return None

        result = fallback()
        if inspect.isawaitable(result):
            result = await result
        if result is not None:
            await self.set(key, result, ttl=ttl, skip_tier1=skip_tier1, skip_tier2=skip_tier2)
        return result

    async def _get_tier2(self, key: str, ttl: int, refresh: bool) -> Any | None:
        assert self._tier2 is not None
        try:
            value = await self._tier2.get(key)
            if value is not None and refresh:
                await self._tier2.expire(key, ttl)
        except StoreUnavailableError as exc:
            self._log_tier2_error("get", exc, key=key)
            return None
        return value

    async def set(
        self,
        key: str,
        value: Any,
        *,
        ttl: int | None = None,
        skip_tier1: bool = False,
        skip_tier2: bool = False,
    ) -> bool:
        """Write *value* to both tiers.

        ``ttl=0`` stores without expiry in Tier-2; Tier-1 then uses its own
        default so local entries always expire.  Returns ``False`` only when
        no tier accepted the write.
        """
        effective_ttl = self._default_ttl if ttl is None else ttl
        stored = False

        if not skip_tier1:
            await self._tier1.set(key, value, effective_ttl)
            self._bump("tier1_writes")
            stored = True

        if not skip_tier2 and self._tier2_ready():
            assert self._tier2 is not None
            try:
                await self._tier2.set(key, value, effective_ttl)
            except StoreUnavailableError as exc:
                self._log_tier2_error("set", exc, key=key)
            else:
                self._bump("tier2_writes")
                stored = True

        return stored

    async def delete(self, key: str) -> None:
        await self.delete_many([key])

    async def delete_many(self, keys: list[str]) -> int:
        """Remove *keys* from both tiers.  Returns how many keys existed anywhere."""
        if not keys:
            return 0
        removed: set[str] = set()
        for key in keys:
            if await self._tier1.delete(key):
                removed.add(key)
        if self._tier2_ready():
            assert self._tier2 is not None
            try:
                present = [key for key in keys if key not in removed and await self._tier2.exists(key)]
                await self._tier2.delete_many(keys)
            except StoreUnavailableError as exc:
                self._log_tier2_error("delete", exc, count=len(keys))
            else:
                removed.update(present)
        return len(removed)

    async def has(self, key: str) -> bool:
        if await self._tier1.exists(key):
            return True
        if not self._tier2_ready():
            return False
        assert self._tier2 is not None
        try:
            return await self._tier2.exists(key)
        except StoreUnavailableError as exc:
            self._log_tier2_error("exists", exc, key=key)
            return False

    async def invalidate_by_pattern(self, pattern: str) -> int:
        """Delete every key matching *pattern* (``*`` = any sequence).

        Returns the number of distinct keys removed across both tiers.
        """
        regex = wildcard_to_regex(pattern)
        matched = {key for key in await self._tier1.keys("*") if regex.fullmatch(key)}

        if self._tier2_ready():
            assert self._tier2 is not None
            try:
                matched.update(await self._tier2.keys(pattern))
            except StoreUnavailableError as exc:
                self._log_tier2_error("scan", exc, pattern=pattern)

        if not matched:
            return 0

        keys = sorted(matched)
        for key in keys:
            await self._tier1.delete(key)
        if self._tier2_ready():
            assert self._tier2 is not None
            try:
                await self._tier2.delete_many(keys)
            except StoreUnavailableError as exc:
                self._log_tier2_error("delete", exc, pattern=pattern)

        logger.info("cache_invalidated", pattern=pattern, removed=len(keys))
        return len(keys)

    async def flush_all(self) -> None:
        """Empty both tiers."""
        await self._tier1.clear()
        if self._tier2_ready():
            assert self._tier2 is not None
            try:
                await self._tier2.clear()
            except StoreUnavailableError as exc:
                self._log_tier2_error("flush", exc)
        logger.info("cache_flushed")

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    def get_statistics(self) -> CacheStatistics:
        """Snapshot the current counters without resetting them."""
        with self._stats_lock:
            return CacheStatistics(**self._counters)

    def report_statistics(self) -> CacheStatistics:
        """Log the current window's counters, then start a new window."""
        with self._stats_lock:
            snapshot = CacheStatistics(**self._counters)
            self._counters = dict.fromkeys(_COUNTERS, 0)
        logger.info(
            "cache_statistics",
            hit_rate=round(snapshot.hit_rate, 4),
            tier1_hit_rate=round(snapshot.tier1_hit_rate, 4),
            tier2_hit_rate=round(snapshot.tier2_hit_rate, 4),
            tier1_writes=snapshot.tier1_writes,
            tier2_writes=snapshot.tier2_writes,
            total_misses=snapshot.total_misses,
            tier2_enabled=self._tier2_ready(),
        )
        return snapshot

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def sweep(self) -> int:
        removed = await self._tier1.purge_expired()
        if removed:
            logger.debug("cache_swept", removed=removed)
        return removed

    def start(self) -> None:
        """Launch the periodic sweep and report tasks on the running loop."""
        if self._tasks:
            return
        if self._sweep_interval > 0:
            self._tasks.append(
                asyncio.create_task(self._every(self._sweep_interval, self.sweep, "sweep"))
            )
        if self._stats_interval > 0:
            self._tasks.append(
                asyncio.create_task(
                    self._every(self._stats_interval, self.report_statistics, "report")
                )
            )

    async def stop(self) -> None:
        tasks, self._tasks = self._tasks, []
        for task in tasks:
            task.cancel()
        for task in tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task

    async def close(self) -> None:
        """Stop background tasks and release the Tier-2 connection."""
        await self.stop()
        if self._tier2 is not None:
            await self._tier2.close()

    @staticmethod
    async def _every(interval: float, job: Callable[[], Any], name: str) -> None:
        while True:
            await asyncio.sleep(interval)
            try:
                result = job()
                if inspect.isawaitable(result):
                    await result
            except Exception as exc:  # noqa: BLE001
                logger.warning("cache_background_job_failed", job=name, error=str(exc))
