"""Quiz content selection: generator first, curated bank as fallback.

For a request of ``count`` questions on ``topic`` at ``difficulty``:

1. Validate the request.  Bad arguments raise before any I/O.
2. Check the selection cache (``questions:{topic}:{difficulty}:{count}``)
   through the cache coordinator.  A hit is returned as a freshly
   shuffled copy so repeat requests don't see identical ordering.
3. Ask the question generator.  A non-empty, normalizable result is
   cached and returned.
4. Otherwise fall back to the curated bank (exact topic, then partial
   match, then the built-in default pool), optionally narrow by
   difficulty, shuffle, take ``count`` and normalize.  Fallback results
   are not cached so a recovered generator is used on the next request.

Generator failures are logged and recovered here; callers only ever see
``InvalidRequestError`` or ``ContentUnavailableError``.
"""

from __future__ import annotations

import asyncio
import random
from collections.abc import Mapping, Sequence
from typing import Any

import structlog
from pydantic import ValidationError

from quizforge.interfaces.question_generator import IQuestionGenerator
from quizforge.models.content import ContentRecord, RecordSource
from quizforge.services.cache_coordinator import CacheCoordinator
from quizforge.services.curated_store import CuratedContentStore
from quizforge.services.default_pool import DEFAULT_QUESTIONS
from quizforge.services.normalization import normalize_batch
from quizforge.utils.errors import ContentUnavailableError, InvalidRequestError
from quizforge.utils.sampling import fisher_yates_shuffle, sample_without_replacement

logger = structlog.get_logger(logger_name=__name__)

CACHE_PREFIX = "questions"


def selection_cache_key(topic: str, difficulty: str, count: int) -> str:
    return f"{CACHE_PREFIX}:{topic.lower()}:{difficulty}:{count}"


class ContentSelector:
    """Serves normalized quiz questions for (topic, difficulty, count) requests.

    Parameters
    ----------
    cache:
        The shared two-tier cache coordinator.
    curated:
        Curated question bank used when generation is unavailable or fails.
    generator:
        Optional on-demand generator.  ``None`` means curated only.
    cache_ttl:
        Seconds a generated selection stays cached.
    max_count:
        Largest ``count`` accepted per request.
    generator_timeout:
        Seconds to wait for the generator; 0 or ``None`` waits indefinitely.
    rng:
        Random source for shuffling; injectable for deterministic tests.
    """

    def __init__(
        self,
        cache: CacheCoordinator,
        curated: CuratedContentStore,
        generator: IQuestionGenerator | None = None,
        *,
        cache_ttl: int = 1800,
        max_count: int = 50,
        generator_timeout: float | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._cache = cache
        self._curated = curated
        self._generator = generator
        self._cache_ttl = cache_ttl
        self._max_count = max_count
        self._generator_timeout = generator_timeout or None
        self._rng = rng or random.Random()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def select_content(self, topic: str, difficulty: str, count: int) -> list[ContentRecord]:
        """Return up to *count* questions for *topic* at *difficulty*.

        Raises
        ------
        InvalidRequestError
            If the arguments are unusable.
        ContentUnavailableError
            If the generator failed and the curated bank was never loaded.
        """
        topic, difficulty = self._validate(topic, difficulty, count)
        key = selection_cache_key(topic, difficulty, count)

        cached = await self._from_cache(key)
        if cached:
            logger.debug("selection_cache_hit", key=key, size=len(cached))
            return fisher_yates_shuffle(cached, self._rng)

        generated = await self._generate(topic, difficulty, count)
        if generated:
            await self._cache.set(
                key,
                [record.model_dump(mode="json") for record in generated],
                ttl=self._cache_ttl,
            )
            return generated

        return self._select_curated(topic, difficulty, count)

    def get_available_topics(self) -> frozenset[str]:
        return self._curated.topics()

    def get_question_count_for_topic(self, topic: str) -> int:
        return self._curated.count(topic)

    async def reload(self) -> bool:
        """Drop cached selections and re-read the curated bank."""
        await self.clear_cache()
        return await self._curated.reload()

    async def invalidate_topic(self, topic: str) -> int:
        """Forget every cached selection for *topic*."""
        return await self._cache.invalidate_by_pattern(
            f"{CACHE_PREFIX}:{topic.strip().lower()}:*"
        )

    async def clear_cache(self) -> int:
        return await self._cache.invalidate_by_pattern(f"{CACHE_PREFIX}:*")

    # ------------------------------------------------------------------
    # Pipeline steps
    # ------------------------------------------------------------------

    def _validate(self, topic: Any, difficulty: Any, count: Any) -> tuple[str, str]:
        if not isinstance(topic, str) or not topic.strip():
            raise InvalidRequestError("topic must be a non-empty string")
        if not isinstance(difficulty, str) or not difficulty.strip():
            raise InvalidRequestError("difficulty must be a non-empty string")
        if isinstance(count, bool) or not isinstance(count, int) or count <= 0:
            raise InvalidRequestError(f"count must be a positive integer, got {count!r}")
        if count > self._max_count:
            raise InvalidRequestError(
                f"count {count} exceeds the per-request limit of {self._max_count}"
            )
        return topic.strip().lower(), difficulty.strip().lower()

    async def _from_cache(self, key: str) -> list[ContentRecord] | None:
        payload = await self._cache.get(key, ttl=self._cache_ttl)
        if payload is None:
            return None
        try:
            return [ContentRecord.model_validate(item) for item in payload]
        except (TypeError, ValidationError) as exc:
            logger.warning("selection_cache_corrupt", key=key, error=str(exc))
            await self._cache.delete(key)
            return None

    async def _generate(self, topic: str, difficulty: str, count: int) -> list[ContentRecord]:
        generator = self._generator
        if generator is None or not generator.is_available():
            return []

        try:
            result = await asyncio.wait_for(
                generator.generate(topic, count, difficulty), timeout=self._generator_timeout
            )
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "generator_failed",
                topic=topic,
                difficulty=difficulty,
                provider=generator.get_provider_name(),
                error=str(exc) or type(exc).__name__,
            )
            return []

        items = result.get("questions") if isinstance(result, Mapping) else None
        if not isinstance(items, Sequence) or isinstance(items, str) or not items:
            logger.warning("generator_empty_result", topic=topic, difficulty=difficulty)
            return []

        records = normalize_batch(
            items, topic=topic, difficulty=difficulty, source=RecordSource.GENERATED
        )
        return records[:count]

    def _select_curated(self, topic: str, difficulty: str, count: int) -> list[ContentRecord]:
        if not self._curated.is_loaded:
            raise ContentUnavailableError(
                "Question generation failed and the curated bank is not loaded",
                provider_name="curated-bank",
            )

        pool: Sequence[Mapping[str, Any]] | None = self._curated.match_topic(topic)
        if not pool:
            logger.info("curated_topic_unmatched", topic=topic)
            pool = DEFAULT_QUESTIONS

        candidates = self._filter_by_difficulty(pool, difficulty, count)
        chosen = sample_without_replacement(candidates, count, self._rng)
        records = normalize_batch(
            chosen, topic=topic, difficulty=difficulty, source=RecordSource.CURATED
        )

        if not records and pool is not DEFAULT_QUESTIONS:
            # Every chosen curated item was malformed.
            logger.warning("curated_pool_unusable", topic=topic)
            chosen = sample_without_replacement(DEFAULT_QUESTIONS, count, self._rng)
            records = normalize_batch(
                chosen, topic=topic, difficulty=difficulty, source=RecordSource.CURATED
            )

        logger.info(
            "curated_selection",
            topic=topic,
            difficulty=difficulty,
            requested=count,
            returned=len(records),
        )
        return records

    @staticmethod
    def _filter_by_difficulty(
        pool: Sequence[Mapping[str, Any]], difficulty: str, count: int
    ) -> Sequence[Mapping[str, Any]]:
        """Narrow *pool* to *difficulty* only when doing so still leaves *count* items.

        Pools whose first item has no difficulty label are treated as
        unlabelled and returned unchanged.
        """
        if not pool or not pool[0].get("difficulty"):
            return pool
        matching = [
            item for item in pool if str(item.get("difficulty", "")).lower() == difficulty
        ]
        return matching if len(matching) >= count else pool
