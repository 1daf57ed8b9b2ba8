"""Shared pytest fixtures for the quizforge test suite."""

from __future__ import annotations

import json
import random
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio

from quizforge.interfaces.cache_provider import ICacheProvider
from quizforge.interfaces.question_generator import IQuestionGenerator
from quizforge.providers.cache.memory_cache import MemoryCacheProvider
from quizforge.services.cache_coordinator import CacheCoordinator
from quizforge.services.content_selector import ContentSelector
from quizforge.services.curated_store import CuratedContentStore
from quizforge.utils.errors import StoreUnavailableError
from quizforge.utils.patterns import matches

# ---------------------------------------------------------------------------
# Test doubles
# ---------------------------------------------------------------------------


class FakeClock:
    """Manually advanced monotonic clock for TTL tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeSharedStore(ICacheProvider):
    """In-memory stand-in for the Redis tier.

    Records the TTL of every write.  Setting ``fail = True`` makes every
    operation raise StoreUnavailableError, like a dropped Redis connection.
    """

    def __init__(self, available: bool = True) -> None:
        self.data: dict[str, Any] = {}
        self.ttls: dict[str, int | None] = {}
        self.available = available
        self.fail = False
        self.closed = False

    def _check(self) -> None:
        if self.fail:
            raise StoreUnavailableError("connection refused", provider_name="fake-redis")

    async def get(self, key: str) -> Any | None:
        self._check()
        return self.data.get(key)

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        self._check()
        try:
            self.data[key] = json.loads(json.dumps(value))
        except TypeError as exc:
            raise StoreUnavailableError(str(exc), provider_name="fake-redis") from exc
        self.ttls[key] = ttl

    async def delete(self, key: str) -> bool:
        self._check()
        self.ttls.pop(key, None)
        return self.data.pop(key, None) is not None

    async def exists(self, key: str) -> bool:
        self._check()
        return key in self.data

    async def keys(self, pattern: str = "*") -> list[str]:
        self._check()
        return [key for key in self.data if matches(pattern, key)]

    async def expire(self, key: str, ttl: int) -> bool:
        self._check()
        if key not in self.data:
            return False
        self.ttls[key] = ttl
        return True

    async def clear(self) -> None:
        self._check()
        self.data.clear()
        self.ttls.clear()

    async def close(self) -> None:
        self.closed = True

    def is_available(self) -> bool:
        return self.available

    def get_provider_name(self) -> str:
        return "fake-redis"


def make_question(
    prompt: str, difficulty: str | None = None, correct: int = 0, **extra: Any
) -> dict[str, Any]:
    item: dict[str, Any] = {
        "question": prompt,
        "options": ["A", "B", "C", "D"],
        "correctIndex": correct,
        "explanation": f"Because {prompt}",
    }
    if difficulty is not None:
        item["difficulty"] = difficulty
    item.update(extra)
    return item


# ---------------------------------------------------------------------------
# Cache fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def memory_cache(clock: FakeClock) -> MemoryCacheProvider:
    return MemoryCacheProvider(max_size=100, ttl=300, timer=clock)


@pytest.fixture
def shared_store() -> FakeSharedStore:
    return FakeSharedStore()


@pytest.fixture
def coordinator(memory_cache: MemoryCacheProvider, shared_store: FakeSharedStore) -> CacheCoordinator:
    return CacheCoordinator(
        memory_cache, shared_store, default_ttl=300, sweep_interval=0, stats_interval=0
    )


# ---------------------------------------------------------------------------
# Content fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def curated_dir(tmp_path: Path) -> Path:
    """A small curated bank: a level-map file, a wrapped file and a bare list."""
    data_dir = tmp_path / "quizzes"
    data_dir.mkdir()
    (data_dir / "javascript.json").write_text(
        json.dumps(
            {
                "beginner": [make_question(f"js easy {i}", "easy") for i in range(6)],
                "advanced": [make_question(f"js hard {i}", "hard") for i in range(2)],
            }
        ),
        encoding="utf-8",
    )
    (data_dir / "Python.json").write_text(
        json.dumps({"questions": [make_question(f"py {i}", "medium") for i in range(4)]}),
        encoding="utf-8",
    )
    (data_dir / "css.json").write_text(
        json.dumps([make_question(f"css {i}") for i in range(3)]), encoding="utf-8"
    )
    return data_dir


@pytest_asyncio.fixture
async def curated_store(curated_dir: Path) -> CuratedContentStore:
    store = CuratedContentStore(curated_dir)
    await store.load()
    return store


@pytest.fixture
def generated_payload() -> dict[str, Any]:
    return {
        "questions": [
            {
                "question": f"Generated question {i}?",
                "options": ["w", "x", "y", "z"],
                "correctIndex": i % 4,
                "explanation": "Generated explanation.",
                "conceptTested": "closures",
                "hint": "Think about scope.",
            }
            for i in range(5)
        ]
    }


@pytest.fixture
def mock_generator(generated_payload: dict[str, Any]) -> MagicMock:
    generator = MagicMock(spec=IQuestionGenerator)
    generator.is_available.return_value = True
    generator.get_provider_name.return_value = "mock-llm"
    generator.generate = AsyncMock(return_value=generated_payload)
    return generator


@pytest.fixture
def failing_generator() -> MagicMock:
    generator = MagicMock(spec=IQuestionGenerator)
    generator.is_available.return_value = True
    generator.get_provider_name.return_value = "mock-llm"
    generator.generate = AsyncMock(side_effect=RuntimeError("model overloaded"))
    return generator


@pytest.fixture
def selector_factory(coordinator: CacheCoordinator, curated_store: CuratedContentStore):
    """Build a ContentSelector over the shared fixtures with a seeded RNG."""

    def _make(generator: Any = None, **kwargs: Any) -> ContentSelector:
        kwargs.setdefault("rng", random.Random(1234))
        return ContentSelector(coordinator, curated_store, generator, **kwargs)

    return _make
