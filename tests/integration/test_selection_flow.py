"""End-to-end selection flows over the bundled and temporary question banks.

Real CuratedContentStore, MemoryCacheProvider and CacheCoordinator; the
shared tier is the in-memory FakeSharedStore and the generator is mocked.
"""

from __future__ import annotations

import asyncio
import json
import random

import pytest
import pytest_asyncio

from quizforge.main import BUNDLED_DATA_DIR
from quizforge.providers.cache.memory_cache import MemoryCacheProvider
from quizforge.services.cache_coordinator import CacheCoordinator
from quizforge.services.content_selector import ContentSelector, selection_cache_key
from quizforge.services.curated_store import CuratedContentStore
from quizforge.services.default_pool import DEFAULT_QUESTIONS
from tests.conftest import FakeSharedStore, make_question

pytestmark = pytest.mark.integration


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def bank() -> CuratedContentStore:
    store = CuratedContentStore(BUNDLED_DATA_DIR)
    assert await store.load()
    return store


@pytest.fixture
def stack(clock, shared_store: FakeSharedStore) -> CacheCoordinator:
    tier1 = MemoryCacheProvider(max_size=1000, ttl=300, timer=clock)
    return CacheCoordinator(tier1, shared_store, default_ttl=300, sweep_interval=0, stats_interval=0)


def _selector(stack: CacheCoordinator, bank: CuratedContentStore, generator=None) -> ContentSelector:
    return ContentSelector(stack, bank, generator, cache_ttl=1800, rng=random.Random(7))


# ---------------------------------------------------------------------------
# Fallback behaviour
# ---------------------------------------------------------------------------


class TestCuratedFallback:
    @pytest.mark.asyncio
    async def test_generator_failure_serves_curated_javascript(
        self, stack, bank, failing_generator
    ) -> None:
        selector = _selector(stack, bank, failing_generator)

        records = await selector.select_content("JavaScript", "easy", 5)

        assert len(records) == 5
        assert len({r.id for r in records}) == 5
        assert all(r.id.startswith("fallback_") for r in records)
        assert all(r.topic == "javascript" for r in records)
        assert all(r.difficulty_label == "easy" for r in records)
        assert not await stack.has(selection_cache_key("javascript", "easy", 5))

    @pytest.mark.asyncio
    async def test_unknown_topic_uses_default_pool(self, stack, bank) -> None:
        selector = _selector(stack, bank)
        default_prompts = {item["question"] for item in DEFAULT_QUESTIONS}

        records = await selector.select_content("quantum basket weaving", "medium", 3)

        assert len(records) == 3
        assert {r.prompt for r in records} <= default_prompts
        assert all(r.topic == "quantum basket weaving" for r in records)

    @pytest.mark.asyncio
    async def test_small_unlabelled_topic_returns_what_it_has(self, stack, bank) -> None:
        records = await _selector(stack, bank).select_content("css", "hard", 10)
        assert len(records) == bank.count("css")

    @pytest.mark.asyncio
    async def test_partial_topic_match(self, stack, bank) -> None:
        records = await _selector(stack, bank).select_content("advanced python", "hard", 4)
        python_prompts = {item["question"] for item in bank.match_topic("python")}
        assert {r.prompt for r in records} <= python_prompts


# ---------------------------------------------------------------------------
# Generated content and caching
# ---------------------------------------------------------------------------


class TestGeneratedCaching:
    @pytest.mark.asyncio
    async def test_repeat_request_served_from_cache(self, stack, bank, mock_generator) -> None:
        selector = _selector(stack, bank, mock_generator)

        first = await selector.select_content("closures", "medium", 5)
        second = await selector.select_content("closures", "medium", 5)

        mock_generator.generate.assert_awaited_once_with("closures", 5, "medium")
        assert {r.id for r in first} == {r.id for r in second}
        assert all(r.id.startswith("ai_") for r in first)

    @pytest.mark.asyncio
    async def test_second_process_reads_shared_tier(
        self, stack, bank, shared_store, clock, mock_generator
    ) -> None:
        await _selector(stack, bank, mock_generator).select_content("closures", "easy", 5)

        fresh_tier1 = MemoryCacheProvider(max_size=1000, ttl=300, timer=clock)
        other = CacheCoordinator(
            fresh_tier1, shared_store, default_ttl=300, sweep_interval=0, stats_interval=0
        )
        records = await _selector(other, bank, None).select_content("closures", "easy", 5)

        assert len(records) == 5
        assert all(r.id.startswith("ai_") for r in records)
        assert other.get_statistics().tier2_hits == 1

    @pytest.mark.asyncio
    async def test_shared_tier_outage_degrades_to_memory(
        self, stack, bank, shared_store, mock_generator
    ) -> None:
        shared_store.fail = True
        selector = _selector(stack, bank, mock_generator)

        first = await selector.select_content("closures", "hard", 5)
        second = await selector.select_content("closures", "hard", 5)

        assert len(first) == len(second) == 5
        mock_generator.generate.assert_awaited_once()
        assert stack.get_statistics().tier1_hits == 1
        assert shared_store.data == {}

    @pytest.mark.asyncio
    async def test_invalidate_topic_forces_regeneration(self, stack, bank, mock_generator) -> None:
        selector = _selector(stack, bank, mock_generator)
        await selector.select_content("closures", "easy", 5)
        await selector.select_content("closures", "hard", 5)

        assert await selector.invalidate_topic("Closures") == 2
        await selector.select_content("closures", "easy", 5)

        assert mock_generator.generate.await_count == 3


# ---------------------------------------------------------------------------
# Coordinator behaviour under load
# ---------------------------------------------------------------------------


class TestCoordinatorFlows:
    @pytest.mark.asyncio
    async def test_hit_rate_matches_hits_over_lookups(self, stack) -> None:
        for i in range(4):
            await stack.set(f"quiz:{i}", {"n": i})

        hits = 0
        lookups = 0
        for key in ("quiz:0", "quiz:1", "quiz:9", "quiz:2", "quiz:8", "quiz:3"):
            lookups += 1
            if await stack.get(key) is not None:
                hits += 1

        stats = stack.get_statistics()
        assert stats.hits == hits == 4
        assert stats.hit_rate == pytest.approx(hits / lookups)

    @pytest.mark.asyncio
    async def test_pattern_invalidation_spans_both_tiers(self, stack, shared_store) -> None:
        await stack.set("quiz:python:easy", [1])
        await stack.set("quiz:css:hard", [2])
        await stack.set("user:42", {"name": "x"})
        await shared_store.set("quiz:only-shared", [3])

        removed = await stack.invalidate_by_pattern("quiz:*")

        assert removed == 3
        assert await stack.has("user:42")
        assert not await stack.has("quiz:python:easy")
        assert not await stack.has("quiz:only-shared")
        assert sorted(shared_store.data) == ["user:42"]

    @pytest.mark.asyncio
    async def test_reload_during_selection_never_sees_partial_index(
        self, stack, curated_store, curated_dir
    ) -> None:
        selector = _selector(stack, curated_store)
        old_pool = {item["question"] for item in curated_store.match_topic("python")}
        new_items = [make_question(f"py v2 {i}", "medium") for i in range(4)]
        new_pool = {item["question"] for item in new_items}
        (curated_dir / "Python.json").write_text(
            json.dumps({"questions": new_items}), encoding="utf-8"
        )
        (curated_dir / "go.json").write_text(
            json.dumps([make_question("go 0", "easy")]), encoding="utf-8"
        )

        async def select() -> set[str]:
            records = await selector.select_content("python", "medium", 4)
            assert len(records) == 4
            return {r.prompt for r in records}

        results = await asyncio.gather(
            *(select() for _ in range(10)), curated_store.reload(), *(select() for _ in range(10))
        )
        results.append(await select())

        selections = [r for r in results if not isinstance(r, bool)]
        assert len(selections) == 21
        for prompts in selections:
            assert prompts == old_pool or prompts == new_pool
        assert selections[0] == old_pool
        assert selections[-1] == new_pool
        assert curated_store.topics() == {"css", "go", "javascript", "python"}
