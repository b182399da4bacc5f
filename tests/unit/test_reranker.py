"""
Unit tests for the rerankers.

Memories are created at fixed times and reranked against a pinned "now".
"""
import math
from datetime import datetime, timezone, timedelta

import pytest

from scitrera_app_framework import Variables

from memoryrank.models import MemoryMetadata, MemoryRecord, ScoredMemory
from memoryrank.services.reranker import RerankerService
from memoryrank.services.reranker.default import DefaultRerankerService, adjust_score, recency_boost
from memoryrank.services.reranker.none import NoneRerankerService

NOW = datetime(2025, 6, 10, 12, 0, tzinfo=timezone.utc)


def memory(content: str = "User prefers window seats", age: timedelta = timedelta(0), **kwargs) -> MemoryRecord:
    return MemoryRecord(content=content, embedding=(1.0, 0.0), timestamp=NOW - age, **kwargs)


@pytest.fixture
def reranker() -> DefaultRerankerService:
    return DefaultRerankerService(v=Variables())


class TestRecencyBoost:

    @pytest.mark.parametrize("age,expected", [
        (timedelta(hours=1), 1.0),
        (timedelta(days=3), 0.5),
        (timedelta(days=10), 0.2),
        (timedelta(days=45), 0.0),
    ])
    def test_bands(self, age, expected):
        assert recency_boost(memory(age=age), NOW) == expected


class TestAdjustScore:

    def test_fresh_memory(self):
        assert adjust_score(0.5, memory(), NOW) == pytest.approx(0.6)

    def test_static_multiplier(self):
        assert adjust_score(0.5, memory(is_static=True), NOW) == pytest.approx(0.72)

    def test_decayed_confidence_and_access(self):
        m = memory(
            age=timedelta(days=3),
            confidence=0.8,
            metadata=MemoryMetadata(access_count=2, last_accessed=NOW),
        )
        # (0.5 + 0.5 * 0.1) * 0.8 + 2 * 0.05; decay factor clamps to 1.0
        assert adjust_score(0.5, m, NOW) == pytest.approx(0.54)

    def test_steps_apply_in_order(self):
        m = memory(is_static=True, metadata=MemoryMetadata(access_count=10, last_accessed=NOW))
        # access boost is added after the static multiplier: 0.6 * 1.2 + 0.3
        assert adjust_score(0.5, m, NOW) == pytest.approx(1.02)

    def test_old_memory_decays(self):
        m = memory(age=timedelta(days=60))
        assert adjust_score(0.9, m, NOW) == pytest.approx(0.9 * math.exp(-6.0))


class TestDefaultReranker:

    def test_is_reranker_service(self, reranker):
        assert isinstance(reranker, RerankerService)

    @pytest.mark.asyncio
    async def test_empty_candidates(self, reranker):
        assert await reranker.rerank("query", [], top_k=5, now=NOW) == []

    @pytest.mark.asyncio
    async def test_static_ranks_at_or_above_dynamic(self, reranker):
        dynamic = memory("User lives in Porto")
        static = memory("User lives in Porto", is_static=True)
        results = await reranker.rerank(
            "where does the user live",
            [ScoredMemory(dynamic, 0.5), ScoredMemory(static, 0.5)],
            now=NOW,
        )
        assert results[0].memory is static
        assert results[0].score >= results[1].score

    @pytest.mark.asyncio
    async def test_recent_memory_overtakes_stale_one(self, reranker):
        stale = memory("Old address", age=timedelta(days=90))
        fresh = memory("New address")
        results = await reranker.rerank("address", [ScoredMemory(stale, 0.9), ScoredMemory(fresh, 0.4)], now=NOW)
        assert [r.memory for r in results] == [fresh, stale]

    @pytest.mark.asyncio
    async def test_truncates_to_top_k(self, reranker):
        candidates = [ScoredMemory(memory(f"memory {i}"), 0.1 * i) for i in range(5)]
        results = await reranker.rerank("memory", candidates, top_k=2, now=NOW)
        assert len(results) == 2
        assert [r.memory for r in results] == [candidates[4].memory, candidates[3].memory]

    @pytest.mark.asyncio
    async def test_ties_keep_incoming_order(self, reranker):
        first, second = memory("first"), memory("second")
        results = await reranker.rerank("x", [ScoredMemory(first, 0.3), ScoredMemory(second, 0.3)], now=NOW)
        assert [r.memory for r in results] == [first, second]

    @pytest.mark.asyncio
    async def test_query_text_does_not_change_scores(self, reranker):
        candidates = [ScoredMemory(memory("User drinks coffee"), 0.5)]
        a = await reranker.rerank("coffee", candidates, now=NOW)
        b = await reranker.rerank("something else entirely", candidates, now=NOW)
        assert a[0].score == pytest.approx(b[0].score)

    @pytest.mark.asyncio
    async def test_does_not_mutate_input(self, reranker):
        candidate = ScoredMemory(memory(), 0.5)
        await reranker.rerank("q", [candidate], now=NOW)
        assert candidate.score == 0.5

    @pytest.mark.asyncio
    async def test_negative_top_k_raises(self, reranker):
        with pytest.raises(ValueError):
            await reranker.rerank("q", [ScoredMemory(memory(), 0.5)], top_k=-1, now=NOW)

    @pytest.mark.asyncio
    async def test_exact_match_boost_runs_last(self):
        reranker = DefaultRerankerService(v=Variables(), exact_match=True)
        matching = memory("User drinks coffee daily")
        other = memory("User enjoys long walks")
        results = await reranker.rerank(
            "coffee daily",
            [ScoredMemory(other, 0.5), ScoredMemory(matching, 0.5)],
            now=NOW,
        )
        assert results[0].memory is matching
        assert results[0].score == pytest.approx(0.6 * 2)
        assert results[1].score == pytest.approx(0.6)


class TestNoneReranker:

    @pytest.mark.asyncio
    async def test_keeps_order_and_scores(self):
        reranker = NoneRerankerService(v=Variables())
        candidates = [ScoredMemory(memory("a"), 0.1), ScoredMemory(memory("b"), 0.9), ScoredMemory(memory("c"), 0.5)]
        results = await reranker.rerank("q", candidates, top_k=2)
        assert results == candidates[:2]

    @pytest.mark.asyncio
    async def test_empty(self):
        assert await NoneRerankerService(v=Variables()).rerank("q", []) == []


@pytest.mark.asyncio
async def test_configured_reranker_is_default(reranker_service):
    assert isinstance(reranker_service, DefaultRerankerService)
    assert reranker_service.exact_match is False
