"""
Unit tests for DecayService.

Tests the confidence decay formula, write-back, and pruning exemptions.
"""
import math
from datetime import datetime, timezone, timedelta

import pytest

from scitrera_app_framework import Variables

from memoryrank.models import MemoryMetadata, MemoryRecord, MemoryStatus
from memoryrank.services.decay import DecayResult, DecayService
from memoryrank.services.decay.default import DefaultDecayService, decayed_confidence, is_forgettable
from memoryrank.services.storage.in_memory import InMemoryMemoryStore

NOW = datetime(2025, 6, 10, 12, 0, tzinfo=timezone.utc)


def memory(content: str, age_days: float = 0.0, **kwargs) -> MemoryRecord:
    return MemoryRecord(content=content, embedding=(1.0, 0.0), timestamp=NOW - timedelta(days=age_days), **kwargs)


@pytest.fixture
def store() -> InMemoryMemoryStore:
    return InMemoryMemoryStore(v=Variables())


@pytest.fixture
def decay(store) -> DefaultDecayService:
    return DefaultDecayService(store, v=Variables())


class TestDecayResult:

    def test_default_values(self):
        r = DecayResult()
        assert r.processed == 0
        assert r.decayed == 0
        assert r.archived == 0


class TestDecayedConfidence:

    def test_fresh_memory_unchanged(self):
        assert decayed_confidence(memory("fresh"), NOW) == pytest.approx(1.0)

    def test_dynamic_rate(self):
        assert decayed_confidence(memory("ten days", age_days=10), NOW) == pytest.approx(math.exp(-0.5))

    def test_static_rate(self):
        m = memory("ten days static", age_days=10, is_static=True)
        assert decayed_confidence(m, NOW) == pytest.approx(math.exp(-0.1))

    def test_access_credit_is_capped(self):
        m = memory("used a lot", age_days=10, confidence=0.5, metadata=MemoryMetadata(access_count=20))
        assert decayed_confidence(m, NOW) == pytest.approx(0.5 * math.exp(-0.5) + 0.3)

    def test_uses_recorded_base_confidence(self):
        m = memory("decayed before", age_days=10, confidence=0.2, metadata=MemoryMetadata(base_confidence=0.8))
        assert decayed_confidence(m, NOW) == pytest.approx(0.8 * math.exp(-0.5))

    def test_clamped_to_one(self):
        m = memory("used", confidence=0.9, metadata=MemoryMetadata(access_count=4))
        assert decayed_confidence(m, NOW) == 1.0


class TestForgettable:

    def test_low_confidence_is_forgettable(self):
        assert is_forgettable(memory("old", age_days=60), 0.1, NOW)

    def test_static_is_never_forgettable(self):
        assert not is_forgettable(memory("old static", age_days=60, is_static=True, confidence=0.01), 0.1, NOW)

    def test_user_confirmed_is_never_forgettable(self):
        m = memory("confirmed", age_days=60, metadata=MemoryMetadata(user_confirmed=True))
        assert not is_forgettable(m, 0.1, NOW)

    def test_fresh_memory_kept(self):
        assert not is_forgettable(memory("fresh"), 0.1, NOW)


class TestDefaultDecayService:

    def test_is_decay_service(self, decay):
        assert isinstance(decay, DecayService)
        assert decay.prune_threshold == 0.1

    @pytest.mark.asyncio
    async def test_process_decay_writes_changes(self, store, decay):
        fresh = await store.add_memory(memory("fresh"))
        aged = await store.add_memory(memory("aged", age_days=10))

        result = await decay.process_decay(now=NOW)

        assert result.processed == 2
        assert result.decayed == 1
        assert (await store.get_memory(fresh.id)).confidence == pytest.approx(1.0)
        assert (await store.get_memory(aged.id)).confidence == pytest.approx(math.exp(-0.5))

    @pytest.mark.asyncio
    async def test_process_decay_is_idempotent_at_fixed_now(self, store, decay):
        used = await store.add_memory(
            memory("used", age_days=10, confidence=0.5, metadata=MemoryMetadata(access_count=6))
        )

        confidences = []
        for _ in range(4):
            await decay.process_decay(now=NOW)
            confidences.append((await store.get_memory(used.id)).confidence)

        expected = 0.5 * math.exp(-0.5) + 0.3
        assert confidences == pytest.approx([expected] * 4)
        assert (await store.get_memory(used.id)).metadata.base_confidence == pytest.approx(0.5)

    @pytest.mark.asyncio
    async def test_nightly_passes_match_single_pass(self, store, decay):
        created = NOW - timedelta(days=10)
        nightly = await store.add_memory(MemoryRecord(content="nightly", embedding=(1.0, 0.0), timestamp=created))

        for day in range(1, 11):
            await decay.process_decay(now=created + timedelta(days=day))

        assert (await store.get_memory(nightly.id)).confidence == pytest.approx(math.exp(-0.5))

    @pytest.mark.asyncio
    async def test_second_pass_reports_no_change(self, store, decay):
        await store.add_memory(memory("aged", age_days=10))

        assert (await decay.process_decay(now=NOW)).decayed == 1
        assert (await decay.process_decay(now=NOW)).decayed == 0

    @pytest.mark.asyncio
    async def test_prune_archives_forgettable_only(self, store, decay):
        old = await store.add_memory(memory("old", age_days=60))
        old_static = await store.add_memory(memory("old static", age_days=60, is_static=True))
        fresh = await store.add_memory(memory("fresh"))

        archived = await decay.prune_memories(now=NOW)

        assert archived == 1
        assert (await store.get_memory(old.id)).status == MemoryStatus.ARCHIVED
        assert (await store.get_memory(old_static.id)).status == MemoryStatus.ACTIVE
        assert (await store.get_memory(fresh.id)).status == MemoryStatus.ACTIVE
        assert await store.count() == 2

    @pytest.mark.asyncio
    async def test_prune_custom_threshold(self, store, decay):
        await store.add_memory(memory("ten days", age_days=10))
        assert await decay.prune_memories(threshold=0.3, now=NOW) == 0
        assert await decay.prune_memories(threshold=0.5, now=NOW) == 1

    @pytest.mark.asyncio
    async def test_run_decays_then_prunes(self, store, decay):
        await store.add_memory(memory("old", age_days=60))
        await store.add_memory(memory("fresh"))

        result = await decay.run(now=NOW)

        assert result.processed == 2
        assert result.decayed == 1
        assert result.archived == 1

    @pytest.mark.asyncio
    async def test_empty_store(self, decay):
        result = await decay.run(now=NOW)
        assert (result.processed, result.decayed, result.archived) == (0, 0, 0)


@pytest.mark.asyncio
async def test_configured_decay_service(decay_service):
    assert isinstance(decay_service, DefaultDecayService)
    assert decay_service.prune_threshold == pytest.approx(0.1)
