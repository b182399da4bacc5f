"""Unit tests for the in-memory memory store."""
import pytest

from scitrera_app_framework import Variables

from memoryrank.models import MemoryRecord, MemoryStatus
from memoryrank.services.storage import MemoryStore
from memoryrank.services.storage.in_memory import InMemoryMemoryStore


def memory(content: str) -> MemoryRecord:
    return MemoryRecord(content=content, embedding=(1.0, 0.0))


@pytest.fixture
def store() -> InMemoryMemoryStore:
    return InMemoryMemoryStore(v=Variables())


class TestInMemoryStore:

    def test_is_memory_store(self, store):
        assert isinstance(store, MemoryStore)

    @pytest.mark.asyncio
    async def test_add_and_get(self, store):
        m = await store.add_memory(memory("User likes jazz"))
        assert await store.get_memory(m.id) is m
        assert await store.get_memory("mem_missing") is None

    @pytest.mark.asyncio
    async def test_duplicate_id_rejected(self, store):
        m = await store.add_memory(memory("once"))
        with pytest.raises(ValueError):
            await store.add_memory(m)

    @pytest.mark.asyncio
    async def test_snapshot_keeps_insertion_order(self, store):
        added = [await store.add_memory(memory(f"memory {i}")) for i in range(5)]
        assert [m.id for m in await store.get_all_memories()] == [m.id for m in added]

    @pytest.mark.asyncio
    async def test_snapshot_is_a_copy(self, store):
        await store.add_memory(memory("a"))
        snapshot = await store.get_all_memories()
        await store.add_memory(memory("b"))
        assert len(snapshot) == 1

    @pytest.mark.asyncio
    async def test_update_keeps_position(self, store):
        first = await store.add_memory(memory("first"))
        second = await store.add_memory(memory("second"))
        first.confidence = 0.4

        assert await store.update_memory(first) is first
        assert [m.id for m in await store.get_all_memories()] == [first.id, second.id]
        assert (await store.get_memory(first.id)).confidence == 0.4

    @pytest.mark.asyncio
    async def test_update_unknown_returns_none(self, store):
        assert await store.update_memory(memory("never stored")) is None

    @pytest.mark.asyncio
    async def test_archive(self, store):
        kept = await store.add_memory(memory("kept"))
        gone = await store.add_memory(memory("gone"))

        assert await store.archive_memory(gone.id) is True
        assert await store.archive_memory("mem_missing") is False

        assert [m.id for m in await store.get_all_memories()] == [kept.id]
        assert [m.id for m in await store.get_all_memories(include_archived=True)] == [kept.id, gone.id]
        assert (await store.get_memory(gone.id)).status == MemoryStatus.ARCHIVED
        assert await store.count() == 1
        assert await store.count(include_archived=True) == 2

    @pytest.mark.asyncio
    async def test_connect_disconnect(self, store):
        await store.connect()
        await store.disconnect()


@pytest.mark.asyncio
async def test_configured_store_is_in_memory(memory_store):
    assert isinstance(memory_store, InMemoryMemoryStore)
