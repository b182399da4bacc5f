"""
In-memory memory store.

Records live in an insertion-ordered dict, so snapshots enumerate memories in
the order they were added. Data is lost on restart.
"""
from logging import Logger
from typing import Optional

from scitrera_app_framework import Variables

from ...models.memory import MemoryRecord, MemoryStatus
from .base import MemoryStore, MemoryStorePluginBase


class InMemoryMemoryStore(MemoryStore):
    """Dictionary-backed store. Snapshots are shallow copies of the index."""

    def __init__(self, v: Variables = None):
        super().__init__(v)
        self._memories: dict[str, MemoryRecord] = {}
        self.logger.info("Initialized InMemoryMemoryStore")

    async def connect(self) -> None:
        """Initialize storage (no-op for in-memory)."""
        self.logger.info("In-memory store connected")

    async def disconnect(self) -> None:
        """Close storage (no-op for in-memory)."""
        self.logger.info("In-memory store disconnected")

    async def get_all_memories(self, include_archived: bool = False) -> list[MemoryRecord]:
        if include_archived:
            return list(self._memories.values())
        return [m for m in self._memories.values() if m.status == MemoryStatus.ACTIVE]

    async def get_memory(self, memory_id: str) -> Optional[MemoryRecord]:
        return self._memories.get(memory_id)

    async def add_memory(self, memory: MemoryRecord) -> MemoryRecord:
        if memory.id in self._memories:
            raise ValueError(f"Memory {memory.id} already exists")
        self._memories[memory.id] = memory
        self.logger.debug("Stored memory %s", memory.id)
        return memory

    async def update_memory(self, memory: MemoryRecord) -> Optional[MemoryRecord]:
        if memory.id not in self._memories:
            self.logger.warning("Cannot update unknown memory %s", memory.id)
            return None
        # re-assigning keeps the original insertion position
        self._memories[memory.id] = memory
        return memory

    async def archive_memory(self, memory_id: str) -> bool:
        memory = self._memories.get(memory_id)
        if memory is None:
            self.logger.warning("Cannot archive unknown memory %s", memory_id)
            return False
        memory.status = MemoryStatus.ARCHIVED
        self.logger.debug("Archived memory %s", memory_id)
        return True


class InMemoryMemoryStorePlugin(MemoryStorePluginBase):
    PROVIDER_NAME = 'memory'

    def initialize(self, v: Variables, logger: Logger) -> InMemoryMemoryStore:
        return InMemoryMemoryStore(v=v)
