"""Abstract memory store interface.

The store owns persistence. Ranking code only ever sees point-in-time
snapshots from :meth:`MemoryStore.get_all_memories` and writes mutated
records back through :meth:`MemoryStore.update_memory`.
"""
from abc import ABC, abstractmethod
from logging import Logger
from typing import Optional

from scitrera_app_framework import get_logger
from scitrera_app_framework.api import Variables, Plugin, enabled_option_pattern

from ...config import MEMORYRANK_STORAGE_BACKEND, DEFAULT_MEMORYRANK_STORAGE_BACKEND
from ...models.memory import MemoryRecord
from .._constants import EXT_MEMORY_STORE


class MemoryStore(ABC):
    """
    Abstract base class for memory stores.

    Snapshots must enumerate records in a stable order; that order is the
    tie-break for every ranking computed from the snapshot.
    """

    def __init__(self, v: Variables = None):
        self.logger = get_logger(v, name=self.__class__.__name__)

    # Lifecycle
    async def connect(self) -> None:
        """Initialize store connection."""
        pass

    async def disconnect(self) -> None:
        """Close store connection."""
        pass

    # Memory operations
    @abstractmethod
    async def get_all_memories(self, include_archived: bool = False) -> list[MemoryRecord]:
        """Point-in-time snapshot of stored memories, archived ones excluded by default."""
        pass

    @abstractmethod
    async def get_memory(self, memory_id: str) -> Optional[MemoryRecord]:
        """Get memory by ID, or None if unknown."""
        pass

    @abstractmethod
    async def add_memory(self, memory: MemoryRecord) -> MemoryRecord:
        """Store a new memory. Raises ValueError if the ID is already taken."""
        pass

    @abstractmethod
    async def update_memory(self, memory: MemoryRecord) -> Optional[MemoryRecord]:
        """Persist a mutated memory. Returns None if the memory is unknown."""
        pass

    @abstractmethod
    async def archive_memory(self, memory_id: str) -> bool:
        """Mark a memory archived. Returns False if the memory is unknown."""
        pass

    async def count(self, include_archived: bool = False) -> int:
        return len(await self.get_all_memories(include_archived=include_archived))


# noinspection PyAbstractClass
class MemoryStorePluginBase(Plugin):
    PROVIDER_NAME: str = None

    def name(self) -> str:
        return f"{EXT_MEMORY_STORE}|{self.PROVIDER_NAME}"

    def extension_point_name(self, v: Variables) -> str:
        return EXT_MEMORY_STORE

    def is_enabled(self, v: Variables) -> bool:
        return enabled_option_pattern(self, v, MEMORYRANK_STORAGE_BACKEND, self_attr='PROVIDER_NAME')

    def on_registration(self, v: Variables) -> None:
        v.set_default_value(MEMORYRANK_STORAGE_BACKEND, DEFAULT_MEMORYRANK_STORAGE_BACKEND)

    async def async_ready(self, v: Variables, logger: Logger, value: object | None) -> None:
        if isinstance(value, MemoryStore):
            try:
                await value.connect()
                logger.info("Memory store '%s' connected successfully.", self.PROVIDER_NAME)
            except Exception as e:
                logger.error("Error connecting memory store '%s': %s", self.PROVIDER_NAME, e)
                raise
        return

    async def async_stopping(self, v: Variables, logger: Logger, value: object | None) -> None:
        if isinstance(value, MemoryStore):
            try:
                await value.disconnect()
                logger.info("Memory store '%s' disconnected successfully.", self.PROVIDER_NAME)
            except Exception as e:
                logger.error("Error disconnecting memory store '%s': %s", self.PROVIDER_NAME, e)
        return
