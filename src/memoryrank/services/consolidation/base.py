"""
Consolidation Service Base - duplicate detection and merging.

Extension Points:
- memoryrank-consolidation-service: consolidation implementations
"""
from abc import ABC, abstractmethod
from typing import NamedTuple, Sequence

from scitrera_app_framework.api import Plugin, Variables, enabled_option_pattern

from ...config import MEMORYRANK_CONSOLIDATION_SERVICE, DEFAULT_MEMORYRANK_CONSOLIDATION_SERVICE
from ...models.memory import MemoryRecord
from .._constants import EXT_MEMORY_STORE, EXT_CONSOLIDATION_SERVICE


class DuplicatePair(NamedTuple):
    """Near-identical memories; ``original`` is the older one."""
    original: MemoryRecord
    duplicate: MemoryRecord
    similarity: float


class ConsolidationResult(NamedTuple):
    consolidated: list[MemoryRecord]
    removed_ids: list[str]


class ConsolidationService(ABC):
    """Interface for merging near-duplicate memories."""

    @abstractmethod
    def find_duplicates(self, memories: Sequence[MemoryRecord]) -> list[DuplicatePair]:
        pass

    @abstractmethod
    def merge(self, original: MemoryRecord, duplicate: MemoryRecord) -> MemoryRecord:
        pass

    @abstractmethod
    def consolidate(self, memories: Sequence[MemoryRecord]) -> ConsolidationResult:
        """Merge every duplicate pair in ``memories``. Input records are not modified."""
        pass

    @abstractmethod
    async def consolidate_store(self) -> ConsolidationResult:
        """Consolidate the store's active memories, persisting merges and archiving removed duplicates."""
        pass


# noinspection PyAbstractClass
class ConsolidationServicePluginBase(Plugin):
    """Base plugin for consolidation service."""
    PROVIDER_NAME: str = None

    def name(self) -> str:
        return f"{EXT_CONSOLIDATION_SERVICE}|{self.PROVIDER_NAME}"

    def extension_point_name(self, v: Variables) -> str:
        return EXT_CONSOLIDATION_SERVICE

    def is_enabled(self, v: Variables) -> bool:
        return enabled_option_pattern(self, v, MEMORYRANK_CONSOLIDATION_SERVICE, self_attr='PROVIDER_NAME')

    def on_registration(self, v: Variables) -> None:
        v.set_default_value(MEMORYRANK_CONSOLIDATION_SERVICE, DEFAULT_MEMORYRANK_CONSOLIDATION_SERVICE)

    def get_dependencies(self, v: Variables):
        return (EXT_MEMORY_STORE,)
