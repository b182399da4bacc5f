"""
Graph Service Base - traversal over the memory graph.

Records reference each other by identifier only, so every traversal runs
against a point-in-time snapshot of the store.

Extension Points:
- memoryrank-graph-service: graph traversal implementations
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from scitrera_app_framework.api import Plugin, Variables, enabled_option_pattern

from ...config import MEMORYRANK_GRAPH_SERVICE, DEFAULT_MEMORYRANK_GRAPH_SERVICE
from ...models.memory import MemoryRecord, RelationType
from .._constants import EXT_MEMORY_STORE, EXT_GRAPH_SERVICE
from .snapshot import GraphStats, MemoryGraph


class GraphService(ABC):
    """Identifier-based graph queries. Unknown identifiers yield empty results or None."""

    @abstractmethod
    async def snapshot(self) -> MemoryGraph:
        """Build a graph view over the current store contents."""
        pass

    async def get_related(self, memory_id: str, relation_type: Optional[RelationType] = None) -> list[MemoryRecord]:
        return (await self.snapshot()).related(memory_id, relation_type)

    async def get_incoming(self, memory_id: str, relation_type: Optional[RelationType] = None) -> list[MemoryRecord]:
        return (await self.snapshot()).incoming(memory_id, relation_type)

    async def get_subgraph(self, memory_id: str, max_depth: int = 3) -> list[MemoryRecord]:
        return (await self.snapshot()).subgraph(memory_id, max_depth)

    async def find_path(self, source_id: str, target_id: str) -> Optional[list[MemoryRecord]]:
        return (await self.snapshot()).find_path(source_id, target_id)

    async def get_latest_version(self, memory_id: str) -> Optional[MemoryRecord]:
        return (await self.snapshot()).latest_version(memory_id)

    async def get_enriched_context(self, memory_id: str) -> list[MemoryRecord]:
        return (await self.snapshot()).enriched_context(memory_id)

    async def get_latest_memories(self) -> list[MemoryRecord]:
        return (await self.snapshot()).latest()

    async def get_memories_by_confidence(
            self,
            min_confidence: float,
            current_date: Optional[datetime] = None,
    ) -> list[MemoryRecord]:
        return (await self.snapshot()).by_confidence(min_confidence, current_date)

    async def get_static_memories(self) -> list[MemoryRecord]:
        return (await self.snapshot()).static()

    async def get_dynamic_memories(self) -> list[MemoryRecord]:
        return (await self.snapshot()).dynamic()

    async def stats(self) -> GraphStats:
        return (await self.snapshot()).stats()


# noinspection PyAbstractClass
class GraphServicePluginBase(Plugin):
    """Base plugin for graph service."""
    PROVIDER_NAME: str = None

    def name(self) -> str:
        return f"{EXT_GRAPH_SERVICE}|{self.PROVIDER_NAME}"

    def extension_point_name(self, v: Variables) -> str:
        return EXT_GRAPH_SERVICE

    def is_enabled(self, v: Variables) -> bool:
        return enabled_option_pattern(self, v, MEMORYRANK_GRAPH_SERVICE, self_attr='PROVIDER_NAME')

    def on_registration(self, v: Variables) -> None:
        v.set_default_value(MEMORYRANK_GRAPH_SERVICE, DEFAULT_MEMORYRANK_GRAPH_SERVICE)

    def get_dependencies(self, v: Variables):
        return (EXT_MEMORY_STORE,)
