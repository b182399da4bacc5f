"""Default graph service backed by the memory store."""
from logging import Logger

from scitrera_app_framework import get_logger
from scitrera_app_framework.api import Variables

from ..storage import EXT_MEMORY_STORE, MemoryStore
from .base import GraphService, GraphServicePluginBase
from .snapshot import MemoryGraph


class DefaultGraphService(GraphService):
    """Builds a fresh :class:`MemoryGraph` from the store's active memories for every query."""

    def __init__(self, store: MemoryStore, v: Variables = None):
        self._store = store
        self.logger = get_logger(v, name=self.__class__.__name__)

    async def snapshot(self) -> MemoryGraph:
        graph = MemoryGraph(await self._store.get_all_memories())
        self.logger.debug("Built graph snapshot with %d nodes", len(graph))
        return graph


class DefaultGraphServicePlugin(GraphServicePluginBase):
    PROVIDER_NAME = 'default'

    def initialize(self, v: Variables, logger: Logger) -> DefaultGraphService:
        return DefaultGraphService(store=self.get_extension(EXT_MEMORY_STORE, v), v=v)
