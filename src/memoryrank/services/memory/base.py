from scitrera_app_framework.api import Plugin, Variables, enabled_option_pattern

from ...config import (
    MEMORYRANK_MEMORY_SERVICE, DEFAULT_MEMORYRANK_MEMORY_SERVICE,
    MEMORYRANK_MEMORY_RECALL_OVERFETCH, DEFAULT_MEMORYRANK_MEMORY_RECALL_OVERFETCH,
)
from .._constants import (
    EXT_MEMORY_SERVICE,
    EXT_MEMORY_STORE,
    EXT_EMBEDDING_SERVICE,
    EXT_SEARCH_SERVICE,
    EXT_RERANKER_SERVICE,
    EXT_TEMPORAL_SERVICE,
)


# noinspection PyAbstractClass
class MemoryServicePluginBase(Plugin):
    """Base plugin for memory service - extensible for custom implementations."""
    PROVIDER_NAME: str = None

    def name(self) -> str:
        return f"{EXT_MEMORY_SERVICE}|{self.PROVIDER_NAME}"

    def extension_point_name(self, v: Variables) -> str:
        return EXT_MEMORY_SERVICE

    def is_enabled(self, v: Variables) -> bool:
        return enabled_option_pattern(self, v, MEMORYRANK_MEMORY_SERVICE, self_attr='PROVIDER_NAME')

    def on_registration(self, v: Variables) -> None:
        v.set_default_value(MEMORYRANK_MEMORY_SERVICE, DEFAULT_MEMORYRANK_MEMORY_SERVICE)
        v.set_default_value(MEMORYRANK_MEMORY_RECALL_OVERFETCH, DEFAULT_MEMORYRANK_MEMORY_RECALL_OVERFETCH)

    def get_dependencies(self, v: Variables):
        return (
            EXT_MEMORY_STORE,
            EXT_EMBEDDING_SERVICE,
            EXT_SEARCH_SERVICE,
            EXT_RERANKER_SERVICE,
            EXT_TEMPORAL_SERVICE,
        )
