"""
Hybrid Search Service Base - Abstract interface for memory retrieval.

Retrieval fuses vector similarity with lexical scoring over a snapshot of
the memory store.

Extension Points:
- memoryrank-search-service: hybrid search implementations
"""
from abc import ABC, abstractmethod
from typing import Optional, Sequence

from scitrera_app_framework import get_logger
from scitrera_app_framework.api import Plugin, Variables, enabled_option_pattern

from ...config import MEMORYRANK_SEARCH_SERVICE, DEFAULT_MEMORYRANK_SEARCH_SERVICE
from ...models.memory import ScoredMemory
from .._constants import EXT_SEARCH_SERVICE, EXT_MEMORY_STORE, EXT_EMBEDDING_SERVICE


class HybridSearchService(ABC):
    """Interface for fused vector + keyword retrieval."""

    def __init__(self, v: Variables = None):
        self.logger = get_logger(v, name=self.__class__.__name__)

    @abstractmethod
    async def search(
            self,
            query: str,
            query_embedding: Sequence[float],
            top_k: int = 10,
            vector_weight: Optional[float] = None,
            keyword_weight: Optional[float] = None,
    ) -> list[ScoredMemory]:
        """
        Rank stored memories against a query.

        Args:
            query: Query text for lexical scoring
            query_embedding: Query vector for similarity scoring
            top_k: Maximum number of results
            vector_weight: Weight of the vector score (None for the configured default)
            keyword_weight: Weight of the keyword score (None for the configured default)

        Returns:
            At most top_k ScoredMemory, highest fused score first
        """
        pass

    @abstractmethod
    async def search_text(
            self,
            query: str,
            top_k: int = 10,
            vector_weight: Optional[float] = None,
            keyword_weight: Optional[float] = None,
    ) -> list[ScoredMemory]:
        """Embed ``query`` and run :meth:`search`. Embedding errors propagate unchanged."""
        pass


# noinspection PyAbstractClass
class SearchServicePluginBase(Plugin):
    """Base plugin for hybrid search implementations."""
    PROVIDER_NAME: str = None

    def name(self) -> str:
        return f"{EXT_SEARCH_SERVICE}|{self.PROVIDER_NAME}"

    def extension_point_name(self, v: Variables) -> str:
        return EXT_SEARCH_SERVICE

    def is_enabled(self, v: Variables) -> bool:
        return enabled_option_pattern(self, v, MEMORYRANK_SEARCH_SERVICE, self_attr='PROVIDER_NAME')

    def on_registration(self, v: Variables) -> None:
        v.set_default_value(MEMORYRANK_SEARCH_SERVICE, DEFAULT_MEMORYRANK_SEARCH_SERVICE)

    def get_dependencies(self, v: Variables):
        return (EXT_MEMORY_STORE, EXT_EMBEDDING_SERVICE)
