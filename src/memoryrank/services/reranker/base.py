"""
Reranker Service Base - Abstract interface for second-pass scoring.

Rerankers take an already ranked candidate list and re-score it using signals
retrieval does not see: recency, decayed confidence, staticness and usage.

Extension Points:
- memoryrank-reranker-service: reranker implementations
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional, Sequence

from scitrera_app_framework import get_logger
from scitrera_app_framework.api import Variables, Plugin, enabled_option_pattern

from ...config import MEMORYRANK_RERANKER_SERVICE, DEFAULT_MEMORYRANK_RERANKER_SERVICE
from ...models.memory import ScoredMemory
from .._constants import EXT_RERANKER_SERVICE


class RerankerService(ABC):
    """Abstract reranker over ScoredMemory lists."""

    def __init__(self, v: Variables = None):
        self.logger = get_logger(v, name=self.__class__.__name__)

    @abstractmethod
    async def rerank(
            self,
            query: str,
            memories: Sequence[ScoredMemory],
            top_k: int = 10,
            now: Optional[datetime] = None,
    ) -> list[ScoredMemory]:
        """
        Re-score candidates and return the best ``top_k``.

        Args:
            query: The search query
            memories: Candidates with their retrieval scores
            top_k: Maximum number of results
            now: Reference time for age-based signals (default: current UTC time)

        Returns:
            At most top_k ScoredMemory, highest adjusted score first
        """
        pass


class RerankerServicePluginBase(Plugin):
    """Base Plugin for reranker service implementations."""
    PROVIDER_NAME: str = ''

    def name(self) -> str:
        return f"{EXT_RERANKER_SERVICE}|{self.PROVIDER_NAME}"

    def extension_point_name(self, v: Variables) -> str:
        return EXT_RERANKER_SERVICE

    def is_enabled(self, v: Variables) -> bool:
        return enabled_option_pattern(self, v, MEMORYRANK_RERANKER_SERVICE, self_attr='PROVIDER_NAME')

    def on_registration(self, v: Variables) -> None:
        v.set_default_value(MEMORYRANK_RERANKER_SERVICE, DEFAULT_MEMORYRANK_RERANKER_SERVICE)
