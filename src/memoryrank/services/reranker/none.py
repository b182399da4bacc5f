"""
Disabled reranker (no-op).

Keeps the incoming order and scores; only truncates. Useful for isolating
retrieval behavior in tests.
"""
from datetime import datetime
from logging import Logger
from typing import Optional, Sequence

from scitrera_app_framework import Variables

from ...config import RerankerType
from ...models.memory import ScoredMemory
from .base import RerankerService, RerankerServicePluginBase


class NoneRerankerService(RerankerService):
    """Pass-through reranker."""

    async def rerank(
            self,
            query: str,
            memories: Sequence[ScoredMemory],
            top_k: int = 10,
            now: Optional[datetime] = None,
    ) -> list[ScoredMemory]:
        if top_k < 0:
            raise ValueError(f"top_k must be non-negative, got {top_k}")
        return list(memories[:top_k])


class NoneRerankerServicePlugin(RerankerServicePluginBase):
    """Plugin for disabled reranker."""
    PROVIDER_NAME = RerankerType.NONE

    def initialize(self, v: Variables, logger: Logger) -> NoneRerankerService:
        return NoneRerankerService(v=v)
