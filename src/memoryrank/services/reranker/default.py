"""
Default reranker: recency, decayed confidence, static and access-frequency signals.

Adjustments are applied to the incoming retrieval score in a fixed order:

1. add ``recency_boost * 0.1``
2. multiply by the memory's effective (decayed) confidence
3. multiply by 1.2 for static memories
4. add ``min(access_count * 0.05, 0.3)``

Steps 1 and 4 add while steps 2 and 3 multiply, so changing the order changes
the ranking. An optional exact keyword-match boost runs after step 4.
"""
from datetime import datetime
from logging import Logger
from typing import Optional, Sequence

from scitrera_app_framework import Variables, ext_parse_bool

from ...config import (
    RerankerType,
    MEMORYRANK_RERANKER_EXACT_MATCH_BOOST, DEFAULT_MEMORYRANK_RERANKER_EXACT_MATCH_BOOST,
)
from ...models.memory import MemoryRecord, ScoredMemory
from ...utils import utc_now, ensure_utc, exact_match_boost
from .base import RerankerService, RerankerServicePluginBase

RECENCY_WEIGHT = 0.1
STATIC_MULTIPLIER = 1.2
ACCESS_BOOST_PER_ACCESS = 0.05
ACCESS_BOOST_CAP = 0.3

# (max age in days, boost), checked in order
RECENCY_BANDS = (
    (1.0, 1.0),
    (7.0, 0.5),
    (30.0, 0.2),
)


def recency_boost(memory: MemoryRecord, now: datetime) -> float:
    """Step boost by age since creation: 1.0 under a day, 0.5 under a week, 0.2 under a month."""
    age_days = (now - memory.timestamp).total_seconds() / 86400.0
    for max_age, boost in RECENCY_BANDS:
        if age_days < max_age:
            return boost
    return 0.0


def adjust_score(score: float, memory: MemoryRecord, now: datetime) -> float:
    """Apply the four ordered adjustments to one retrieval score."""
    score += recency_boost(memory, now) * RECENCY_WEIGHT
    score *= memory.effective_confidence(now)
    if memory.is_static:
        score *= STATIC_MULTIPLIER
    score += min(memory.metadata.access_count * ACCESS_BOOST_PER_ACCESS, ACCESS_BOOST_CAP)
    return score


class DefaultRerankerService(RerankerService):
    """Signal-based reranker."""

    def __init__(self, v: Variables = None, exact_match: bool = DEFAULT_MEMORYRANK_RERANKER_EXACT_MATCH_BOOST):
        super().__init__(v)
        self.exact_match = exact_match

    async def rerank(
            self,
            query: str,
            memories: Sequence[ScoredMemory],
            top_k: int = 10,
            now: Optional[datetime] = None,
    ) -> list[ScoredMemory]:
        if top_k < 0:
            raise ValueError(f"top_k must be non-negative, got {top_k}")
        if not memories:
            return []

        now = ensure_utc(now) if now is not None else utc_now()

        reranked = []
        for candidate in memories:
            score = adjust_score(candidate.score, candidate.memory, now)
            if self.exact_match:
                score = exact_match_boost(candidate.memory.content, query, score)
            reranked.append(ScoredMemory(memory=candidate.memory, score=score))

        # stable: equal scores keep incoming order
        reranked.sort(key=lambda s: s.score, reverse=True)

        self.logger.debug("Reranked %d candidates, returning top %d", len(reranked), min(top_k, len(reranked)))
        return reranked[:top_k]


class DefaultRerankerServicePlugin(RerankerServicePluginBase):
    """Plugin for default reranker service."""
    PROVIDER_NAME = RerankerType.DEFAULT

    def initialize(self, v: Variables, logger: Logger) -> DefaultRerankerService:
        return DefaultRerankerService(
            v=v,
            exact_match=v.environ(MEMORYRANK_RERANKER_EXACT_MATCH_BOOST,
                                  default=DEFAULT_MEMORYRANK_RERANKER_EXACT_MATCH_BOOST, type_fn=ext_parse_bool),
        )
