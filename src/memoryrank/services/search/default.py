"""
Default hybrid search: exact cosine scan fused with a BM25-style keyword scan.

Both scans are linear over one store snapshot. Each keeps the top
``2 * top_k`` candidates so that a memory strong on only one signal can
still reach the fused ranking.

The keyword scorer keeps a simplified BM25: the average document length is
a fixed constant, and the per-term weight is ``log(2 / (tf + 1))`` computed
from the term's frequency in the document itself rather than a corpus
document frequency. Swap in a corpus IDF here if true BM25 is wanted.
"""
import asyncio
import math
from collections import Counter
from logging import Logger
from typing import Iterable, Optional, Sequence

from scitrera_app_framework import Variables, ext_parse_bool

from ...config import (
    MEMORYRANK_SEARCH_VECTOR_WEIGHT, DEFAULT_MEMORYRANK_SEARCH_VECTOR_WEIGHT,
    MEMORYRANK_SEARCH_KEYWORD_WEIGHT, DEFAULT_MEMORYRANK_SEARCH_KEYWORD_WEIGHT,
    MEMORYRANK_SEARCH_PARALLEL, DEFAULT_MEMORYRANK_SEARCH_PARALLEL,
)
from ...models.memory import MemoryRecord, ScoredMemory
from ...utils import cosine_similarity, tokenize
from ..embedding import EmbeddingService, EXT_EMBEDDING_SERVICE
from ..storage import MemoryStore, EXT_MEMORY_STORE
from .base import HybridSearchService, SearchServicePluginBase

BM25_K1 = 1.5
BM25_B = 0.75
BM25_AVG_DOC_LENGTH = 50.0  # assumed, not measured from the corpus

# Each branch over-fetches this many candidates per requested result
CANDIDATE_MULTIPLIER = 2


def bm25_score(query_terms: Sequence[str], doc_terms: Sequence[str]) -> float:
    """
    Score a tokenized document against tokenized query terms.

    Repeated query terms contribute once per repetition. Terms absent from the
    document contribute nothing, and empty inputs score 0.0.
    """
    if not query_terms or not doc_terms:
        return 0.0

    doc_length = len(doc_terms)
    term_counts = Counter(doc_terms)
    length_norm = 1.0 - BM25_B + BM25_B * (doc_length / BM25_AVG_DOC_LENGTH)

    score = 0.0
    for term in query_terms:
        tf = term_counts.get(term, 0)
        if tf > 0:
            idf = math.log(2.0 / (tf + 1.0))
            score += idf * (tf * (BM25_K1 + 1.0)) / (tf + BM25_K1 * length_norm)
    return score


def _top(scored: Iterable[ScoredMemory], limit: int) -> list[ScoredMemory]:
    # sorted() is stable, so ties keep snapshot order
    return sorted(scored, key=lambda s: s.score, reverse=True)[:limit]


def vector_search(
        memories: Sequence[MemoryRecord],
        query_embedding: Sequence[float],
        limit: int,
) -> list[ScoredMemory]:
    """Top ``limit`` memories by cosine similarity to ``query_embedding``."""
    return _top(
        (ScoredMemory(memory=m, score=cosine_similarity(query_embedding, m.embedding)) for m in memories),
        limit,
    )


def keyword_search(memories: Sequence[MemoryRecord], query: str, limit: int) -> list[ScoredMemory]:
    """Top ``limit`` memories by :func:`bm25_score` against ``query``."""
    query_terms = tokenize(query)
    return _top(
        (ScoredMemory(memory=m, score=bm25_score(query_terms, tokenize(m.content))) for m in memories),
        limit,
    )


def fuse_scores(
        memories: Sequence[MemoryRecord],
        vector_results: Sequence[ScoredMemory],
        keyword_results: Sequence[ScoredMemory],
        top_k: int,
        vector_weight: float,
        keyword_weight: float,
) -> list[ScoredMemory]:
    """
    Blend branch scores into ``vector * vector_weight + keyword * keyword_weight``.

    A memory missing from one branch scores 0 for that branch. Fused entries
    are laid out in snapshot order before the stable sort, so equal scores
    keep the order the store enumerated them in.
    """
    combined: dict[str, float] = {}
    for result in vector_results:
        combined[result.memory.id] = result.score * vector_weight
    for result in keyword_results:
        combined[result.memory.id] = combined.get(result.memory.id, 0.0) + result.score * keyword_weight

    fused = [ScoredMemory(memory=m, score=combined[m.id]) for m in memories if m.id in combined]
    return _top(fused, top_k)


def hybrid_search(
        memories: Sequence[MemoryRecord],
        query: str,
        query_embedding: Sequence[float],
        top_k: int = 10,
        vector_weight: float = DEFAULT_MEMORYRANK_SEARCH_VECTOR_WEIGHT,
        keyword_weight: float = DEFAULT_MEMORYRANK_SEARCH_KEYWORD_WEIGHT,
) -> list[ScoredMemory]:
    """Run both scans and fuse them over an explicit snapshot, synchronously."""
    if top_k < 0:
        raise ValueError(f"top_k must be non-negative, got {top_k}")
    limit = top_k * CANDIDATE_MULTIPLIER
    return fuse_scores(
        memories,
        vector_search(memories, query_embedding, limit),
        keyword_search(memories, query, limit),
        top_k, vector_weight, keyword_weight,
    )


class DefaultHybridSearchService(HybridSearchService):
    """
    Hybrid search over the configured memory store.

    When ``parallel`` is set the vector and keyword scans run concurrently in
    worker threads; both only read the snapshot.
    """

    def __init__(
            self,
            store: MemoryStore,
            embedding_service: Optional[EmbeddingService] = None,
            v: Variables = None,
            vector_weight: float = DEFAULT_MEMORYRANK_SEARCH_VECTOR_WEIGHT,
            keyword_weight: float = DEFAULT_MEMORYRANK_SEARCH_KEYWORD_WEIGHT,
            parallel: bool = DEFAULT_MEMORYRANK_SEARCH_PARALLEL,
    ):
        super().__init__(v)
        self.store = store
        self.embedding_service = embedding_service
        self.vector_weight = vector_weight
        self.keyword_weight = keyword_weight
        self.parallel = parallel

    async def search(
            self,
            query: str,
            query_embedding: Sequence[float],
            top_k: int = 10,
            vector_weight: Optional[float] = None,
            keyword_weight: Optional[float] = None,
    ) -> list[ScoredMemory]:
        if top_k < 0:
            raise ValueError(f"top_k must be non-negative, got {top_k}")
        vector_weight = self.vector_weight if vector_weight is None else vector_weight
        keyword_weight = self.keyword_weight if keyword_weight is None else keyword_weight

        memories = await self.store.get_all_memories()
        if not memories or top_k == 0:
            return []

        limit = top_k * CANDIDATE_MULTIPLIER
        if self.parallel:
            vector_results, keyword_results = await asyncio.gather(
                asyncio.to_thread(vector_search, memories, query_embedding, limit),
                asyncio.to_thread(keyword_search, memories, query, limit),
            )
        else:
            vector_results = vector_search(memories, query_embedding, limit)
            keyword_results = keyword_search(memories, query, limit)

        results = fuse_scores(memories, vector_results, keyword_results, top_k, vector_weight, keyword_weight)
        self.logger.debug(
            "Hybrid search over %d memories: %d vector + %d keyword candidates -> %d results",
            len(memories), len(vector_results), len(keyword_results), len(results)
        )
        return results

    async def search_text(
            self,
            query: str,
            top_k: int = 10,
            vector_weight: Optional[float] = None,
            keyword_weight: Optional[float] = None,
    ) -> list[ScoredMemory]:
        if self.embedding_service is None:
            raise ValueError("search_text requires an embedding service")
        query_embedding = await self.embedding_service.embed(query)
        return await self.search(query, query_embedding, top_k, vector_weight, keyword_weight)


class DefaultSearchServicePlugin(SearchServicePluginBase):
    """Plugin for the default hybrid search service."""
    PROVIDER_NAME = 'default'

    def initialize(self, v: Variables, logger: Logger) -> DefaultHybridSearchService:
        return DefaultHybridSearchService(
            store=self.get_extension(EXT_MEMORY_STORE, v),
            embedding_service=self.get_extension(EXT_EMBEDDING_SERVICE, v),
            v=v,
            vector_weight=v.environ(MEMORYRANK_SEARCH_VECTOR_WEIGHT,
                                    default=DEFAULT_MEMORYRANK_SEARCH_VECTOR_WEIGHT, type_fn=float),
            keyword_weight=v.environ(MEMORYRANK_SEARCH_KEYWORD_WEIGHT,
                                     default=DEFAULT_MEMORYRANK_SEARCH_KEYWORD_WEIGHT, type_fn=float),
            parallel=v.environ(MEMORYRANK_SEARCH_PARALLEL,
                               default=DEFAULT_MEMORYRANK_SEARCH_PARALLEL, type_fn=ext_parse_bool),
        )
