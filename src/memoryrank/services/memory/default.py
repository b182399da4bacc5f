"""
Memory Service - the entry point tying storage, embedding, temporal
extraction, hybrid search and reranking together.

Operations:
- remember: Embed content, extract temporal info, store the new record
- recall: Hybrid search, filter, rerank and record access on the results
- supersede: Store a new version of a memory and link the two records
- relate: Add a typed edge between two stored memories
- confirm / forget / get: Single-record lifecycle helpers
"""
from datetime import datetime
from logging import Logger
from typing import Iterable, Optional

from scitrera_app_framework import Variables, get_logger

from ...config import MEMORYRANK_MEMORY_RECALL_OVERFETCH, DEFAULT_MEMORYRANK_MEMORY_RECALL_OVERFETCH
from ...models.memory import (
    MemoryMetadata,
    MemoryRecord,
    MemoryRelationship,
    MemorySource,
    RelationType,
    ScoredMemory,
)
from ...utils import ensure_utc, utc_now
from ..embedding import EmbeddingService, EXT_EMBEDDING_SERVICE
from ..reranker import RerankerService, EXT_RERANKER_SERVICE
from ..search import HybridSearchService, EXT_SEARCH_SERVICE
from ..storage import MemoryStore, EXT_MEMORY_STORE
from ..temporal import TemporalExtractorService, EXT_TEMPORAL_SERVICE
from .base import MemoryServicePluginBase


class MemoryService:
    """Core memory service: store and recall memories."""

    def __init__(
            self,
            store: MemoryStore,
            embedding_service: EmbeddingService,
            search_service: HybridSearchService,
            reranker_service: RerankerService,
            temporal_service: TemporalExtractorService,
            v: Variables = None,
            recall_overfetch: int = DEFAULT_MEMORYRANK_MEMORY_RECALL_OVERFETCH,
    ):
        self.store = store
        self.embedding_service = embedding_service
        self.search_service = search_service
        self.reranker_service = reranker_service
        self.temporal_service = temporal_service
        self.logger = get_logger(v, name=self.__class__.__name__)
        self.recall_overfetch = max(1, recall_overfetch)

        self.logger.info("Initialized MemoryService (recall overfetch: %d)", self.recall_overfetch)

    async def _build(
            self,
            content: str,
            is_static: bool,
            confidence: float,
            source: MemorySource,
            entities: Optional[Iterable[str]],
            topics: Optional[Iterable[str]],
            importance: float,
            container_tags: Optional[Iterable[str]],
            reference_date: Optional[datetime],
    ) -> MemoryRecord:
        if not content or not content.strip():
            raise ValueError("Memory content cannot be empty")

        created_at = ensure_utc(reference_date) if reference_date is not None else utc_now()
        embedding = await self.embedding_service.embed(content)
        temporal = self.temporal_service.extract(content, reference_date=created_at)

        return MemoryRecord(
            content=content,
            embedding=tuple(embedding),
            timestamp=created_at,
            confidence=confidence,
            is_static=is_static,
            container_tags=set(container_tags or ()),
            temporal=temporal,
            metadata=MemoryMetadata(
                source=source,
                entities=set(entities or ()),
                topics=set(topics or ()),
                importance=importance,
            ),
        )

    async def remember(
            self,
            content: str,
            is_static: bool = False,
            confidence: float = 1.0,
            source: MemorySource = MemorySource.CONVERSATION,
            entities: Optional[Iterable[str]] = None,
            topics: Optional[Iterable[str]] = None,
            importance: float = 0.5,
            container_tags: Optional[Iterable[str]] = None,
            reference_date: Optional[datetime] = None,
    ) -> MemoryRecord:
        """
        Store a new memory.

        Args:
            content: Memory text
            is_static: Core durable fact (slower decay, reranker boost)
            confidence: Stored confidence (0.0-1.0)
            source: Where the memory came from
            entities: Named entities mentioned by the memory
            topics: Topic labels
            importance: Importance score (0.0-1.0)
            container_tags: Scoping tags used to filter recall
            reference_date: Creation time, also the reference date for temporal
                extraction (default: now)

        Returns:
            The stored record

        Raises:
            ValueError: If content is empty
        """
        memory = await self._build(content, is_static, confidence, source, entities, topics,
                                   importance, container_tags, reference_date)
        await self.store.add_memory(memory)
        self.logger.info("Stored memory %s (static=%s, temporal=%s)",
                         memory.id, memory.is_static, memory.temporal.temporal_type.value)
        return memory

    async def recall(
            self,
            query: str,
            top_k: int = 10,
            vector_weight: Optional[float] = None,
            keyword_weight: Optional[float] = None,
            container_tags: Optional[Iterable[str]] = None,
            latest_only: bool = False,
            now: Optional[datetime] = None,
    ) -> list[ScoredMemory]:
        """
        Retrieve the memories most relevant to ``query``.

        Hybrid search over-fetches ``top_k * recall_overfetch`` candidates so
        that filtering and reranking still leave ``top_k`` results where the
        store holds that many. Every returned memory has its access recorded.

        Args:
            query: Natural-language query
            top_k: Maximum number of results
            vector_weight: Override for the cosine weight
            keyword_weight: Override for the keyword weight
            container_tags: Keep only memories carrying at least one of these tags
            latest_only: Drop superseded memories
            now: Reference time for reranking and access stamps (default: now)

        Returns:
            Scored memories, best first
        """
        if top_k < 0:
            raise ValueError(f"top_k must be non-negative, got {top_k}")
        if top_k == 0:
            return []

        now = ensure_utc(now) if now is not None else utc_now()
        query_embedding = await self.embedding_service.embed(query)

        candidates = await self.search_service.search(
            query,
            query_embedding,
            top_k=top_k * self.recall_overfetch,
            vector_weight=vector_weight,
            keyword_weight=keyword_weight,
        )

        tags = set(container_tags or ())
        if tags:
            candidates = [c for c in candidates if c.memory.container_tags & tags]
        if latest_only:
            candidates = [c for c in candidates if c.memory.is_latest]

        results = await self.reranker_service.rerank(query, candidates, top_k=top_k, now=now)

        for result in results:
            result.memory.metadata.record_access(at=now)
            await self.store.update_memory(result.memory)

        self.logger.info("Recall for %r returned %d of %d candidates", query, len(results), len(candidates))
        return results

    async def get(self, memory_id: str) -> Optional[MemoryRecord]:
        return await self.store.get_memory(memory_id)

    async def supersede(
            self,
            old_id: str,
            new_content: str,
            confidence: float = 1.0,
            source: MemorySource = MemorySource.CONVERSATION,
            reference_date: Optional[datetime] = None,
    ) -> Optional[MemoryRecord]:
        """
        Store ``new_content`` as the new version of memory ``old_id``.

        The new record carries an ``updates`` edge to the old one and inherits
        its staticness, tags, entities and topics. The old record is marked as
        superseded with an ``updates`` edge pointing at its successor.

        Returns:
            The new record, or None if ``old_id`` is unknown
        """
        old = await self.store.get_memory(old_id)
        if old is None:
            self.logger.warning("Cannot supersede unknown memory %s", old_id)
            return None

        newer = await self._build(
            new_content,
            is_static=old.is_static,
            confidence=confidence,
            source=source,
            entities=old.metadata.entities,
            topics=old.metadata.topics,
            importance=old.metadata.importance,
            container_tags=old.container_tags,
            reference_date=reference_date,
        )
        newer.add_relationship(MemoryRelationship(
            type=RelationType.UPDATES,
            target_id=old.id,
            timestamp=newer.timestamp,
        ))
        await self.store.add_memory(newer)

        old.mark_superseded_by(newer.id, timestamp=newer.timestamp)
        await self.store.update_memory(old)

        self.logger.info("Memory %s superseded by %s", old.id, newer.id)
        return newer

    async def relate(
            self,
            source_id: str,
            target_id: str,
            relation_type: RelationType,
            confidence: float = 1.0,
    ) -> Optional[MemoryRecord]:
        """
        Add a ``relation_type`` edge from ``source_id`` to ``target_id``.

        An ``updates`` edge also marks the target as superseded by the source.

        Returns:
            The updated source record, or None if either memory is unknown
        """
        source = await self.store.get_memory(source_id)
        target = await self.store.get_memory(target_id)
        if source is None or target is None:
            self.logger.warning("Cannot relate %s -> %s: memory not found", source_id, target_id)
            return None

        relation_type = RelationType(relation_type)
        source.add_relationship(MemoryRelationship(
            type=relation_type,
            target_id=target.id,
            confidence=confidence,
        ))
        await self.store.update_memory(source)

        if relation_type == RelationType.UPDATES:
            target.mark_superseded_by(source.id, confidence=confidence)
            await self.store.update_memory(target)

        self.logger.debug("Related %s -[%s]-> %s", source.id, relation_type.value, target.id)
        return source

    async def confirm(self, memory_id: str) -> Optional[MemoryRecord]:
        """Mark a memory as user-confirmed, protecting it from pruning."""
        memory = await self.store.get_memory(memory_id)
        if memory is None:
            self.logger.warning("Cannot confirm unknown memory %s", memory_id)
            return None
        memory.metadata.user_confirmed = True
        return await self.store.update_memory(memory)

    async def forget(self, memory_id: str) -> bool:
        """Zero the memory's confidence and archive it."""
        memory = await self.store.get_memory(memory_id)
        if memory is None:
            self.logger.warning("Memory %s not found for forget", memory_id)
            return False

        memory.confidence = 0.0
        await self.store.update_memory(memory)
        archived = await self.store.archive_memory(memory_id)
        self.logger.info("Forgot memory %s", memory_id)
        return archived


class DefaultMemoryServicePlugin(MemoryServicePluginBase):
    """Default memory service plugin."""
    PROVIDER_NAME = 'default'

    def initialize(self, v: Variables, logger: Logger) -> MemoryService:
        return MemoryService(
            store=self.get_extension(EXT_MEMORY_STORE, v),
            embedding_service=self.get_extension(EXT_EMBEDDING_SERVICE, v),
            search_service=self.get_extension(EXT_SEARCH_SERVICE, v),
            reranker_service=self.get_extension(EXT_RERANKER_SERVICE, v),
            temporal_service=self.get_extension(EXT_TEMPORAL_SERVICE, v),
            v=v,
            recall_overfetch=v.environ(MEMORYRANK_MEMORY_RECALL_OVERFETCH,
                                       default=DEFAULT_MEMORYRANK_MEMORY_RECALL_OVERFETCH, type_fn=int),
        )
