"""Default consolidation: cosine-threshold duplicate detection with field-wise merge."""
from logging import Logger
from typing import Optional, Sequence

from scitrera_app_framework import get_logger
from scitrera_app_framework.api import Variables

from ...config import (
    MEMORYRANK_CONSOLIDATION_SIMILARITY_THRESHOLD, DEFAULT_MEMORYRANK_CONSOLIDATION_SIMILARITY_THRESHOLD,
)
from ...models.memory import MemoryMetadata, MemoryRecord, MemoryRelationship
from ...utils import cosine_similarity
from ..storage import EXT_MEMORY_STORE, MemoryStore
from .base import ConsolidationService, ConsolidationServicePluginBase, ConsolidationResult, DuplicatePair


def merge_relationships(
        original: Sequence[MemoryRelationship],
        duplicate: Sequence[MemoryRelationship],
) -> list[MemoryRelationship]:
    """One edge per target, keeping the higher confidence (the original's edge on ties)."""
    by_target: dict[str, MemoryRelationship] = {}
    for rel in list(original) + list(duplicate):
        existing = by_target.get(rel.target_id)
        if existing is None or rel.confidence > existing.confidence:
            by_target[rel.target_id] = rel
    return list(by_target.values())


def _merged_base_confidence(original: MemoryRecord, duplicate: MemoryRecord) -> Optional[float]:
    # None while neither record has been through a decay pass
    bases = (original.metadata.base_confidence, duplicate.metadata.base_confidence)
    if all(b is None for b in bases):
        return None
    return max(original.confidence if bases[0] is None else bases[0],
               duplicate.confidence if bases[1] is None else bases[1])


class DefaultConsolidationService(ConsolidationService):
    def __init__(
            self,
            store: MemoryStore,
            v: Variables = None,
            similarity_threshold: float = DEFAULT_MEMORYRANK_CONSOLIDATION_SIMILARITY_THRESHOLD,
    ):
        self._store = store
        self.similarity_threshold = similarity_threshold
        self.logger = get_logger(v, name=self.__class__.__name__)

    def find_duplicates(self, memories: Sequence[MemoryRecord]) -> list[DuplicatePair]:
        pairs = []
        for i, first in enumerate(memories):
            for second in memories[i + 1:]:
                similarity = cosine_similarity(first.embedding, second.embedding)
                if similarity >= self.similarity_threshold:
                    original, duplicate = (first, second) if first.timestamp < second.timestamp else (second, first)
                    pairs.append(DuplicatePair(original, duplicate, similarity))
                    self.logger.debug(
                        "Found duplicate %s -> %s (similarity=%.3f)", duplicate.id, original.id, similarity
                    )
        return pairs

    def merge(self, original: MemoryRecord, duplicate: MemoryRecord) -> MemoryRecord:
        """
        Fold ``duplicate`` into ``original``.

        The result keeps the original's id, embedding and timestamp. Differing
        content is appended as an update, and the merged record is latest.
        """
        if original.content == duplicate.content:
            content = original.content
        else:
            content = f"{original.content}\n\nUpdate: {duplicate.content}"

        metadata = MemoryMetadata(
            source=original.metadata.source,
            entities=original.metadata.entities | duplicate.metadata.entities,
            topics=original.metadata.topics | duplicate.metadata.topics,
            importance=max(original.metadata.importance, duplicate.metadata.importance),
            access_count=original.metadata.access_count + duplicate.metadata.access_count,
            last_accessed=original.metadata.last_accessed,
            user_confirmed=original.metadata.user_confirmed or duplicate.metadata.user_confirmed,
            base_confidence=_merged_base_confidence(original, duplicate),
        )

        return MemoryRecord(
            id=original.id,
            content=content,
            embedding=original.embedding,
            timestamp=original.timestamp,
            confidence=max(original.confidence, duplicate.confidence),
            relationships=merge_relationships(original.relationships, duplicate.relationships),
            metadata=metadata,
            is_latest=True,
            is_static=original.is_static or duplicate.is_static,
            container_tags=original.container_tags | duplicate.container_tags,
            temporal=original.temporal,
            status=original.status,
        )

    def consolidate(self, memories: Sequence[MemoryRecord]) -> ConsolidationResult:
        pairs = self.find_duplicates(memories)
        if not pairs:
            return ConsolidationResult(list(memories), [])

        by_id: dict[str, MemoryRecord] = {m.id: m for m in memories}
        removed: list[str] = []
        for original, duplicate, _ in pairs:
            if duplicate.id not in by_id or original.id not in by_id:
                continue
            # merge into the accumulated record so earlier merges are kept
            by_id[original.id] = self.merge(by_id[original.id], by_id[duplicate.id])
            del by_id[duplicate.id]
            removed.append(duplicate.id)

        self.logger.info("Consolidated %d duplicates from %d pairs", len(removed), len(pairs))
        return ConsolidationResult(list(by_id.values()), removed)

    async def consolidate_store(self) -> ConsolidationResult:
        memories = await self._store.get_all_memories()
        result = self.consolidate(memories)

        removed = set(result.removed_ids)
        originals = {m.id: m for m in memories}
        for memory in result.consolidated:
            if memory is not originals.get(memory.id):
                await self._store.update_memory(memory)
        for memory_id in removed:
            await self._store.archive_memory(memory_id)
        return result


class DefaultConsolidationServicePlugin(ConsolidationServicePluginBase):
    PROVIDER_NAME = 'default'

    def initialize(self, v: Variables, logger: Logger) -> DefaultConsolidationService:
        return DefaultConsolidationService(
            store=self.get_extension(EXT_MEMORY_STORE, v),
            v=v,
            similarity_threshold=v.environ(MEMORYRANK_CONSOLIDATION_SIMILARITY_THRESHOLD,
                                           default=DEFAULT_MEMORYRANK_CONSOLIDATION_SIMILARITY_THRESHOLD,
                                           type_fn=float),
        )
