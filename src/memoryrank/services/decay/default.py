"""Default decay service implementation."""
import math
from datetime import datetime
from logging import Logger
from typing import Optional

from scitrera_app_framework import get_logger
from scitrera_app_framework.api import Variables

from ...config import MEMORYRANK_DECAY_PRUNE_THRESHOLD, DEFAULT_MEMORYRANK_DECAY_PRUNE_THRESHOLD
from ...models.memory import MemoryRecord, STATIC_DECAY_RATE, DYNAMIC_DECAY_RATE
from ...utils import utc_now, ensure_utc
from ..storage import EXT_MEMORY_STORE, MemoryStore
from .base import DecayService, DecayServicePluginBase, DecayResult

# Confidence credit for usage: 0.05 per access, capped at 0.3
ACCESS_CREDIT_PER_ACCESS = 0.05
ACCESS_CREDIT_CAP = 0.3

# Changes smaller than this are not written back
_CHANGE_EPSILON = 1e-9


def base_confidence(memory: MemoryRecord) -> float:
    """Confidence the memory had before any decay pass touched it."""
    base = memory.metadata.base_confidence
    return memory.confidence if base is None else base


def decayed_confidence(memory: MemoryRecord, now: datetime) -> float:
    """
    Base confidence aged by ``exp(-rate * days_since_creation)`` plus a capped
    access credit, clamped to [0, 1].

    Computed from :func:`base_confidence`, never from a previously decayed
    value, so repeated passes at the same ``now`` give the same result.
    """
    days_since_creation = (now - memory.timestamp).total_seconds() / 86400.0
    decay_rate = STATIC_DECAY_RATE if memory.is_static else DYNAMIC_DECAY_RATE
    access_credit = min(memory.metadata.access_count * ACCESS_CREDIT_PER_ACCESS, ACCESS_CREDIT_CAP)

    value = base_confidence(memory) * math.exp(-decay_rate * days_since_creation) + access_credit
    return max(min(value, 1.0), 0.0)


def is_forgettable(memory: MemoryRecord, threshold: float, now: datetime) -> bool:
    """Static and user-confirmed memories are never forgotten."""
    if memory.is_static or memory.metadata.user_confirmed:
        return False
    return memory.effective_confidence(now) < threshold


class DefaultDecayService(DecayService):
    """Default decay implementation using the memory store directly."""

    def __init__(
            self,
            store: MemoryStore,
            v: Variables = None,
            prune_threshold: float = DEFAULT_MEMORYRANK_DECAY_PRUNE_THRESHOLD,
    ):
        self._store = store
        self.prune_threshold = prune_threshold
        self.logger = get_logger(v, name=self.__class__.__name__)

    async def process_decay(self, now: Optional[datetime] = None) -> DecayResult:
        now = ensure_utc(now) if now is not None else utc_now()
        result = DecayResult()

        memories = await self._store.get_all_memories()
        result.processed = len(memories)

        for memory in memories:
            new_confidence = decayed_confidence(memory, now)
            if abs(new_confidence - memory.confidence) > _CHANGE_EPSILON:
                if memory.metadata.base_confidence is None:
                    memory.metadata.base_confidence = memory.confidence
                memory.confidence = new_confidence
                await self._store.update_memory(memory)
                result.decayed += 1

        self.logger.info("Decay pass: %d processed, %d decayed", result.processed, result.decayed)
        return result

    async def prune_memories(self, threshold: Optional[float] = None, now: Optional[datetime] = None) -> int:
        threshold = self.prune_threshold if threshold is None else threshold
        now = ensure_utc(now) if now is not None else utc_now()

        archived = 0
        for memory in await self._store.get_all_memories():
            if is_forgettable(memory, threshold, now):
                if await self._store.archive_memory(memory.id):
                    archived += 1

        if archived:
            self.logger.info("Archived %d low-confidence memories (threshold=%.3f)", archived, threshold)
        return archived


class DefaultDecayServicePlugin(DecayServicePluginBase):
    """Default decay service plugin."""
    PROVIDER_NAME = 'default'

    def initialize(self, v: Variables, logger: Logger) -> DefaultDecayService:
        return DefaultDecayService(
            store=self.get_extension(EXT_MEMORY_STORE, v),
            v=v,
            prune_threshold=v.environ(MEMORYRANK_DECAY_PRUNE_THRESHOLD,
                                      default=DEFAULT_MEMORYRANK_DECAY_PRUNE_THRESHOLD, type_fn=float),
        )
