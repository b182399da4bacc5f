"""Decay service contract: confidence decay over time and pruning of faded memories."""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from scitrera_app_framework.api import Plugin, Variables, enabled_option_pattern

from ...config import MEMORYRANK_DECAY_SERVICE, DEFAULT_MEMORYRANK_DECAY_SERVICE
from .._constants import EXT_MEMORY_STORE, EXT_DECAY_SERVICE


@dataclass
class DecayResult:
    """Result of a decay pass."""
    processed: int = 0
    decayed: int = 0
    archived: int = 0


class DecayService(ABC):
    """Interface for confidence decay and automatic forgetting."""

    @abstractmethod
    async def process_decay(self, now: Optional[datetime] = None) -> DecayResult:
        """Rewrite stored confidence of every active memory with its decayed value."""
        pass

    @abstractmethod
    async def prune_memories(self, threshold: Optional[float] = None, now: Optional[datetime] = None) -> int:
        """Archive forgettable memories whose effective confidence is below threshold. Returns count archived."""
        pass

    async def run(self, now: Optional[datetime] = None) -> DecayResult:
        """Decay pass followed by pruning."""
        result = await self.process_decay(now=now)
        result.archived = await self.prune_memories(now=now)
        return result


# noinspection PyAbstractClass
class DecayServicePluginBase(Plugin):
    """Plugin base for MEMORYRANK_DECAY_SERVICE providers."""
    PROVIDER_NAME: str = None

    def name(self) -> str:
        return f"{EXT_DECAY_SERVICE}|{self.PROVIDER_NAME}"

    def extension_point_name(self, v: Variables) -> str:
        return EXT_DECAY_SERVICE

    def is_enabled(self, v: Variables) -> bool:
        return enabled_option_pattern(self, v, MEMORYRANK_DECAY_SERVICE, self_attr='PROVIDER_NAME')

    def on_registration(self, v: Variables) -> None:
        v.set_default_value(MEMORYRANK_DECAY_SERVICE, DEFAULT_MEMORYRANK_DECAY_SERVICE)

    def get_dependencies(self, v: Variables):
        return (EXT_MEMORY_STORE,)
