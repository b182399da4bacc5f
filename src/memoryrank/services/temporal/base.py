"""
Temporal Service Base - Abstract interface for temporal extraction.

Turns natural-language time references in memory content into structured,
comparable TemporalInfo.

Extension Points:
- memoryrank-temporal-service: temporal extractor implementations
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from scitrera_app_framework import get_logger
from scitrera_app_framework.api import Plugin, Variables, enabled_option_pattern

from ...config import MEMORYRANK_TEMPORAL_SERVICE, DEFAULT_MEMORYRANK_TEMPORAL_SERVICE
from ...models.temporal import TemporalInfo, TimeGranularity
from .._constants import EXT_TEMPORAL_SERVICE


class TemporalExtractorService(ABC):
    """Interface for temporal extraction and date comparison helpers.

    All operations are deterministic for a given reference date.
    """

    def __init__(self, v: Variables = None):
        self.logger = get_logger(v, name=self.__class__.__name__)

    @abstractmethod
    def extract(self, content: str, reference_date: Optional[datetime] = None) -> TemporalInfo:
        """Extract temporal information from ``content`` relative to ``reference_date`` (default: now)."""
        pass

    @abstractmethod
    def recency_score(self, date: datetime, reference_date: Optional[datetime] = None) -> float:
        """Score in (0, 1], higher for more recent dates."""
        pass

    @abstractmethod
    def are_in_same_period(self, a: datetime, b: datetime, granularity: TimeGranularity) -> bool:
        """Whether two dates fall into the same period at ``granularity``."""
        pass

    @abstractmethod
    def format_relative(self, date: datetime, reference_date: Optional[datetime] = None) -> str:
        """Render ``date`` as a short human-readable phrase relative to ``reference_date``."""
        pass


# noinspection PyAbstractClass
class TemporalServicePluginBase(Plugin):
    """Base plugin for temporal extractor implementations."""
    PROVIDER_NAME: str = None

    def name(self) -> str:
        return f"{EXT_TEMPORAL_SERVICE}|{self.PROVIDER_NAME}"

    def extension_point_name(self, v: Variables) -> str:
        return EXT_TEMPORAL_SERVICE

    def is_enabled(self, v: Variables) -> bool:
        return enabled_option_pattern(self, v, MEMORYRANK_TEMPORAL_SERVICE, self_attr='PROVIDER_NAME')

    def on_registration(self, v: Variables) -> None:
        v.set_default_value(MEMORYRANK_TEMPORAL_SERVICE, DEFAULT_MEMORYRANK_TEMPORAL_SERVICE)
