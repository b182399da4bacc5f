"""
Temporal domain models.

Structured time information extracted from memory content: when the fact was
recorded, when the described event happened, and how precise that is.
"""
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ..utils.datetime import utc_now, ensure_utc


class TimeGranularity(str, Enum):
    """Precision of a resolved event time."""

    EXACT = "exact"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"
    APPROXIMATE = "approximate"  # "a few days ago", "recently"
    UNKNOWN = "unknown"  # nothing resolved


class TemporalType(str, Enum):
    """Tense classification of a statement."""

    PAST = "past"
    PRESENT = "present"
    FUTURE = "future"
    HABITUAL = "habitual"  # "always", "every week"


class TemporalInfo(BaseModel):
    """Temporal facts attached to a memory."""

    storage_time: datetime = Field(default_factory=utc_now, description="When the memory was recorded")
    event_time: Optional[datetime] = Field(None, description="When the described event occurred, if resolvable")
    event_time_granularity: TimeGranularity = Field(
        TimeGranularity.UNKNOWN,
        description="Precision of event_time"
    )
    is_ongoing: bool = Field(False, description="Whether the statement describes a continuing state")
    temporal_markers: list[str] = Field(default_factory=list, description="Recognized time phrases, in scan order")
    temporal_type: TemporalType = Field(TemporalType.PRESENT, description="Tense classification")

    @field_validator("storage_time", "event_time")
    @classmethod
    def normalize_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Store all times as timezone-aware UTC."""
        return ensure_utc(v) if v is not None else None

    @property
    def effective_time(self) -> datetime:
        """Event time when known, otherwise the time the memory was stored."""
        return self.event_time if self.event_time is not None else self.storage_time
