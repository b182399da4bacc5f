"""
Memory domain models for memoryrank.

A memory record is a node in the memory graph: immutable content and vector,
mutable confidence and usage metadata, and typed edges to other records that
are addressed by identifier only.
"""
import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..utils.datetime import utc_now, ensure_utc
from ..utils.id_generation import generate_id
from .temporal import TemporalInfo

# Decay rates per day of age
STATIC_DECAY_RATE = 0.01
DYNAMIC_DECAY_RATE = 0.05

# Access boost inside decay_factor: 0.1 per access, counted up to 10 accesses
DECAY_ACCESS_BOOST_PER_ACCESS = 0.1
DECAY_ACCESS_BOOST_MAX_COUNT = 10

_SECONDS_PER_DAY = 86400.0


class RelationType(str, Enum):
    """Typed, directed edge between two memory records."""

    UPDATES = "updates"  # newer fact replaces an older one
    EXTENDS = "extends"  # adds detail to the target
    DERIVES = "derives"  # inferred from the target
    CONTRADICTS = "contradicts"
    RELATED_TO = "related_to"


class MemorySource(str, Enum):
    """Where a memory came from."""

    CONVERSATION = "conversation"
    DOCUMENT = "document"
    USER_INPUT = "user_input"
    DERIVED = "derived"
    IMPORTED = "imported"


class MemoryStatus(str, Enum):
    """Lifecycle status of a memory."""

    ACTIVE = "active"
    ARCHIVED = "archived"  # Excluded from default enumeration, never physically removed


class MemoryRelationship(BaseModel):
    """Edge from the owning record to ``target_id``."""

    model_config = ConfigDict(frozen=True)

    type: RelationType = Field(..., description="Relationship type")
    target_id: str = Field(..., description="Identifier of the related memory")
    confidence: float = Field(1.0, ge=0.0, le=1.0, description="Confidence in the relationship")
    timestamp: datetime = Field(default_factory=utc_now, description="When the relationship was recorded")

    @field_validator("timestamp")
    @classmethod
    def normalize_utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)


class MemoryMetadata(BaseModel):
    """Mutable usage and provenance data for a memory."""

    model_config = ConfigDict(validate_assignment=True)

    source: MemorySource = Field(MemorySource.CONVERSATION, description="Origin of the memory")
    entities: set[str] = Field(default_factory=set, description="Named entities mentioned")
    topics: set[str] = Field(default_factory=set, description="Topics covered")
    importance: float = Field(0.5, ge=0.0, le=1.0, description="Importance (0.0-1.0)")
    access_count: int = Field(0, ge=0, description="Number of times the memory was retrieved")
    last_accessed: Optional[datetime] = Field(None, description="Last retrieval timestamp")
    user_confirmed: bool = Field(False, description="Explicitly confirmed by the user")
    base_confidence: Optional[float] = Field(
        None, ge=0.0, le=1.0, description="Confidence before decay; recorded by the first decay pass that changes it"
    )

    @field_validator("last_accessed")
    @classmethod
    def normalize_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v) if v is not None else None

    def record_access(self, at: Optional[datetime] = None) -> None:
        """Count one retrieval and stamp the access time."""
        self.access_count += 1
        self.last_accessed = at or utc_now()


class MemoryRecord(BaseModel):
    """A single stored fact: content, vector, confidence, relationships and metadata."""

    model_config = ConfigDict(validate_assignment=True)

    # Identity and immutable payload
    id: str = Field(default_factory=lambda: generate_id("mem"), frozen=True, description="Unique memory identifier")
    content: str = Field(..., frozen=True, description="The memory content")
    embedding: tuple[float, ...] = Field(..., frozen=True, description="Vector embedding, fixed at creation")
    timestamp: datetime = Field(default_factory=utc_now, frozen=True, description="Creation timestamp")

    # Mutable state
    confidence: float = Field(1.0, ge=0.0, le=1.0, description="Stored confidence (0.0-1.0)")
    relationships: list[MemoryRelationship] = Field(default_factory=list, description="Outgoing edges, in insertion order")
    metadata: MemoryMetadata = Field(default_factory=MemoryMetadata)
    is_latest: bool = Field(True, description="False once superseded by a newer record")
    is_static: bool = Field(False, description="Core durable fact; decays slower than episodic memories")
    container_tags: set[str] = Field(default_factory=set, description="Free-form scoping tags")
    temporal: Optional[TemporalInfo] = Field(None, description="Extracted temporal information")
    status: MemoryStatus = Field(MemoryStatus.ACTIVE, description="Memory lifecycle status")

    @field_validator("content")
    @classmethod
    def content_not_empty(cls, v: str) -> str:
        """Validate that content is not empty."""
        if not v or not v.strip():
            raise ValueError("Memory content cannot be empty")
        return v.strip()

    @field_validator("timestamp")
    @classmethod
    def normalize_utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    @model_validator(mode="after")
    def superseded_requires_update_edge(self) -> "MemoryRecord":
        """A record that is no longer latest must carry an ``updates`` relationship."""
        if not self.is_latest and not any(r.type == RelationType.UPDATES for r in self.relationships):
            raise ValueError("A record with is_latest=False must have an 'updates' relationship")
        return self

    # ------------------------------------------------------------------
    # Decay
    # ------------------------------------------------------------------

    def decay_factor(self, current_date: Optional[datetime] = None) -> float:
        """
        Time- and access-dependent multiplier applied to stored confidence.

        Combines an age factor (decay since creation) with an access factor
        (decay since last access plus a bounded per-access boost). The product
        is capped at 1.0.

        Args:
            current_date: Reference "now" (default: current UTC time)

        Returns:
            Decay factor, never greater than 1.0
        """
        now = ensure_utc(current_date) if current_date is not None else utc_now()

        days_since_creation = (now - self.timestamp).total_seconds() / _SECONDS_PER_DAY
        last_accessed = self.metadata.last_accessed
        if last_accessed is not None:
            days_since_access = (now - last_accessed).total_seconds() / _SECONDS_PER_DAY
        else:
            days_since_access = days_since_creation

        decay_rate = STATIC_DECAY_RATE if self.is_static else DYNAMIC_DECAY_RATE
        access_boost = min(self.metadata.access_count, DECAY_ACCESS_BOOST_MAX_COUNT) * DECAY_ACCESS_BOOST_PER_ACCESS

        age_factor = math.exp(-decay_rate * days_since_creation)
        access_factor = math.exp(-decay_rate * days_since_access) + access_boost

        return min(age_factor * access_factor, 1.0)

    def effective_confidence(self, current_date: Optional[datetime] = None) -> float:
        """Stored confidence scaled by :meth:`decay_factor`."""
        return self.confidence * self.decay_factor(current_date)

    # ------------------------------------------------------------------
    # Relationships
    # ------------------------------------------------------------------

    def add_relationship(self, relationship: MemoryRelationship) -> None:
        """
        Append ``relationship``, replacing any existing edge of the same type to the same target.

        Adding an ``updates`` edge marks this record as the latest version.
        """
        self.relationships = [
            r for r in self.relationships
            if not (r.target_id == relationship.target_id and r.type == relationship.type)
        ] + [relationship]

        if relationship.type == RelationType.UPDATES:
            self.is_latest = True

    def relationships_of_type(self, relation_type: RelationType) -> list[MemoryRelationship]:
        return [r for r in self.relationships if r.type == relation_type]

    def mark_superseded_by(
            self,
            newer_id: str,
            confidence: float = 1.0,
            timestamp: Optional[datetime] = None,
    ) -> None:
        """
        Record that ``newer_id`` replaces this memory.

        The ``updates`` edge on a superseded record names its successor, so the
        record keeps a traversable link forward through the update chain.
        """
        self.add_relationship(MemoryRelationship(
            type=RelationType.UPDATES,
            target_id=newer_id,
            confidence=confidence,
            timestamp=timestamp or utc_now(),
        ))
        self.is_latest = False

    @property
    def is_superseded(self) -> bool:
        return not self.is_latest and any(r.type == RelationType.UPDATES for r in self.relationships)


@dataclass(frozen=True)
class ScoredMemory:
    """A memory paired with a ranking score. Transient, never persisted."""
    memory: MemoryRecord
    score: float
