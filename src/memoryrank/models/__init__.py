"""
Core domain models for memoryrank.

Exports the memory graph node, its edges and metadata, and temporal types.
"""
from .memory import (
    MemoryMetadata,
    MemoryRecord,
    MemoryRelationship,
    MemorySource,
    MemoryStatus,
    RelationType,
    ScoredMemory,
)
from .temporal import (
    TemporalInfo,
    TemporalType,
    TimeGranularity,
)

__all__ = [
    'MemoryMetadata',
    'MemoryRecord',
    'MemoryRelationship',
    'MemorySource',
    'MemoryStatus',
    'RelationType',
    'ScoredMemory',
    'TemporalInfo',
    'TemporalType',
    'TimeGranularity',
]
