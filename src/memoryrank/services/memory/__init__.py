"""
Memory Service - remember, recall and version memories.

Extension Points:
- memoryrank-memory-service: memory service implementations
"""
from scitrera_app_framework import Variables, get_extension

from .base import EXT_MEMORY_SERVICE, MemoryServicePluginBase
from .default import MemoryService


def get_memory_service(v: Variables = None) -> MemoryService:
    """Get the active memory service."""
    return get_extension(EXT_MEMORY_SERVICE, v=v)


__all__ = [
    'EXT_MEMORY_SERVICE',
    'MemoryService',
    'MemoryServicePluginBase',
    'get_memory_service',
]
