"""
Reranker Service - second-pass scoring of retrieved memories.

Extension Points:
- memoryrank-reranker-service: reranker implementations
"""

from scitrera_app_framework import get_extension, Variables

from .base import (
    EXT_RERANKER_SERVICE,
    RerankerService,
    RerankerServicePluginBase,
)


def get_reranker_service(v: Variables = None) -> RerankerService:
    """Get the active reranker service."""
    return get_extension(EXT_RERANKER_SERVICE, v=v)


__all__ = [
    'EXT_RERANKER_SERVICE',
    'RerankerService',
    'RerankerServicePluginBase',
    'get_reranker_service',
]
