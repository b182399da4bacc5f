"""Hybrid search service package."""
from scitrera_app_framework import Variables, get_extension

from .base import (
    EXT_SEARCH_SERVICE,
    HybridSearchService,
    SearchServicePluginBase,
)


def get_search_service(v: Variables = None) -> HybridSearchService:
    """Get the hybrid search service instance."""
    return get_extension(EXT_SEARCH_SERVICE, v)


__all__ = (
    'EXT_SEARCH_SERVICE',
    'HybridSearchService',
    'SearchServicePluginBase',
    'get_search_service',
)
