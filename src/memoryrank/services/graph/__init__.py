"""Graph service package."""
from scitrera_app_framework import Variables, get_extension

from .base import (
    EXT_GRAPH_SERVICE,
    GraphService,
    GraphServicePluginBase,
)
from .snapshot import GraphStats, MemoryGraph


def get_graph_service(v: Variables = None) -> GraphService:
    """Get the graph service instance."""
    return get_extension(EXT_GRAPH_SERVICE, v)


__all__ = (
    'EXT_GRAPH_SERVICE',
    'GraphService',
    'GraphServicePluginBase',
    'GraphStats',
    'MemoryGraph',
    'get_graph_service',
)
