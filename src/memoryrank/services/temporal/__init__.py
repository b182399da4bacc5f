"""Temporal extraction service package."""
from scitrera_app_framework import Variables, get_extension

from .base import (
    EXT_TEMPORAL_SERVICE,
    TemporalExtractorService,
    TemporalServicePluginBase,
)


def get_temporal_service(v: Variables = None) -> TemporalExtractorService:
    """Get the temporal extractor service instance."""
    return get_extension(EXT_TEMPORAL_SERVICE, v)


__all__ = (
    'EXT_TEMPORAL_SERVICE',
    'TemporalExtractorService',
    'TemporalServicePluginBase',
    'get_temporal_service',
)
