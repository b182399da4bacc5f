"""
Embedding contracts and plugin bases.

A provider maps text to a fixed-length vector. Vectors from one provider must
be reproducible for the same text and keep one dimensionality, because stored
memories and queries are compared with cosine similarity.

Extension Points:
- memoryrank-embedding-provider: the model behind the vectors
- memoryrank-embedding-service: cached front used by the rest of the engine
"""
from abc import ABC, abstractmethod
from logging import Logger
from typing import Optional

from scitrera_app_framework.api import Variables, Plugin, enabled_option_pattern
from scitrera_app_framework import get_logger, ext_parse_bool

from ...config import (
    MEMORYRANK_EMBEDDING_PROVIDER, DEFAULT_MEMORYRANK_EMBEDDING_PROVIDER,
    MEMORYRANK_EMBEDDING_SERVICE, DEFAULT_MEMORYRANK_EMBEDDING_SERVICE,
    MEMORYRANK_EMBEDDING_PRELOAD_ENABLED, DEFAULT_MEMORYRANK_EMBEDDING_PRELOAD_ENABLED,
)
from .._constants import EXT_EMBEDDING_PROVIDER, EXT_EMBEDDING_SERVICE


class EmbeddingProvider(ABC):
    """Turns memory and query text into vectors."""

    def __init__(self, v: Variables = None, output_dimensions: Optional[int] = None):
        self._dimensions = output_dimensions
        self.logger = get_logger(v, name=self.__class__.__name__)

    async def preload(self):
        """Load model weights ahead of the first request. No-op by default."""
        return

    @abstractmethod
    async def embed(self, text: str) -> list[float]:
        ...

    @abstractmethod
    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Vectors for ``texts``, in input order."""
        ...

    @property
    def dimensions(self) -> int:
        return self._dimensions


# noinspection PyAbstractClass
class EmbeddingProviderPluginBase(Plugin):
    """Selects the provider named by MEMORYRANK_EMBEDDING_PROVIDER and optionally warms it up."""
    PROVIDER_NAME: str = ''

    def name(self) -> str:
        return f"{EXT_EMBEDDING_PROVIDER}|{self.PROVIDER_NAME}"

    def extension_point_name(self, v: Variables) -> str:
        return EXT_EMBEDDING_PROVIDER

    def is_enabled(self, v: Variables) -> bool:
        return enabled_option_pattern(self, v, MEMORYRANK_EMBEDDING_PROVIDER, self_attr='PROVIDER_NAME')

    def on_registration(self, v: Variables) -> None:
        v.set_default_value(MEMORYRANK_EMBEDDING_PROVIDER, DEFAULT_MEMORYRANK_EMBEDDING_PROVIDER)

    async def async_ready(self, v: Variables, logger: Logger, value: object | None) -> None:
        if not v.environ(MEMORYRANK_EMBEDDING_PRELOAD_ENABLED,
                         default=DEFAULT_MEMORYRANK_EMBEDDING_PRELOAD_ENABLED, type_fn=ext_parse_bool):
            return

        # noinspection PyTypeChecker
        provider: EmbeddingProvider = value
        logger.info("Preloading embedding provider %s", self.PROVIDER_NAME)
        await provider.preload()


# noinspection PyAbstractClass
class EmbeddingServicePluginBase(Plugin):
    PROVIDER_NAME: str = None

    def name(self) -> str:
        return f"{EXT_EMBEDDING_SERVICE}|{self.PROVIDER_NAME}"

    def extension_point_name(self, v: Variables) -> str:
        return EXT_EMBEDDING_SERVICE

    def is_enabled(self, v: Variables) -> bool:
        return enabled_option_pattern(self, v, MEMORYRANK_EMBEDDING_SERVICE, self_attr='PROVIDER_NAME')

    def on_registration(self, v: Variables) -> None:
        v.set_default_value(MEMORYRANK_EMBEDDING_SERVICE, DEFAULT_MEMORYRANK_EMBEDDING_SERVICE)

    def get_dependencies(self, v: Variables):
        return (EXT_EMBEDDING_PROVIDER,)
