from logging import Logger
from typing import Optional

from cachetools import LRUCache
from scitrera_app_framework import get_logger, Variables

from ...config import MEMORYRANK_EMBEDDING_CACHE_SIZE, DEFAULT_MEMORYRANK_EMBEDDING_CACHE_SIZE
from ...utils import compute_content_hash
from .base import EmbeddingProvider, EmbeddingServicePluginBase, EXT_EMBEDDING_PROVIDER


class EmbeddingService:
    """
    Front for the configured provider with an LRU cache keyed by content hash.

    Single-text calls go through the cache; batches go straight to the
    provider. Provider errors are raised to the caller as-is.
    """

    def __init__(
            self,
            v: Variables = None,
            provider: EmbeddingProvider = None,
            cache_size: int = DEFAULT_MEMORYRANK_EMBEDDING_CACHE_SIZE,
    ):
        self.provider = provider
        self.logger = get_logger(v, name=self.__class__.__name__)
        # cache_size <= 0 disables caching
        self._cache: Optional[LRUCache] = LRUCache(maxsize=cache_size) if cache_size > 0 else None
        self.logger.info("%s wraps %s (cache size %d)",
                         self.__class__.__name__, type(provider).__name__, cache_size)

    async def embed(self, text: str) -> list[float]:
        if not text or not text.strip():
            raise ValueError("Cannot embed empty text")

        key = compute_content_hash(text)
        if self._cache is not None and key in self._cache:
            return list(self._cache[key])

        vector = await self.provider.embed(text)
        if self._cache is not None:
            self._cache[key] = tuple(vector)
        return list(vector)

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            return []
        for i, text in enumerate(texts):
            if not text or not text.strip():
                raise ValueError(f"Cannot embed empty text (batch index {i})")
        return await self.provider.embed_batch(texts)

    @property
    def dimensions(self) -> int:
        return self.provider.dimensions


class EmbeddingServicePlugin(EmbeddingServicePluginBase):
    PROVIDER_NAME = 'default'

    def initialize(self, v: Variables, logger: Logger) -> EmbeddingService:
        return EmbeddingService(
            v=v,
            provider=self.get_extension(EXT_EMBEDDING_PROVIDER, v),
            cache_size=v.environ(MEMORYRANK_EMBEDDING_CACHE_SIZE,
                                 default=DEFAULT_MEMORYRANK_EMBEDDING_CACHE_SIZE, type_fn=int),
        )
