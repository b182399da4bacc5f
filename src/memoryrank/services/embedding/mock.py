import hashlib
from logging import Logger

import numpy as np

from scitrera_app_framework import Variables

from ...config import (
    EmbeddingProviderType,
    MEMORYRANK_EMBEDDING_DIMENSIONS, DEFAULT_MEMORYRANK_EMBEDDING_DIMENSIONS,
)
from .base import EmbeddingProvider, EmbeddingProviderPluginBase


class MockEmbeddingProvider(EmbeddingProvider):
    """
    Deterministic hash-seeded embeddings for tests and offline use.

    The SHA-256 digest of the text seeds the generator, so the same text always
    gets the same vector. Components are non-negative and the vector has unit
    length, so cosine similarities fall in [0, 1]. Related texts are NOT close.
    """

    def __init__(self, v: Variables = None, dimensions: int = DEFAULT_MEMORYRANK_EMBEDDING_DIMENSIONS):
        super().__init__(v, dimensions)

    async def embed(self, text: str) -> list[float]:
        seed = int.from_bytes(hashlib.sha256(text.encode()).digest()[:8], byteorder="big")
        vector = np.random.default_rng(seed).random(self._dimensions)
        norm = np.linalg.norm(vector)
        if norm > 0:
            vector = vector / norm
        return vector.tolist()

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        return [await self.embed(text) for text in texts]


class MockEmbeddingProviderPlugin(EmbeddingProviderPluginBase):
    PROVIDER_NAME = EmbeddingProviderType.MOCK

    def initialize(self, v: Variables, logger: Logger) -> MockEmbeddingProvider:
        dimensions = v.environ(MEMORYRANK_EMBEDDING_DIMENSIONS,
                               default=DEFAULT_MEMORYRANK_EMBEDDING_DIMENSIONS, type_fn=int)
        logger.info("Using mock embeddings (%d dimensions)", dimensions)
        return MockEmbeddingProvider(v=v, dimensions=dimensions)
