"""sentence-transformers provider (``pip install memoryrank[local]``)."""
import asyncio
from logging import Logger

from scitrera_app_framework import Variables

from ...config import (
    EmbeddingProviderType,
    MEMORYRANK_EMBEDDING_MODEL, DEFAULT_MEMORYRANK_EMBEDDING_MODEL,
)
from .base import EmbeddingProvider, EmbeddingProviderPluginBase


class LocalEmbeddingProvider(EmbeddingProvider):
    """
    Runs a sentence-transformers model in-process.

    The model loads on first use unless preloaded, and ``encode`` runs in a
    worker thread to keep the event loop responsive.
    """

    def __init__(self, v: Variables = None, model_name: str = DEFAULT_MEMORYRANK_EMBEDDING_MODEL):
        super().__init__(v)
        self.model_name = model_name
        self._model = None

    def _load(self):
        if self._model is None:
            from sentence_transformers import SentenceTransformer
            self.logger.info("Loading model %s", self.model_name)
            self._model = SentenceTransformer(self.model_name)
        return self._model

    async def preload(self):
        await asyncio.to_thread(self._load)

    async def embed(self, text: str) -> list[float]:
        vector = await asyncio.to_thread(self._load().encode, text)
        return vector.tolist()

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        self.logger.debug("Encoding %d texts with %s", len(texts), self.model_name)
        vectors = await asyncio.to_thread(self._load().encode, texts)
        return [row.tolist() for row in vectors]

    @property
    def dimensions(self) -> int:
        return self._load().get_sentence_embedding_dimension()


class LocalEmbeddingProviderPlugin(EmbeddingProviderPluginBase):
    PROVIDER_NAME = EmbeddingProviderType.LOCAL

    def initialize(self, v: Variables, logger: Logger) -> LocalEmbeddingProvider:
        model_name = v.environ(MEMORYRANK_EMBEDDING_MODEL, default=DEFAULT_MEMORYRANK_EMBEDDING_MODEL)
        logger.info("Using local embedding model %s", model_name)
        return LocalEmbeddingProvider(v=v, model_name=model_name)
