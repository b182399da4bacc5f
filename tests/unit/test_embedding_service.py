"""Unit tests for EmbeddingService and the mock provider."""
import math
from unittest.mock import AsyncMock

import pytest

from scitrera_app_framework import Variables

from memoryrank.services.embedding import EmbeddingProvider, EmbeddingService
from memoryrank.services.embedding.mock import MockEmbeddingProvider

# Mock provider default dimensions
MOCK_EMBEDDING_DIMENSIONS = 384


def counting_provider() -> AsyncMock:
    provider = AsyncMock(spec=EmbeddingProvider)
    provider.embed.return_value = [0.6, 0.8]
    provider.embed_batch.return_value = [[0.6, 0.8], [0.8, 0.6]]
    provider.dimensions = 2
    return provider


class TestEmbedding:
    """Tests for embedding generation through the configured service."""

    @pytest.mark.asyncio
    async def test_embed_returns_vector(self, embedding_service: EmbeddingService):
        embedding = await embedding_service.embed("Test text")

        assert len(embedding) == MOCK_EMBEDDING_DIMENSIONS
        assert all(isinstance(x, float) for x in embedding)
        assert embedding_service.dimensions == MOCK_EMBEDDING_DIMENSIONS

    @pytest.mark.asyncio
    async def test_embed_deterministic(self, embedding_service: EmbeddingService):
        text = "Deterministic test"
        assert await embedding_service.embed(text) == await embedding_service.embed(text)

    @pytest.mark.asyncio
    async def test_embed_batch(self, embedding_service: EmbeddingService):
        embeddings = await embedding_service.embed_batch(["First text", "Second text", "Third text"])

        assert len(embeddings) == 3
        assert all(len(e) == MOCK_EMBEDDING_DIMENSIONS for e in embeddings)

    @pytest.mark.asyncio
    async def test_empty_text_rejected(self, embedding_service: EmbeddingService):
        with pytest.raises(ValueError):
            await embedding_service.embed("   ")
        with pytest.raises(ValueError):
            await embedding_service.embed_batch(["fine", ""])

    @pytest.mark.asyncio
    async def test_empty_batch(self, embedding_service: EmbeddingService):
        assert await embedding_service.embed_batch([]) == []


class TestMockProvider:

    @pytest.mark.asyncio
    async def test_vectors_are_normalized_and_non_negative(self):
        provider = MockEmbeddingProvider(v=Variables(), dimensions=16)
        embedding = await provider.embed("hello world")

        assert len(embedding) == 16
        assert all(x >= 0.0 for x in embedding)
        assert math.sqrt(sum(x * x for x in embedding)) == pytest.approx(1.0)

    @pytest.mark.asyncio
    async def test_different_texts_differ(self):
        provider = MockEmbeddingProvider(v=Variables(), dimensions=16)
        assert await provider.embed("alpha") != await provider.embed("beta")

    @pytest.mark.asyncio
    async def test_batch_matches_single(self):
        provider = MockEmbeddingProvider(v=Variables(), dimensions=8)
        batch = await provider.embed_batch(["one", "two"])
        assert batch == [await provider.embed("one"), await provider.embed("two")]


class TestCaching:

    @pytest.mark.asyncio
    async def test_repeated_text_served_from_cache(self):
        provider = counting_provider()
        service = EmbeddingService(v=Variables(), provider=provider, cache_size=8)

        first = await service.embed("cached text")
        second = await service.embed("cached text")

        assert first == second == [0.6, 0.8]
        provider.embed.assert_awaited_once_with("cached text")

    @pytest.mark.asyncio
    async def test_cache_disabled(self):
        provider = counting_provider()
        service = EmbeddingService(v=Variables(), provider=provider, cache_size=0)

        await service.embed("text")
        await service.embed("text")

        assert provider.embed.await_count == 2

    @pytest.mark.asyncio
    async def test_cache_evicts_least_recently_used(self):
        provider = counting_provider()
        service = EmbeddingService(v=Variables(), provider=provider, cache_size=1)

        await service.embed("first")
        await service.embed("second")
        await service.embed("first")

        assert provider.embed.await_count == 3

    @pytest.mark.asyncio
    async def test_cached_vector_is_a_copy(self):
        provider = counting_provider()
        service = EmbeddingService(v=Variables(), provider=provider, cache_size=8)

        first = await service.embed("text")
        first.append(99.0)

        assert await service.embed("text") == [0.6, 0.8]

    @pytest.mark.asyncio
    async def test_provider_errors_propagate(self):
        provider = counting_provider()
        provider.embed.side_effect = RuntimeError("model crashed")
        service = EmbeddingService(v=Variables(), provider=provider)

        with pytest.raises(RuntimeError, match="model crashed"):
            await service.embed("text")

    @pytest.mark.asyncio
    async def test_batch_delegates_to_provider(self):
        provider = counting_provider()
        service = EmbeddingService(v=Variables(), provider=provider)

        assert await service.embed_batch(["a text", "b text"]) == [[0.6, 0.8], [0.8, 0.6]]
        provider.embed_batch.assert_awaited_once_with(["a text", "b text"])
