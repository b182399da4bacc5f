"""
Shared fixtures for memoryrank tests.

One framework instance is built per session with the mock embedding provider
and the in-memory store, so no model download or disk state is involved. The
configuration is set on a fresh Variables object rather than read from the
process environment.

Service fixtures resolve the configured plugins, e.g.:
    async def test_recall(memory_service):
        await memory_service.remember("User lives in Lisbon")
"""
import logging
from datetime import datetime, timezone

import pytest
import pytest_asyncio

from scitrera_app_framework import Variables, get_extension
from memoryrank.config import (
    MEMORYRANK_DATA_DIR,
    MEMORYRANK_EMBEDDING_PROVIDER,
    MEMORYRANK_EMBEDDING_PRELOAD_ENABLED,
    MEMORYRANK_STORAGE_BACKEND,
    MEMORYRANK_RERANKER_SERVICE,
)
from memoryrank.services.consolidation import EXT_CONSOLIDATION_SERVICE
from memoryrank.services.decay import EXT_DECAY_SERVICE
from memoryrank.services.embedding import EXT_EMBEDDING_SERVICE
from memoryrank.services.graph import EXT_GRAPH_SERVICE
from memoryrank.services.memory import EXT_MEMORY_SERVICE
from memoryrank.services.reranker import EXT_RERANKER_SERVICE
from memoryrank.services.search import EXT_SEARCH_SERVICE
from memoryrank.services.storage import EXT_MEMORY_STORE
from memoryrank.services.temporal import EXT_TEMPORAL_SERVICE

# A Tuesday
REFERENCE_DATE = datetime(2025, 6, 10, 12, 0, tzinfo=timezone.utc)

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'


@pytest.fixture(scope="session")
def test_logger() -> logging.Logger:
    """Debug logger handed to preconfigure; handlers are attached here, not by the framework."""
    logger = logging.getLogger("memoryrank.tests")
    logger.setLevel(logging.DEBUG)
    if not logger.handlers:
        stream = logging.StreamHandler()
        stream.setFormatter(logging.Formatter(LOG_FORMAT, datefmt='%H:%M:%S'))
        logger.addHandler(stream)
    return logger


@pytest_asyncio.fixture(scope="session")
async def test_configuration():
    v = Variables()
    v.set(MEMORYRANK_EMBEDDING_PROVIDER, "mock")
    v.set(MEMORYRANK_EMBEDDING_PRELOAD_ENABLED, "false")
    v.set(MEMORYRANK_STORAGE_BACKEND, "memory")
    v.set(MEMORYRANK_RERANKER_SERVICE, "default")
    return v


@pytest_asyncio.fixture(scope="session")
async def test_framework(test_configuration, tmp_path_factory, test_logger):
    """Bootstrap the plugin graph once and yield ``(v, services)``; shut it down afterwards."""
    from memoryrank.dependencies import preconfigure, initialize_services, shutdown_services

    v = test_configuration
    v.set(MEMORYRANK_DATA_DIR, str(tmp_path_factory.mktemp("memoryrank_data")))

    v, services = preconfigure(v=v, test_mode=True, test_logger=test_logger)
    v = await initialize_services(v)
    yield v, services
    await shutdown_services(v)


@pytest.fixture(scope="session")
def v(test_framework):
    return test_framework[0]


@pytest.fixture(scope="session")
def memory_store(v):
    return get_extension(EXT_MEMORY_STORE, v)


@pytest.fixture(scope="session")
def embedding_service(v):
    return get_extension(EXT_EMBEDDING_SERVICE, v)


@pytest.fixture(scope="session")
def temporal_service(v):
    return get_extension(EXT_TEMPORAL_SERVICE, v)


@pytest.fixture(scope="session")
def search_service(v):
    return get_extension(EXT_SEARCH_SERVICE, v)


@pytest.fixture(scope="session")
def reranker_service(v):
    return get_extension(EXT_RERANKER_SERVICE, v)


@pytest.fixture(scope="session")
def decay_service(v):
    return get_extension(EXT_DECAY_SERVICE, v)


@pytest.fixture(scope="session")
def consolidation_service(v):
    return get_extension(EXT_CONSOLIDATION_SERVICE, v)


@pytest.fixture(scope="session")
def graph_service(v):
    return get_extension(EXT_GRAPH_SERVICE, v)


@pytest.fixture(scope="session")
def memory_service(v):
    return get_extension(EXT_MEMORY_SERVICE, v)


@pytest.fixture
def reference_date() -> datetime:
    return REFERENCE_DATE
