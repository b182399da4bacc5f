"""Configuration constants for memoryrank.

Values are read through ``Variables.environ()`` so each name below doubles as an
environment variable. Tests set them directly on an isolated ``Variables`` instance.
"""

from enum import Enum

# ============================================
# Data Home Directory
# ============================================
MEMORYRANK_DATA_DIR = 'MEMORYRANK_DATA_DIR'


# ============================================
# Embedding Providers
# ============================================
class EmbeddingProviderType(str, Enum):
    """Available embedding provider types."""

    LOCAL = "local"  # sentence-transformers (self-hosted)
    MOCK = "mock"  # deterministic hash-based vectors, testing only


MEMORYRANK_EMBEDDING_PROVIDER = 'MEMORYRANK_EMBEDDING_PROVIDER'
DEFAULT_MEMORYRANK_EMBEDDING_PROVIDER = EmbeddingProviderType.LOCAL
MEMORYRANK_EMBEDDING_MODEL = 'MEMORYRANK_EMBEDDING_MODEL'
DEFAULT_MEMORYRANK_EMBEDDING_MODEL = 'all-MiniLM-L6-v2'
MEMORYRANK_EMBEDDING_DIMENSIONS = 'MEMORYRANK_EMBEDDING_DIMENSIONS'
DEFAULT_MEMORYRANK_EMBEDDING_DIMENSIONS = 384
MEMORYRANK_EMBEDDING_PRELOAD_ENABLED = 'MEMORYRANK_EMBEDDING_PRELOAD_ENABLED'
DEFAULT_MEMORYRANK_EMBEDDING_PRELOAD_ENABLED = True

# ============================================
# Embedding Service
# ============================================
MEMORYRANK_EMBEDDING_SERVICE = 'MEMORYRANK_EMBEDDING_SERVICE'
DEFAULT_MEMORYRANK_EMBEDDING_SERVICE = 'default'
MEMORYRANK_EMBEDDING_CACHE_SIZE = 'MEMORYRANK_EMBEDDING_CACHE_SIZE'
DEFAULT_MEMORYRANK_EMBEDDING_CACHE_SIZE = 4096

# ============================================
# Storage Backend
# ============================================
MEMORYRANK_STORAGE_BACKEND = 'MEMORYRANK_STORAGE_BACKEND'
DEFAULT_MEMORYRANK_STORAGE_BACKEND = 'memory'

# ============================================
# Hybrid Search
# ============================================
MEMORYRANK_SEARCH_SERVICE = 'MEMORYRANK_SEARCH_SERVICE'
DEFAULT_MEMORYRANK_SEARCH_SERVICE = 'default'
MEMORYRANK_SEARCH_VECTOR_WEIGHT = 'MEMORYRANK_SEARCH_VECTOR_WEIGHT'
DEFAULT_MEMORYRANK_SEARCH_VECTOR_WEIGHT = 0.7
MEMORYRANK_SEARCH_KEYWORD_WEIGHT = 'MEMORYRANK_SEARCH_KEYWORD_WEIGHT'
DEFAULT_MEMORYRANK_SEARCH_KEYWORD_WEIGHT = 0.3
MEMORYRANK_SEARCH_PARALLEL = 'MEMORYRANK_SEARCH_PARALLEL'
DEFAULT_MEMORYRANK_SEARCH_PARALLEL = True


# ============================================
# Reranker
# ============================================
class RerankerType(str, Enum):
    """Available reranker service types."""

    DEFAULT = "default"  # recency, decayed confidence, static and access signals
    NONE = "none"  # keep incoming order, truncate only


MEMORYRANK_RERANKER_SERVICE = 'MEMORYRANK_RERANKER_SERVICE'
DEFAULT_MEMORYRANK_RERANKER_SERVICE = RerankerType.DEFAULT
MEMORYRANK_RERANKER_EXACT_MATCH_BOOST = 'MEMORYRANK_RERANKER_EXACT_MATCH_BOOST'
DEFAULT_MEMORYRANK_RERANKER_EXACT_MATCH_BOOST = False

# ============================================
# Temporal Extraction
# ============================================
MEMORYRANK_TEMPORAL_SERVICE = 'MEMORYRANK_TEMPORAL_SERVICE'
DEFAULT_MEMORYRANK_TEMPORAL_SERVICE = 'default'

# ============================================
# Decay
# ============================================
MEMORYRANK_DECAY_SERVICE = 'MEMORYRANK_DECAY_SERVICE'
DEFAULT_MEMORYRANK_DECAY_SERVICE = 'default'
MEMORYRANK_DECAY_PRUNE_THRESHOLD = 'MEMORYRANK_DECAY_PRUNE_THRESHOLD'
DEFAULT_MEMORYRANK_DECAY_PRUNE_THRESHOLD = 0.1

# ============================================
# Consolidation
# ============================================
MEMORYRANK_CONSOLIDATION_SERVICE = 'MEMORYRANK_CONSOLIDATION_SERVICE'
DEFAULT_MEMORYRANK_CONSOLIDATION_SERVICE = 'default'
MEMORYRANK_CONSOLIDATION_SIMILARITY_THRESHOLD = 'MEMORYRANK_CONSOLIDATION_SIMILARITY_THRESHOLD'
DEFAULT_MEMORYRANK_CONSOLIDATION_SIMILARITY_THRESHOLD = 0.85

# ============================================
# Graph
# ============================================
MEMORYRANK_GRAPH_SERVICE = 'MEMORYRANK_GRAPH_SERVICE'
DEFAULT_MEMORYRANK_GRAPH_SERVICE = 'default'

# ============================================
# Memory Service
# ============================================
MEMORYRANK_MEMORY_SERVICE = 'MEMORYRANK_MEMORY_SERVICE'
DEFAULT_MEMORYRANK_MEMORY_SERVICE = 'default'
MEMORYRANK_MEMORY_RECALL_OVERFETCH = 'MEMORYRANK_MEMORY_RECALL_OVERFETCH'
DEFAULT_MEMORYRANK_MEMORY_RECALL_OVERFETCH = 2
