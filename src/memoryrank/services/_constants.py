"""
Extension point names for every memoryrank service.

Kept in one module so service packages can depend on each other's extension
points without importing each other's implementations.
"""

EXT_MEMORY_STORE = 'memoryrank-memory-store'

# embedding: providers produce raw vectors, the service adds caching
EXT_EMBEDDING_PROVIDER = 'memoryrank-embedding-provider'
EXT_EMBEDDING_SERVICE = 'memoryrank-embedding-service'

EXT_TEMPORAL_SERVICE = 'memoryrank-temporal-service'

# retrieval
EXT_SEARCH_SERVICE = 'memoryrank-search-service'
EXT_RERANKER_SERVICE = 'memoryrank-reranker-service'

# maintenance over the stored records
EXT_DECAY_SERVICE = 'memoryrank-decay-service'
EXT_CONSOLIDATION_SERVICE = 'memoryrank-consolidation-service'
EXT_GRAPH_SERVICE = 'memoryrank-graph-service'

EXT_MEMORY_SERVICE = 'memoryrank-memory-service'
