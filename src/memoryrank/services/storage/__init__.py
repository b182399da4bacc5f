from .base import MemoryStore, EXT_MEMORY_STORE

from scitrera_app_framework import Variables, get_extension


def get_memory_store(v: Variables = None) -> MemoryStore:
    return get_extension(EXT_MEMORY_STORE, v)


__all__ = (
    'MemoryStore', 'get_memory_store', 'EXT_MEMORY_STORE',
)
