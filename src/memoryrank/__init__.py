"""memoryrank - relevance engine for personal memory knowledge bases."""

__version__ = "0.1.0"
