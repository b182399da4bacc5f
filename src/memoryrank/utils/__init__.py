"""Shared utilities for memoryrank services."""

from .hashing import compute_content_hash
from .id_generation import generate_id
from .datetime import utc_now, ensure_utc, start_of_day, parse_datetime_utc
from .vector_math import cosine_similarity
from .text import tokenize, extract_keywords, exact_match_boost

__all__ = [
    "compute_content_hash",
    "generate_id",
    "utc_now",
    "ensure_utc",
    "start_of_day",
    "parse_datetime_utc",
    "cosine_similarity",
    "tokenize",
    "extract_keywords",
    "exact_match_boost",
]
