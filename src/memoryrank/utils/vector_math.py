"""Vector math utilities for embedding operations."""
from typing import Sequence

import numpy as np


def cosine_similarity(vec1: Sequence[float], vec2: Sequence[float]) -> float:
    """
    Calculate cosine similarity between two vectors using numpy.

    This is a scoring function, not an integrity check: mismatched
    dimensions or a zero vector score 0.0 instead of raising.

    Args:
        vec1: First vector
        vec2: Second vector

    Returns:
        Cosine similarity in range [-1, 1], or 0.0 if vectors have different lengths
        or either vector is zero.
    """
    if len(vec1) != len(vec2) or len(vec1) == 0:
        return 0.0

    a = np.asarray(vec1, dtype=np.float64)
    b = np.asarray(vec2, dtype=np.float64)

    norm_a = np.linalg.norm(a)
    norm_b = np.linalg.norm(b)

    if norm_a == 0 or norm_b == 0:
        return 0.0

    # rounding can push identical vectors a hair past 1.0
    return float(np.clip(np.dot(a, b) / (norm_a * norm_b), -1.0, 1.0))
