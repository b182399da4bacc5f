"""Content hashing utilities."""

from hashlib import sha256


def compute_content_hash(content: str) -> str:
    """Compute the SHA-256 hex digest of ``content``.

    Used as the cache key for embeddings so that identical text is only
    embedded once per process.
    """
    return sha256(content.encode()).hexdigest()
