"""ID generation utilities."""

import uuid


def generate_id(prefix: str, length: int = 16) -> str:
    """Generate an opaque identifier of the form ``{prefix}_{uuid_hex[:length]}``.

    Example: mem_a1b2c3d4e5f6a7b8
    """
    return f"{prefix}_{uuid.uuid4().hex[:length]}"
