import uuid


def new_id(prefix: str) -> str:
    """Return a unique, prefix-tagged id usable as a correlation key."""
    return f"{prefix}-{uuid.uuid4()}"
