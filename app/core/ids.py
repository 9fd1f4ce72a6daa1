from uuid import uuid4


def new_id(prefix: str) -> str:
    """Opaque string identifier, e.g. ``task_3f9a0c1b2d4e``."""
    return f"{prefix}_{uuid4().hex[:12]}"
