import uuid


def generate_id() -> str:
    """Fresh UUID-v4 string for synthesized variant and size ids."""
    return str(uuid.uuid4())
