from uuid import uuid4


def new_reference_id(prefix: str) -> str:
    """Short caller-facing id, e.g. CONTACT-1a2b3c4d"""
    return f"{prefix}-{uuid4().hex[:8]}"
