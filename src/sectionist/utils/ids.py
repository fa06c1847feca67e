"""Identifier generation for containers and paragraphs."""

import uuid


def generate_container_id() -> str:
    """
    Generate a unique container id.

    Example:
        >>> generate_container_id()
        "container-5f1c2a9e3b7d4c60a1e8f2d9b0c4a7e1"
    """
    return f"container-{uuid.uuid4().hex}"


def generate_paragraph_id() -> str:
    """
    Generate a unique paragraph id.

    Used both for new pool paragraphs and for copies made by assignment.

    Example:
        >>> generate_paragraph_id()
        "paragraph-0d3e8b1f6a2c4e97b5d1c8a3f7e29b04"
    """
    return f"paragraph-{uuid.uuid4().hex}"


def generate_move_id() -> str:
    """
    Generate a unique relocation record id.

    Example:
        >>> generate_move_id()
        "move-9c41e0b7d2a84f13b6e5a07c3d1f8e26"
    """
    return f"move-{uuid.uuid4().hex}"
