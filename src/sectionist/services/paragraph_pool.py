"""Paragraph pool: every authored block, assigned or not.

Functions here never mutate the list or the paragraphs they are given; they
return a new list in which changed paragraphs are replaced by updated copies
carrying the same id.
"""

from datetime import datetime
from typing import Callable, List, Optional, Sequence, Tuple

import structlog

from sectionist.models.paragraph import Paragraph
from sectionist.utils.ids import generate_paragraph_id

logger = structlog.get_logger()


def _now() -> datetime:
    return datetime.now().astimezone()


def add_paragraph(
    paragraphs: Sequence[Paragraph],
    id_factory: Callable[[], str] = generate_paragraph_id,
    now: Optional[datetime] = None,
) -> Tuple[List[Paragraph], Paragraph]:
    """
    Append a new, empty, unassigned paragraph.

    Its order is the current pool size, so orders keep increasing even after
    deletions.

    Returns:
        (new paragraph list, the new paragraph)
    """
    timestamp = now or _now()
    paragraph = Paragraph(
        id=id_factory(),
        content="",
        container_id=None,
        order=len(paragraphs),
        created_at=timestamp,
        updated_at=timestamp,
    )
    logger.info("paragraph_added", paragraph_id=paragraph.id, order=paragraph.order)
    return [*paragraphs, paragraph], paragraph


def update_paragraph_content(
    paragraphs: Sequence[Paragraph],
    paragraph_id: str,
    content: str,
    now: Optional[datetime] = None,
) -> Tuple[List[Paragraph], bool]:
    """
    Replace a paragraph's content and refresh updated_at.

    Writing identical content, or targeting an unknown id, changes nothing
    and returns the input unchanged.

    Returns:
        (paragraph list, whether anything changed)
    """
    content = content or ""
    current = get_paragraph(paragraphs, paragraph_id)
    if current is None:
        logger.warning("paragraph_update_unknown_id", paragraph_id=paragraph_id)
        return list(paragraphs), False
    if current.content == content:
        logger.debug("paragraph_update_skipped", paragraph_id=paragraph_id)
        return list(paragraphs), False

    updated = current.model_copy(update={"content": content, "updated_at": now or _now()})
    logger.info("paragraph_content_updated", paragraph_id=paragraph_id, length=len(content))
    return [updated if p.id == paragraph_id else p for p in paragraphs], True


def delete_paragraph(
    paragraphs: Sequence[Paragraph],
    paragraph_id: str,
) -> Tuple[List[Paragraph], bool]:
    """
    Remove a paragraph outright.

    Sibling orders are not renumbered. Copies whose original_id points at the
    deleted paragraph are left alone.

    Returns:
        (paragraph list, whether a paragraph was removed)
    """
    remaining = [p for p in paragraphs if p.id != paragraph_id]
    removed = len(remaining) != len(paragraphs)
    if removed:
        logger.info("paragraph_deleted", paragraph_id=paragraph_id)
    else:
        logger.warning("paragraph_delete_unknown_id", paragraph_id=paragraph_id)
    return remaining, removed


def get_paragraph(paragraphs: Sequence[Paragraph], paragraph_id: Optional[str]) -> Optional[Paragraph]:
    """Find a paragraph by id."""
    if not paragraph_id:
        return None
    return next((p for p in paragraphs if p.id == paragraph_id), None)


def get_unassigned_paragraphs(paragraphs: Sequence[Paragraph]) -> List[Paragraph]:
    """Paragraphs in the pool, in creation order."""
    return sorted(
        (p for p in paragraphs if p.container_id is None),
        key=lambda p: p.created_at,
    )


def get_paragraphs_by_container(paragraphs: Sequence[Paragraph], container_id: str) -> List[Paragraph]:
    """Paragraphs assigned to a container, in ascending order."""
    if not container_id:
        return []
    return sorted(
        (p for p in paragraphs if p.container_id == container_id),
        key=lambda p: p.order,
    )


def last_order_in_container(paragraphs: Sequence[Paragraph], container_id: str) -> int:
    """Highest order used in a container, or -1 when it is empty."""
    return max(
        (p.order for p in paragraphs if p.container_id == container_id),
        default=-1,
    )
