"""Reordering engine: moving a paragraph up or down inside its container."""

from typing import Literal, Sequence

import structlog

from sectionist.models.paragraph import Paragraph
from sectionist.models.results import FailureReason, ReorderResult
from sectionist.services.paragraph_pool import get_paragraph, get_paragraphs_by_container

logger = structlog.get_logger()

Direction = Literal["up", "down"]


def move_paragraph_in_container(
    paragraphs: Sequence[Paragraph],
    paragraph_id: str,
    direction: Direction,
) -> ReorderResult:
    """
    Swap a paragraph's order with its neighbour in the same container.

    Only the two order values are exchanged; no other paragraph changes and
    list positions are preserved. Unknown or unassigned paragraphs, and moves
    past the first or last position, are no-ops: the exact input list is
    returned.

    Args:
        paragraphs: Current paragraph collection
        paragraph_id: Paragraph to move
        direction: "up" (towards the start) or "down"

    Returns:
        ReorderResult with moved=True when a swap happened
    """
    if direction not in ("up", "down"):
        raise ValueError(f"Invalid direction: {direction!r}. Expected 'up' or 'down'")

    paragraph = get_paragraph(paragraphs, paragraph_id)
    if paragraph is None or paragraph.container_id is None:
        logger.debug("reorder_skipped", paragraph_id=paragraph_id, reason="not_assigned")
        return ReorderResult(paragraphs=paragraphs)

    siblings = get_paragraphs_by_container(paragraphs, paragraph.container_id)
    index = next(i for i, p in enumerate(siblings) if p.id == paragraph_id)

    if (direction == "up" and index == 0) or (direction == "down" and index == len(siblings) - 1):
        logger.debug("reorder_skipped", paragraph_id=paragraph_id, reason="boundary", direction=direction)
        return ReorderResult(paragraphs=paragraphs, failure=FailureReason.BOUNDARY_NO_OP)

    neighbour = siblings[index - 1] if direction == "up" else siblings[index + 1]
    swapped = {
        paragraph.id: paragraph.model_copy(update={"order": neighbour.order}),
        neighbour.id: neighbour.model_copy(update={"order": paragraph.order}),
    }

    logger.info(
        "paragraph_reordered",
        paragraph_id=paragraph_id,
        neighbour_id=neighbour.id,
        direction=direction,
        container_id=paragraph.container_id,
    )
    return ReorderResult(
        paragraphs=[swapped.get(p.id, p) for p in paragraphs],
        moved=True,
    )
