"""Completion gate and invariant checks for the composition model."""

from collections import Counter
from typing import Dict, List, Sequence

import structlog

from sectionist.models.container import Container
from sectionist.models.paragraph import Paragraph
from sectionist.services.exceptions import InvariantViolationError

logger = structlog.get_logger()


def validate_editor_state(
    containers: Sequence[Container],
    paragraphs: Sequence[Paragraph],
    completed_content: str,
    is_completed: bool,
) -> bool:
    """
    Decide whether the editor has enough content to be completed.

    Fails when there are no containers, when no paragraph is assigned, or
    when every assigned paragraph is blank.

    Args:
        containers: Current containers
        paragraphs: Current paragraphs (assigned and unassigned)
        completed_content: Compiled document (logged, not judged)
        is_completed: Requested completion flag (logged, not judged)

    Returns:
        True if the editor may transition to the completed state
    """
    if not containers:
        logger.info("editor_state_invalid", reason="no_containers")
        return False

    assigned = [p for p in paragraphs if p.container_id is not None]
    if not assigned:
        logger.info("editor_state_invalid", reason="no_assigned_paragraphs")
        return False

    with_content = [p for p in assigned if p.content.strip()]
    if not with_content:
        logger.info("editor_state_invalid", reason="no_assigned_content")
        return False

    logger.info(
        "editor_state_valid",
        containers=len(containers),
        assigned_paragraphs=len(assigned),
        paragraphs_with_content=len(with_content),
        completed_content_length=len(completed_content),
        is_completed=is_completed,
    )
    return True


def check_invariants(containers: Sequence[Container], paragraphs: Sequence[Paragraph]) -> None:
    """
    Assert the structural invariants of the container/paragraph collections.

    - container ids and orders are unique
    - paragraph ids are unique
    - every container_id on a paragraph names an existing container
    - paragraph orders are unique within each container

    Raises:
        InvariantViolationError: On the first broken rule found
    """
    _require_unique("unique_container_id", [c.id for c in containers], "container id")
    _require_unique("unique_container_order", [c.order for c in containers], "container order")
    _require_unique("unique_paragraph_id", [p.id for p in paragraphs], "paragraph id")

    container_ids = {c.id for c in containers}
    orders_by_container: Dict[str, List[int]] = {}
    for paragraph in paragraphs:
        if paragraph.container_id is None:
            continue
        if paragraph.container_id not in container_ids:
            logger.error(
                "invariant_violation",
                invariant="container_reference",
                paragraph_id=paragraph.id,
                container_id=paragraph.container_id,
            )
            raise InvariantViolationError(
                "container_reference",
                f"Paragraph {paragraph.id} references missing container {paragraph.container_id}",
            )
        orders_by_container.setdefault(paragraph.container_id, []).append(paragraph.order)

    for container_id, orders in orders_by_container.items():
        _require_unique(
            "unique_paragraph_order",
            orders,
            f"paragraph order in container {container_id}",
        )


def _require_unique(invariant: str, values: List, label: str) -> None:
    duplicates = [value for value, count in Counter(values).items() if count > 1]
    if duplicates:
        logger.error("invariant_violation", invariant=invariant, duplicates=duplicates)
        raise InvariantViolationError(invariant, f"Duplicate {label}: {duplicates}")
