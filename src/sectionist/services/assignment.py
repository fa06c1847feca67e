"""Assignment engine: putting pool paragraphs into containers.

Assignment copies. The selected paragraphs stay in the pool untouched and
each copy records its source in ``original_id``, so one authored paragraph
can be reused in several containers. The pool therefore grows with every
assignment.

Empty-content policy: a selection containing any blank paragraph is rejected
as a whole (EMPTY_CONTENT_REJECTED). Blank paragraphs are never copied.

Relocation (move_paragraph_to_container) is the only operation that moves a
paragraph itself, and it only applies to paragraphs already in a container.
Unassigned paragraphs reach a container by being copied, never moved.
"""

from datetime import datetime
from typing import Callable, List, Optional, Sequence

import structlog

from sectionist.models.container import Container
from sectionist.models.paragraph import Paragraph
from sectionist.models.results import AssignmentResult, FailureReason, MoveResult
from sectionist.services.container_registry import get_container
from sectionist.services.paragraph_pool import get_paragraph, last_order_in_container
from sectionist.utils.ids import generate_paragraph_id

logger = structlog.get_logger()


def add_to_container(
    paragraphs: Sequence[Paragraph],
    containers: Sequence[Container],
    selected_paragraph_ids: Sequence[str],
    target_container_id: Optional[str],
    id_factory: Callable[[], str] = generate_paragraph_id,
    now: Optional[datetime] = None,
) -> AssignmentResult:
    """
    Copy the selected paragraphs to the end of a container.

    Copies are made in selection order. The first copy gets the container's
    highest order + 1, the next one + 2, and so on. Selected ids that are
    not in the pool are ignored; duplicates in the selection are copied once.

    Args:
        paragraphs: Current paragraph collection
        containers: Current container registry
        selected_paragraph_ids: Paragraphs to copy, in selection order
        target_container_id: Destination container
        id_factory: Source of fresh paragraph ids
        now: Timestamp for the copies

    Returns:
        AssignmentResult; on failure ``paragraphs`` is the unchanged input
    """
    unchanged = list(paragraphs)

    selected: List[Paragraph] = []
    seen = set()
    for paragraph_id in selected_paragraph_ids:
        if paragraph_id in seen:
            continue
        seen.add(paragraph_id)
        paragraph = get_paragraph(paragraphs, paragraph_id)
        if paragraph is not None:
            selected.append(paragraph)

    if not selected:
        logger.warning("assignment_rejected", reason=FailureReason.EMPTY_SELECTION.value)
        return AssignmentResult(paragraphs=unchanged, failure=FailureReason.EMPTY_SELECTION)

    target = get_container(containers, (target_container_id or "").strip())
    if target is None:
        logger.warning(
            "assignment_rejected",
            reason=FailureReason.NO_TARGET.value,
            target_container_id=target_container_id,
        )
        return AssignmentResult(paragraphs=unchanged, failure=FailureReason.NO_TARGET)

    empty_ids = [p.id for p in selected if not p.has_content]
    if empty_ids:
        logger.warning(
            "assignment_rejected",
            reason=FailureReason.EMPTY_CONTENT_REJECTED.value,
            empty_paragraph_ids=empty_ids,
        )
        return AssignmentResult(
            paragraphs=unchanged,
            failure=FailureReason.EMPTY_CONTENT_REJECTED,
            empty_paragraph_ids=empty_ids,
        )

    last_order = last_order_in_container(paragraphs, target.id)
    timestamp = now or datetime.now().astimezone()

    copies = [
        Paragraph(
            id=id_factory(),
            original_id=source.id,
            content=source.content,
            container_id=target.id,
            order=last_order + 1 + position,
            created_at=timestamp,
            updated_at=timestamp,
        )
        for position, source in enumerate(selected)
    ]

    logger.info(
        "paragraphs_assigned",
        container_id=target.id,
        container_name=target.name,
        count=len(copies),
        original_ids=[c.original_id for c in copies],
        first_order=last_order + 1,
    )
    return AssignmentResult(
        paragraphs=[*paragraphs, *copies],
        added=copies,
        container_name=target.name,
    )


def move_paragraph_to_container(
    paragraphs: Sequence[Paragraph],
    containers: Sequence[Container],
    paragraph_id: str,
    target_container_id: Optional[str],
) -> MoveResult:
    """
    Relocate an assigned paragraph to another container or back to the pool.

    Unlike add_to_container this moves the paragraph itself: its id is kept,
    its container_id changes and it is placed after the last paragraph of
    the target container. Moving to the pool (target None) keeps the old
    order value, which the pool does not use for sequencing.

    Pool paragraphs are not relocated: they only enter containers through
    add_to_container, which copies them and leaves the source in the pool.
    Relocating one is rejected with NOT_ASSIGNED.

    Returns:
        MoveResult; on failure ``paragraphs`` is the unchanged input
    """
    unchanged = list(paragraphs)

    paragraph = get_paragraph(paragraphs, paragraph_id)
    if paragraph is None:
        logger.warning("relocation_rejected", reason=FailureReason.PARAGRAPH_NOT_FOUND.value, paragraph_id=paragraph_id)
        return MoveResult(paragraphs=unchanged, failure=FailureReason.PARAGRAPH_NOT_FOUND)

    if paragraph.container_id is None:
        logger.warning("relocation_rejected", reason=FailureReason.NOT_ASSIGNED.value, paragraph_id=paragraph_id)
        return MoveResult(paragraphs=unchanged, failure=FailureReason.NOT_ASSIGNED)

    if target_container_id is None:
        moved = paragraph.model_copy(update={"container_id": None})
        logger.info("paragraph_unassigned", paragraph_id=paragraph_id, from_container=paragraph.container_id)
        return MoveResult(
            paragraphs=[moved if p.id == paragraph_id else p for p in paragraphs],
            moved=moved,
        )

    target = get_container(containers, target_container_id)
    if target is None:
        logger.warning(
            "relocation_rejected",
            reason=FailureReason.CONTAINER_NOT_FOUND.value,
            target_container_id=target_container_id,
        )
        return MoveResult(paragraphs=unchanged, failure=FailureReason.CONTAINER_NOT_FOUND)

    if target.id == paragraph.container_id:
        logger.warning("relocation_rejected", reason=FailureReason.SAME_CONTAINER.value, paragraph_id=paragraph_id)
        return MoveResult(paragraphs=unchanged, container_name=target.name, failure=FailureReason.SAME_CONTAINER)

    moved = paragraph.model_copy(
        update={
            "container_id": target.id,
            "order": last_order_in_container(paragraphs, target.id) + 1,
        }
    )
    logger.info(
        "paragraph_relocated",
        paragraph_id=paragraph_id,
        from_container=paragraph.container_id,
        to_container=target.id,
        order=moved.order,
    )
    return MoveResult(
        paragraphs=[moved if p.id == paragraph_id else p for p in paragraphs],
        moved=moved,
        container_name=target.name,
    )
