"""Relocation history: a log of paragraphs moved between containers.

Records are appended by the editor each time move_paragraph_to_container
succeeds. Like the paragraph pool, every function here leaves its input
list alone and returns a new one.
"""

from collections import Counter
from datetime import datetime
from typing import Callable, List, Optional, Sequence, Tuple

import structlog

from sectionist.models.move_record import ContainerMoveRecord
from sectionist.models.results import ContainerMoveStats
from sectionist.utils.ids import generate_move_id

logger = structlog.get_logger()

DEFAULT_RECENT_LIMIT = 10


def record_move(
    history: Sequence[ContainerMoveRecord],
    paragraph_id: str,
    from_container_id: Optional[str],
    to_container_id: Optional[str],
    id_factory: Callable[[], str] = generate_move_id,
    now: Optional[datetime] = None,
    reason: Optional[str] = None,
) -> Tuple[List[ContainerMoveRecord], ContainerMoveRecord]:
    """
    Append a relocation record.

    Returns:
        (new history, the new record)
    """
    record = ContainerMoveRecord(
        id=id_factory(),
        paragraph_id=paragraph_id,
        from_container_id=from_container_id,
        to_container_id=to_container_id,
        timestamp=now or datetime.now().astimezone(),
        reason=reason,
    )
    logger.info(
        "move_recorded",
        record_id=record.id,
        paragraph_id=paragraph_id,
        from_container=from_container_id,
        to_container=to_container_id,
    )
    return [*history, record], record


def get_moves_by_paragraph(history: Sequence[ContainerMoveRecord], paragraph_id: str) -> List[ContainerMoveRecord]:
    """Records for one paragraph, oldest first."""
    return [record for record in history if record.paragraph_id == paragraph_id]


def get_recent_moves(history: Sequence[ContainerMoveRecord], limit: int = DEFAULT_RECENT_LIMIT) -> List[ContainerMoveRecord]:
    """
    The newest records first, at most ``limit`` of them.

    A limit below 1 falls back to DEFAULT_RECENT_LIMIT. Records with equal
    timestamps keep their reverse insertion order.
    """
    if limit < 1:
        limit = DEFAULT_RECENT_LIMIT
    newest_first = sorted(
        reversed(list(history)),
        key=lambda record: record.timestamp,
        reverse=True,
    )
    return newest_first[:limit]


def move_stats(history: Sequence[ContainerMoveRecord]) -> ContainerMoveStats:
    """
    Summarize the history.

    Ties for most moved paragraph and most targeted container go to the
    candidate whose first record is the latest. Moves back to the pool count
    towards the totals but never make the pool the most targeted container.
    """
    if not history:
        return ContainerMoveStats()

    paragraph_counts = Counter(record.paragraph_id for record in history)
    target_counts = Counter(
        record.to_container_id for record in history if record.to_container_id is not None
    )

    return ContainerMoveStats(
        total_moves=len(history),
        most_moved_paragraph=_most_common(paragraph_counts),
        most_targeted_container=_most_common(target_counts),
        average_moves_per_paragraph=len(history) / len(paragraph_counts),
    )


def remove_move_record(
    history: Sequence[ContainerMoveRecord],
    record_id: str,
) -> Tuple[List[ContainerMoveRecord], bool]:
    """
    Drop one record by id.

    Returns:
        (history, whether a record was removed)
    """
    remaining = [record for record in history if record.id != record_id]
    removed = len(remaining) != len(history)
    if removed:
        logger.info("move_record_removed", record_id=record_id)
    else:
        logger.warning("move_record_unknown_id", record_id=record_id)
    return remaining, removed


def _most_common(counts: Counter) -> Optional[str]:
    best, best_count = None, 0
    for key, count in counts.items():
        if count >= best_count:
            best, best_count = key, count
    return best
