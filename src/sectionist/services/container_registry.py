"""Container registry: the ordered, create-only set of document sections.

Containers come into existence in exactly one way, as a batch built from
the section names entered in the structure step. There is no rename,
reorder or delete operation.
"""

from typing import Callable, Dict, List, Optional, Sequence

import structlog

from sectionist.models.container import Container
from sectionist.models.paragraph import Paragraph
from sectionist.models.results import (
    ContainerCreationResult,
    ContainerStats,
    FailureReason,
    SectionValidation,
)
from sectionist.services.paragraph_pool import get_paragraphs_by_container
from sectionist.utils.ids import generate_container_id

logger = structlog.get_logger()

MIN_SECTIONS = 2


def validate_section_inputs(names: Sequence[str]) -> SectionValidation:
    """
    Trim section names, drop the empty ones and check there are enough left.

    Args:
        names: Raw names typed by the user

    Returns:
        SectionValidation with is_valid=True when at least MIN_SECTIONS remain
    """
    valid_inputs = [name.strip() for name in names if name and name.strip()]
    is_valid = len(valid_inputs) >= MIN_SECTIONS

    logger.debug(
        "section_inputs_validated",
        total=len(names),
        valid=len(valid_inputs),
        is_valid=is_valid,
    )
    return SectionValidation(is_valid=is_valid, valid_inputs=valid_inputs)


def create_containers_from_inputs(
    names: Sequence[str],
    id_factory: Callable[[], str] = generate_container_id,
) -> ContainerCreationResult:
    """
    Build the container set from the structure step's section names.

    Args:
        names: Raw section names; blank entries are ignored
        id_factory: Source of fresh container ids

    Returns:
        ContainerCreationResult with one container per valid name
        (order = position among the valid names), or a TOO_FEW_SECTIONS
        rejection with no containers
    """
    validation = validate_section_inputs(names)
    if not validation.is_valid:
        logger.warning(
            "container_creation_rejected",
            valid=len(validation.valid_inputs),
            required=MIN_SECTIONS,
        )
        return ContainerCreationResult(failure=FailureReason.TOO_FEW_SECTIONS)

    containers = [
        Container(id=id_factory(), name=name, order=index)
        for index, name in enumerate(validation.valid_inputs)
    ]

    logger.info(
        "containers_created",
        count=len(containers),
        names=[c.name for c in containers],
    )
    return ContainerCreationResult(containers=containers)


def sort_containers(containers: Sequence[Container]) -> List[Container]:
    """Return containers in ascending order."""
    return sorted(containers, key=lambda c: c.order)


def get_container(containers: Sequence[Container], container_id: Optional[str]) -> Optional[Container]:
    """Find a container by id."""
    if not container_id:
        return None
    return next((c for c in containers if c.id == container_id), None)


def container_paragraph_stats(
    containers: Sequence[Container],
    paragraphs: Sequence[Paragraph],
) -> Dict[str, ContainerStats]:
    """
    Count assigned paragraphs, and those with real content, per container.

    Returns:
        Mapping of container id to ContainerStats
    """
    stats: Dict[str, ContainerStats] = {}
    for container in sort_containers(containers):
        in_container = get_paragraphs_by_container(paragraphs, container.id)
        stats[container.id] = ContainerStats(
            count=len(in_container),
            with_content=sum(1 for p in in_container if p.has_content),
        )
    return stats


def count_assigned_paragraphs(paragraphs: Sequence[Paragraph]) -> int:
    """Number of paragraphs that belong to a container."""
    return sum(1 for p in paragraphs if p.is_assigned)


def count_paragraphs_with_content(paragraphs: Sequence[Paragraph]) -> int:
    """Number of assigned paragraphs with non-blank content."""
    return sum(1 for p in paragraphs if p.is_assigned and p.has_content)
