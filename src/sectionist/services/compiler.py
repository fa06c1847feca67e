"""Compiler: derive the final markdown document from containers and paragraphs."""

from typing import Sequence

import structlog

from sectionist.models.container import Container
from sectionist.models.paragraph import Paragraph
from sectionist.services.container_registry import sort_containers
from sectionist.services.paragraph_pool import get_paragraphs_by_container

logger = structlog.get_logger()


def generate_completed_content(
    containers: Sequence[Container],
    paragraphs: Sequence[Paragraph],
) -> str:
    """
    Compile the document.

    Containers are visited in order; each one with at least one assigned
    paragraph contributes a ``## <name>`` heading followed by its paragraphs'
    trimmed content, in order. Blank paragraphs add no block. Blocks are
    separated by one blank line and the result is trimmed. Containers without
    assigned paragraphs contribute nothing.

    Pure: no input is modified and equal inputs give equal output.

    Example:
        >>> generate_completed_content([intro, body], [hello_in_body])
        '## Body\\n\\nHello'
    """
    blocks = []
    sections = 0
    for container in sort_containers(containers):
        in_container = get_paragraphs_by_container(paragraphs, container.id)
        if not in_container:
            continue

        sections += 1
        blocks.append(f"## {container.name}")
        blocks.extend(p.content.strip() for p in in_container if p.content.strip())

    document = "\n\n".join(blocks).strip()

    logger.debug(
        "document_compiled",
        containers=len(containers),
        paragraphs=len(paragraphs),
        sections=sections,
        length=len(document),
    )
    return document
