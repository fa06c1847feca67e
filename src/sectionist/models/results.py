"""Result types returned by the composition operations.

Invalid user input never raises: operations return one of these results
with ``failure`` set and leave the collections untouched.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from sectionist.models.container import Container
from sectionist.models.paragraph import Paragraph


class FailureReason(str, Enum):
    """Soft failure modes of the editor operations."""

    EMPTY_SELECTION = "empty_selection"
    NO_TARGET = "no_target"
    EMPTY_CONTENT_REJECTED = "empty_content_rejected"
    BOUNDARY_NO_OP = "boundary_no_op"
    INCOMPLETE_STATE = "incomplete_state"
    TOO_FEW_SECTIONS = "too_few_sections"
    PARAGRAPH_NOT_FOUND = "paragraph_not_found"
    NOT_ASSIGNED = "not_assigned"
    CONTAINER_NOT_FOUND = "container_not_found"
    SAME_CONTAINER = "same_container"
    WRONG_STEP = "wrong_step"
    EDITOR_COMPLETED = "editor_completed"
    MOVE_RECORD_NOT_FOUND = "move_record_not_found"


@dataclass
class SectionValidation:
    """Outcome of validating the structure step's section names.

    Attributes:
        is_valid: Whether enough non-empty names were supplied
        valid_inputs: Trimmed, non-empty names in input order
    """
    is_valid: bool
    valid_inputs: List[str] = field(default_factory=list)


@dataclass
class ContainerCreationResult:
    """Result of creating the container set from section names."""
    containers: List[Container] = field(default_factory=list)
    failure: Optional[FailureReason] = None

    @property
    def success(self) -> bool:
        return self.failure is None


@dataclass
class AssignmentResult:
    """Result of copying selected paragraphs into a container.

    Attributes:
        paragraphs: Full paragraph collection after the operation
        added: Copies appended to the collection
        container_name: Name of the target container (None on failure)
        failure: Soft failure reason, None on success
        empty_paragraph_ids: Selected paragraphs rejected for having no content
    """
    paragraphs: List[Paragraph]
    added: List[Paragraph] = field(default_factory=list)
    container_name: Optional[str] = None
    failure: Optional[FailureReason] = None
    empty_paragraph_ids: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.failure is None


@dataclass
class MoveResult:
    """Result of relocating an assigned paragraph."""
    paragraphs: List[Paragraph]
    moved: Optional[Paragraph] = None
    container_name: Optional[str] = None
    failure: Optional[FailureReason] = None

    @property
    def success(self) -> bool:
        return self.failure is None


@dataclass
class ReorderResult:
    """Result of moving a paragraph up or down inside its container."""
    paragraphs: List[Paragraph]
    moved: bool = False
    failure: Optional[FailureReason] = None


@dataclass
class ContainerStats:
    """Paragraph counts for one container."""
    count: int
    with_content: int


@dataclass
class ContainerMoveStats:
    """Summary of the relocation history.

    Attributes:
        total_moves: Number of recorded relocations
        most_moved_paragraph: Paragraph with the most relocations (None if none)
        most_targeted_container: Container entered most often (None if none)
        average_moves_per_paragraph: total_moves over distinct paragraphs moved
    """
    total_moves: int = 0
    most_moved_paragraph: Optional[str] = None
    most_targeted_container: Optional[str] = None
    average_moves_per_paragraph: float = 0.0


@dataclass
class OperationOutcome:
    """What the editor facade reports back to its caller.

    Attributes:
        success: Whether the operation changed state
        failure: Soft failure reason if it did not
        data: Operation-specific payload (new paragraph, compiled text, ...)
    """
    success: bool
    failure: Optional[FailureReason] = None
    data: Optional[object] = None

