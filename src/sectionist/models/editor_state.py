"""Editor session and persisted editor state models."""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from sectionist.models.container import Container
from sectionist.models.move_record import ContainerMoveRecord
from sectionist.models.paragraph import Paragraph


SubStep = Literal["structure", "writing"]

STATE_VERSION = 1


class EditorSession(BaseModel):
    """Editor-level step, completion and selection state."""

    sub_step: SubStep = Field(
        default="structure",
        description="Visible editor step: defining containers or writing paragraphs"
    )

    is_completed: bool = Field(
        default=False,
        description="Terminal flag, set only after the completion gate passes"
    )

    completed_content: str = Field(
        default="",
        description="Compiled document snapshot taken at completion"
    )

    selected_paragraph_ids: List[str] = Field(
        default_factory=list,
        description="Paragraphs chosen for the next assignment, in selection order"
    )

    target_container_id: Optional[str] = Field(
        default=None,
        description="Container chosen as the next assignment target"
    )

    active_paragraph_id: Optional[str] = Field(
        default=None,
        description="Paragraph currently focused for editing"
    )

    model_config = {"frozen": False}


class EditorState(BaseModel):
    """Everything a store persists for one editor."""

    version: int = Field(default=STATE_VERSION, description="On-disk format version")
    containers: List[Container] = Field(default_factory=list)
    paragraphs: List[Paragraph] = Field(default_factory=list)
    session: EditorSession = Field(default_factory=EditorSession)
    move_history: List[ContainerMoveRecord] = Field(
        default_factory=list,
        description="Relocations in the order they happened"
    )
