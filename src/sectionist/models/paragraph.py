"""Paragraph model: an independently authored block of content."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class Paragraph(BaseModel):
    """A content block, either in the unassigned pool or in a container."""

    id: str = Field(
        ...,
        min_length=1,
        description="Opaque unique identifier, stable across reordering"
    )

    content: str = Field(
        default="",
        description="Opaque content string (may be empty while authoring)"
    )

    container_id: Optional[str] = Field(
        default=None,
        description="Owning container id, or None for the unassigned pool"
    )

    order: int = Field(
        ...,
        description="Sort key relative to paragraphs sharing the same container_id"
    )

    created_at: datetime = Field(
        ...,
        description="Creation timestamp"
    )

    updated_at: datetime = Field(
        ...,
        description="Last content edit timestamp"
    )

    original_id: Optional[str] = Field(
        default=None,
        description="Source paragraph id when this paragraph is a copy made by assignment"
    )

    @property
    def is_assigned(self) -> bool:
        """Whether the paragraph belongs to a container."""
        return self.container_id is not None

    @property
    def has_content(self) -> bool:
        """Whether the paragraph has non-whitespace content."""
        return bool(self.content.strip())

    model_config = {"frozen": False}
