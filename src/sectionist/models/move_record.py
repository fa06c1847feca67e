"""Move record model: one relocation of a paragraph between containers."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ContainerMoveRecord(BaseModel):
    """An entry in the editor's relocation history."""

    id: str = Field(
        ...,
        min_length=1,
        description="Unique record identifier"
    )

    paragraph_id: str = Field(
        ...,
        description="Paragraph that was relocated"
    )

    from_container_id: Optional[str] = Field(
        default=None,
        description="Container the paragraph left"
    )

    to_container_id: Optional[str] = Field(
        default=None,
        description="Container the paragraph entered, or None for the unassigned pool"
    )

    timestamp: datetime = Field(
        ...,
        description="When the relocation was committed"
    )

    reason: Optional[str] = Field(
        default=None,
        description="Free-form note supplied by the caller"
    )

    model_config = {"frozen": True}
