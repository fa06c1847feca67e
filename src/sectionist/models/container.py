"""Container model: a named, ordered section of the compiled document."""

from pydantic import BaseModel, Field, field_validator


class Container(BaseModel):
    """A section of the final document.

    Containers are created in one batch when the structure step is
    finalised and are never renamed, reordered or deleted afterwards.
    """

    id: str = Field(
        ...,
        min_length=1,
        description="Opaque unique identifier, never reused"
    )

    name: str = Field(
        ...,
        description="Display name, used as the section heading"
    )

    order: int = Field(
        ...,
        ge=0,
        description="Position among sibling containers (0..n-1)"
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Trim the name and reject blank names."""
        name = v.strip()
        if not name:
            raise ValueError("Container name must not be empty")
        return name

    model_config = {"frozen": True}  # Create-only
