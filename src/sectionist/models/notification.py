"""Notification model for user-facing operation outcomes."""

from typing import Literal

from pydantic import BaseModel, Field


NotificationKind = Literal["success", "warning", "danger"]


class Notification(BaseModel):
    """A single outcome message delivered through a Notifier."""

    kind: NotificationKind = Field(
        ...,
        description="Severity used by the UI to pick a colour"
    )

    title: str = Field(..., description="Short headline")

    description: str = Field(..., description="Detail line")

    model_config = {"frozen": True}
