"""Pydantic data models for sectionist."""

from sectionist.models.container import Container
from sectionist.models.paragraph import Paragraph
from sectionist.models.editor_state import EditorSession, EditorState
from sectionist.models.move_record import ContainerMoveRecord
from sectionist.models.notification import Notification

__all__ = ["Container", "Paragraph", "EditorSession", "EditorState", "Notification", "ContainerMoveRecord"]
