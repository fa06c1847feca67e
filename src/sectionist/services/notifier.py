"""Notifier collaborators for reporting operation outcomes to a UI."""

from abc import ABC, abstractmethod
from typing import Callable, List, Optional

from sectionist.models.notification import Notification, NotificationKind


class Notifier(ABC):
    """Abstract interface for delivering user-facing messages."""

    @abstractmethod
    def notify(self, kind: NotificationKind, title: str, description: str) -> None:
        """Deliver one message.

        Args:
            kind: "success", "warning" or "danger"
            title: Short headline
            description: Detail line
        """
        pass


class NullNotifier(Notifier):
    """Notifier that drops every message."""

    def notify(self, kind: NotificationKind, title: str, description: str) -> None:
        pass


class RecordingNotifier(Notifier):
    """Notifier that keeps every message in memory, oldest first."""

    def __init__(self) -> None:
        self.notifications: List[Notification] = []

    def notify(self, kind: NotificationKind, title: str, description: str) -> None:
        self.notifications.append(
            Notification(kind=kind, title=title, description=description)
        )

    @property
    def last(self) -> Optional[Notification]:
        """Most recent notification, or None if nothing was reported."""
        return self.notifications[-1] if self.notifications else None

    def kinds(self) -> List[str]:
        return [n.kind for n in self.notifications]

    def clear(self) -> None:
        self.notifications.clear()


class CallbackNotifier(Notifier):
    """Adapter for UIs that expose a plain ``notify(kind, title, description)`` callable."""

    def __init__(self, callback: Callable[[NotificationKind, str, str], None]):
        self._callback = callback

    def notify(self, kind: NotificationKind, title: str, description: str) -> None:
        self._callback(kind, title, description)
