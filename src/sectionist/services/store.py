"""Store abstraction for the container and paragraph collections.

The composition algorithms only ever see plain lists. A store hands those
lists out and takes replacements back; where they live (memory, a JSON file,
a database row) is the store's business.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional

import structlog
from pydantic import ValidationError

from sectionist.models.container import Container
from sectionist.models.editor_state import EditorSession, EditorState
from sectionist.models.move_record import ContainerMoveRecord
from sectionist.models.paragraph import Paragraph
from sectionist.services.exceptions import StateFileError
from sectionist.services.file_monitor import FileMonitor
from sectionist.services.file_operations import atomic_write
from sectionist.services.validator import check_invariants

logger = structlog.get_logger()


class EditorStore(ABC):
    """Abstract get/set surface for editor state."""

    @abstractmethod
    def get_containers(self) -> List[Container]:
        """Return the container list (callers may not mutate it)."""
        pass

    @abstractmethod
    def set_containers(self, containers: List[Container]) -> None:
        pass

    @abstractmethod
    def get_paragraphs(self) -> List[Paragraph]:
        """Return the paragraph list (callers may not mutate it)."""
        pass

    @abstractmethod
    def set_paragraphs(self, paragraphs: List[Paragraph]) -> None:
        pass

    @abstractmethod
    def get_session(self) -> EditorSession:
        pass

    @abstractmethod
    def set_session(self, session: EditorSession) -> None:
        pass

    @abstractmethod
    def get_move_history(self) -> List[ContainerMoveRecord]:
        """Return the relocation history, oldest first."""
        pass

    @abstractmethod
    def set_move_history(self, history: List[ContainerMoveRecord]) -> None:
        pass

    def snapshot(self) -> EditorState:
        """Return an independent copy of the whole state."""
        return EditorState(
            containers=list(self.get_containers()),
            paragraphs=[p.model_copy() for p in self.get_paragraphs()],
            session=self.get_session().model_copy(deep=True),
            move_history=list(self.get_move_history()),
        )

    def commit(
        self,
        containers: Optional[List[Container]] = None,
        paragraphs: Optional[List[Paragraph]] = None,
        session: Optional[EditorSession] = None,
        move_history: Optional[List[ContainerMoveRecord]] = None,
    ) -> None:
        """Replace any subset of the state in one step.

        Paragraphs are written before containers: operations that replace
        the container set detach paragraphs from the old containers first,
        so no intermediate state holds a dangling container reference.
        """
        if paragraphs is not None:
            self.set_paragraphs(paragraphs)
        if containers is not None:
            self.set_containers(containers)
        if session is not None:
            self.set_session(session)
        if move_history is not None:
            self.set_move_history(move_history)


class InMemoryStore(EditorStore):
    """Store backed by a plain in-process EditorState."""

    def __init__(self, state: Optional[EditorState] = None):
        self._state = state if state is not None else EditorState()

    def get_containers(self) -> List[Container]:
        return list(self._state.containers)

    def set_containers(self, containers: List[Container]) -> None:
        self._state.containers = list(containers)

    def get_paragraphs(self) -> List[Paragraph]:
        return list(self._state.paragraphs)

    def set_paragraphs(self, paragraphs: List[Paragraph]) -> None:
        self._state.paragraphs = list(paragraphs)

    def get_session(self) -> EditorSession:
        return self._state.session.model_copy(deep=True)

    def set_session(self, session: EditorSession) -> None:
        self._state.session = session.model_copy(deep=True)

    def get_move_history(self) -> List[ContainerMoveRecord]:
        return list(self._state.move_history)

    def set_move_history(self, history: List[ContainerMoveRecord]) -> None:
        self._state.move_history = list(history)


class JsonFileStore(InMemoryStore):
    """Store persisted as one JSON document.

    Every commit rewrites the file atomically. The file is tracked with a
    FileMonitor so that a write from another process between our load and
    our save raises FileModifiedError instead of being silently lost.
    """

    def __init__(self, path: Path, file_monitor: Optional[FileMonitor] = None):
        self.path = Path(path).expanduser()
        self.file_monitor = file_monitor or FileMonitor()
        super().__init__(self._load())

    def _load(self) -> EditorState:
        if not self.path.exists():
            logger.info("state_file_missing", path=str(self.path))
            return EditorState()

        try:
            state = EditorState.model_validate_json(self.path.read_text(encoding="utf-8"))
        except ValidationError as e:
            logger.error("state_file_invalid", path=str(self.path), error=str(e))
            raise StateFileError(str(self.path), f"Invalid editor state file ({e.error_count()} errors)") from e

        check_invariants(state.containers, state.paragraphs)
        self.file_monitor.record(self.path)

        logger.info(
            "state_file_loaded",
            path=str(self.path),
            containers=len(state.containers),
            paragraphs=len(state.paragraphs),
        )
        return state

    def _save(self) -> None:
        atomic_write(self.path, self._state.model_dump_json(indent=2), self.file_monitor)
        logger.debug("state_file_saved", path=str(self.path))

    def set_containers(self, containers: List[Container]) -> None:
        super().set_containers(containers)
        self._save()

    def set_paragraphs(self, paragraphs: List[Paragraph]) -> None:
        super().set_paragraphs(paragraphs)
        self._save()

    def set_session(self, session: EditorSession) -> None:
        super().set_session(session)
        self._save()

    def set_move_history(self, history: List[ContainerMoveRecord]) -> None:
        super().set_move_history(history)
        self._save()

    def commit(
        self,
        containers: Optional[List[Container]] = None,
        paragraphs: Optional[List[Paragraph]] = None,
        session: Optional[EditorSession] = None,
        move_history: Optional[List[ContainerMoveRecord]] = None,
    ) -> None:
        """Apply all replacements in memory, then write the file once.

        If the write fails the in-memory state is rolled back.
        """
        previous = self._state.model_copy()
        if paragraphs is not None:
            InMemoryStore.set_paragraphs(self, paragraphs)
        if containers is not None:
            InMemoryStore.set_containers(self, containers)
        if session is not None:
            InMemoryStore.set_session(self, session)
        if move_history is not None:
            InMemoryStore.set_move_history(self, move_history)
        try:
            self._save()
        except Exception:
            self._state = previous
            raise
