"""Modular editor: the structure → writing → completed workflow.

``ModularEditor`` is what a UI talks to. Each public method takes a snapshot
of the store, runs one of the pure composition functions on it, checks the
invariants of the result and commits it with a single ``store.commit`` call.
Rejected input is reported through the notifier as a warning and commits
nothing.

State machine::

    structure ──complete_structure──► writing ──complete──► completed
        ▲                               │
        └────────go_to_structure────────┘

    reset() returns to an empty structure step from anywhere.
"""

from datetime import datetime
from typing import Callable, Dict, List, Optional, Sequence

import structlog

from sectionist.models.container import Container
from sectionist.models.editor_state import EditorSession, SubStep
from sectionist.models.paragraph import Paragraph
from sectionist.models.move_record import ContainerMoveRecord
from sectionist.models.results import ContainerMoveStats, ContainerStats, FailureReason, OperationOutcome
from sectionist.services import assignment, container_registry, move_history, paragraph_pool, reordering
from sectionist.services.compiler import generate_completed_content
from sectionist.services.move_history import DEFAULT_RECENT_LIMIT
from sectionist.services.notifier import Notifier, NullNotifier
from sectionist.services.reordering import Direction
from sectionist.services.store import EditorStore
from sectionist.services.validator import check_invariants, validate_editor_state
from sectionist.utils.ids import generate_container_id, generate_move_id, generate_paragraph_id

logger = structlog.get_logger()


# (title, description) for each soft failure that is reported to the user
FAILURE_MESSAGES: Dict[FailureReason, tuple] = {
    FailureReason.TOO_FEW_SECTIONS: (
        "Structure incomplete",
        f"Enter at least {container_registry.MIN_SECTIONS} section names.",
    ),
    FailureReason.EMPTY_SELECTION: (
        "No paragraphs selected",
        "Select the paragraphs to add to a container.",
    ),
    FailureReason.NO_TARGET: (
        "No container selected",
        "Choose the container to add the paragraphs to.",
    ),
    FailureReason.EMPTY_CONTENT_REJECTED: (
        "Empty paragraphs selected",
        "Paragraphs without content cannot be added to a container.",
    ),
    FailureReason.INCOMPLETE_STATE: (
        "Editor incomplete",
        "At least one container with an assigned, non-empty paragraph is required.",
    ),
    FailureReason.PARAGRAPH_NOT_FOUND: (
        "Paragraph not found",
        "The paragraph to change could not be found.",
    ),
    FailureReason.NOT_ASSIGNED: (
        "Paragraph not in a container",
        "Only paragraphs already in a container can be moved.",
    ),
    FailureReason.CONTAINER_NOT_FOUND: (
        "Container not found",
        "The selected container could not be found.",
    ),
    FailureReason.SAME_CONTAINER: (
        "Already in this container",
        "The paragraph is already in the selected container.",
    ),
    FailureReason.EDITOR_COMPLETED: (
        "Editor completed",
        "The post is complete. Reset the editor to make further changes.",
    ),
    FailureReason.MOVE_RECORD_NOT_FOUND: (
        "Move record not found",
        "The move history has no such record.",
    ),
}


class ModularEditor:
    """Editor facade over an EditorStore and a Notifier.

    Args:
        store: Where containers, paragraphs and session state live
        notifier: Receives user-facing outcomes (defaults to NullNotifier)
        paragraph_id_factory: Source of paragraph ids
        container_id_factory: Source of container ids
        move_id_factory: Source of relocation record ids
        clock: Returns the timestamp used for created_at/updated_at
    """

    def __init__(
        self,
        store: EditorStore,
        notifier: Optional[Notifier] = None,
        paragraph_id_factory: Callable[[], str] = generate_paragraph_id,
        container_id_factory: Callable[[], str] = generate_container_id,
        move_id_factory: Callable[[], str] = generate_move_id,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.store = store
        self.notifier = notifier or NullNotifier()
        self._paragraph_id_factory = paragraph_id_factory
        self._container_id_factory = container_id_factory
        self._move_id_factory = move_id_factory
        self._clock = clock or (lambda: datetime.now().astimezone())

    @property
    def containers(self) -> List[Container]:
        return container_registry.sort_containers(self.store.get_containers())

    @property
    def paragraphs(self) -> List[Paragraph]:
        return self.store.get_paragraphs()

    @property
    def session(self) -> EditorSession:
        return self.store.get_session()

    def unassigned_paragraphs(self) -> List[Paragraph]:
        return paragraph_pool.get_unassigned_paragraphs(self.store.get_paragraphs())

    def paragraphs_in(self, container_id: str) -> List[Paragraph]:
        return paragraph_pool.get_paragraphs_by_container(self.store.get_paragraphs(), container_id)

    def stats(self) -> Dict[str, ContainerStats]:
        return container_registry.container_paragraph_stats(
            self.store.get_containers(), self.store.get_paragraphs()
        )

    @property
    def move_records(self) -> List[ContainerMoveRecord]:
        return self.store.get_move_history()

    def moves_for(self, paragraph_id: str) -> List[ContainerMoveRecord]:
        return move_history.get_moves_by_paragraph(self.store.get_move_history(), paragraph_id)

    def recent_moves(self, limit: int = DEFAULT_RECENT_LIMIT) -> List[ContainerMoveRecord]:
        return move_history.get_recent_moves(self.store.get_move_history(), limit)

    def move_stats(self) -> ContainerMoveStats:
        return move_history.move_stats(self.store.get_move_history())

    def preview(self) -> str:
        """Compile the current state without changing anything."""
        return generate_completed_content(self.store.get_containers(), self.store.get_paragraphs())

    def complete_structure(self, names: Sequence[str]) -> OperationOutcome:
        """
        Create the container set from section names and move to writing.

        When the structure is redone after go_to_structure, the previous
        containers are replaced and paragraphs assigned to them go back to
        the unassigned pool.
        """
        if (blocked := self._guard("structure")) is not None:
            return blocked

        result = container_registry.create_containers_from_inputs(names, self._container_id_factory)
        if not result.success:
            return self._reject(result.failure)

        state = self.store.snapshot()
        old_ids = {c.id for c in state.containers}
        paragraphs = [
            p.model_copy(update={"container_id": None}) if p.container_id in old_ids else p
            for p in state.paragraphs
        ]

        session = state.session
        session.sub_step = "writing"
        session.target_container_id = None

        self._commit(containers=result.containers, paragraphs=paragraphs, session=session)
        logger.info(
            "structure_completed",
            containers=len(result.containers),
            replaced=len(old_ids),
        )
        self.notifier.notify(
            "success",
            "Structure set",
            f"{len(result.containers)} sections created.",
        )
        return OperationOutcome(success=True, data=result.containers)

    def go_to_structure(self) -> OperationOutcome:
        """Return from writing to the structure step."""
        if (blocked := self._guard("writing")) is not None:
            return blocked

        session = self.store.get_session()
        session.sub_step = "structure"
        self._commit(session=session)
        logger.info("step_changed", sub_step="structure")
        return OperationOutcome(success=True)

    def add_paragraph(self) -> OperationOutcome:
        """Add an empty paragraph to the pool and make it the active one."""
        if (blocked := self._guard("writing")) is not None:
            return blocked

        state = self.store.snapshot()
        paragraphs, paragraph = paragraph_pool.add_paragraph(
            state.paragraphs, self._paragraph_id_factory, self._clock()
        )
        state.session.active_paragraph_id = paragraph.id

        self._commit(paragraphs=paragraphs, session=state.session)
        return OperationOutcome(success=True, data=paragraph)

    def update_paragraph_content(self, paragraph_id: str, content: str) -> OperationOutcome:
        """Replace a paragraph's content. Identical content is ignored silently."""
        if (blocked := self._guard("writing")) is not None:
            return blocked

        current = self.store.get_paragraphs()
        if paragraph_pool.get_paragraph(current, paragraph_id) is None:
            return self._reject(FailureReason.PARAGRAPH_NOT_FOUND)

        paragraphs, changed = paragraph_pool.update_paragraph_content(
            current, paragraph_id, content, self._clock()
        )
        if not changed:
            return OperationOutcome(success=False)

        self._commit(paragraphs=paragraphs)
        return OperationOutcome(success=True, data=paragraph_pool.get_paragraph(paragraphs, paragraph_id))

    def delete_paragraph(self, paragraph_id: str) -> OperationOutcome:
        """Delete a paragraph and drop it from the selection."""
        if (blocked := self._guard("writing")) is not None:
            return blocked

        state = self.store.snapshot()
        paragraphs, removed = paragraph_pool.delete_paragraph(state.paragraphs, paragraph_id)
        if not removed:
            return self._reject(FailureReason.PARAGRAPH_NOT_FOUND)

        session = state.session
        session.selected_paragraph_ids = [i for i in session.selected_paragraph_ids if i != paragraph_id]
        if session.active_paragraph_id == paragraph_id:
            session.active_paragraph_id = None

        self._commit(paragraphs=paragraphs, session=session)
        self.notifier.notify("success", "Paragraph deleted", "The selected paragraph was deleted.")
        return OperationOutcome(success=True)

    def toggle_paragraph_selection(self, paragraph_id: str) -> OperationOutcome:
        """Add a paragraph to the selection, or remove it if already selected."""
        if (blocked := self._guard("writing")) is not None:
            return blocked

        state = self.store.snapshot()
        if paragraph_pool.get_paragraph(state.paragraphs, paragraph_id) is None:
            return self._reject(FailureReason.PARAGRAPH_NOT_FOUND)

        selected = state.session.selected_paragraph_ids
        if paragraph_id in selected:
            selected.remove(paragraph_id)
        else:
            selected.append(paragraph_id)

        self._commit(session=state.session)
        logger.debug("selection_changed", selected=list(selected))
        return OperationOutcome(success=True, data=list(selected))

    def set_target_container(self, container_id: Optional[str]) -> OperationOutcome:
        """Choose (or clear, with None) the container for the next assignment."""
        if (blocked := self._guard("writing")) is not None:
            return blocked

        if container_id is not None and container_registry.get_container(
            self.store.get_containers(), container_id
        ) is None:
            return self._reject(FailureReason.CONTAINER_NOT_FOUND)

        session = self.store.get_session()
        session.target_container_id = container_id
        self._commit(session=session)
        return OperationOutcome(success=True)

    def activate_paragraph(self, paragraph_id: str) -> OperationOutcome:
        """Mark a paragraph as the one being edited."""
        if (blocked := self._guard("writing")) is not None:
            return blocked

        if paragraph_pool.get_paragraph(self.store.get_paragraphs(), paragraph_id) is None:
            return self._reject(FailureReason.PARAGRAPH_NOT_FOUND)

        session = self.store.get_session()
        session.active_paragraph_id = paragraph_id
        self._commit(session=session)
        return OperationOutcome(success=True)

    def clear_selection(self) -> OperationOutcome:
        """Reset the selected paragraphs and the target container."""
        if (blocked := self._guard("writing")) is not None:
            return blocked

        session = self.store.get_session()
        session.selected_paragraph_ids = []
        session.target_container_id = None
        self._commit(session=session)
        return OperationOutcome(success=True)

    def add_to_container(
        self,
        selected_paragraph_ids: Optional[Sequence[str]] = None,
        target_container_id: Optional[str] = None,
    ) -> OperationOutcome:
        """
        Copy paragraphs into a container.

        Arguments left as None fall back to the session's current selection
        and target. On success the selection and target are cleared.
        """
        if (blocked := self._guard("writing")) is not None:
            return blocked

        state = self.store.snapshot()
        session = state.session
        if selected_paragraph_ids is None:
            selected_paragraph_ids = session.selected_paragraph_ids
        if target_container_id is None:
            target_container_id = session.target_container_id

        result = assignment.add_to_container(
            state.paragraphs,
            state.containers,
            list(selected_paragraph_ids),
            target_container_id,
            self._paragraph_id_factory,
            self._clock(),
        )
        if not result.success:
            return self._reject(result.failure)

        session.selected_paragraph_ids = []
        session.target_container_id = None

        self._commit(paragraphs=result.paragraphs, session=session)
        self.notifier.notify(
            "success",
            "Paragraphs added",
            f"{len(result.added)} paragraph(s) added to {result.container_name}.",
        )
        return OperationOutcome(success=True, data=result.added)

    def move_paragraph_in_container(self, paragraph_id: str, direction: Direction) -> OperationOutcome:
        """Move an assigned paragraph one position up or down. Boundaries are silent no-ops."""
        if (blocked := self._guard("writing")) is not None:
            return blocked

        result = reordering.move_paragraph_in_container(self.store.get_paragraphs(), paragraph_id, direction)
        if result.moved:
            self._commit(paragraphs=result.paragraphs)
        return OperationOutcome(success=result.moved, failure=result.failure)

    def move_paragraph_to_container(
        self,
        paragraph_id: str,
        target_container_id: Optional[str],
        reason: Optional[str] = None,
    ) -> OperationOutcome:
        """
        Relocate an assigned paragraph to another container, or to the pool with None.

        Each successful relocation is appended to the move history.
        """
        if (blocked := self._guard("writing")) is not None:
            return blocked

        state = self.store.snapshot()
        result = assignment.move_paragraph_to_container(
            state.paragraphs, state.containers, paragraph_id, target_container_id
        )
        if not result.success:
            return self._reject(result.failure)

        source = paragraph_pool.get_paragraph(state.paragraphs, paragraph_id)
        history, _ = move_history.record_move(
            state.move_history,
            paragraph_id,
            source.container_id,
            result.moved.container_id,
            self._move_id_factory,
            self._clock(),
            reason,
        )

        self._commit(paragraphs=result.paragraphs, move_history=history)
        if result.container_name is None:
            description = "The paragraph was returned to the unassigned pool."
        else:
            description = f"The paragraph was moved to {result.container_name}."
        self.notifier.notify("success", "Paragraph moved", description)
        return OperationOutcome(success=True, data=result.moved)

    def clear_move_history(self) -> OperationOutcome:
        """Drop every relocation record."""
        if (blocked := self._guard()) is not None:
            return blocked

        self._commit(move_history=[])
        logger.info("move_history_cleared")
        return OperationOutcome(success=True)

    def remove_move_record(self, record_id: str) -> OperationOutcome:
        """Drop one relocation record."""
        if (blocked := self._guard()) is not None:
            return blocked

        history, removed = move_history.remove_move_record(self.store.get_move_history(), record_id)
        if not removed:
            return self._reject(FailureReason.MOVE_RECORD_NOT_FOUND)

        self._commit(move_history=history)
        return OperationOutcome(success=True)

    def complete(self) -> OperationOutcome:
        """Compile the document and enter the completed state if it passes the gate."""
        if (blocked := self._guard("writing")) is not None:
            return blocked

        state = self.store.snapshot()
        content = generate_completed_content(state.containers, state.paragraphs)
        if not validate_editor_state(state.containers, state.paragraphs, content, True):
            return self._reject(FailureReason.INCOMPLETE_STATE)

        session = state.session
        session.is_completed = True
        session.completed_content = content
        session.selected_paragraph_ids = []
        session.target_container_id = None

        self._commit(session=session)
        logger.info("editor_completed", length=len(content))
        self.notifier.notify("success", "Editor completed", "The modular post is complete!")
        return OperationOutcome(success=True, data=content)

    def reset(self) -> OperationOutcome:
        """Clear everything and return to an empty structure step."""
        self.store.commit(containers=[], paragraphs=[], session=EditorSession(), move_history=[])
        logger.info("editor_reset")
        return OperationOutcome(success=True)

    def _guard(self, required_step: Optional[SubStep] = None) -> Optional[OperationOutcome]:
        """Reject the operation after completion, or outside required_step when given."""
        session = self.store.get_session()
        if session.is_completed:
            return self._reject(FailureReason.EDITOR_COMPLETED)
        if required_step is not None and session.sub_step != required_step:
            logger.warning(
                "operation_rejected",
                reason=FailureReason.WRONG_STEP.value,
                required_step=required_step,
                current_step=session.sub_step,
            )
            self.notifier.notify(
                "warning",
                "Not available",
                f"This action is only available in the {required_step} step.",
            )
            return OperationOutcome(success=False, failure=FailureReason.WRONG_STEP)
        return None

    def _reject(self, reason: FailureReason) -> OperationOutcome:
        title, description = FAILURE_MESSAGES[reason]
        logger.warning("operation_rejected", reason=reason.value)
        self.notifier.notify("warning", title, description)
        return OperationOutcome(success=False, failure=reason)

    def _commit(
        self,
        containers: Optional[List[Container]] = None,
        paragraphs: Optional[List[Paragraph]] = None,
        session: Optional[EditorSession] = None,
        move_history: Optional[List[ContainerMoveRecord]] = None,
    ) -> None:
        check_invariants(
            containers if containers is not None else self.store.get_containers(),
            paragraphs if paragraphs is not None else self.store.get_paragraphs(),
        )
        self.store.commit(
            containers=containers,
            paragraphs=paragraphs,
            session=session,
            move_history=move_history,
        )
        logger.debug(
            "state_committed",
            containers=containers is not None,
            paragraphs=paragraphs is not None,
            session=session is not None,
            move_history=move_history is not None,
        )
