"""Shared test fixtures for all test modules."""

import itertools
from datetime import datetime, timedelta, timezone

import pytest

from sectionist.models.container import Container
from sectionist.models.paragraph import Paragraph
from sectionist.services.editor import ModularEditor
from sectionist.services.notifier import RecordingNotifier
from sectionist.services.store import InMemoryStore


BASE_TIME = datetime(2025, 1, 15, 9, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock():
    """Clock that advances one second per call, starting at BASE_TIME."""
    ticks = itertools.count()
    return lambda: BASE_TIME + timedelta(seconds=next(ticks))


@pytest.fixture
def paragraph_ids():
    """Deterministic paragraph id factory: paragraph-0001, paragraph-0002, ..."""
    counter = itertools.count(1)
    return lambda: f"paragraph-{next(counter):04d}"


@pytest.fixture
def container_ids():
    """Deterministic container id factory: container-0001, container-0002, ..."""
    counter = itertools.count(1)
    return lambda: f"container-{next(counter):04d}"


@pytest.fixture
def move_ids():
    """Deterministic relocation record id factory: move-0001, move-0002, ..."""
    counter = itertools.count(1)
    return lambda: f"move-{next(counter):04d}"


@pytest.fixture
def make_paragraph():
    """Build a Paragraph with sensible defaults."""
    def _make(paragraph_id, content="", container_id=None, order=0, seconds=0, original_id=None):
        timestamp = BASE_TIME + timedelta(seconds=seconds)
        return Paragraph(
            id=paragraph_id,
            content=content,
            container_id=container_id,
            order=order,
            created_at=timestamp,
            updated_at=timestamp,
            original_id=original_id,
        )
    return _make


@pytest.fixture
def containers():
    """Three containers: Intro (0), Body (1), Outro (2)."""
    return [
        Container(id="intro-id", name="Intro", order=0),
        Container(id="body-id", name="Body", order=1),
        Container(id="outro-id", name="Outro", order=2),
    ]


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def editor(store, notifier, paragraph_ids, container_ids, move_ids, clock):
    """Editor in the structure step with deterministic ids and time."""
    return ModularEditor(
        store,
        notifier,
        paragraph_id_factory=paragraph_ids,
        container_id_factory=container_ids,
        move_id_factory=move_ids,
        clock=clock,
    )


@pytest.fixture
def writing_editor(editor, notifier):
    """Editor in the writing step with sections Intro, Body, Outro.

    Container ids are container-0001 (Intro), container-0002 (Body) and
    container-0003 (Outro). The notifier starts empty.
    """
    outcome = editor.complete_structure(["Intro", "Body", "Outro"])
    assert outcome.success
    notifier.clear()
    return editor


@pytest.fixture
def base_time():
    return BASE_TIME
