"""Integration tests for the sectionist CLI."""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from sectionist.cli import cli, resolve_id, short_id


@pytest.fixture
def home(tmp_path, monkeypatch):
    """Isolated home directory for config, logs and state."""
    monkeypatch.setattr(Path, "home", lambda: tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv("SECTIONIST_STORAGE_STATE_PATH", raising=False)
    monkeypatch.delenv("SECTIONIST_EXPORT_DOCUMENT_PATH", raising=False)
    return tmp_path


@pytest.fixture
def state_file(home):
    return home / "editor.json"


@pytest.fixture
def run(state_file):
    """Invoke the CLI against the test state file."""
    runner = CliRunner()

    def _run(*args, input=None):
        return runner.invoke(cli, ["--state", str(state_file), *args], input=input)
    return _run


def load_state(state_file):
    return json.loads(state_file.read_text())


def pool_ids(state_file):
    return [p["id"] for p in load_state(state_file)["paragraphs"] if p["container_id"] is None]


def container_paragraphs(state_file, name):
    state = load_state(state_file)
    container_id = next(c["id"] for c in state["containers"] if c["name"] == name)
    paragraphs = [p for p in state["paragraphs"] if p["container_id"] == container_id]
    return sorted(paragraphs, key=lambda p: p["order"])


class TestShortIds:
    """Test id abbreviation and resolution helpers."""

    def test_short_id(self):
        """Test ids are shortened to their prefix plus eight characters."""
        assert short_id("paragraph-0123456789abcdef") == "paragraph-01234567"
        assert short_id("plainid") == "plainid"

    def test_resolve_by_suffix_prefix(self):
        """Test a reference can omit the kind prefix."""
        ids = ["paragraph-3fa2aa", "paragraph-91bcbb"]

        assert resolve_id(ids, "3fa", "paragraph") == "paragraph-3fa2aa"
        assert resolve_id(ids, "paragraph-91", "paragraph") == "paragraph-91bcbb"

    def test_resolve_ambiguous(self):
        """Test an ambiguous reference is refused."""
        import click

        with pytest.raises(click.BadParameter, match="ambiguous"):
            resolve_id(["paragraph-aa1", "paragraph-aa2"], "aa", "paragraph")

    def test_resolve_missing(self):
        """Test an unknown reference is refused."""
        import click

        with pytest.raises(click.BadParameter, match="No paragraph matches"):
            resolve_id(["paragraph-aa1"], "zz", "paragraph")


class TestCLIWorkflow:
    """End-to-end runs through the CLI."""

    def test_full_workflow(self, run, state_file, home):
        """Test structure, writing, assignment, completion and export."""
        result = run("structure", "Intro", "Body", "Outro")
        assert result.exit_code == 0, result.output
        assert "Structure set: 3 sections created." in result.output
        assert "1. Intro" in result.output

        result = run("add", "-c", "Hello world")
        assert result.exit_code == 0, result.output
        assert "Added paragraph paragraph-" in result.output

        source_id = pool_ids(state_file)[0]
        result = run("assign", source_id, "--to", "body")
        assert result.exit_code == 0, result.output
        assert "1 paragraph(s) added to Body." in result.output

        result = run("preview", "--raw")
        assert result.output.strip() == "## Body\n\nHello world"

        result = run("complete")
        assert result.exit_code == 0, result.output
        assert "The modular post is complete!" in result.output
        assert "## Body\n\nHello world" in result.output

        result = run("export", str(home / "post.md"))
        assert result.exit_code == 0, result.output
        assert (home / "post.md").read_text() == "## Body\n\nHello world\n"

    def test_selection_and_target_workflow(self, run, state_file):
        """Test assigning from the saved selection and target."""
        run("structure", "Intro", "Body")
        run("add", "-c", "First")
        run("add", "-c", "Second")
        first, second = pool_ids(state_file)

        result = run("select", second, first)
        assert result.exit_code == 0, result.output
        assert result.output.strip() == f"Selected: {short_id(second)}, {short_id(first)}"

        assert run("target", "Intro").exit_code == 0

        result = run("assign")
        assert result.exit_code == 0, result.output

        contents = [p["content"] for p in container_paragraphs(state_file, "Intro")]
        assert contents == ["Second", "First"]
        assert load_state(state_file)["session"]["selected_paragraph_ids"] == []

    def test_write_from_stdin(self, run, state_file):
        """Test content can be piped in."""
        run("structure", "A", "B")
        run("add")
        paragraph_id = pool_ids(state_file)[0]

        result = run("write", paragraph_id, input="Piped text")

        assert result.exit_code == 0, result.output
        assert load_state(state_file)["paragraphs"][0]["content"] == "Piped text"

        result = run("write", paragraph_id, "Piped text")
        assert "Content unchanged." in result.output

    def test_move_and_relocate(self, run, state_file):
        """Test reordering inside a container and relocation between containers."""
        run("structure", "Intro", "Body")
        run("add", "-c", "One")
        run("add", "-c", "Two")
        run("assign", *pool_ids(state_file), "--to", "Body")
        one, two = [p["id"] for p in container_paragraphs(state_file, "Body")]

        result = run("move", two, "up")
        assert result.exit_code == 0, result.output
        assert [p["content"] for p in container_paragraphs(state_file, "Body")] == ["Two", "One"]

        result = run("move", two, "up")
        assert result.exit_code == 0
        assert "Already at the top of its container." in result.output

        result = run("relocate", one, "Intro")
        assert result.exit_code == 0, result.output
        assert [p["id"] for p in container_paragraphs(state_file, "Intro")] == [one]

        result = run("relocate", one, "--pool")
        assert result.exit_code == 0, result.output
        assert one in pool_ids(state_file)

    def test_status(self, run, state_file):
        """Test status lists sections and the pool."""
        run("structure", "Intro", "Body")
        run("add", "-c", "Unplaced text")

        result = run("status")

        assert result.exit_code == 0, result.output
        assert "Step: writing" in result.output
        assert "Sections" in result.output
        assert "Assigned: 0 (0 with content)" in result.output
        assert "Unassigned" in result.output
        assert "Unplaced text" in result.output

    def test_restructure_and_reset(self, run, state_file):
        """Test going back to structure and resetting."""
        run("structure", "Intro", "Body")

        result = run("restructure")
        assert result.exit_code == 0
        assert load_state(state_file)["session"]["sub_step"] == "structure"

        result = run("reset", "--yes")
        assert result.exit_code == 0
        assert "Editor reset." in result.output
        assert load_state(state_file)["containers"] == []

    def test_bracketed_content_printed_literally(self, run, state_file):
        """Test paragraph text that looks like console markup is shown as typed."""
        run("structure", "Intro", "Body")
        run("add", "-c", "see [/x] here")
        run("add", "-c", "[bold]not bold[/bold]")

        result = run("status")

        assert result.exit_code == 0, result.output
        assert "see [/x] here" in result.output
        assert "[bold]not bold[/bold]" in result.output

    def test_bracketed_section_name(self, run, state_file):
        """Test section names with brackets survive notifications and tables."""
        result = run("structure", "a[/b]", "Body")
        assert result.exit_code == 0, result.output
        run("add", "-c", "text")
        [source] = pool_ids(state_file)

        result = run("assign", source, "--to", "a[/b]")
        assert result.exit_code == 0, result.output
        assert "added to a[/b]." in result.output

        result = run("status")
        assert result.exit_code == 0, result.output
        assert "a[/b]" in result.output

    def test_move_pool_paragraph(self, run, state_file):
        """Test reordering an unassigned paragraph explains why nothing happened."""
        run("structure", "Intro", "Body")
        run("add", "-c", "Loose")
        [source] = pool_ids(state_file)

        result = run("move", source, "up")

        assert result.exit_code == 0, result.output
        assert "Paragraph is not in a container" in result.output

    def test_move_history(self, run, state_file):
        """Test relocations are listed, summarized, removed and cleared."""
        run("structure", "Intro", "Body")
        run("add", "-c", "One")
        run("assign", *pool_ids(state_file), "--to", "Body")
        [copy] = [p["id"] for p in container_paragraphs(state_file, "Body")]

        result = run("history")
        assert result.exit_code == 0, result.output
        assert "(no moves recorded)" in result.output

        result = run("relocate", copy, "Intro", "--reason", "opens better")
        assert result.exit_code == 0, result.output
        [record] = load_state(state_file)["move_history"]
        assert record["paragraph_id"] == copy
        assert record["reason"] == "opens better"

        result = run("history")
        assert result.exit_code == 0, result.output
        assert "Move history" in result.output
        assert "Total moves: 1" in result.output

        result = run("history", copy)
        assert result.exit_code == 0, result.output
        assert "Move history" in result.output

        result = run("history", pool_ids(state_file)[0])
        assert "(no moves recorded)" in result.output

        result = run("history", "--remove", record["id"])
        assert result.exit_code == 0, result.output
        assert "Removed move record" in result.output
        assert load_state(state_file)["move_history"] == []

        run("relocate", copy, "--pool")
        result = run("history", "--clear")
        assert result.exit_code == 0, result.output
        assert "Move history cleared." in result.output
        assert load_state(state_file)["move_history"] == []

    def test_reset_clears_move_history(self, run, state_file):
        """Test reset removes recorded relocations."""
        run("structure", "Intro", "Body")
        run("add", "-c", "One")
        run("assign", *pool_ids(state_file), "--to", "Body")
        [copy] = [p["id"] for p in container_paragraphs(state_file, "Body")]
        run("relocate", copy, "Intro")

        run("reset", "--yes")

        assert load_state(state_file)["move_history"] == []
        assert "(no moves recorded)" in run("history").output


class TestCLIErrors:
    """Test failure reporting and exit codes."""

    def test_too_few_sections(self, run):
        """Test a single section name exits with status 1."""
        result = run("structure", "Only")

        assert result.exit_code == 1
        assert "Structure incomplete" in result.output

    def test_wrong_step(self, run):
        """Test writing commands before the structure is set."""
        result = run("add")

        assert result.exit_code == 1
        assert "only available in the writing step" in result.output

    def test_assign_blank_paragraph(self, run, state_file):
        """Test blank paragraphs cannot be assigned."""
        run("structure", "Intro", "Body")
        run("add")

        result = run("assign", pool_ids(state_file)[0], "--to", "Intro")

        assert result.exit_code == 1
        assert "Empty paragraphs selected" in result.output

    def test_unknown_paragraph_reference(self, run):
        """Test an unknown paragraph reference is a usage error."""
        run("structure", "Intro", "Body")

        result = run("delete", "zzzz")

        assert result.exit_code == 2
        assert "No paragraph matches 'zzzz'" in result.output

    def test_relocate_requires_one_destination(self, run, state_file):
        """Test relocate needs exactly one of CONTAINER and --pool."""
        run("structure", "Intro", "Body")

        result = run("relocate", "anything")

        assert result.exit_code == 2
        assert "Give either CONTAINER or --pool" in result.output

    def test_complete_without_content(self, run):
        """Test completion is refused when nothing is assigned."""
        run("structure", "Intro", "Body")

        result = run("complete")

        assert result.exit_code == 1
        assert "Editor incomplete" in result.output

    def test_export_before_complete(self, run):
        """Test export requires a completed editor."""
        run("structure", "Intro", "Body")

        result = run("export", "out.md")

        assert result.exit_code == 1
        assert "not completed yet" in result.output

    def test_export_without_path(self, run, state_file):
        """Test export needs a path when none is configured."""
        run("structure", "Intro", "Body")
        run("add", "-c", "Text")
        run("assign", pool_ids(state_file)[0], "--to", "Intro")
        run("complete")

        result = run("export")

        assert result.exit_code == 1
        assert "export.document_path is not configured" in result.output

    def test_export_to_configured_path(self, run, state_file, home, monkeypatch):
        """Test export falls back to SECTIONIST_EXPORT_DOCUMENT_PATH."""
        run("structure", "Intro", "Body")
        run("add", "-c", "Text")
        run("assign", pool_ids(state_file)[0], "--to", "Intro")
        run("complete")
        monkeypatch.setenv("SECTIONIST_EXPORT_DOCUMENT_PATH", str(home / "configured.md"))

        result = run("export")

        assert result.exit_code == 0, result.output
        assert (home / "configured.md").read_text() == "## Intro\n\nText\n"

    def test_corrupt_state_file(self, run, state_file):
        """Test an unreadable state file is reported cleanly."""
        state_file.write_text("{broken")

        result = run("status")

        assert result.exit_code == 1
        assert "Invalid editor state file" in result.output

    def test_invalid_config(self, home, state_file):
        """Test configuration errors are reported cleanly."""
        config_file = home / "config.yaml"
        config_file.write_text("storage: [unclosed\n")

        result = CliRunner().invoke(cli, ["--config", str(config_file), "--state", str(state_file), "status"])

        assert result.exit_code == 1
        assert "Configuration validation failed" in result.output

    def test_version(self):
        """Test --version prints the program version."""
        result = CliRunner().invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert "0.1.0" in result.output
