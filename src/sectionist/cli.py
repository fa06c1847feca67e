"""CLI entry point for sectionist."""

from pathlib import Path
from typing import List, Optional, Sequence

import click
from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape
from rich.table import Table

from sectionist.models.config import Config
from sectionist.models.notification import NotificationKind
from sectionist.models.paragraph import Paragraph
from sectionist.models.results import FailureReason, OperationOutcome
from sectionist.services.container_registry import count_assigned_paragraphs, count_paragraphs_with_content
from sectionist.services.editor import ModularEditor
from sectionist.services.exceptions import FileModifiedError, InvariantViolationError, StateFileError
from sectionist.services.file_operations import export_document
from sectionist.services.notifier import Notifier
from sectionist.services.store import JsonFileStore
from sectionist.utils.logging import configure_logging, get_logger


logger = get_logger(__name__)
console = Console()

SHORT_ID_LENGTH = 8

KIND_STYLES = {
    "success": "bold green",
    "warning": "bold yellow",
    "danger": "bold red",
}


class ConsoleNotifier(Notifier):
    """Print notifications to the terminal."""

    def __init__(self, output: Console):
        self.output = output

    def notify(self, kind: NotificationKind, title: str, description: str) -> None:
        style = KIND_STYLES.get(kind, "bold")
        self.output.print(f"[{style}]{escape(title)}[/{style}]: {escape(description)}", highlight=False)


def short_id(identifier: str) -> str:
    """Abbreviate ``paragraph-<hex>`` / ``container-<hex>`` ids for display."""
    prefix, _, rest = identifier.partition("-")
    if not rest:
        return identifier[:SHORT_ID_LENGTH]
    return f"{prefix}-{rest[:SHORT_ID_LENGTH]}"


def resolve_id(identifiers: Sequence[str], reference: str, kind: str) -> str:
    """
    Resolve a possibly abbreviated id.

    A reference matches an id when it equals it, is a prefix of it, or is a
    prefix of the part after the ``kind-`` prefix (so ``3fa2`` finds
    ``paragraph-3fa2...``).

    Raises:
        click.BadParameter: If nothing or more than one id matches
    """
    if reference in identifiers:
        return reference

    matches = [
        identifier for identifier in identifiers
        if identifier.startswith(reference) or identifier.partition("-")[2].startswith(reference)
    ]
    if len(matches) == 1:
        logger.debug("id_resolved", kind=kind, reference=reference, resolved=matches[0])
        return matches[0]
    if not matches:
        raise click.BadParameter(f"No {kind} matches '{reference}'")
    raise click.BadParameter(
        f"'{reference}' is ambiguous: matches {', '.join(short_id(m) for m in matches)}"
    )


def resolve_paragraph(editor: ModularEditor, reference: str) -> str:
    return resolve_id([p.id for p in editor.paragraphs], reference, "paragraph")


def resolve_container(editor: ModularEditor, reference: str) -> str:
    """Resolve a container by exact name (case-insensitive) or by id prefix."""
    by_name = [c.id for c in editor.containers if c.name.casefold() == reference.casefold()]
    if len(by_name) == 1:
        return by_name[0]
    return resolve_id([c.id for c in editor.containers], reference, "container")


def load_config(config_path: Optional[Path] = None) -> Config:
    """
    Load configuration from ~/.config/sectionist/config.yaml (or config_path).

    Raises:
        click.ClickException: If the configuration is invalid
    """
    try:
        config = Config.load(config_path)
        logger.info("config_loaded", path=str(config_path) if config_path else "default")
        return config
    except ValueError as e:
        logger.error("config_validation_error", error=str(e))
        raise click.ClickException(f"Configuration validation failed:\n{e}")


def _finish(outcome: OperationOutcome) -> None:
    """Exit non-zero when the editor rejected the operation."""
    if outcome.failure is not None and outcome.failure != FailureReason.BOUNDARY_NO_OP:
        click.get_current_context().exit(1)


def _editor(ctx: click.Context) -> ModularEditor:
    return ctx.obj["editor"]


class SectionistGroup(click.Group):
    """Group that reports storage and invariant failures as CLI errors."""

    def invoke(self, ctx: click.Context):
        try:
            return super().invoke(ctx)
        except (FileModifiedError, StateFileError, InvariantViolationError) as e:
            logger.error("command_failed", error_type=type(e).__name__, error=str(e))
            raise click.ClickException(str(e))


@click.group(cls=SectionistGroup)
@click.version_option(version="0.1.0", prog_name="sectionist")
@click.option(
    "--state",
    "state_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Editor state file (overrides storage.state_path).",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Configuration file (default: ~/.config/sectionist/config.yaml).",
)
@click.pass_context
def cli(ctx: click.Context, state_path: Optional[Path], config_path: Optional[Path]):
    """sectionist: compose a post from ordered sections and reusable paragraphs."""
    configure_logging()

    config = load_config(config_path)
    path = state_path or Path(config.storage.state_path)

    store = JsonFileStore(path)
    ctx.obj = {
        "config": config,
        "editor": ModularEditor(store, ConsoleNotifier(console)),
    }
    logger.info("cli_started", command=ctx.invoked_subcommand, state_path=str(store.path))


@cli.command()
@click.argument("names", nargs=-1, required=True)
@click.pass_context
def structure(ctx: click.Context, names: List[str]):
    """
    Define the document sections (at least two).

    Examples:
        sectionist structure Introduction "Main points" Conclusion
    """
    editor = _editor(ctx)
    outcome = editor.complete_structure(names)
    if outcome.success:
        for container in outcome.data:
            click.echo(f"  {container.order + 1}. {container.name} ({short_id(container.id)})")
    _finish(outcome)


@cli.command()
@click.pass_context
def restructure(ctx: click.Context):
    """Go back to the structure step to define the sections again."""
    outcome = _editor(ctx).go_to_structure()
    if outcome.success:
        click.echo("Back to the structure step. Run `sectionist structure NAME...` to redefine sections.")
    _finish(outcome)


@cli.command()
@click.option("--content", "-c", default=None, help="Initial paragraph content.")
@click.pass_context
def add(ctx: click.Context, content: Optional[str]):
    """Add a new paragraph to the unassigned pool."""
    editor = _editor(ctx)
    outcome = editor.add_paragraph()
    _finish(outcome)

    paragraph: Paragraph = outcome.data
    if content:
        editor.update_paragraph_content(paragraph.id, content)
    click.echo(f"Added paragraph {short_id(paragraph.id)}")


@cli.command()
@click.argument("paragraph")
@click.argument("content", required=False)
@click.pass_context
def write(ctx: click.Context, paragraph: str, content: Optional[str]):
    """
    Replace a paragraph's content.

    Reads the content from standard input when CONTENT is omitted.
    """
    editor = _editor(ctx)
    paragraph_id = resolve_paragraph(editor, paragraph)
    if content is None:
        content = click.get_text_stream("stdin").read()

    outcome = editor.update_paragraph_content(paragraph_id, content)
    if outcome.success:
        click.echo(f"Updated paragraph {short_id(paragraph_id)}")
    elif outcome.failure is None:
        click.echo("Content unchanged.")
    _finish(outcome)


@cli.command()
@click.argument("paragraph")
@click.pass_context
def delete(ctx: click.Context, paragraph: str):
    """Delete a paragraph."""
    editor = _editor(ctx)
    _finish(editor.delete_paragraph(resolve_paragraph(editor, paragraph)))


@cli.command()
@click.argument("paragraphs", nargs=-1, required=True)
@click.pass_context
def select(ctx: click.Context, paragraphs: List[str]):
    """Toggle paragraphs in the current selection."""
    editor = _editor(ctx)
    outcome = None
    for reference in paragraphs:
        outcome = editor.toggle_paragraph_selection(resolve_paragraph(editor, reference))
        _finish(outcome)

    selected = outcome.data if outcome and outcome.success else []
    click.echo(f"Selected: {', '.join(short_id(i) for i in selected) or '(none)'}")


@cli.command()
@click.argument("container")
@click.pass_context
def target(ctx: click.Context, container: str):
    """Choose the container that `assign` copies into."""
    editor = _editor(ctx)
    container_id = resolve_container(editor, container)
    _finish(editor.set_target_container(container_id))
    click.echo(f"Target: {short_id(container_id)}")


@cli.command()
@click.argument("paragraphs", nargs=-1)
@click.option("--to", "container", default=None, help="Target container (name or id).")
@click.pass_context
def assign(ctx: click.Context, paragraphs: List[str], container: Optional[str]):
    """
    Copy paragraphs into a container.

    Without arguments, the current selection and target are used.

    Examples:
        sectionist assign --to Introduction 3fa2 91bc
    """
    editor = _editor(ctx)
    selected_ids = [resolve_paragraph(editor, p) for p in paragraphs] if paragraphs else None
    container_id = resolve_container(editor, container) if container else None

    _finish(editor.add_to_container(selected_ids, container_id))


@cli.command()
@click.argument("paragraph")
@click.argument("direction", type=click.Choice(["up", "down"]))
@click.pass_context
def move(ctx: click.Context, paragraph: str, direction: str):
    """Move an assigned paragraph up or down inside its container."""
    editor = _editor(ctx)
    outcome = editor.move_paragraph_in_container(resolve_paragraph(editor, paragraph), direction)
    if outcome.failure == FailureReason.BOUNDARY_NO_OP:
        click.echo(f"Already at the {'top' if direction == 'up' else 'bottom'} of its container.")
    elif not outcome.success and outcome.failure is None:
        click.echo("Paragraph is not in a container; only assigned paragraphs can be reordered.")
    _finish(outcome)


@cli.command()
@click.argument("paragraph")
@click.argument("container", required=False)
@click.option("--pool", is_flag=True, help="Return the paragraph to the unassigned pool.")
@click.option("--reason", default=None, help="Note stored with the move history record.")
@click.pass_context
def relocate(ctx: click.Context, paragraph: str, container: Optional[str], pool: bool, reason: Optional[str]):
    """Move an assigned paragraph to another container (or back to the pool)."""
    if bool(container) == pool:
        raise click.UsageError("Give either CONTAINER or --pool")

    editor = _editor(ctx)
    paragraph_id = resolve_paragraph(editor, paragraph)
    container_id = None if pool else resolve_container(editor, container)
    _finish(editor.move_paragraph_to_container(paragraph_id, container_id, reason))


@cli.command()
@click.argument("paragraph", required=False)
@click.option("--limit", "-n", default=10, show_default=True, help="Show at most this many records.")
@click.option("--remove", "record", default=None, help="Delete one record (id or unique prefix).")
@click.option("--clear", is_flag=True, help="Delete the whole move history.")
@click.pass_context
def history(ctx: click.Context, paragraph: Optional[str], limit: int, record: Optional[str], clear: bool):
    """
    Show the relocation history, newest first.

    Examples:
        sectionist history
        sectionist history 3fa2
        sectionist history --remove move-91bc
    """
    editor = _editor(ctx)

    if clear:
        outcome = editor.clear_move_history()
        _finish(outcome)
        click.echo("Move history cleared.")
        return

    if record:
        record_id = resolve_id([r.id for r in editor.move_records], record, "move")
        _finish(editor.remove_move_record(record_id))
        click.echo(f"Removed move record {short_id(record_id)}")
        return

    if paragraph:
        records = list(reversed(editor.moves_for(resolve_paragraph(editor, paragraph))))[:limit]
    else:
        records = editor.recent_moves(limit)

    if not records:
        click.echo("(no moves recorded)")
        return

    names = {c.id: c.name for c in editor.containers}

    def label(container_id: Optional[str]) -> str:
        if container_id is None:
            return "[dim](pool)[/dim]"
        return escape(names.get(container_id, short_id(container_id)))

    table = Table(title="Move history")
    table.add_column("Id")
    table.add_column("When")
    table.add_column("Paragraph")
    table.add_column("From")
    table.add_column("To")
    table.add_column("Reason")
    for move_record in records:
        table.add_row(
            short_id(move_record.id),
            move_record.timestamp.strftime("%Y-%m-%d %H:%M:%S"),
            short_id(move_record.paragraph_id),
            label(move_record.from_container_id),
            label(move_record.to_container_id),
            escape(move_record.reason or ""),
        )
    console.print(table)

    stats = editor.move_stats()
    most_moved = short_id(stats.most_moved_paragraph) if stats.most_moved_paragraph else "-"
    most_targeted = label(stats.most_targeted_container) if stats.most_targeted_container else "-"
    console.print(
        f"Total moves: {stats.total_moves}  "
        f"Average per paragraph: {stats.average_moves_per_paragraph:.1f}  "
        f"Most moved: {most_moved}  Most targeted: {most_targeted}",
        highlight=False,
    )


@cli.command()
@click.pass_context
def status(ctx: click.Context):
    """Show sections, their paragraphs and the unassigned pool."""
    editor = _editor(ctx)
    session = editor.session

    step = "completed" if session.is_completed else session.sub_step
    console.print(f"[bold]Step:[/bold] {step}", highlight=False)

    stats = editor.stats()
    sections = Table(title="Sections")
    sections.add_column("#", justify="right")
    sections.add_column("Name")
    sections.add_column("Id")
    sections.add_column("Paragraphs", justify="right")
    sections.add_column("With content", justify="right")
    for container in editor.containers:
        container_stats = stats[container.id]
        sections.add_row(
            str(container.order + 1),
            escape(container.name),
            short_id(container.id),
            str(container_stats.count),
            str(container_stats.with_content),
        )
    console.print(sections)

    paragraphs = editor.paragraphs
    console.print(
        f"Assigned: {count_assigned_paragraphs(paragraphs)} "
        f"({count_paragraphs_with_content(paragraphs)} with content)",
        highlight=False,
    )

    for container in editor.containers:
        _print_paragraphs(container.name, editor.paragraphs_in(container.id), session.active_paragraph_id)

    _print_paragraphs("Unassigned", editor.unassigned_paragraphs(), session.active_paragraph_id)

    if session.selected_paragraph_ids or session.target_container_id:
        selected = ", ".join(short_id(i) for i in session.selected_paragraph_ids) or "(none)"
        target_id = short_id(session.target_container_id) if session.target_container_id else "(none)"
        console.print(f"Selected: {selected}  Target: {target_id}", highlight=False)


def _print_paragraphs(title: str, paragraphs: List[Paragraph], active_id: Optional[str]) -> None:
    if not paragraphs:
        return
    table = Table(title=escape(title), show_lines=False)
    table.add_column("Id")
    table.add_column("Content")
    table.add_column("Copy of")
    for paragraph in paragraphs:
        marker = "*" if paragraph.id == active_id else ""
        preview = paragraph.content.strip().replace("\n", " ")
        if len(preview) > 60:
            preview = preview[:57] + "..."
        table.add_row(
            f"{short_id(paragraph.id)}{marker}",
            escape(preview) if preview else "[dim](empty)[/dim]",
            short_id(paragraph.original_id) if paragraph.original_id else "",
        )
    console.print(table)


@cli.command()
@click.option("--raw", is_flag=True, help="Print markdown source instead of rendering it.")
@click.pass_context
def preview(ctx: click.Context, raw: bool):
    """Show the compiled document for the current state."""
    document = _editor(ctx).preview()
    if not document:
        click.echo("(nothing assigned yet)")
    elif raw:
        click.echo(document)
    else:
        console.print(Markdown(document))


@cli.command()
@click.pass_context
def complete(ctx: click.Context):
    """Finish writing: validate and store the compiled document."""
    outcome = _editor(ctx).complete()
    _finish(outcome)
    click.echo()
    click.echo(outcome.data)


@cli.command()
@click.argument("path", required=False, type=click.Path(dir_okay=False, path_type=Path))
@click.pass_context
def export(ctx: click.Context, path: Optional[Path]):
    """Write the completed document to PATH (or export.document_path)."""
    editor = _editor(ctx)
    config: Config = ctx.obj["config"]
    session = editor.session

    if not session.is_completed:
        raise click.ClickException("The editor is not completed yet. Run `sectionist complete` first.")

    if path is None:
        if not config.export.document_path:
            raise click.ClickException("No output path given and export.document_path is not configured.")
        path = Path(config.export.document_path)

    written = export_document(path, session.completed_content)
    click.echo(f"Exported to {written}")


@cli.command()
@click.confirmation_option(prompt="Discard all sections and paragraphs?")
@click.pass_context
def reset(ctx: click.Context):
    """Discard everything and start over at the structure step."""
    _editor(ctx).reset()
    click.echo("Editor reset.")


def main():
    """Main entry point for setuptools console script."""
    cli()


if __name__ == "__main__":
    main()
