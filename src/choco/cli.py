"""choco CLI - typer application entry point."""

from __future__ import annotations

import atexit
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from choco.config import ChocoConfig, ConfigError, resolve_config
from choco.core.events import Break, Call, Param, Ping, Prompt, Text, iter_events
from choco.graph import StoryLookupError, bookmark_node, read
from choco.observability import (
    close_file_logging,
    configure_logging,
    get_logger,
    get_logs_dir,
)
from choco.style import StyledText, event_iter

if TYPE_CHECKING:
    from collections.abc import Iterable

    from choco.core.events import Event
    from choco.style import StyledEvent

# Load environment variables from .env file
load_dotenv()

app = typer.Typer(
    name="choco",
    help="choco: inspect and convert signal-annotated interactive stories.",
    no_args_is_help=True,
)
console = Console()
log = get_logger(__name__)

DEFAULT_LOG_DIR = Path("logs")
PREVIEW_LENGTH = 48

# Global state set by the callback, used by commands
_config_path: Path | None = None

FileArgument = Annotated[
    Path,
    typer.Argument(help="Story document to read.", show_default=False),
]


@app.callback()
def main(
    verbose: Annotated[
        int,
        typer.Option(
            "-v",
            "--verbose",
            count=True,
            help="Increase verbosity: -v for INFO, -vv for DEBUG.",
        ),
    ] = 0,
    log_enabled: Annotated[
        bool,
        typer.Option("--log", help="Enable file logging to {log-dir}/debug.jsonl."),
    ] = False,
    log_dir: Annotated[
        Path,
        typer.Option("--log-dir", help="Directory for log files (default: ./logs)."),
    ] = DEFAULT_LOG_DIR,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Config file (default: choco.yaml next to the document).",
            envvar="CHOCO_CONFIG",
        ),
    ] = None,
) -> None:
    """choco: inspect and convert signal-annotated interactive stories."""
    global _config_path
    _config_path = config

    configure_logging(verbosity=verbose, log_to_file=log_enabled, log_dir=log_dir)
    if log_enabled:
        atexit.register(close_file_logging)


# =============================================================================
# Helpers
# =============================================================================


def _read_document(path: Path) -> str:
    """Read a document or exit with an error message."""
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        console.print(f"[red]Error:[/red] Cannot read {escape(str(path))}: {escape(str(e))}")
        raise typer.Exit(1) from None


def _load_config(document: Path) -> ChocoConfig:
    """Resolve configuration for *document* or exit with an error message."""
    try:
        return resolve_config(document, _config_path)
    except (ConfigError, ValueError) as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from None


def _print_logs_location() -> None:
    logs_dir = get_logs_dir()
    if logs_dir is not None:
        console.print(f"  Logs: [dim]{escape(str(logs_dir))}[/dim]")


def _preview(text: str, length: int = PREVIEW_LENGTH) -> str:
    flat = " ".join(text.split())
    if len(flat) <= length:
        return flat
    return flat[: length - 3] + "..."


def _describe(event: Event | StyledEvent) -> tuple[str, str, str]:
    """Kind, range and content columns for one event."""
    if isinstance(event, StyledText):
        kind = f"Text [{event.style.name}]" if event.style else "Text"
        content = event.content
        return kind, f"{content.start}..{content.end}", repr(content.text)
    if isinstance(event, Text):
        return "Text", f"{event.content.start}..{event.content.end}", repr(event.content.text)
    if isinstance(event, Call):
        rng = f"{event.prompt.start}..{event.param.end}"
        return "Call", rng, f"{event.prompt.text}{{{event.param.text}}}"
    if isinstance(event, Prompt):
        return "Prompt", f"{event.prompt.start}..{event.prompt.end}", event.prompt.text
    if isinstance(event, Param):
        return "Param", f"{event.param.start}..{event.param.end}", f"{{{event.param.text}}}"
    if isinstance(event, Ping):
        return "Ping", "-", "@"
    if isinstance(event, Break):
        return "Break", "-", ""
    raise TypeError(f"Unexpected event {event!r}")


def _event_table(title: str, events: Iterable[Event | StyledEvent]) -> Table:
    table = Table(title=title)
    table.add_column("#", style="dim", justify="right")
    table.add_column("Event", style="cyan")
    table.add_column("Range", style="dim")
    table.add_column("Content")
    for index, event in enumerate(events):
        kind, rng, content = _describe(event)
        table.add_row(str(index), escape(kind), rng, escape(content))
    return table


# =============================================================================
# Commands
# =============================================================================


@app.command()
def version() -> None:
    """Show version information."""
    from choco import __version__

    console.print(f"choco v{__version__}")


@app.command()
def events(
    file: FileArgument,
    raw: Annotated[
        bool,
        typer.Option("--raw", help="Show composed events without style decoration."),
    ] = False,
    bookmark: Annotated[
        str | None,
        typer.Option("--bookmark", "-b", help="Only show the text of this bookmark."),
    ] = None,
) -> None:
    """List the events of a document."""
    source = _read_document(file)
    config = _load_config(file)
    title = file.name

    if bookmark is not None:
        book, story = read(source)
        try:
            source = story[bookmark_node(book, bookmark)].text
        except StoryLookupError as e:
            console.print(f"[red]Error:[/red] {escape(str(e))}")
            raise typer.Exit(1) from None
        title = f"{file.name} @ {bookmark}"

    stream: Iterable[Event | StyledEvent]
    if raw:
        stream = iter_events(source)
    else:
        stream = event_iter(source, fallback=config.style.fallback)

    console.print()
    console.print(_event_table(title, stream))
    console.print()


@app.command()
def guide(file: FileArgument) -> None:
    """Show bookmarks with their node ids and choices."""
    source = _read_document(file)
    book, story = read(source)
    names = {node_id: name for name, node_id in book.items()}

    table = Table(title=f"Guide: {file.name}")
    table.add_column("Node", style="dim", justify="right")
    table.add_column("Bookmark", style="cyan")
    table.add_column("Preview")
    table.add_column("Choices", style="green")

    for name, node_id in book.items():
        outgoing = reversed(story.edges_from(node_id))
        targets = ", ".join(names[edge.target] for edge in outgoing)
        preview = escape(_preview(story[node_id].text))
        table.add_row(str(node_id), escape(name), preview, escape(targets) or "-")

    console.print()
    console.print(table)
    console.print(f"  {story.node_count()} bookmark(s), {story.edge_count()} choice(s)")
    console.print()


@app.command()
def inspect(
    file: FileArgument,
    strict: Annotated[
        bool,
        typer.Option("--strict", help="Exit with code 1 when problems are found."),
    ] = False,
) -> None:
    """Report unresolved choices, duplicate bookmarks and other problems."""
    from choco.inspection import inspect_source

    report = inspect_source(_read_document(file))
    summary = report.summary

    console.print()
    console.print(f"[bold]Inspection: {file.name}[/bold]")
    console.print(
        f"  Bookmarks: [bold]{summary.bookmarks}[/bold]  "
        f"Choices: [bold]{summary.edges}[/bold]  "
        f"Characters: {summary.characters:,}"
    )
    console.print()

    for issue in report.unresolved_choices:
        console.print(
            f"  [red]✗[/red] Choice in '{escape(str(issue.source))}' targets unknown bookmark "
            f"'{escape(issue.target)}' (offset {issue.offset})"
        )
    for issue in report.orphan_choices:
        console.print(
            f"  [red]✗[/red] Choice to '{escape(issue.target)}' appears before any bookmark "
            f"(offset {issue.offset})"
        )
    for name in report.duplicate_bookmarks:
        console.print(f"  [red]✗[/red] Bookmark '{escape(name)}' is declared more than once")
    for name in report.unreachable:
        console.print(
            f"  [yellow]![/yellow] Bookmark '{escape(name)}' is not reachable by any choice"
        )
    if report.dead_ends:
        console.print(f"  [dim]○[/dim] Endings: {escape(', '.join(report.dead_ends))}")

    console.print()
    if report.has_problems:
        console.print("[yellow]Problems found.[/yellow]")
        if strict:
            raise typer.Exit(1)
    else:
        console.print("[green]No problems found.[/green]")


@app.command()
def viz(
    file: FileArgument,
    fmt: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: dot or mermaid."),
    ] = "dot",
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write to this file instead of stdout."),
    ] = None,
    no_labels: Annotated[
        bool,
        typer.Option("--no-labels", help="Omit choice labels on edges."),
    ] = False,
) -> None:
    """Render the story graph as DOT or Mermaid."""
    from choco.visualization import build_story_graph, render_dot, render_mermaid

    renderers = {"dot": render_dot, "mermaid": render_mermaid}
    renderer = renderers.get(fmt)
    if renderer is None:
        console.print(f"[red]Error:[/red] Unknown format '{fmt}'. Supported: dot, mermaid")
        raise typer.Exit(1)

    config = _load_config(file)
    book, story = read(_read_document(file))
    sg = build_story_graph(book, story, label_length=config.visualization.label_length)
    rendered = renderer(sg, no_labels=no_labels or not config.visualization.labels)

    if output is None:
        console.print(rendered, markup=False, highlight=False, soft_wrap=True)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(rendered + "\n", encoding="utf-8")
    log.info("viz_written", format=fmt, output=str(output))
    console.print(f"[green]✓[/green] Wrote {fmt} graph to [cyan]{output}[/cyan]")
    _print_logs_location()


@app.command()
def export(
    file: FileArgument,
    fmt: Annotated[
        str | None,
        typer.Option("--format", "-f", help="Export format: json or twee."),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output directory (default: next to the document)."),
    ] = None,
    title: Annotated[
        str | None,
        typer.Option("--title", "-t", help="Story title (default: from config)."),
    ] = None,
) -> None:
    """Export the story as JSON or Twee."""
    from choco.export import build_export_context, get_exporter

    config = _load_config(file)
    try:
        exporter = get_exporter(fmt or config.export.format)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from None

    book, story = read(_read_document(file))
    if story.node_count() == 0:
        console.print(f"[red]Error:[/red] {file} has no bookmarks to export")
        raise typer.Exit(1)

    context = build_export_context(
        book,
        story,
        title=title or config.export.title,
        fallback=config.style.fallback,
    )
    output_dir = output if output is not None else file.parent
    result = exporter.export(context, output_dir)

    console.print(f"[green]✓[/green] Exported {exporter.format_name} to [cyan]{result}[/cyan]")
    console.print(f"  Passages: [bold]{len(context.passages)}[/bold]")
    console.print(f"  Choices: [bold]{len(context.choices)}[/bold]")
    _print_logs_location()


if __name__ == "__main__":
    app()
