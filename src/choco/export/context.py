"""Build an ExportContext from a Story.

Passage prose is the bookmark block re-read through the style decorator, so
``@style{b}@{...}`` survives as a styled run. Signals other than styles are
not reader-facing and are dropped.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from choco.config import DEFAULT_TITLE
from choco.core.events import Break
from choco.export.base import ExportChoice, ExportContext, ExportPassage, ProseRun
from choco.observability.logging import get_logger
from choco.style import Style, StyledText, StyleFallback, event_iter

if TYPE_CHECKING:
    from choco.graph.story import Guide, Story

log = get_logger(__name__)


def build_export_context(
    guide: Guide,
    story: Story,
    *,
    title: str = DEFAULT_TITLE,
    fallback: StyleFallback = StyleFallback.TRUNCATE,
) -> ExportContext:
    """Extract passages and choices from a built story.

    Args:
        guide: Bookmark name -> node id.
        story: Story built from the same document.
        title: Story title for the export.
        fallback: Style policy used when re-reading block text.

    Returns:
        ExportContext with passages in declaration order.
    """
    names = {node_id: name for name, node_id in guide.items()}

    passages = [
        ExportPassage(
            id=names[node_id],
            prose=render_prose(span.text, fallback=fallback),
            is_start=node_id == 0,
            is_ending=not story.edges_from(node_id),
        )
        for node_id, span in story.nodes()
    ]

    choices = []
    for edge in story.edges():
        label = plain_text(render_prose(edge.span.text, fallback=fallback))
        choices.append(
            ExportChoice(
                from_passage=names[edge.source],
                to_passage=names[edge.target],
                label=label or names[edge.target],
            )
        )

    log.debug("export_context_built", passages=len(passages), choices=len(choices))
    return ExportContext(title=title, passages=passages, choices=choices)


def render_prose(
    text: str,
    *,
    fallback: StyleFallback = StyleFallback.TRUNCATE,
) -> list[ProseRun]:
    """Turn block text into styled runs. Each Break becomes a newline run.

    Whitespace the trimmer removed between two runs on the same line comes
    back as a single space, so ``the @style{b}@{cave}`` reads "the cave".
    """
    runs: list[ProseRun] = []
    previous_end: int | None = None
    for event in event_iter(text, fallback=fallback):
        if isinstance(event, StyledText):
            content = event.content
            if content.is_empty:
                continue
            gap = previous_end is not None and text[previous_end].isspace()
            if gap and not content.text[0].isspace():
                runs.append(ProseRun(" "))
            runs.append(ProseRun(content.text, style_names(event.style)))
            previous_end = content.end
        elif isinstance(event, Break):
            runs.append(ProseRun("\n"))
            previous_end = None
    return _strip_breaks(runs)


def plain_text(runs: list[ProseRun]) -> str:
    """Prose runs as one line of unstyled text."""
    return " ".join("".join(run.text for run in runs).split())


def style_names(style: Style) -> list[str]:
    """Lower-case flag names, in bit order."""
    return [flag.name.lower() for flag in Style if flag and flag in style and flag.name]


def _strip_breaks(runs: list[ProseRun]) -> list[ProseRun]:
    start, end = 0, len(runs)
    while start < end and runs[start].text == "\n":
        start += 1
    while end > start and runs[end - 1].text == "\n":
        end -= 1
    return runs[start:end]
