"""Twee/SugarCube export format.

Generates a Twee 3 file compatible with SugarCube 2. The output can be
imported into Twine or compiled directly with Tweego.

Format reference: https://twinery.org/cookbook/terms/terms_twee.html
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from choco.observability.logging import get_logger

if TYPE_CHECKING:
    from pathlib import Path

    from choco.export.base import ExportChoice, ExportContext, ExportPassage, ProseRun

log = get_logger(__name__)

# Inline markup per style name, innermost first.
_INLINE_MARKUP: list[tuple[str, str, str]] = [
    ("code", "{{{", "}}}"),
    ("bold", "''", "''"),
    ("italic", "//", "//"),
    ("scratch", "==", "=="),
]

# Block-level wrappers per style name.
_BLOCK_MARKUP: list[tuple[str, str, str]] = [
    ("quote", "<blockquote>", "</blockquote>"),
    ("panel", '<div class="panel">', "</div>"),
]


class TweeExporter:
    """Export story as Twee 3 / SugarCube 2 format."""

    format_name = "twee"

    def export(self, context: ExportContext, output_dir: Path) -> Path:
        """Write story as a .twee file.

        Args:
            context: Extracted story data.
            output_dir: Directory to write output files.

        Returns:
            Path to the generated .twee file.
        """
        output_dir.mkdir(parents=True, exist_ok=True)
        output_file = output_dir / "story.twee"

        start = next((p for p in context.passages if p.is_start), None)

        lines: list[str] = []
        lines.extend(_story_header(context.title, start.id if start else None))
        lines.append("")

        choices_by_passage = _group_choices_by_passage(context.choices)
        for passage in context.passages:
            lines.extend(_render_passage(passage, choices_by_passage.get(passage.id, [])))
            lines.append("")

        output_file.write_text("\n".join(lines), encoding="utf-8")

        log.info(
            "twee_export_complete",
            passages=len(context.passages),
            choices=len(context.choices),
            output=str(output_file),
        )

        return output_file


def _story_header(title: str, start: str | None) -> list[str]:
    """Generate Twee 3 story header passages."""
    ifid = str(uuid.uuid4()).upper()
    start_field = f', "start": "{_escape_name(start)}"' if start else ""
    return [
        f":: StoryTitle\n{title}",
        "",
        f':: StoryData\n{{"ifid": "{ifid}", "format": "SugarCube", '
        f'"format-version": "2.37.3"{start_field}}}',
    ]


def _group_choices_by_passage(
    choices: list[ExportChoice],
) -> dict[str, list[ExportChoice]]:
    """Group choices by their source passage."""
    result: dict[str, list[ExportChoice]] = {}
    for choice in choices:
        result.setdefault(choice.from_passage, []).append(choice)
    return result


def _render_passage(passage: ExportPassage, choices: list[ExportChoice]) -> list[str]:
    """Render a single passage as Twee markup."""
    tags = " [start]" if passage.is_start else ""
    lines = [f":: {_escape_name(passage.id)}{tags}"]
    prose = "".join(_render_run(run) for run in passage.prose)
    if prose:
        lines.append(prose)
    lines.extend(_render_choice(choice) for choice in choices)
    return lines


def _render_run(run: ProseRun) -> str:
    text = run.text
    for name, opener, closer in _INLINE_MARKUP + _BLOCK_MARKUP:
        if name in run.styles:
            text = f"{opener}{text}{closer}"
    return text


def _render_choice(choice: ExportChoice) -> str:
    """Render a choice as ``[[label->target]]``."""
    label = choice.label.replace("]", "\\]").replace("->", "-\\>")
    return f"[[{label}->{_escape_name(choice.to_passage)}]]"


def _escape_name(name: str) -> str:
    """Escape Twee 3 passage-name metacharacters."""
    for ch in "\\[]{}":
        name = name.replace(ch, f"\\{ch}")
    return name
