"""Export data models and Exporter protocol.

Defines the intermediate representation (ExportContext) that all exporters
consume, plus the Exporter protocol they must implement.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from pathlib import Path


@dataclass
class ProseRun:
    """A run of prose text carrying style names (e.g. ``["bold"]``)."""

    text: str
    styles: list[str] = field(default_factory=list)


@dataclass
class ExportPassage:
    """A bookmark rendered as a reader-facing passage."""

    id: str
    prose: list[ProseRun]
    is_start: bool = False
    is_ending: bool = False


@dataclass
class ExportChoice:
    """A navigable link between two passages."""

    from_passage: str
    to_passage: str
    label: str


@dataclass
class ExportContext:
    """All data needed by exporters, extracted from the story graph.

    This is the intermediate representation between the Story and the
    export formats (JSON, Twee).
    """

    title: str
    passages: list[ExportPassage]
    choices: list[ExportChoice]


class Exporter(Protocol):
    """Protocol for story export format handlers."""

    format_name: str

    def export(self, context: ExportContext, output_dir: Path) -> Path:
        """Export the story to the given output directory.

        Args:
            context: Extracted story data.
            output_dir: Directory to write output files.

        Returns:
            Path to the main output file.
        """
        ...
