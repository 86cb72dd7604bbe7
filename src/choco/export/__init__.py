"""Export format handlers (JSON, Twee)."""

from __future__ import annotations

from choco.export.base import (
    ExportChoice,
    ExportContext,
    Exporter,
    ExportPassage,
    ProseRun,
)
from choco.export.context import build_export_context, plain_text, render_prose
from choco.export.json_exporter import JsonExporter
from choco.export.twee_exporter import TweeExporter

_EXPORTERS: dict[str, type[JsonExporter | TweeExporter]] = {
    "json": JsonExporter,
    "twee": TweeExporter,
}


def get_exporter(format_name: str) -> JsonExporter | TweeExporter:
    """Get an exporter instance by format name.

    Args:
        format_name: Export format ("json" or "twee").

    Returns:
        Exporter instance.

    Raises:
        ValueError: If the format is not supported.
    """
    cls = _EXPORTERS.get(format_name)
    if cls is None:
        supported = ", ".join(sorted(_EXPORTERS))
        msg = f"Unknown export format '{format_name}'. Supported: {supported}"
        raise ValueError(msg)
    return cls()


__all__ = [
    "ExportChoice",
    "ExportContext",
    "ExportPassage",
    "Exporter",
    "JsonExporter",
    "ProseRun",
    "TweeExporter",
    "build_export_context",
    "get_exporter",
    "plain_text",
    "render_prose",
]
