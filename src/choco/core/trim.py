"""Per-line whitespace trimming over the raw scanner."""

from __future__ import annotations

from typing import TYPE_CHECKING

from choco.core.raw import RawSignal, RawText, scan
from choco.core.span import Range

if TYPE_CHECKING:
    from collections.abc import Iterator

    from choco.core.raw import RawSpan


def trim(line: str) -> Iterator[RawSpan]:
    """Scan *line* and trim its text spans.

    Trailing whitespace is always removed. Leading whitespace is removed
    from text that directly follows a whitespace-delimited signal (``@`` or
    ``@name``), since that whitespace only terminates the signal. Text that
    ends up empty is skipped.
    """
    strip_left = False
    for span in scan(line):
        if isinstance(span, RawSignal):
            strip_left = not span.bracketed
            yield span
            continue

        rng = _strip_right(line, span.range)
        if strip_left:
            rng = _strip_left(line, rng)
        strip_left = False
        if not rng.is_empty:
            yield RawText(rng)


def _strip_right(text: str, rng: Range) -> Range:
    end = rng.end
    while end > rng.start and text[end - 1].isspace():
        end -= 1
    return Range(rng.start, end)


def _strip_left(text: str, rng: Range) -> Range:
    start = rng.start
    while start < rng.end and text[start].isspace():
        start += 1
    return Range(start, rng.end)
