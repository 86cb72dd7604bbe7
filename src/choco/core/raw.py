"""Raw signal scanner.

Walks one line of text and splits it into text runs and signals. A signal
starts with ``@`` and may carry a prompt (``@wave``), a bracketed param
(``@{ text }``), both (``@bookmark{intro}``) or neither (``@``).

The scanner never fails: unterminated brackets run to the end of the input
and a bare ``@`` becomes an empty signal. The extents it yields are
contiguous and concatenate back to the input.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from choco.core.span import Range

if TYPE_CHECKING:
    from collections.abc import Iterator

SIGNAL_CHAR = "@"
BRACKETS = {"{": "}", "[": "]", "(": ")", "<": ">"}


@dataclass(frozen=True)
class RawText:
    """A run of plain text."""

    range: Range


@dataclass(frozen=True)
class RawSignal:
    """A signal split into its prompt and param sub-ranges.

    Attributes:
        range: Full extent, from ``@`` through the closing bracket if any.
        prompt: Name portion (empty for ``@`` and ``@{...}``).
        param: Bracket contents, excluding the brackets.
    """

    range: Range
    prompt: Range
    param: Range

    @property
    def is_empty(self) -> bool:
        return self.prompt.is_empty and self.param.is_empty

    @property
    def bracketed(self) -> bool:
        """Whether the signal was delimited by a bracket rather than whitespace."""
        return self.range.end > self.prompt.end

    def shift(self, offset: int) -> RawSignal:
        return RawSignal(
            self.range.shift(offset),
            self.prompt.shift(offset),
            self.param.shift(offset),
        )


RawSpan = RawText | RawSignal


def scan(text: str) -> Iterator[RawSpan]:
    """Lazily split *text* into :class:`RawText` and :class:`RawSignal` spans."""
    index = 0
    length = len(text)
    while index < length:
        if text[index] == SIGNAL_CHAR:
            signal = _scan_signal(text, index)
            yield signal
            index = signal.range.end
        else:
            stop = text.find(SIGNAL_CHAR, index)
            if stop == -1:
                stop = length
            yield RawText(Range(index, stop))
            index = stop


def _scan_signal(text: str, at: int) -> RawSignal:
    first = at + 1
    if first >= len(text) or text[first].isspace() or text[first] == SIGNAL_CHAR:
        empty = Range(first, first)
        return RawSignal(Range(at, first), empty, empty)

    if text[first] in BRACKETS:
        param, end = _scan_param(text, first)
        return RawSignal(Range(at, end), Range(first, first), param)

    stop = first
    while stop < len(text):
        ch = text[stop]
        if ch.isspace() or ch == SIGNAL_CHAR or ch in BRACKETS:
            break
        stop += 1
    prompt = Range(first, stop)

    if stop < len(text) and text[stop] in BRACKETS:
        param, end = _scan_param(text, stop)
        return RawSignal(Range(at, end), prompt, param)
    return RawSignal(Range(at, stop), prompt, Range(stop, stop))


def _scan_param(text: str, opening: int) -> tuple[Range, int]:
    """Match the first closer for the bracket at *opening*.

    Returns the param range and the offset just past the signal.
    """
    start = opening + 1
    close = text.find(BRACKETS[text[opening]], start)
    if close == -1:
        return Range(start, len(text)), len(text)
    return Range(start, close), close + 1
