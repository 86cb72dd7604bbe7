"""Semantic events composed from trimmed lines.

The composer walks the document line by line, rebases every range to an
absolute offset in the source and classifies signals by which of their
prompt and param parts are present:

========  ========  =======  =====================
Event     Prompt    Param    Example
========  ========  =======  =====================
Ping      no        no       ``Pay attention! @``
Prompt    yes       no       ``@wave``
Param     no        yes      ``@{ My param }``
Call      yes       yes      ``@bookmark{into}``
========  ========  =======  =====================

A :class:`Break` marks every line boundary.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from choco.core.lines import split_lines
from choco.core.raw import RawSignal
from choco.core.span import Span
from choco.core.trim import trim

if TYPE_CHECKING:
    from collections.abc import Iterator


@dataclass(frozen=True)
class Ping:
    """A bare ``@``."""


@dataclass(frozen=True)
class Prompt:
    """``@name``."""

    prompt: Span


@dataclass(frozen=True)
class Param:
    """``@{text}``."""

    param: Span


@dataclass(frozen=True)
class Call:
    """``@name{text}``."""

    prompt: Span
    param: Span


@dataclass(frozen=True)
class Text:
    """Plain narrative text."""

    content: Span


@dataclass(frozen=True)
class Break:
    """Line boundary."""


Signal = Ping | Prompt | Param | Call
Event = Signal | Text | Break


def classify(source: str, raw: RawSignal) -> Signal:
    """Turn an absolute raw signal into its semantic shape."""
    if raw.prompt.is_empty and raw.param.is_empty:
        return Ping()
    if raw.prompt.is_empty:
        return Param(Span.of(source, raw.param))
    if raw.param.is_empty:
        return Prompt(Span.of(source, raw.prompt))
    return Call(Span.of(source, raw.prompt), Span.of(source, raw.param))


def iter_events(source: str) -> Iterator[Event]:
    """Lazily compose the event stream of a whole document."""
    for number, line in enumerate(split_lines(source)):
        if number:
            yield Break()
        for raw in trim(line.text):
            if isinstance(raw, RawSignal):
                yield classify(source, raw.shift(line.offset))
            else:
                yield Text(Span.of(source, raw.range.shift(line.offset)))
