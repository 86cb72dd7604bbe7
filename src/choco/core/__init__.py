"""Scanning pipeline: lines, raw signals, trimming and event composition."""

from choco.core.events import (
    Break,
    Call,
    Event,
    Param,
    Ping,
    Prompt,
    Signal,
    Text,
    classify,
    iter_events,
)
from choco.core.lines import Line, split_lines
from choco.core.raw import BRACKETS, SIGNAL_CHAR, RawSignal, RawSpan, RawText, scan
from choco.core.span import Range, Span
from choco.core.trim import trim

__all__ = [
    "BRACKETS",
    "SIGNAL_CHAR",
    "Break",
    "Call",
    "Event",
    "Line",
    "Param",
    "Ping",
    "Prompt",
    "Range",
    "RawSignal",
    "RawSpan",
    "RawText",
    "Signal",
    "Span",
    "Text",
    "classify",
    "iter_events",
    "scan",
    "split_lines",
    "trim",
]
