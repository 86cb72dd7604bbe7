"""Reserved signal namespaces.

Only three prompts mean something to choco itself. Every other signal is
passed through for whatever renders the events.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

from choco.core.events import Call

if TYPE_CHECKING:
    from choco.core.events import Event


class SignalKind(StrEnum):
    """What a signal is used for."""

    BOOKMARK = "bookmark"
    CHOICE = "choice"
    STYLE = "style"
    PASSTHROUGH = "passthrough"


RESERVED_PROMPTS = frozenset({SignalKind.BOOKMARK, SignalKind.CHOICE, SignalKind.STYLE})


def classify(event: Event) -> SignalKind:
    """Map an event to its namespace.

    Reserved namespaces only apply to ``Call`` events (``@bookmark{intro}``);
    a bare ``@bookmark`` is an ordinary prompt.
    """
    if isinstance(event, Call):
        prompt = event.prompt.text
        if prompt in RESERVED_PROMPTS:
            return SignalKind(prompt)
    return SignalKind.PASSTHROUGH


def is_branching(kind: SignalKind) -> bool:
    """Whether *kind* opens a bookmark or choice block."""
    return kind in (SignalKind.BOOKMARK, SignalKind.CHOICE)
