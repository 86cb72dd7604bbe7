"""Style decoration of the event stream.

``@style{bq}@{Hello}`` marks ``Hello`` as bold and quoted. The ``style``
call carries one-letter codes and must be immediately followed by a
prompt-less param holding the styled text:

====  =======  ==============================
Code  Style    Note
====  =======  ==============================
p     PANEL    i.e. block
c     CODE
q     QUOTE    doesn't have to be block-quote
b     BOLD
i     ITALIC
s     SCRATCH  i.e. strike-through
====  =======  ==============================
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntFlag, StrEnum
from typing import TYPE_CHECKING, cast

from choco.core.events import Break, Call, Param, Signal, Text, iter_events
from choco.observability.logging import get_logger
from choco.signals import SignalKind, classify

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from choco.core.events import Event
    from choco.core.span import Span

log = get_logger(__name__)


class Style(IntFlag):
    """Bit set of text styles."""

    REGULAR = 0
    PANEL = 1 << 0
    CODE = 1 << 1
    QUOTE = 1 << 2
    BOLD = 1 << 3
    ITALIC = 1 << 4
    SCRATCH = 1 << 5

    @classmethod
    def from_codes(cls, codes: str) -> Style:
        """Parse one-letter codes; unknown characters add nothing."""
        style = cls.REGULAR
        for ch in codes:
            style |= STYLE_CODES.get(ch, cls.REGULAR)
        return style


STYLE_CODES: dict[str, Style] = {
    "p": Style.PANEL,
    "c": Style.CODE,
    "q": Style.QUOTE,
    "b": Style.BOLD,
    "i": Style.ITALIC,
    "s": Style.SCRATCH,
}


class StyleFallback(StrEnum):
    """What to do when a ``style`` call is not followed by a param.

    TRUNCATE stops the stream at the dangling call. PASSTHROUGH emits the
    call as an ordinary signal and keeps going.
    """

    TRUNCATE = "truncate"
    PASSTHROUGH = "passthrough"


@dataclass(frozen=True)
class StyledText:
    """Text with its style flags.

    ``bracketed`` is set when the run is the param of a style call, so its
    content ends just before a closing bracket.
    """

    content: Span
    style: Style = Style.REGULAR
    bracketed: bool = False


StyledEvent = Signal | StyledText | Break


def decorate(
    events: Iterable[Event],
    *,
    fallback: StyleFallback = StyleFallback.TRUNCATE,
) -> Iterator[StyledEvent]:
    """Fold ``style`` calls into the text that follows them.

    Args:
        events: Composed events, consumed lazily.
        fallback: Policy for a ``style`` call without a following param.

    Yields:
        Styled events; plain text gets :attr:`Style.REGULAR`.
    """
    stream = iter(events)
    event = next(stream, None)
    while event is not None:
        if classify(event) is not SignalKind.STYLE:
            yield _plain(event)
            event = next(stream, None)
            continue

        call = cast("Call", event)
        following = next(stream, None)
        if isinstance(following, Param):
            yield StyledText(
                following.param, Style.from_codes(call.param.text), bracketed=True
            )
            event = next(stream, None)
            continue

        log.debug("style_without_param", at=call.prompt.start, fallback=str(fallback))
        if fallback is StyleFallback.TRUNCATE:
            return
        yield event
        event = following


def event_iter(
    source: str,
    *,
    fallback: StyleFallback = StyleFallback.TRUNCATE,
) -> Iterator[StyledEvent]:
    """Go through *source* and parse styled events out."""
    return decorate(iter_events(source), fallback=fallback)


def _plain(event: Event) -> StyledEvent:
    if isinstance(event, Text):
        return StyledText(event.content)
    return event
