"""Two-pass construction of a Story from the event stream.

``@bookmark{name}`` opens a node and ``@choice{target}`` opens a choice from
the enclosing bookmark to ``target``. Each block's text runs from just after
its signal to just before the next bookmark or choice signal, or to the end
of the content.

Pass 1 builds nodes and the Guide and queues choice requests; pass 2 links
them. Targets may be declared anywhere later in the document, so linking has
to wait until the whole Guide is known.

The builder never raises. Choices naming unknown bookmarks are dropped and
duplicate bookmark names keep their first declaration.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, cast

from choco.core.events import Call, Param, Prompt, Text, iter_events
from choco.core.raw import BRACKETS
from choco.core.span import Span
from choco.graph.story import Guide, Story
from choco.observability.logging import get_logger
from choco.signals import SignalKind, classify, is_branching
from choco.style import StyledText

if TYPE_CHECKING:
    from collections.abc import Iterable

    from choco.core.events import Event
    from choco.style import StyledEvent

log = get_logger(__name__)

_CLOSERS = frozenset(BRACKETS.values())


@dataclass(frozen=True)
class ChoiceRequest:
    """A choice waiting for its target to be resolved.

    Attributes:
        source: Enclosing bookmark node, or None before any bookmark.
        target: Name of the bookmark the choice points to.
        span: Choice text.
    """

    source: int | None
    target: str
    span: Span


@dataclass(frozen=True)
class DuplicateBookmark:
    """A bookmark declaration whose name was already taken."""

    name: str
    span: Span


@dataclass
class NodePass:
    """Everything pass 1 produces."""

    story: Story = field(default_factory=Story)
    guide: Guide = field(default_factory=dict)
    requests: list[ChoiceRequest] = field(default_factory=list)
    duplicates: list[DuplicateBookmark] = field(default_factory=list)


@dataclass
class _Pending:
    kind: SignalKind
    param: Span


def node_pass(events: Iterable[Event | StyledEvent]) -> NodePass:
    """Create nodes for bookmarks and queue choice requests.

    Args:
        events: Composed or style-decorated events of one document.

    Returns:
        The story with nodes only, the guide, and unresolved requests.
    """
    result = NodePass()
    content_end = 0
    current: int | None = None
    pending: _Pending | None = None

    def close(block: _Pending, end: int) -> None:
        nonlocal current
        span = _block_span(block.param, end)
        name = block.param.text
        if block.kind is SignalKind.BOOKMARK:
            if name in result.guide:
                result.duplicates.append(DuplicateBookmark(name, span))
                log.debug("bookmark_duplicate", name=name, at=block.param.start)
                return
            current = result.story.add_node(span)
            result.guide[name] = current
        else:
            result.requests.append(ChoiceRequest(current, name, span))

    for event in events:
        kind = classify(event)
        if is_branching(kind):
            call = cast("Call", event)
            if pending is not None:
                # The '@' sits just before the prompt.
                close(pending, call.prompt.start - 1)
            pending = _Pending(kind, call.param)
        elif isinstance(event, (Call, Param)):
            content_end = _past_param(event.param)
        elif isinstance(event, Prompt):
            content_end = event.prompt.end
        elif isinstance(event, StyledText) and event.bracketed:
            content_end = _past_param(event.content)
        elif isinstance(event, (Text, StyledText)):
            content_end = event.content.end

    if pending is not None:
        close(pending, content_end)

    return result


def edge_pass(nodes: NodePass) -> list[ChoiceRequest]:
    """Link queued choices to their targets.

    Returns:
        Requests that could not be linked, in declaration order.
    """
    unresolved: list[ChoiceRequest] = []
    for request in nodes.requests:
        target = nodes.guide.get(request.target)
        if request.source is None or target is None:
            unresolved.append(request)
            continue
        nodes.story.add_edge(request.source, target, request.span)
    return unresolved


def build(events: Iterable[Event | StyledEvent]) -> tuple[Guide, Story]:
    """Consume ``bookmark`` and ``choice`` signals to create a Story."""
    nodes = node_pass(events)
    unresolved = edge_pass(nodes)
    log.debug(
        "story_built",
        nodes=nodes.story.node_count(),
        edges=nodes.story.edge_count(),
        dropped_choices=len(unresolved),
        duplicate_bookmarks=len(nodes.duplicates),
    )
    return nodes.guide, nodes.story


def read(source: str) -> tuple[Guide, Story]:
    """Parse *source* and build its Guide and Story."""
    return build(iter_events(source))


def _past_param(param: Span) -> int:
    """Offset just past the param's closing bracket, if it has one."""
    if param.end < len(param.source) and param.source[param.end] in _CLOSERS:
        return param.end + 1
    return param.end


def _block_span(param: Span, end: int) -> Span:
    start = _past_param(param)
    return Span(param.source, start, max(start, min(end, len(param.source))))
