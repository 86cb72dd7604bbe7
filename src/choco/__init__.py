"""choco - signal-annotated interactive fiction.

Plain text carries ``@`` signals. ``event_iter`` turns a document into a lazy
stream of styled events and ``read`` builds its Guide and Story::

    guide, story = read(source)
    for event in event_iter(story[guide["intro"]].text):
        ...
"""

from choco.core import Break, Call, Event, Param, Ping, Prompt, Signal, Span, Text, iter_events
from choco.graph import Guide, Story, read
from choco.style import Style, StyledEvent, StyledText, StyleFallback, event_iter

__version__ = "0.1.0"

__all__ = [
    "Break",
    "Call",
    "Event",
    "Guide",
    "Param",
    "Ping",
    "Prompt",
    "Signal",
    "Span",
    "Story",
    "Style",
    "StyleFallback",
    "StyledEvent",
    "StyledText",
    "Text",
    "__version__",
    "event_iter",
    "iter_events",
    "read",
]
