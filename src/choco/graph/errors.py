"""Story lookup error types.

Parsing never raises. These errors come from the query side, when a caller
asks the Story or Guide for something that was never declared. Each error
carries the valid alternatives and close-match suggestions so a front end
can point the author at a likely typo.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from difflib import get_close_matches


class StoryLookupError(LookupError):
    """Base class for failed Story and Guide lookups."""

    def suggestions(self) -> list[str]:
        """Return likely intended keys, best first."""
        raise NotImplementedError


@dataclass
class NodeNotFoundError(StoryLookupError):
    """Raised when referencing a node id the Story does not contain.

    Attributes:
        node_id: The id that was referenced.
        available: Valid node ids.
        context: Description of where the reference occurred.
    """

    node_id: int
    available: list[int] = field(default_factory=list)
    context: str = ""

    def __post_init__(self) -> None:
        msg = f"Node {self.node_id} not found"
        if self.context:
            msg += f" ({self.context})"
        if self.available:
            msg += f"; valid ids are {self.available[0]}..{self.available[-1]}"
        super().__init__(msg)

    def suggestions(self) -> list[str]:
        return []


@dataclass
class BookmarkNotFoundError(StoryLookupError):
    """Raised when a bookmark name is missing from the Guide.

    Attributes:
        name: The bookmark name that was looked up.
        available: Declared bookmark names.
    """

    name: str
    available: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        msg = f"Bookmark '{self.name}' not found"
        suggestions = self.suggestions()
        if suggestions:
            msg += f"; did you mean {', '.join(repr(s) for s in suggestions)}?"
        super().__init__(msg)

    def suggestions(self) -> list[str]:
        return get_close_matches(self.name, self.available, n=3, cutoff=0.6)
