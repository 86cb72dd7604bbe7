"""Source ranges.

Every piece of parsed output refers back into the caller's source text
through a :class:`Span`. Spans never own text; slicing happens only when
``text`` is read.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import NamedTuple


class Range(NamedTuple):
    """Half-open ``[start, end)`` offsets, relative to whatever was scanned."""

    start: int
    end: int

    @property
    def is_empty(self) -> bool:
        return self.end <= self.start

    def shift(self, offset: int) -> Range:
        """Rebase the range by *offset*."""
        return Range(self.start + offset, self.end + offset)


@dataclass(frozen=True)
class Span:
    """A ``[start, end)`` window into a shared source string.

    Attributes:
        source: The full document the offsets refer to.
        start: Offset of the first character.
        end: Offset one past the last character.
    """

    source: str = field(repr=False, compare=False)
    start: int
    end: int

    @classmethod
    def of(cls, source: str, rng: Range) -> Span:
        return cls(source, rng.start, rng.end)

    @property
    def text(self) -> str:
        """Slice the source lazily."""
        return self.source[self.start : self.end]

    @property
    def range(self) -> Range:
        return Range(self.start, self.end)

    @property
    def is_empty(self) -> bool:
        return self.end <= self.start

    def __len__(self) -> int:
        return max(0, self.end - self.start)

    def __str__(self) -> str:
        return self.text
