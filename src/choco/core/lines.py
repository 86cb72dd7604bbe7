"""Line splitting with absolute offsets."""

from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    from collections.abc import Iterator


class Line(NamedTuple):
    """One line of a document and the offset of its first character."""

    offset: int
    text: str


def split_lines(source: str) -> Iterator[Line]:
    """Yield every ``\\n``-separated line of *source*, including a trailing empty one."""
    offset = 0
    while True:
        stop = source.find("\n", offset)
        if stop == -1:
            yield Line(offset, source[offset:])
            return
        yield Line(offset, source[offset:stop])
        offset = stop + 1
