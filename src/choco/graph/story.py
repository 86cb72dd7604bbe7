"""Story graph storage.

A Story is a directed multigraph whose payloads are source spans: nodes hold
the narrative text under a bookmark and edges hold the text of a choice.
Node and edge ids are consecutive integers in creation order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from choco.graph.errors import BookmarkNotFoundError, NodeNotFoundError

if TYPE_CHECKING:
    from collections.abc import Iterator

    from choco.core.span import Span

# Bookmark name -> node id. The first declaration of a name wins.
Guide = dict[str, int]


@dataclass(frozen=True)
class ChoiceEdge:
    """A choice from one node to another.

    Attributes:
        id: Edge id, in insertion order.
        source: Node of the bookmark enclosing the choice.
        target: Node of the bookmark the choice names.
        span: Choice text.
    """

    id: int
    source: int
    target: int
    span: Span


class Story:
    """Directed graph of narrative nodes linked by choices."""

    def __init__(self) -> None:
        self._nodes: list[Span] = []
        self._edges: list[ChoiceEdge] = []

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    def add_node(self, span: Span) -> int:
        """Add a node holding *span* and return its id."""
        self._nodes.append(span)
        return len(self._nodes) - 1

    def add_edge(self, source: int, target: int, span: Span) -> int:
        """Add a choice edge and return its id.

        Raises:
            NodeNotFoundError: If either endpoint does not exist.
        """
        self._require(source, "add_edge source")
        self._require(target, "add_edge target")
        edge = ChoiceEdge(len(self._edges), source, target, span)
        self._edges.append(edge)
        return edge.id

    # -------------------------------------------------------------------------
    # Nodes
    # -------------------------------------------------------------------------

    def node(self, node_id: int) -> Span:
        """Get the narrative span of a node.

        Raises:
            NodeNotFoundError: If the node does not exist.
        """
        self._require(node_id, "node lookup")
        return self._nodes[node_id]

    def __getitem__(self, node_id: int) -> Span:
        return self.node(node_id)

    def has_node(self, node_id: int) -> bool:
        return 0 <= node_id < len(self._nodes)

    def nodes(self) -> Iterator[tuple[int, Span]]:
        """Iterate ``(node_id, span)`` pairs in creation order."""
        return iter(enumerate(self._nodes))

    def node_count(self) -> int:
        return len(self._nodes)

    # -------------------------------------------------------------------------
    # Edges
    # -------------------------------------------------------------------------

    def edges(self) -> list[ChoiceEdge]:
        """All edges in insertion order."""
        return list(self._edges)

    def edges_from(self, node_id: int) -> list[ChoiceEdge]:
        """Outgoing edges of a node, newest first."""
        self._require(node_id, "edges_from")
        return [e for e in reversed(self._edges) if e.source == node_id]

    def edges_to(self, node_id: int) -> list[ChoiceEdge]:
        """Incoming edges of a node, newest first."""
        self._require(node_id, "edges_to")
        return [e for e in reversed(self._edges) if e.target == node_id]

    def edges_connecting(self, source: int, target: int) -> Iterator[ChoiceEdge]:
        """Edges from *source* to *target*, newest first."""
        for edge in reversed(self._edges):
            if edge.source == source and edge.target == target:
                yield edge

    def edge_count(self) -> int:
        return len(self._edges)

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def validate_invariants(self) -> list[str]:
        """Check structural invariants and return any violations.

        Invariants checked:
        1. All edge endpoints exist
        2. All spans lie within their source and are not inverted
        """
        violations: list[str] = []

        for node_id, span in enumerate(self._nodes):
            if not 0 <= span.start <= span.end <= len(span.source):
                violations.append(f"Node {node_id}: span {span.start}..{span.end} out of bounds")

        for edge in self._edges:
            if not self.has_node(edge.source):
                violations.append(f"Edge {edge.id}: source {edge.source} does not exist")
            if not self.has_node(edge.target):
                violations.append(f"Edge {edge.id}: target {edge.target} does not exist")
            span = edge.span
            if not 0 <= span.start <= span.end <= len(span.source):
                violations.append(f"Edge {edge.id}: span {span.start}..{span.end} out of bounds")

        return violations

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Convert the story to plain data (offsets and sliced text)."""
        return {
            "nodes": [
                {"id": node_id, "start": span.start, "end": span.end, "text": span.text}
                for node_id, span in enumerate(self._nodes)
            ],
            "edges": [
                {
                    "id": edge.id,
                    "from": edge.source,
                    "to": edge.target,
                    "start": edge.span.start,
                    "end": edge.span.end,
                    "text": edge.span.text,
                }
                for edge in self._edges
            ],
        }

    def _require(self, node_id: int, context: str) -> None:
        if not self.has_node(node_id):
            raise NodeNotFoundError(
                node_id,
                available=list(range(len(self._nodes))),
                context=context,
            )

    def __repr__(self) -> str:
        return f"Story(nodes={self.node_count()}, edges={self.edge_count()})"


def bookmark_node(guide: Guide, name: str) -> int:
    """Resolve a bookmark name to its node id.

    Raises:
        BookmarkNotFoundError: If *name* was never declared.
    """
    try:
        return guide[name]
    except KeyError:
        raise BookmarkNotFoundError(name, available=sorted(guide)) from None
