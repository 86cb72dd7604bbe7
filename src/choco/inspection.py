"""Document inspection.

Reports structural problems the builder silently tolerates: choices that
name unknown bookmarks, duplicate bookmark names, choices outside any
bookmark, dead ends and bookmarks no choice leads to. Pure analysis; works
on any input.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from choco.core.events import iter_events
from choco.graph.builder import edge_pass, node_pass
from choco.observability.logging import get_logger

log = get_logger(__name__)


@dataclass
class StorySummary:
    """High-level graph statistics."""

    bookmarks: int
    nodes: int
    edges: int
    characters: int


@dataclass
class ChoiceIssue:
    """A choice that did not become an edge."""

    target: str
    source: str | None
    offset: int


@dataclass
class InspectionReport:
    """Complete inspection report for one document."""

    summary: StorySummary
    unresolved_choices: list[ChoiceIssue] = field(default_factory=list)
    orphan_choices: list[ChoiceIssue] = field(default_factory=list)
    duplicate_bookmarks: list[str] = field(default_factory=list)
    dead_ends: list[str] = field(default_factory=list)
    unreachable: list[str] = field(default_factory=list)

    @property
    def has_problems(self) -> bool:
        """Whether authoring mistakes were found (dead ends are normal endings)."""
        return bool(self.unresolved_choices or self.orphan_choices or self.duplicate_bookmarks)


def inspect_source(source: str) -> InspectionReport:
    """Run all checks on a document.

    Args:
        source: Full document text.

    Returns:
        InspectionReport with all findings.
    """
    nodes = node_pass(iter_events(source))
    failed = edge_pass(nodes)
    story = nodes.story

    names = {node_id: name for name, node_id in nodes.guide.items()}

    unresolved: list[ChoiceIssue] = []
    orphans: list[ChoiceIssue] = []
    for request in failed:
        issue = ChoiceIssue(
            target=request.target,
            source=names.get(request.source) if request.source is not None else None,
            offset=request.span.start,
        )
        if request.source is None:
            orphans.append(issue)
        else:
            unresolved.append(issue)

    dead_ends = [names[node_id] for node_id, _ in story.nodes() if not story.edges_from(node_id)]
    # The first bookmark is where reading starts.
    unreachable = [
        names[node_id]
        for node_id, _ in story.nodes()
        if node_id != 0 and not story.edges_to(node_id)
    ]

    report = InspectionReport(
        summary=StorySummary(
            bookmarks=len(nodes.guide),
            nodes=story.node_count(),
            edges=story.edge_count(),
            characters=len(source),
        ),
        unresolved_choices=unresolved,
        orphan_choices=orphans,
        duplicate_bookmarks=[d.name for d in nodes.duplicates],
        dead_ends=dead_ends,
        unreachable=unreachable,
    )

    log.info(
        "inspection_complete",
        nodes=report.summary.nodes,
        edges=report.summary.edges,
        unresolved=len(unresolved),
        duplicates=len(report.duplicate_bookmarks),
    )

    return report
