"""Story graph visualization.

Extracts bookmark/choice structure from a Story and renders it as DOT
(Graphviz) or Mermaid markup.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from choco.config import DEFAULT_LABEL_LENGTH
from choco.observability.logging import get_logger

if TYPE_CHECKING:
    from choco.graph.story import Guide, Story

log = get_logger(__name__)

_NODE_COLOR = "#ADD8E6"  # light blue
_START_COLOR = "#90EE90"  # light green
_ENDING_COLOR = "#FFB6C1"  # light pink


@dataclass
class VizNode:
    """A bookmark node in the visualization."""

    id: str
    label: str
    is_start: bool = False
    is_ending: bool = False
    outgoing_count: int = 0


@dataclass
class VizEdge:
    """A choice edge in the visualization."""

    from_id: str
    to_id: str
    label: str = ""


@dataclass
class StoryGraph:
    """Complete visualization data extracted from a Story."""

    nodes: list[VizNode]
    edges: list[VizEdge] = field(default_factory=list)


def build_story_graph(
    guide: Guide,
    story: Story,
    *,
    label_length: int = DEFAULT_LABEL_LENGTH,
) -> StoryGraph:
    """Extract visualization data from a Story.

    Nodes are named after their bookmarks. The first bookmark is the start;
    nodes without outgoing choices are endings.

    Args:
        guide: Bookmark name -> node id.
        story: Story built from the same document.
        label_length: Maximum label length before truncation.

    Returns:
        StoryGraph with nodes and edges in declaration order.
    """
    names = {node_id: name for name, node_id in guide.items()}

    nodes: list[VizNode] = []
    for node_id, span in story.nodes():
        outgoing = len(story.edges_from(node_id))
        nodes.append(
            VizNode(
                id=names.get(node_id, str(node_id)),
                label=_truncate(_preview(span.text), label_length),
                is_start=node_id == 0,
                is_ending=outgoing == 0,
                outgoing_count=outgoing,
            )
        )

    edges = [
        VizEdge(
            from_id=names.get(edge.source, str(edge.source)),
            to_id=names.get(edge.target, str(edge.target)),
            label=_truncate(_preview(edge.span.text), label_length),
        )
        for edge in story.edges()
    ]

    log.info("story_graph_built", nodes=len(nodes), edges=len(edges))

    return StoryGraph(nodes=nodes, edges=edges)


def render_dot(sg: StoryGraph, *, no_labels: bool = False) -> str:
    """Render a StoryGraph as DOT (Graphviz) markup.

    Args:
        sg: Story graph data.
        no_labels: If True, omit choice labels on edges.

    Returns:
        DOT format string.
    """
    lines = [
        "digraph story {",
        "  rankdir=LR;",
        '  node [fontname="Helvetica" fontsize=10 style="filled,solid"];',
        '  edge [fontname="Helvetica" fontsize=8];',
        "",
    ]

    for node in sg.nodes:
        attrs = _dot_node_attrs(node)
        attr_str = " ".join(f"{k}={v}" for k, v in attrs.items())
        lines.append(f'  "{_dot_escape(node.id)}" [{attr_str}];')

    lines.append("")

    for edge in sg.edges:
        suffix = ""
        if not no_labels and edge.label:
            suffix = f' [label="{_dot_escape(edge.label)}"]'
        lines.append(f'  "{_dot_escape(edge.from_id)}" -> "{_dot_escape(edge.to_id)}"{suffix};')

    lines.append("}")
    return "\n".join(lines)


def render_mermaid(sg: StoryGraph, *, no_labels: bool = False) -> str:
    """Render a StoryGraph as Mermaid markup.

    Args:
        sg: Story graph data.
        no_labels: If True, omit choice labels on edges.

    Returns:
        Mermaid format string.
    """
    lines = ["graph LR"]

    for node in sg.nodes:
        safe_id = _mermaid_id(node.id)
        label = _mermaid_escape(node.label or node.id)
        if node.is_start:
            lines.append(f'  {safe_id}["{label}"]:::start')
        elif node.is_ending:
            lines.append(f'  {safe_id}["{label}"]:::ending')
        else:
            lines.append(f'  {safe_id}["{label}"]')

    lines.append("")

    for edge in sg.edges:
        src = _mermaid_id(edge.from_id)
        dst = _mermaid_id(edge.to_id)
        if not no_labels and edge.label:
            lines.append(f'  {src} -->|"{_mermaid_escape(edge.label)}"| {dst}')
        else:
            lines.append(f"  {src} --> {dst}")

    lines.append("")
    lines.append(f"  classDef start fill:{_START_COLOR},stroke:#333")
    lines.append(f"  classDef ending fill:{_ENDING_COLOR},stroke:#333")

    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _preview(text: str) -> str:
    """Collapse whitespace so multi-line text fits on one label line."""
    return " ".join(text.split())


def _truncate(text: str, max_len: int) -> str:
    """Truncate text with ellipsis if too long."""
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def _dot_node_attrs(node: VizNode) -> dict[str, str]:
    """Build DOT attribute dict for a node."""
    attrs: dict[str, str] = {}

    if node.is_start:
        attrs["shape"] = "doubleoctagon"
        attrs["fillcolor"] = f'"{_START_COLOR}"'
    elif node.is_ending:
        attrs["shape"] = "octagon"
        attrs["fillcolor"] = f'"{_ENDING_COLOR}"'
    else:
        attrs["shape"] = "box"
        attrs["fillcolor"] = f'"{_NODE_COLOR}"'

    label = f"{node.id}\\n{_dot_escape(node.label)}" if node.label else _dot_escape(node.id)
    attrs["label"] = f'"{label}"'
    return attrs


def _dot_escape(text: str) -> str:
    """Escape special characters for DOT labels."""
    return text.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


def _mermaid_id(node_id: str) -> str:
    """Convert a node ID to a Mermaid-safe identifier."""
    safe = "".join(ch if ch.isalnum() else "_" for ch in node_id)
    return f"n_{safe}"


def _mermaid_escape(text: str) -> str:
    """Escape special characters for Mermaid labels."""
    return text.replace('"', "&quot;").replace("\n", " ")
