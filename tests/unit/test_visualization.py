"""Tests for story graph visualization module."""

from __future__ import annotations

from choco.graph import read
from choco.visualization import (
    StoryGraph,
    VizEdge,
    VizNode,
    build_story_graph,
    render_dot,
    render_mermaid,
)


def _cave_graph(source: str, **kwargs: int) -> StoryGraph:
    guide, story = read(source)
    return build_story_graph(guide, story, **kwargs)


class TestBuildStoryGraph:
    def test_nodes_named_after_bookmarks(self, cave_source: str) -> None:
        sg = _cave_graph(cave_source)

        assert [n.id for n in sg.nodes] == ["intro", "left", "right"]
        assert sg.nodes[0].label == "Welcome to the @style{b}@{cave}."

    def test_start_and_endings(self, cave_source: str) -> None:
        """The first bookmark is the start; nodes without choices are endings."""
        sg = _cave_graph(cave_source)
        flags = {n.id: (n.is_start, n.is_ending, n.outgoing_count) for n in sg.nodes}

        assert flags == {
            "intro": (True, False, 2),
            "left": (False, False, 1),
            "right": (False, True, 0),
        }

    def test_edges(self, cave_source: str) -> None:
        sg = _cave_graph(cave_source)

        assert [(e.from_id, e.to_id, e.label) for e in sg.edges] == [
            ("intro", "left", "Take the left tunnel."),
            ("intro", "right", "Take the right tunnel."),
            ("left", "intro", "Go back."),
        ]

    def test_labels_are_truncated(self, cave_source: str) -> None:
        sg = _cave_graph(cave_source, label_length=10)

        assert sg.nodes[0].label == "Welcome..."
        assert sg.edges[0].label == "Take th..."

    def test_empty_story(self) -> None:
        sg = _cave_graph("no bookmarks")
        assert sg.nodes == []
        assert sg.edges == []


class TestRenderDot:
    def test_structure(self, cave_source: str) -> None:
        dot = render_dot(_cave_graph(cave_source))

        assert dot.startswith("digraph story {")
        assert dot.endswith("}")
        assert '"intro" [shape=doubleoctagon' in dot
        assert '"right" [shape=octagon' in dot
        assert '"left" [shape=box' in dot
        assert '"intro" -> "left" [label="Take the left tunnel."];' in dot

    def test_no_labels(self, cave_source: str) -> None:
        dot = render_dot(_cave_graph(cave_source), no_labels=True)

        assert '"intro" -> "left";' in dot
        assert "Take the left tunnel." not in dot

    def test_escapes_quotes(self) -> None:
        sg = StoryGraph(
            nodes=[VizNode(id='say "hi"', label='a "quote"', is_start=True)],
            edges=[VizEdge(from_id='say "hi"', to_id='say "hi"', label='"again"')],
        )
        dot = render_dot(sg)

        assert '"say \\"hi\\""' in dot
        assert 'label="\\"again\\""' in dot


class TestRenderMermaid:
    def test_structure(self, cave_source: str) -> None:
        mermaid = render_mermaid(_cave_graph(cave_source))
        lines = mermaid.splitlines()

        assert lines[0] == "graph LR"
        assert '  n_intro["Welcome to the @style{b}@{cave}."]:::start' in lines
        assert '  n_right["You found the exit!"]:::ending' in lines
        assert '  n_intro -->|"Take the left tunnel."| n_left' in lines
        assert "  classDef start fill:#90EE90,stroke:#333" in lines

    def test_no_labels(self, cave_source: str) -> None:
        mermaid = render_mermaid(_cave_graph(cave_source), no_labels=True)
        assert "  n_left --> n_intro" in mermaid.splitlines()

    def test_ids_are_sanitized(self) -> None:
        sg = StoryGraph(nodes=[VizNode(id="dark-room 2", label="")])
        mermaid = render_mermaid(sg)

        assert '  n_dark_room_2["dark-room 2"]' in mermaid.splitlines()
