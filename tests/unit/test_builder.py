"""Tests for two-pass Story construction."""

from __future__ import annotations

import pytest

from choco.core.events import iter_events
from choco.graph.builder import build, edge_pass, node_pass, read
from choco.style import event_iter


class TestReadExamples:
    """Documented graph examples."""

    def test_single_bookmark(self) -> None:
        guide, story = read("@bookmark{greet}Hello, World!")

        assert guide == {"greet": 0}
        assert story.node_count() == 1
        assert story[0].text == "Hello, World!"
        assert story.edge_count() == 0

    def test_two_bookmarks_with_parallel_choices(self) -> None:
        source = (
            "@bookmark{greet}Hello, World!\n"
            "@choice{end}Hi!\n"
            "@choice{end}Hello back at you!\n"
            "@bookmark{end}End."
        )
        guide, story = read(source)

        assert guide == {"greet": 0, "end": 1}
        assert story[guide["greet"]].text == "Hello, World!\n"
        assert story[guide["end"]].text == "End."
        assert [e.span.text for e in story.edges_connecting(0, 1)] == [
            "Hello back at you!\n",
            "Hi!\n",
        ]
        assert story.validate_invariants() == []

    def test_cave(self, cave_source: str) -> None:
        guide, story = read(cave_source)

        assert guide == {"intro": 0, "left": 1, "right": 2}
        assert story[0].text == "Welcome to the @style{b}@{cave}.\n"
        assert story[1].text == "It is dark.\n"
        assert story[2].text == "You found the exit!"
        assert [(e.source, e.target, e.span.text) for e in story.edges()] == [
            (0, 1, "Take the left tunnel.\n"),
            (0, 2, "Take the right tunnel.\n"),
            (1, 0, "Go back.\n"),
        ]


class TestBlockBoundaries:
    """Where bookmark and choice text starts and ends."""

    def test_forward_references_resolve(self) -> None:
        """A choice may name a bookmark declared later."""
        guide, story = read("@bookmark{a}start@choice{b}go@bookmark{b}done")

        assert story.edge_count() == 1
        (edge,) = story.edges()
        assert (edge.source, edge.target, edge.span.text) == (0, guide["b"], "go")

    def test_empty_block_text(self) -> None:
        guide, story = read("@bookmark{a}@bookmark{b}x")

        assert story[guide["a"]].text == ""
        assert story[guide["b"]].text == "x"

    def test_block_keeps_passthrough_signals(self) -> None:
        """Other signals remain part of the block text."""
        _, story = read("@bookmark{a}x @color{red}")
        assert story[0].text == "x @color{red}"

    def test_trailing_newline_is_not_part_of_last_block(self) -> None:
        _, story = read("@bookmark{a}x\n")
        assert story[0].text == "x"

    def test_last_block_ending_in_prompt(self) -> None:
        _, story = read("@bookmark{a}Wave @hello")
        assert story[0].text == "Wave @hello"

    def test_unterminated_bookmark_param(self) -> None:
        """A bookmark whose name runs to the end gets an empty block."""
        guide, story = read("@bookmark{a")

        assert guide == {"a": 0}
        assert story[0].text == ""
        assert story.validate_invariants() == []

    def test_other_brackets_work_for_reserved_signals(self) -> None:
        guide, story = read("@bookmark[a]one@choice(b)go@bookmark<b>two")

        assert guide == {"a": 0, "b": 1}
        assert story[0].text == "one"
        assert [e.span.text for e in story.edges()] == ["go"]

    def test_text_before_first_bookmark_is_ignored(self) -> None:
        guide, story = read("Preface.\n@bookmark{a}Body")

        assert guide == {"a": 0}
        assert story[0].text == "Body"


class TestTolerance:
    """The builder never raises on authoring mistakes."""

    def test_unknown_choice_target_is_dropped(self) -> None:
        guide, story = read("@bookmark{a}x@choice{nowhere}lost")

        assert guide == {"a": 0}
        assert story.edge_count() == 0

    def test_choice_before_any_bookmark_is_dropped(self) -> None:
        nodes = node_pass(iter_events("@choice{a}early@bookmark{a}body"))
        unresolved = edge_pass(nodes)

        assert nodes.story.edge_count() == 0
        assert len(unresolved) == 1
        assert unresolved[0].source is None
        assert unresolved[0].span.text == "early"
        assert nodes.story[0].text == "body"

    def test_duplicate_bookmark_keeps_first(self) -> None:
        """A repeated name is skipped; its choices stay with the enclosing node."""
        source = "@bookmark{a}one@bookmark{a}two@choice{b}go@bookmark{b}end"
        nodes = node_pass(iter_events(source))
        edge_pass(nodes)

        assert nodes.guide == {"a": 0, "b": 1}
        assert nodes.story[0].text == "one"
        assert [d.name for d in nodes.duplicates] == ["a"]
        assert nodes.duplicates[0].span.text == "two"
        assert [(e.source, e.target) for e in nodes.story.edges()] == [(0, 1)]

    def test_empty_document(self) -> None:
        guide, story = read("")
        assert guide == {}
        assert story.node_count() == 0

    def test_plain_prose(self) -> None:
        guide, story = read("No signals here.\nNone at all.")
        assert guide == {}
        assert story.node_count() == 0

    def test_bare_reserved_prompts_are_not_blocks(self) -> None:
        guide, _ = read("@bookmark intro")
        assert guide == {}


class TestNodePass:
    def test_requests_record_source_and_target(self) -> None:
        nodes = node_pass(iter_events("@bookmark{a}x@choice{b}y@choice{c}z"))

        assert [(r.source, r.target, r.span.text) for r in nodes.requests] == [
            (0, "b", "y"),
            (0, "c", "z"),
        ]
        assert nodes.story.edge_count() == 0


def test_build_accepts_styled_events() -> None:
    """Decorated events produce the same graph as composed ones."""
    source = "@bookmark{a}@style{b}@{Bold} text@choice{b}go@bookmark{b}end"
    guide, story = build(event_iter(source))
    expected_guide, expected_story = read(source)

    assert guide == expected_guide
    assert story.to_dict() == expected_story.to_dict()
    assert story[0].text == "@style{b}@{Bold} text"


@pytest.mark.parametrize(
    ("source", "text"),
    [
        ("@bookmark{a}Go @style{b}@{now}", "Go @style{b}@{now}"),
        ("@bookmark{a}x @style{z}@{y}", "x @style{z}@{y}"),
        ("@bookmark{a}x @style{i}@[y]\n", "x @style{i}@[y]"),
    ],
)
def test_styled_run_ending_the_last_block(source: str, text: str) -> None:
    """A trailing styled run keeps its closing bracket in the block."""
    guide, story = build(event_iter(source))
    expected_guide, expected_story = read(source)

    assert guide == expected_guide
    assert story.to_dict() == expected_story.to_dict()
    assert story[0].text == text


def test_styled_run_ending_a_choice_block() -> None:
    source = "@bookmark{b}end@bookmark{a}@choice{b}pick @style{b}@{me}"
    _, story = build(event_iter(source))
    (edge,) = story.edges()

    assert edge.span.text == "pick @style{b}@{me}"
