"""Tests for the raw signal scanner."""

from __future__ import annotations

import pytest

from choco.core.raw import RawSignal, RawText, scan
from choco.core.span import Range

SAMPLES = [
    "",
    "Hello, world!",
    "Hello, @ world! @",
    "@first_signal Hello, @second_signal world!",
    "Hello, @first_signal{ 20 84 }@second_signal{ #e13f3f } world!",
    "@@@",
    "@name{unterminated",
    "@{a}@[b]@(c)@<d>",
    "tail @",
    "@bookmark{x}@choice{y}text",
    "mixed @a{ok} and @b[also} fine]",
    "é @ü{ñ} ß\n@x\tz",
    "@wave\u00a0hi @名前{値}\u3000終わり",
    "tab\t@x\t",
]


def _text(source: str, rng: Range) -> str:
    return source[rng.start : rng.end]


class TestScanProperties:
    """Round-trip and coverage hold for any input."""

    @pytest.mark.parametrize("source", SAMPLES)
    def test_round_trip(self, source: str) -> None:
        """Concatenated extents reproduce the input."""
        assert "".join(_text(source, span.range) for span in scan(source)) == source

    @pytest.mark.parametrize("source", SAMPLES)
    def test_extents_are_contiguous(self, source: str) -> None:
        """Extents touch end to start and cover the whole input."""
        position = 0
        for span in scan(source):
            assert span.range.start == position
            assert span.range.end > span.range.start
            position = span.range.end
        assert position == len(source)


class TestScanText:
    def test_plain_text_is_one_span(self) -> None:
        """Text without signals is a single span."""
        assert list(scan("Hello, world!")) == [RawText(Range(0, 13))]

    def test_empty_input_yields_nothing(self) -> None:
        assert list(scan("")) == []


class TestScanSignals:
    """Signal shapes and their sub-ranges."""

    def test_bare_signals(self) -> None:
        """'@' before whitespace or at the end is an empty signal."""
        spans = list(scan("Hello, @ world! @"))

        assert [type(s) for s in spans] == [RawText, RawSignal, RawText, RawSignal]
        assert spans[1].range == Range(7, 8)
        assert spans[3].range == Range(16, 17)
        assert all(s.is_empty for s in spans if isinstance(s, RawSignal))

    def test_prompt_stops_at_whitespace(self) -> None:
        """A prompt runs until whitespace and excludes it."""
        signal = next(scan("@wave hello"))

        assert isinstance(signal, RawSignal)
        assert signal.prompt == Range(1, 5)
        assert signal.param.is_empty
        assert signal.range == Range(0, 5)
        assert not signal.bracketed

    @pytest.mark.parametrize("space", ["\t", "\u00a0", "\u3000", "\u2003"])
    def test_prompt_stops_at_any_unicode_whitespace(self, space: str) -> None:
        source = f"@wave{space}hello"
        spans = list(scan(source))

        signal = spans[0]
        assert isinstance(signal, RawSignal)
        assert signal.prompt == Range(1, 5)
        assert spans[1] == RawText(Range(5, 11))

    def test_offsets_count_code_points(self) -> None:
        """Multibyte characters advance offsets by one each."""
        source = "é @ü{ñ} ß"
        spans = list(scan(source))

        assert spans[0] == RawText(Range(0, 2))
        signal = spans[1]
        assert isinstance(signal, RawSignal)
        assert signal.prompt == Range(3, 4)
        assert signal.param == Range(5, 6)
        assert signal.range == Range(2, 7)
        assert spans[2] == RawText(Range(7, 9))

    def test_call_has_prompt_and_param(self) -> None:
        """'@name{text}' splits into prompt and param, brackets excluded."""
        source = "@bookmark{intro}rest"
        signal = next(scan(source))

        assert isinstance(signal, RawSignal)
        assert _text(source, signal.prompt) == "bookmark"
        assert _text(source, signal.param) == "intro"
        assert signal.range == Range(0, 16)
        assert signal.bracketed

    def test_param_only(self) -> None:
        source = "@{ My param }"
        signal = next(scan(source))

        assert isinstance(signal, RawSignal)
        assert signal.prompt.is_empty
        assert _text(source, signal.param) == " My param "

    @pytest.mark.parametrize(
        ("source", "param"),
        [("@x{a}", "a"), ("@x[a]", "a"), ("@x(a)", "a"), ("@x<a>", "a")],
    )
    def test_all_bracket_pairs(self, source: str, param: str) -> None:
        """Each of the four bracket pairs delimits a param."""
        signal = next(scan(source))
        assert isinstance(signal, RawSignal)
        assert _text(source, signal.param) == param

    def test_param_ends_at_first_matching_closer(self) -> None:
        """Brackets do not nest; the first closer of the same kind wins."""
        source = "@x{a{b}c}"
        signal = next(scan(source))

        assert isinstance(signal, RawSignal)
        assert _text(source, signal.param) == "a{b"
        assert signal.range == Range(0, 7)

    def test_mismatched_closer_is_part_of_param(self) -> None:
        source = "@b[also} fine]"
        signal = next(scan(source))

        assert isinstance(signal, RawSignal)
        assert _text(source, signal.param) == "also} fine"

    def test_unterminated_param_runs_to_end(self) -> None:
        """A missing closer extends the param to the end of the input."""
        source = "@name{unterminated"
        signal = next(scan(source))

        assert isinstance(signal, RawSignal)
        assert _text(source, signal.param) == "unterminated"
        assert signal.range.end == len(source)

    def test_empty_brackets_give_empty_param(self) -> None:
        source = "@x{}after"
        spans = list(scan(source))

        signal = spans[0]
        assert isinstance(signal, RawSignal)
        assert signal.param.is_empty
        assert signal.range == Range(0, 4)
        assert spans[1] == RawText(Range(4, 9))

    def test_signal_char_ends_prompt(self) -> None:
        """'@a@b' is two adjacent prompts."""
        source = "@a@b"
        spans = list(scan(source))

        assert len(spans) == 2
        assert all(isinstance(s, RawSignal) for s in spans)
        assert [_text(source, s.prompt) for s in spans if isinstance(s, RawSignal)] == ["a", "b"]

    def test_repeated_signal_chars(self) -> None:
        """Each '@' followed by '@' is its own empty signal."""
        spans = list(scan("@@@"))
        assert len(spans) == 3
        assert all(isinstance(s, RawSignal) and s.is_empty for s in spans)

    def test_shift_rebases_all_ranges(self) -> None:
        signal = next(scan("@a{b}"))
        assert isinstance(signal, RawSignal)

        shifted = signal.shift(10)

        assert shifted.range == Range(10, 15)
        assert shifted.prompt == Range(11, 12)
        assert shifted.param == Range(13, 14)
