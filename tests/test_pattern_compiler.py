"""
Tests for the pattern compiler.
"""

import pytest

from songcode.core import (
    BLANK,
    LINE_BREAK,
    LOOP_START,
    REMOVER,
    REPEAT,
    SILENCE,
    ChordToken,
    LoopEnd,
    Measure,
)
from songcode.errors import ErrorCode, SongCodeError
from songcode.patterns import CompiledPattern, PatternCompiler, compile_pattern


class TestMeasures:
    """Tests for measure and position parsing."""

    def test_one_chord_per_measure(self, compiler: PatternCompiler) -> None:
        """Semicolons separate measures."""
        pattern = compiler.compile("A;G;D;A")
        assert pattern.elements == (
            Measure.of("A"),
            Measure.of("G"),
            Measure.of("D"),
            Measure.of("A"),
        )
        assert pattern.measures == 4

    def test_multi_position_measures(self, compiler: PatternCompiler) -> None:
        """Whitespace separates positions within a measure."""
        pattern = compiler.compile("A D;G C")
        assert pattern.elements == (Measure.of("A", "D"), Measure.of("G", "C"))
        assert pattern.measures == 2

    def test_extensions_kept(self, compiler: PatternCompiler) -> None:
        """Chord extensions are preserved verbatim."""
        pattern = compiler.compile("Am7 F#maj7")
        assert pattern.elements == (
            Measure((ChordToken("Am", "7"), ChordToken("F#", "maj7"))),
        )

    @pytest.mark.parametrize(
        ("source", "position"),
        [("%", REPEAT), ("_", SILENCE), ("-", BLANK)],
    )
    def test_whole_measure_symbols(
        self, compiler: PatternCompiler, source: str, position: object
    ) -> None:
        """A lone symbol fills the whole measure."""
        assert compiler.compile(f"A;{source}").elements[1] == Measure((position,))

    def test_symbol_positions(self, compiler: PatternCompiler) -> None:
        """% and _ can share a measure with chords."""
        pattern = compiler.compile("A %;D _")
        assert pattern.elements == (Measure.of("A", "%"), Measure.of("D", "_"))

    def test_remover_after_chord(self, compiler: PatternCompiler) -> None:
        """= is accepted once a chord precedes it."""
        pattern = compiler.compile("A = =")
        assert pattern.elements == (Measure((ChordToken("A", ""), REMOVER, REMOVER)),)

    @pytest.mark.parametrize("source", ["= A", "=", "A;= D", "% ="])
    def test_remover_without_chord(self, compiler: PatternCompiler, source: str) -> None:
        """= needs a chord earlier in the same measure."""
        with pytest.raises(SongCodeError) as exc_info:
            compiler.compile(source)
        assert exc_info.value.code == ErrorCode.REMOVER_MISPLACED

    def test_invalid_chord_reports_column(self, compiler: PatternCompiler) -> None:
        """Chord errors carry the measure's column."""
        with pytest.raises(SongCodeError) as exc_info:
            compiler.compile("A;H")
        assert exc_info.value.code == ErrorCode.INVALID_CHORD
        assert exc_info.value.column == 3
        assert exc_info.value.context == "H"

    def test_blank_inside_measure_rejected(self, compiler: PatternCompiler) -> None:
        """- only stands alone; inside a measure it is not a chord."""
        with pytest.raises(SongCodeError) as exc_info:
            compiler.compile("A -")
        assert exc_info.value.code == ErrorCode.INVALID_CHORD

    def test_extra_separators_ignored(self, compiler: PatternCompiler) -> None:
        """Repeated separators and spaces produce no empty measures."""
        assert compiler.compile(" A ;; G ;").measures == 2


class TestNullPattern:
    """Tests for empty input."""

    @pytest.mark.parametrize("source", ["", "   ", "\t"])
    def test_blank_is_null(self, compiler: PatternCompiler, source: str) -> None:
        """Blank input compiles to the null pattern."""
        pattern = compiler.compile(source)
        assert pattern.is_null
        assert pattern.measures == 0
        assert pattern.expand() == []
        assert pattern.to_json() is None


class TestLoops:
    """Tests for loop and line-break syntax."""

    def test_loop_and_line_break(self, compiler: PatternCompiler) -> None:
        """Loops are bracketed by markers; ':' is a line break."""
        pattern = compiler.compile("[A;G]3:D")
        assert pattern.elements == (
            LOOP_START,
            Measure.of("A"),
            Measure.of("G"),
            LoopEnd(3),
            LINE_BREAK,
            Measure.of("D"),
        )
        assert pattern.measures == 7

    def test_to_json(self, compiler: PatternCompiler) -> None:
        """Elements serialize to the wire tokens."""
        assert compiler.compile("[A;G]3:D").to_json() == [
            "loopStart",
            [["A", ""]],
            [["G", ""]],
            "loopEnd:3",
            "newLine",
            [["D", ""]],
        ]

    def test_from_json_rebuilds(self, compiler: PatternCompiler) -> None:
        """A compiled pattern can be rebuilt from its JSON."""
        pattern = compiler.compile("[A D;G]2:E;%")
        assert CompiledPattern.from_json(pattern.source, pattern.to_json()) == pattern

    def test_adjacent_loops(self, compiler: PatternCompiler) -> None:
        """Loops can follow each other directly."""
        assert compiler.compile("[A]2[G]3").measures == 5

    def test_measure_after_loop(self, compiler: PatternCompiler) -> None:
        """A measure after the repeat count starts fresh."""
        pattern = compiler.compile("[A;G]2 D")
        assert pattern.elements[-1] == Measure.of("D")
        assert pattern.measures == 5

    def test_multi_digit_repeat(self, compiler: PatternCompiler) -> None:
        """Repeat counts can have several digits."""
        assert compiler.compile("[A]12").measures == 12

    def test_nested_loop(self, compiler: PatternCompiler) -> None:
        """Loops nest."""
        pattern = compiler.compile("[[A;G]2;D]3")
        assert pattern.elements == (
            LOOP_START,
            LOOP_START,
            Measure.of("A"),
            Measure.of("G"),
            LoopEnd(2),
            Measure.of("D"),
            LoopEnd(3),
        )
        assert pattern.measures == 15

    def test_iter_measures_includes_loop_bodies(self, compiler: PatternCompiler) -> None:
        """Written measures are visited once each, loops not multiplied."""
        pattern = compiler.compile("[A;[G]4]2:D")
        assert list(pattern.iter_measures()) == [Measure.of("A"), Measure.of("G"), Measure.of("D")]


class TestBracketErrors:
    """Tests for malformed loops."""

    @pytest.mark.parametrize("source", ["[A;G", "A;G]2", "[[A]2", "[A]2]"])
    def test_unbalanced(self, compiler: PatternCompiler, source: str) -> None:
        """Unequal bracket counts are rejected."""
        with pytest.raises(SongCodeError) as exc_info:
            compiler.compile(source)
        assert exc_info.value.code == ErrorCode.MISMATCHED_BRACKETS

    def test_stray_close(self, compiler: PatternCompiler) -> None:
        """A ] before its [ is rejected even when counts match."""
        with pytest.raises(SongCodeError, match="unexpected") as exc_info:
            compiler.compile("A]2;[G")
        assert exc_info.value.code == ErrorCode.MISMATCHED_BRACKETS
        assert exc_info.value.column == 2

    @pytest.mark.parametrize("source", ["[A;G]", "[A;G];D", "[A]x"])
    def test_missing_repeat_count(self, compiler: PatternCompiler, source: str) -> None:
        """A loop needs digits after ]."""
        with pytest.raises(SongCodeError) as exc_info:
            compiler.compile(source)
        assert exc_info.value.code == ErrorCode.MISSING_REPEAT_COUNT

    def test_zero_repeat_count(self, compiler: PatternCompiler) -> None:
        """A loop must play at least once."""
        with pytest.raises(SongCodeError, match="positive") as exc_info:
            compiler.compile("[A;G]0")
        assert exc_info.value.code == ErrorCode.MISSING_REPEAT_COUNT


class TestLoopDepth:
    """Tests for the nesting guard."""

    @staticmethod
    def nested(depth: int) -> str:
        return "[" * depth + "A" + "]1" * depth

    def test_max_depth_accepted(self, compiler: PatternCompiler) -> None:
        """Nesting up to the limit compiles."""
        pattern = compiler.compile(self.nested(32))
        assert pattern.measures == 1
        assert pattern.expand() == [Measure.of("A")]

    def test_too_deep_rejected(self, compiler: PatternCompiler) -> None:
        """One level past the limit fails."""
        with pytest.raises(SongCodeError) as exc_info:
            compiler.compile(self.nested(33))
        assert exc_info.value.code == ErrorCode.LOOP_TOO_DEEP

    def test_custom_limit(self) -> None:
        """The limit is configurable."""
        assert compile_pattern("[[A]2]2", max_depth=2).measures == 4
        with pytest.raises(SongCodeError) as exc_info:
            compile_pattern("[[A]2]2", max_depth=1)
        assert exc_info.value.code == ErrorCode.LOOP_TOO_DEEP
