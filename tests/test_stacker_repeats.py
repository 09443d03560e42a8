"""
Tests for measure stacking and repeat resolution.
"""

import pytest

from songcode.arrangement import (
    RepeatSymbolResolver,
    SectionModifiers,
    resolve_repeats,
    stack_measures,
)
from songcode.core import CutModifier, Measure
from songcode.errors import ErrorCode, SongCodeError
from songcode.patterns import compile_pattern

A, B, G, D, E = (Measure.of(c) for c in "ABGDE")
PATTERN = [A, G, D, E]


class TestStackMeasures:
    """Tests for stack_measures."""

    def test_identity(self) -> None:
        """No modifiers returns an equal, new list."""
        result = stack_measures(PATTERN)
        assert result == PATTERN
        assert result is not PATTERN

    def test_repeat(self) -> None:
        """Repeat concatenates copies."""
        assert stack_measures(PATTERN, SectionModifiers(repeat=2)) == PATTERN * 2

    def test_cut_start(self) -> None:
        """Cut start drops leading measures."""
        mods = SectionModifiers(cut_start=CutModifier(1, 0))
        assert stack_measures(PATTERN, mods) == [G, D, E]

    def test_cut_start_partial(self) -> None:
        """Leftover beats drop one more measure."""
        mods = SectionModifiers(cut_start=CutModifier(1, 2))
        assert stack_measures(PATTERN, mods) == [D, E]

    def test_cut_end_partial(self) -> None:
        """A beats-only cut drops the last measure."""
        mods = SectionModifiers(cut_end=CutModifier(0, 1))
        assert stack_measures(PATTERN, mods) == [A, G, D]

    @pytest.mark.parametrize(
        "mods",
        [
            SectionModifiers(cut_start=CutModifier(10, 0)),
            SectionModifiers(cut_end=CutModifier(10, 0)),
            SectionModifiers(cut_start=CutModifier(3, 0), cut_end=CutModifier(3, 0)),
        ],
    )
    def test_oversized_cuts_empty_the_list(self, mods: SectionModifiers) -> None:
        """Cuts larger than the list leave nothing, never wrap around."""
        assert stack_measures(PATTERN, mods) == []

    def test_repeat_before_cut(self) -> None:
        """Cuts apply to the repeated list."""
        mods = SectionModifiers(repeat=2, cut_start=CutModifier(3, 0))
        assert stack_measures(PATTERN, mods) == [E, A, G, D, E]

    def test_before_and_after_from_modifiers(self) -> None:
        """Before/after patterns are expanded when not given."""
        mods = SectionModifiers(before=compile_pattern("[B]2"), after=compile_pattern("A"))
        assert stack_measures(PATTERN, mods) == [B, B, *PATTERN, A]

    def test_before_not_cut(self) -> None:
        """Before is prepended after cutting."""
        mods = SectionModifiers(cut_start=CutModifier(1, 0), before=compile_pattern("B"))
        assert stack_measures(PATTERN, mods) == [B, G, D, E]

    def test_explicit_before_and_after(self) -> None:
        """Given measures take precedence over the modifier patterns."""
        mods = SectionModifiers(before=compile_pattern("B"))
        assert stack_measures(PATTERN, mods, before=[E], after=[E]) == [E, *PATTERN, E]

    def test_count_matches_budget(self) -> None:
        """Stacked length equals the section measure budget."""
        mods = SectionModifiers(
            repeat=3,
            cut_start=CutModifier(1, 1),
            cut_end=CutModifier(1, 0),
            before=compile_pattern("B;B"),
            after=compile_pattern("[A]3"),
        )
        assert len(stack_measures(PATTERN, mods)) == mods.final_measures(len(PATTERN))

    def test_expanded_loop_alternates(self) -> None:
        """[A;G]3 stacks to six measures, A and G alternating."""
        result = stack_measures(compile_pattern("[A;G]3").expand())
        assert len(result) == 6
        assert result == [A, G] * 3

    def test_input_untouched(self) -> None:
        """The input list is not modified."""
        measures = list(PATTERN)
        stack_measures(measures, SectionModifiers(repeat=2, cut_end=CutModifier(1, 0)))
        assert measures == PATTERN


class TestWholeMeasureRepeat:
    """Tests for % filling a whole measure."""

    def test_copies_previous_measure(self) -> None:
        """% becomes the previous measure."""
        assert resolve_repeats([A, Measure.of("%")]) == [A, A]

    def test_copies_multi_position_measure(self) -> None:
        """Every position of the previous measure is copied."""
        ad = Measure.of("A", "D")
        assert resolve_repeats([ad, Measure.of("%")]) == [ad, ad]

    def test_chained(self) -> None:
        """A run of % repeats the last real measure."""
        assert resolve_repeats([G, Measure.of("%"), Measure.of("%")]) == [G, G, G]

    def test_no_prior(self) -> None:
        """% as the first measure has nothing to repeat."""
        with pytest.raises(SongCodeError) as exc_info:
            resolve_repeats([Measure.of("%"), A])
        assert exc_info.value.code == ErrorCode.REPEAT_WITH_NO_PRIOR


class TestPositionRepeat:
    """Tests for % inside a multi-position measure."""

    def test_repeats_preceding_position(self) -> None:
        """[A %] resolves to [A A]."""
        assert resolve_repeats([Measure.of("A", "%")]) == [Measure.of("A", "A")]

    def test_repeats_latest_position(self) -> None:
        """The nearest resolved position is used."""
        result = resolve_repeats([Measure.of("A", "D", "%", "%")])
        assert result == [Measure.of("A", "D", "D", "D")]

    def test_skips_removers(self) -> None:
        """A remover is never repeated; the chord before it is."""
        assert resolve_repeats([Measure.of("A", "=", "%")]) == [Measure.of("A", "=", "A")]

    def test_first_position_uses_previous_measure(self) -> None:
        """A leading % takes the whole previous measure's content."""
        previous = Measure.of("A", "G")
        result = resolve_repeats([previous, Measure.of("%", "D")])
        assert result == [previous, Measure.of("A", "G", "D")]

    def test_first_position_no_prior(self) -> None:
        """A leading % in the first measure fails."""
        with pytest.raises(SongCodeError) as exc_info:
            resolve_repeats([Measure.of("%", "D")])
        assert exc_info.value.code == ErrorCode.REPEAT_WITH_NO_PRIOR

    def test_resolved_measure_feeds_next(self) -> None:
        """A resolved measure is what a following % repeats."""
        result = resolve_repeats([A, Measure.of("D", "%"), Measure.of("%")])
        assert result == [A, Measure.of("D", "D"), Measure.of("D", "D")]


class TestResolverState:
    """Tests for resolver statelessness."""

    def test_no_state_between_calls(self) -> None:
        """Each call starts with no previous measure."""
        resolver = RepeatSymbolResolver()
        assert resolver.resolve([A]) == [A]
        with pytest.raises(SongCodeError):
            resolver.resolve([Measure.of("%")])

    def test_empty_input(self) -> None:
        """Nothing in, nothing out."""
        assert resolve_repeats([]) == []

    def test_other_symbols_untouched(self) -> None:
        """Silence and blank are left as they are."""
        measures = [A, Measure.of("_"), Measure.of("-")]
        assert resolve_repeats(measures) == measures
