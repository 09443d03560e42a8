"""
Section modifiers and the section measure budget.

A section plays its pattern, then reshapes it: repeat the whole thing,
cut measures from either edge, and wrap it with before/after patterns.
"""

from __future__ import annotations

from dataclasses import dataclass

from songcode.core.rhythm import CutModifier
from songcode.patterns.compiler import CompiledPattern


@dataclass(frozen=True)
class SectionModifiers:
    """
    Structural modifiers of one section.

    Captured once per section and consumed, never mutated, when the
    section's measures are stacked.
    """

    repeat: int = 1
    cut_start: CutModifier | None = None
    cut_end: CutModifier | None = None
    before: CompiledPattern | None = None
    after: CompiledPattern | None = None

    def __post_init__(self) -> None:
        if self.repeat < 1:
            raise ValueError(f"Repeat must be >= 1, got {self.repeat}")

    @property
    def cut_slots(self) -> int:
        """Measures removed by both cuts together."""
        return sum(cut.slots for cut in (self.cut_start, self.cut_end) if cut)

    def final_measures(self, pattern_measures: int) -> int:
        """
        Measures the section plays once every modifier is applied.

        final = pattern * repeat - cut_start - cut_end + before + after,
        where a cut with leftover beats removes one extra measure.

        Args:
            pattern_measures: Measure count of the section's pattern

        Returns:
            Expected measure count of the section
        """
        total = pattern_measures * self.repeat - self.cut_slots
        if self.before:
            total += self.before.measures
        if self.after:
            total += self.after.measures
        return total


def section_measure_count(pattern_measures: int, modifiers: SectionModifiers | None = None) -> int:
    """
    Convenience function for the section measure budget.

    Missing modifiers default to their identity (repeat 1, no cuts,
    nothing before or after).
    """
    return (modifiers or SectionModifiers()).final_measures(pattern_measures)
