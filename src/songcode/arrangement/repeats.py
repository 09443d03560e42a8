"""
Repeat Symbol Resolver - replaces `%` with the content it stands for.

Rules:
- A whole-measure `%` becomes the previous resolved measure
- A `%` position becomes the preceding resolved chord position of the
  same measure; as the first position it becomes the whole previous
  measure's content
- A `%` with no previous measure at all is an error
"""

from __future__ import annotations

from collections.abc import Sequence

from songcode.core.measure import REMOVER, REPEAT, ChordPosition, Measure
from songcode.errors import ErrorCode, SongCodeError


class RepeatSymbolResolver:
    """
    Resolves repeat symbols over a flat measure list.

    Holds no state between calls; every call walks its own input.
    """

    def resolve(self, measures: Sequence[Measure]) -> list[Measure]:
        """
        Resolve every `%` in the list.

        Args:
            measures: Flat measures, in playing order

        Returns:
            New list with no repeat symbols left

        Raises:
            SongCodeError: REPEAT_WITH_NO_PRIOR if `%` has nothing to repeat
        """
        resolved: list[Measure] = []
        previous: Measure | None = None

        for index, measure in enumerate(measures):
            if measure.is_whole_repeat:
                current = self._previous_or_fail(previous, index)
            elif REPEAT in measure.positions:
                current = self._resolve_positions(measure, previous, index)
            else:
                current = measure

            resolved.append(current)
            if len(current):
                previous = current

        return resolved

    def _resolve_positions(
        self, measure: Measure, previous: Measure | None, index: int
    ) -> Measure:
        positions: list[ChordPosition] = []
        for position in measure:
            if position != REPEAT:
                positions.append(position)
                continue

            prior = [p for p in positions if p != REMOVER]
            if prior:
                positions.append(prior[-1])
            else:
                positions.extend(self._previous_or_fail(previous, index).positions)

        return Measure(tuple(positions))

    def _previous_or_fail(self, previous: Measure | None, index: int) -> Measure:
        if previous is None:
            raise SongCodeError(
                ErrorCode.REPEAT_WITH_NO_PRIOR,
                "Repeat symbol % has no previous measure to repeat",
                context=f"Measure {index + 1}",
            )
        return previous


def resolve_repeats(measures: Sequence[Measure]) -> list[Measure]:
    """Convenience function to resolve repeat symbols."""
    return RepeatSymbolResolver().resolve(measures)
