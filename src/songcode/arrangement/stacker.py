"""
Measure Stacker - applies section modifiers to a flat measure list.

Order is fixed: repeat, cut start, cut end, prepend before, append after.
"""

from __future__ import annotations

from collections.abc import Sequence

from songcode.arrangement.modifiers import SectionModifiers
from songcode.core.measure import Measure


def stack_measures(
    measures: Sequence[Measure],
    modifiers: SectionModifiers | None = None,
    before: Sequence[Measure] | None = None,
    after: Sequence[Measure] | None = None,
) -> list[Measure]:
    """
    Build a section's played measures from its expanded pattern.

    A cut with leftover beats removes one extra measure, matching the
    section measure budget. A cut larger than the list empties it.

    Args:
        measures: Expanded (and repeat-resolved) pattern measures
        modifiers: Section modifiers (identity if None)
        before: Measures to prepend; defaults to the expanded `before` pattern
        after: Measures to append; defaults to the expanded `after` pattern

    Returns:
        New list of measures; the input is not modified
    """
    mods = modifiers or SectionModifiers()
    result = list(measures) * mods.repeat

    if mods.cut_start:
        result = result[min(mods.cut_start.slots, len(result)) :]

    if mods.cut_end:
        result = result[: max(len(result) - mods.cut_end.slots, 0)]

    if before is None and mods.before is not None:
        before = mods.before.expand()
    if after is None and mods.after is not None:
        after = mods.after.expand()

    return [*(before or ()), *result, *(after or ())]
