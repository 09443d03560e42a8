"""
Loop expansion - flattens a compiled pattern into the measures it plays.
"""

from __future__ import annotations

from collections.abc import Sequence

from songcode.core.measure import LoopEnd, LoopStart, Measure, PatternElement
from songcode.patterns.counter import find_loop_end


def expand_pattern(elements: Sequence[PatternElement] | None) -> list[Measure]:
    """
    Expand loops and drop line breaks.

    Each loop body is expanded recursively, then appended `repeat` times.
    Measures outside loops are copied through in order.

    Args:
        elements: Pattern elements (None for the null pattern)

    Returns:
        Flat list of measures
    """
    result: list[Measure] = []
    if not elements:
        return result

    i = 0
    while i < len(elements):
        element = elements[i]
        if isinstance(element, Measure):
            result.append(element)
            i += 1
        elif isinstance(element, LoopStart):
            end = find_loop_end(elements, i)
            loop_end = elements[end]
            assert isinstance(loop_end, LoopEnd)
            body = expand_pattern(elements[i + 1 : end])
            result.extend(body * loop_end.repeat)
            i = end + 1
        else:
            i += 1

    return result
