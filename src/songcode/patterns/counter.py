"""
Measure counting over compiled pattern elements.

Loops are flat runs bracketed by LoopStart/LoopEnd markers, so counting
walks the run and recurses on each loop body.
"""

from __future__ import annotations

from collections.abc import Sequence

from songcode.core.measure import LoopEnd, LoopStart, Measure, PatternElement
from songcode.errors import ErrorCode, SongCodeError


def find_loop_end(elements: Sequence[PatternElement], start: int) -> int:
    """
    Find the LoopEnd matching the LoopStart at `start`.

    Args:
        elements: Pattern elements
        start: Index of a LoopStart

    Returns:
        Index of the matching LoopEnd at the same nesting depth

    Raises:
        SongCodeError: MISMATCHED_BRACKETS if the loop is never closed
    """
    depth = 0
    for i in range(start, len(elements)):
        element = elements[i]
        if isinstance(element, LoopStart):
            depth += 1
        elif isinstance(element, LoopEnd):
            depth -= 1
            if depth == 0:
                return i

    raise SongCodeError(
        ErrorCode.MISMATCHED_BRACKETS,
        "Mismatched loop brackets: loop start has no matching end",
    )


def count_measures(elements: Sequence[PatternElement] | None) -> int:
    """
    Count the measures a pattern plays.

    A measure counts 1, a line break 0, and a loop counts its body
    times its repeat count, at any nesting depth.

    Args:
        elements: Pattern elements (None for the null pattern)

    Returns:
        Total number of measures
    """
    if not elements:
        return 0

    total = 0
    i = 0
    while i < len(elements):
        element = elements[i]
        if isinstance(element, Measure):
            total += 1
            i += 1
        elif isinstance(element, LoopStart):
            end = find_loop_end(elements, i)
            loop_end = elements[end]
            assert isinstance(loop_end, LoopEnd)
            total += loop_end.repeat * count_measures(elements[i + 1 : end])
            i = end + 1
        else:
            i += 1

    return total
