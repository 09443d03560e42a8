"""
Arrangement - section-level measure arithmetic.

- SectionModifiers: repeat, cuts, before/after patterns of a section
- TimeSignatureValidator: positions must divide the beats of a measure
- LyricTimingValidator: lyric `_N` markers must cover the section
- stack_measures: applies the modifiers to a flat measure list
- RepeatSymbolResolver: replaces `%` with the content it stands for
"""

from songcode.arrangement.modifiers import SectionModifiers, section_measure_count
from songcode.arrangement.repeats import RepeatSymbolResolver, resolve_repeats
from songcode.arrangement.stacker import stack_measures
from songcode.arrangement.validator import (
    LyricTimingValidator,
    TimeSignatureValidator,
    parse_lyric_timing,
    validate_lyric_timing,
    validate_measure,
    validate_pattern,
)

__all__ = [
    "LyricTimingValidator",
    "RepeatSymbolResolver",
    "SectionModifiers",
    "TimeSignatureValidator",
    "parse_lyric_timing",
    "resolve_repeats",
    "section_measure_count",
    "stack_measures",
    "validate_lyric_timing",
    "validate_measure",
    "validate_pattern",
]
