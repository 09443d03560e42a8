"""
Pattern system - compilation, counting, expansion and deduplication.

Patterns are written once in terse text and compiled to measures.
Sections refer to them and modify them; the patterns stay immutable.
"""

from songcode.patterns.compiler import CompiledPattern, PatternCompiler, compile_pattern
from songcode.patterns.counter import count_measures, find_loop_end
from songcode.patterns.expander import expand_pattern
from songcode.patterns.registry import (
    PatternAssignment,
    PatternRegistry,
    normalize_pattern,
    pattern_id,
)

__all__ = [
    "CompiledPattern",
    "PatternAssignment",
    "PatternCompiler",
    "PatternRegistry",
    "compile_pattern",
    "count_measures",
    "expand_pattern",
    "find_loop_end",
    "normalize_pattern",
    "pattern_id",
]
