"""
Core SongCode primitives.

These are the immutable values everything else composes on:
- ChordToken: A chord split into base and extension
- SymbolPosition: Repeat, silence, remover or blank position
- Measure: Ordered positions of one bar
- LoopStart / LoopEnd / LineBreak: Pattern structure markers
- TimeSignature: Beats per measure and beat unit
- CutModifier: Measures/beats cut from a section edge
"""

from songcode.core.chord import ChordToken, parse_chord
from songcode.core.measure import (
    BLANK,
    LINE_BREAK,
    LOOP_START,
    REMOVER,
    REPEAT,
    SILENCE,
    ChordPosition,
    LineBreak,
    LoopEnd,
    LoopStart,
    Measure,
    PatternElement,
    SymbolPosition,
    element_from_json,
)
from songcode.core.rhythm import CutModifier, TimeSignature

__all__ = [
    # Chord
    "ChordToken",
    "parse_chord",
    # Measure
    "ChordPosition",
    "SymbolPosition",
    "Measure",
    "PatternElement",
    "LoopStart",
    "LoopEnd",
    "LineBreak",
    "element_from_json",
    "REPEAT",
    "SILENCE",
    "REMOVER",
    "BLANK",
    "LOOP_START",
    "LINE_BREAK",
    # Rhythm
    "TimeSignature",
    "CutModifier",
]
