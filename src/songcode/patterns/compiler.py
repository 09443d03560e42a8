"""
Pattern Compiler - compiles pattern strings to structured measures.

Pattern syntax:
- `;` separates measures, whitespace separates positions in a measure
- `[ ... ]N` loops the bracketed body N times (loops may nest)
- `:` is a display line break
- `%`, `_`, `-` alone fill a whole measure (repeat, silence, blank)
- `=` removes a beat share after a chord in the same measure

Examples:
    "A;G;D;A"       four one-chord measures
    "A D;G C"       two two-chord measures
    "[A;G]3:D"      A G A G A G, line break, D
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import Any

from songcode.constants import (
    LINE_BREAK,
    LOOP_CLOSE,
    LOOP_OPEN,
    MAX_LOOP_DEPTH,
    MEASURE_SEPARATOR,
    POSITION_SYMBOLS,
    WHOLE_MEASURE_SYMBOLS,
    Symbol,
)
from songcode.core.chord import ChordToken
from songcode.core.measure import (
    LINE_BREAK as LINE_BREAK_ELEMENT,
)
from songcode.core.measure import (
    LOOP_START,
    REMOVER,
    ChordPosition,
    LoopEnd,
    Measure,
    PatternElement,
    SymbolPosition,
    element_from_json,
)
from songcode.errors import ErrorCode, SongCodeError
from songcode.patterns.counter import count_measures
from songcode.patterns.expander import expand_pattern

_MEASURE_DELIMITERS = frozenset({MEASURE_SEPARATOR, LINE_BREAK, LOOP_OPEN, LOOP_CLOSE})


@dataclass(frozen=True)
class CompiledPattern:
    """
    A pattern compiled to elements.

    Created once per distinct normalized pattern text and never mutated.
    An empty source compiles to the null pattern: no elements, 0 measures.
    """

    source: str
    elements: tuple[PatternElement, ...] = ()

    @property
    def is_null(self) -> bool:
        """True for the null (empty) pattern."""
        return not self.elements

    @property
    def measures(self) -> int:
        """Measures played, with loops multiplied out."""
        return count_measures(self.elements)

    def iter_measures(self) -> Iterator[Measure]:
        """Every written measure, including those inside loop bodies."""
        for element in self.elements:
            if isinstance(element, Measure):
                yield element

    def expand(self) -> list[Measure]:
        """Flat list of played measures."""
        return expand_pattern(self.elements)

    def to_json(self) -> list[Any] | None:
        """Serialize elements; the null pattern serializes to None."""
        if self.is_null:
            return None
        return [element.to_json() for element in self.elements]

    @classmethod
    def from_json(cls, source: str, data: Sequence[Any] | None) -> CompiledPattern:
        """Rebuild a compiled pattern from its JSON form."""
        return cls(source, tuple(element_from_json(d) for d in data or ()))


class PatternCompiler:
    """
    Compiles pattern strings to CompiledPattern.

    Recursive descent: each loop body is compiled by a nested call,
    bounded by `max_depth` so adversarial input cannot exhaust the stack.
    """

    def __init__(self, max_depth: int = MAX_LOOP_DEPTH):
        """
        Initialize the compiler.

        Args:
            max_depth: Deepest loop nesting accepted
        """
        self.max_depth = max_depth

    def compile(self, source: str) -> CompiledPattern:
        """
        Compile a pattern string.

        Args:
            source: Pattern text, already extracted and normalized

        Returns:
            The compiled pattern (null pattern for blank input)

        Raises:
            SongCodeError: On any syntax error in the pattern
        """
        text = source.strip() if source else ""
        if not text:
            return CompiledPattern("")

        opens = text.count(LOOP_OPEN)
        closes = text.count(LOOP_CLOSE)
        if opens != closes:
            raise SongCodeError(
                ErrorCode.MISMATCHED_BRACKETS,
                "Mismatched loop brackets",
                context=f"{opens} '[' but {closes} ']' in: {text}",
            )

        elements = self._parse(text, 0, len(text), depth=0)
        return CompiledPattern(text, tuple(elements))

    def _parse(self, text: str, start: int, end: int, depth: int) -> list[PatternElement]:
        """Parse text[start:end] into elements."""
        result: list[PatternElement] = []
        i = start

        while i < end:
            char = text[i]

            if char == LOOP_OPEN:
                elements, i = self._parse_loop(text, i, end, depth)
                result.extend(elements)
            elif char == LOOP_CLOSE:
                raise SongCodeError(
                    ErrorCode.MISMATCHED_BRACKETS,
                    "Mismatched loop brackets: unexpected ]",
                    column=i + 1,
                    context=text,
                )
            elif char == LINE_BREAK:
                result.append(LINE_BREAK_ELEMENT)
                i += 1
            elif char == MEASURE_SEPARATOR or char.isspace():
                i += 1
            else:
                j = i
                while j < end and text[j] not in _MEASURE_DELIMITERS:
                    j += 1
                result.append(self._parse_measure(text[i:j], column=i + 1))
                i = j

        return result

    def _parse_loop(
        self, text: str, start: int, end: int, depth: int
    ) -> tuple[list[PatternElement], int]:
        """Parse a `[...]N` loop starting at text[start]; return elements and next index."""
        if depth + 1 > self.max_depth:
            raise SongCodeError(
                ErrorCode.LOOP_TOO_DEEP,
                f"Loops nested deeper than {self.max_depth} levels",
                column=start + 1,
            )

        close = self._find_close(text, start, end)

        digits_end = close + 1
        while digits_end < end and text[digits_end].isdigit():
            digits_end += 1

        repeat_text = text[close + 1 : digits_end]
        if not repeat_text:
            raise SongCodeError(
                ErrorCode.MISSING_REPEAT_COUNT,
                "Loop without repeat count",
                column=close + 1,
                context=text[start:digits_end],
            )

        repeat = int(repeat_text)
        if repeat < 1:
            raise SongCodeError(
                ErrorCode.MISSING_REPEAT_COUNT,
                "Loop repeat count must be a positive integer",
                column=close + 2,
                context=text[start:digits_end],
            )

        body = self._parse(text, start + 1, close, depth + 1)
        return [LOOP_START, *body, LoopEnd(repeat)], digits_end

    def _find_close(self, text: str, start: int, end: int) -> int:
        """Find the `]` matching the `[` at text[start]."""
        depth = 0
        for i in range(start, end):
            if text[i] == LOOP_OPEN:
                depth += 1
            elif text[i] == LOOP_CLOSE:
                depth -= 1
                if depth == 0:
                    return i

        raise SongCodeError(
            ErrorCode.MISMATCHED_BRACKETS,
            "Mismatched loop brackets: missing ]",
            column=start + 1,
            context=text,
        )

    def _parse_measure(self, raw: str, column: int) -> Measure:
        """Parse one measure's text into positions."""
        content = raw.strip()

        if content in WHOLE_MEASURE_SYMBOLS:
            return Measure((SymbolPosition(Symbol(content)),))

        positions: list[ChordPosition] = []
        has_chord = False

        for token in content.split():
            if token == Symbol.REMOVER.value:
                if not has_chord:
                    raise SongCodeError(
                        ErrorCode.REMOVER_MISPLACED,
                        'Remover "=" must follow a chord in the same measure',
                        column=column,
                        context=content,
                    )
                positions.append(REMOVER)
            elif token in POSITION_SYMBOLS:
                positions.append(SymbolPosition(Symbol(token)))
            else:
                try:
                    positions.append(ChordToken.parse(token))
                except SongCodeError as exc:
                    raise SongCodeError(
                        exc.code, exc.message, column=column, context=content
                    ) from exc
                has_chord = True

        return Measure(tuple(positions))


def compile_pattern(source: str, max_depth: int = MAX_LOOP_DEPTH) -> CompiledPattern:
    """
    Convenience function to compile a pattern string.

    Args:
        source: Pattern text
        max_depth: Deepest loop nesting accepted

    Returns:
        The compiled pattern
    """
    return PatternCompiler(max_depth).compile(source)
