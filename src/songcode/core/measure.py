"""
Measure primitives - positions, measures and pattern elements.

A measure is an ordered run of positions; a compiled pattern is an
ordered run of elements where loops are bracketed by LoopStart/LoopEnd
markers rather than nested containers.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, Union

from songcode.constants import (
    LINE_BREAK_TOKEN,
    LOOP_END_PREFIX,
    LOOP_START_TOKEN,
    Symbol,
)
from songcode.core.chord import ChordToken


@dataclass(frozen=True)
class SymbolPosition:
    """A non-chord position: repeat, silence, remover or blank."""

    symbol: Symbol

    def to_json(self) -> list[str]:
        """Serialize as a one-item list holding the symbol."""
        return [self.symbol.value]

    def __str__(self) -> str:
        return self.symbol.value


ChordPosition = Union[ChordToken, SymbolPosition]

REPEAT = SymbolPosition(Symbol.REPEAT)
SILENCE = SymbolPosition(Symbol.SILENCE)
REMOVER = SymbolPosition(Symbol.REMOVER)
BLANK = SymbolPosition(Symbol.BLANK)


def position_from_json(data: list[str]) -> ChordPosition:
    """Rebuild a position from its JSON form."""
    if len(data) == 1:
        return SymbolPosition(Symbol(data[0]))
    return ChordToken(data[0], data[1])


@dataclass(frozen=True)
class Measure:
    """
    One bar's worth of chord positions.

    Position order is beat order. Two measures are equal when every
    position matches, chords by (root, extension) and symbols by kind.
    """

    positions: tuple[ChordPosition, ...]

    def __len__(self) -> int:
        return len(self.positions)

    def __iter__(self) -> Iterator[ChordPosition]:
        return iter(self.positions)

    @property
    def remover_count(self) -> int:
        """Number of remover positions."""
        return sum(1 for p in self.positions if p == REMOVER)

    def has_symbol(self, symbol: Symbol) -> bool:
        """True if any position holds the given symbol."""
        return any(isinstance(p, SymbolPosition) and p.symbol == symbol for p in self.positions)

    @property
    def is_whole_repeat(self) -> bool:
        """True if the measure is a lone '%'."""
        return self.positions == (REPEAT,)

    def to_json(self) -> list[list[str]]:
        """Serialize as a list of positions."""
        return [p.to_json() for p in self.positions]

    @classmethod
    def of(cls, *positions: ChordPosition | str) -> Measure:
        """
        Build a measure from positions or shorthand strings.

        Strings are read as symbols when they match one, chords otherwise:
        Measure.of("A", "=") == Measure((ChordToken("A", ""), REMOVER))
        """
        symbols = {s.value: s for s in Symbol}
        items: list[ChordPosition] = []
        for p in positions:
            if isinstance(p, str):
                items.append(SymbolPosition(symbols[p]) if p in symbols else ChordToken.parse(p))
            else:
                items.append(p)
        return cls(tuple(items))

    @classmethod
    def from_json(cls, data: list[list[str]]) -> Measure:
        """Rebuild a measure from its JSON form."""
        return cls(tuple(position_from_json(p) for p in data))

    def __str__(self) -> str:
        return " ".join(str(p) for p in self.positions)


@dataclass(frozen=True)
class LoopStart:
    """Opens a loop body."""

    def to_json(self) -> str:
        return LOOP_START_TOKEN


@dataclass(frozen=True)
class LoopEnd:
    """Closes the innermost open loop; the body plays `repeat` times."""

    repeat: int

    def __post_init__(self) -> None:
        if self.repeat < 1:
            raise ValueError(f"Loop repeat count must be >= 1, got {self.repeat}")

    def to_json(self) -> str:
        return f"{LOOP_END_PREFIX}{self.repeat}"


@dataclass(frozen=True)
class LineBreak:
    """Source line break, kept for display layout only."""

    def to_json(self) -> str:
        return LINE_BREAK_TOKEN


PatternElement = Union[Measure, LoopStart, LoopEnd, LineBreak]

LOOP_START = LoopStart()
LINE_BREAK = LineBreak()


def element_from_json(data: Any) -> PatternElement:
    """
    Rebuild a pattern element from its JSON form.

    Raises:
        ValueError: If the data is not a known element form
    """
    if isinstance(data, list):
        return Measure.from_json(data)
    if data == LOOP_START_TOKEN:
        return LOOP_START
    if data == LINE_BREAK_TOKEN:
        return LINE_BREAK
    if isinstance(data, str) and data.startswith(LOOP_END_PREFIX):
        return LoopEnd(int(data[len(LOOP_END_PREFIX) :]))
    raise ValueError(f"Unknown pattern element: {data!r}")
