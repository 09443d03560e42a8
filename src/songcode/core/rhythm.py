"""
Rhythm primitives - TimeSignature, CutModifier.

Time primitives for beat arithmetic. Only the numerator takes part in
beat division; the denominator is carried for display.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import ClassVar

from songcode.constants import ALLOWED_DENOMINATORS, DEFAULT_DENOMINATOR, DEFAULT_NUMERATOR
from songcode.errors import ErrorCode, SongCodeError

_TIME_RE = re.compile(r"^(\d+)/(\d+)$")
_CUT_RE = re.compile(r"^(\d+)(?:-(\d+))?$")


@dataclass(frozen=True)
class TimeSignature:
    """
    A time signature.

    Examples:
        TimeSignature(4, 4) = 4/4
        TimeSignature(3, 4) = 3/4
        TimeSignature(2, 2) = cut time
    """

    numerator: int
    denominator: int

    COMMON_TIME: ClassVar[TimeSignature]  # 4/4

    def __post_init__(self) -> None:
        if self.numerator < 1:
            raise ValueError(f"Numerator must be positive, got {self.numerator}")
        if self.denominator not in ALLOWED_DENOMINATORS:
            raise ValueError(f"Denominator must be 2 or 4, got {self.denominator}")

    @property
    def beats(self) -> int:
        """Beats available in one measure."""
        return self.numerator

    def to_json(self) -> dict[str, int]:
        """Serialize as a {numerator, denominator} object."""
        return {"numerator": self.numerator, "denominator": self.denominator}

    def __str__(self) -> str:
        return f"{self.numerator}/{self.denominator}"

    @classmethod
    def parse(cls, value: str, line: int | None = None) -> TimeSignature:
        """
        Parse a time signature like '3/4'.

        Args:
            value: Text in N/D form
            line: Source line, for error reporting

        Raises:
            SongCodeError: INVALID_TIME_SIGNATURE on bad format or values
        """
        match = _TIME_RE.match(value.strip())
        if not match:
            raise SongCodeError(
                ErrorCode.INVALID_TIME_SIGNATURE,
                "Time signature must be in format N/D",
                line=line,
                context=value,
            )

        numerator = int(match.group(1))
        denominator = int(match.group(2))

        if denominator not in ALLOWED_DENOMINATORS:
            raise SongCodeError(
                ErrorCode.INVALID_TIME_SIGNATURE,
                "Time signature denominator must be 2 or 4",
                line=line,
                context=value,
            )
        if numerator < 1:
            raise SongCodeError(
                ErrorCode.INVALID_TIME_SIGNATURE,
                "Time signature numerator must be positive",
                line=line,
                context=value,
            )

        return cls(numerator, denominator)


TimeSignature.COMMON_TIME = TimeSignature(DEFAULT_NUMERATOR, DEFAULT_DENOMINATOR)


@dataclass(frozen=True)
class CutModifier:
    """
    Amount cut from the start or end of a section.

    A partial-measure cut (beats > 0) still removes a whole display slot,
    so `slots` is what the measure arithmetic subtracts.
    """

    measures: int = 0
    beats: int = 0

    def __post_init__(self) -> None:
        if self.measures < 0 or self.beats < 0:
            raise ValueError(f"Cut values must be >= 0, got {self.measures}-{self.beats}")

    @property
    def slots(self) -> int:
        """Measures removed, counting a partial measure as a whole one."""
        return self.measures + (1 if self.beats > 0 else 0)

    def to_json(self) -> list[int]:
        """Serialize as a [measures, beats] pair."""
        return [self.measures, self.beats]

    @classmethod
    def parse(cls, value: str, line: int | None = None) -> CutModifier:
        """
        Parse a cut value: '2' (measures) or '1-2' (measures-beats).

        Raises:
            SongCodeError: INVALID_MODIFIER if the value is malformed
        """
        match = _CUT_RE.match(value.strip())
        if not match:
            raise SongCodeError(
                ErrorCode.INVALID_MODIFIER,
                "Cut modifier must be M or M-B with non-negative integers",
                line=line,
                context=value,
            )
        beats = int(match.group(2)) if match.group(2) else 0
        return cls(int(match.group(1)), beats)
