"""
Errors raised while converting SongCode.

Every failure is a SongCodeError carrying a stable catalog code.
Conversion is fail-fast: the first error aborts the whole run.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error catalog codes, grouped by pipeline phase."""

    # Reading
    INVALID_ENCODING = "E0.2"

    # Metadata
    METADATA_TOO_LONG = "E1.1.1"
    INVALID_BPM = "E1.1.2"
    INVALID_TIME_SIGNATURE = "E1.1.3"
    INVALID_ORIGINAL_KEY = "E1.1.4"
    INVALID_CAPO = "E1.1.5"
    INVALID_METADATA = "E1.1.6"

    # Pattern definitions
    INVALID_PATTERN_DEFINITION = "E1.2.1"
    EMPTY_PATTERN_DEFINITION = "E1.2.2"
    UNKNOWN_PATTERN_REFERENCE = "E1.2.3"

    # Sections
    MISSING_LYRIC_SEPARATOR = "E1.4.1"
    MISSING_SECTION_NAME = "E1.4.2"
    INVALID_MODIFIER = "E1.4.3"

    # Pattern compilation
    INVALID_CHORD = "E2.1.1"
    REMOVER_MISPLACED = "E2.1.2"
    MISMATCHED_BRACKETS = "E2.1.3"
    MISSING_REPEAT_COUNT = "E2.1.4"
    LOOP_TOO_DEEP = "E2.1.5"

    # Beat arithmetic
    DIVISION_ERROR = "E3.1.1"
    ALL_BEATS_REMOVED = "E3.1.2"

    # Section budget
    CUTS_EXCEED_SECTION = "E3.2.1"

    # Lyric timing
    MISSING_TIMING = "E3.4.1"
    BAD_TIMING_FORMAT = "E3.4.2"
    NON_POSITIVE_TIMING = "E3.4.3"
    TIMING_MISMATCH = "E3.4.4"

    # Prompter generation
    REPEAT_WITH_NO_PRIOR = "E4.1.1"


class SongCodeError(Exception):
    """
    A parsing or validation failure.

    Attributes:
        code: Catalog code identifying the kind of failure
        message: Human-readable description
        line: 1-based line number, when known
        column: 1-based column number, when known
        context: Extra diagnostic text (offending input, computed values)
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        *,
        line: int | None = None,
        column: int | None = None,
        context: str | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.line = line
        self.column = column
        self.context = context

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        d: dict[str, Any] = {"code": self.code.value, "message": self.message}
        if self.line is not None:
            d["line"] = self.line
        if self.column is not None:
            d["column"] = self.column
        if self.context:
            d["context"] = self.context
        return d

    def __str__(self) -> str:
        msg = f"[{self.code.value}] {self.message}"
        if self.line is not None:
            msg += f" (line {self.line}"
            if self.column is not None:
                msg += f", column {self.column}"
            msg += ")"
        if self.context:
            msg += f"\nContext: {self.context}"
        return msg

    def __repr__(self) -> str:
        return f"SongCodeError({self.code.name}, {self.message!r})"
