"""
Arrangement Validator - beat division and lyric timing checks.

Validates:
- Every measure's positions divide the time signature's beats evenly
- Removers never eat every beat of a measure
- Lyric `_N` markers are well formed and sum to the section length
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from fractions import Fraction

from songcode.constants import MODIFIER_PREFIX
from songcode.core.measure import Measure
from songcode.core.rhythm import TimeSignature
from songcode.errors import ErrorCode, SongCodeError
from songcode.patterns.compiler import CompiledPattern

logger = logging.getLogger(__name__)

_TIMING_RE = re.compile(r"_(\d+)$")
_BAD_TIMING_RE = re.compile(r"_[^\d]")


class TimeSignatureValidator:
    """
    Checks that measures fit a time signature.

    A measure of P positions under N beats gives each position N / P
    beats, so P must divide N. Removers subtract their share; the
    measure must keep at least one beat.
    """

    def __init__(self, time_signature: TimeSignature = TimeSignature.COMMON_TIME):
        """
        Initialize the validator.

        Args:
            time_signature: Effective time signature of the section
        """
        self.time_signature = time_signature

    def validate_measure(self, measure: Measure, line: int | None = None) -> None:
        """
        Validate one measure.

        Args:
            measure: Measure to check
            line: Source line, for error reporting

        Raises:
            SongCodeError: ALL_BEATS_REMOVED or DIVISION_ERROR
        """
        beats = self.time_signature.beats
        positions = len(measure)
        removers = measure.remover_count

        if positions == 0:
            return

        # Reported ahead of the division error when both apply
        if removers > 0 and beats % positions != 0:
            non_removers = positions - removers
            if non_removers > 0:
                removed = removers * Fraction(beats, non_removers)
                if removed >= beats:
                    raise self._all_removed(measure, removed, line)

        if beats % positions != 0:
            raise SongCodeError(
                ErrorCode.DIVISION_ERROR,
                f"{positions} positions do not divide {beats} beats evenly",
                line=line,
                context=f"Measure '{measure}' in {self.time_signature}",
            )

        removed = Fraction(removers * beats, positions)
        if beats - removed <= 0:
            raise self._all_removed(measure, removed, line)

    def validate_pattern(self, pattern: CompiledPattern, line: int | None = None) -> None:
        """
        Validate every measure of a pattern, including those inside loops.

        Raises:
            SongCodeError: On the first measure that does not fit
        """
        for measure in pattern.iter_measures():
            self.validate_measure(measure, line)

    def _all_removed(self, measure: Measure, removed: Fraction, line: int | None) -> SongCodeError:
        return SongCodeError(
            ErrorCode.ALL_BEATS_REMOVED,
            "Removers leave no beats in the measure",
            line=line,
            context=f"Measure '{measure}' removes {removed} of {self.time_signature.beats} beats",
        )


def validate_measure(measure: Measure, time_signature: TimeSignature) -> None:
    """Convenience function to validate one measure."""
    TimeSignatureValidator(time_signature).validate_measure(measure)


def validate_pattern(pattern: CompiledPattern, time_signature: TimeSignature) -> None:
    """Convenience function to validate every measure of a pattern."""
    TimeSignatureValidator(time_signature).validate_pattern(pattern)


def parse_lyric_timing(lyric: str, line: int | None = None) -> tuple[str, int]:
    """
    Split a lyric line into its text and `_N` measure count.

    Args:
        lyric: Raw lyric line, e.g. "Hello world _2"
        line: Source line, for error reporting

    Returns:
        Tuple of (text without the marker, measure count)

    Raises:
        SongCodeError: MISSING_TIMING, BAD_TIMING_FORMAT or NON_POSITIVE_TIMING
    """
    text = lyric.strip()
    match = _TIMING_RE.search(text)

    if not match:
        if _BAD_TIMING_RE.search(text) or text.endswith(MODIFIER_PREFIX):
            raise SongCodeError(
                ErrorCode.BAD_TIMING_FORMAT,
                "Lyric timing must be _ followed by digits",
                line=line,
                context=text,
            )
        raise SongCodeError(
            ErrorCode.MISSING_TIMING,
            "Lyric line has no _N measure count",
            line=line,
            context=text,
        )

    measures = int(match.group(1))
    if measures <= 0:
        raise SongCodeError(
            ErrorCode.NON_POSITIVE_TIMING,
            "Lyric measure count must be positive",
            line=line,
            context=text,
        )

    return text[: match.start()].rstrip(), measures


class LyricTimingValidator:
    """Checks that a section's lyric lines account for every measure it plays."""

    def validate(
        self,
        lyrics: Sequence[str],
        expected: int,
        lines: Sequence[int | None] | None = None,
        section: str | None = None,
    ) -> list[int]:
        """
        Validate lyric timing markers against the section length.

        Args:
            lyrics: Raw lyric lines of the section
            expected: Final measure count of the section
            lines: Source line of each lyric, for error reporting
            section: Section name, for error context

        Returns:
            Measure count of each lyric line

        Raises:
            SongCodeError: On a malformed marker or a sum mismatch
        """
        if not lyrics:
            return []

        counts = [
            parse_lyric_timing(lyric, lines[i] if lines else None)[1]
            for i, lyric in enumerate(lyrics)
        ]
        total = sum(counts)

        if total != expected:
            where = f" in section '{section}'" if section else ""
            raise SongCodeError(
                ErrorCode.TIMING_MISMATCH,
                f"Lyric measure counts do not match section length{where}",
                line=lines[0] if lines else None,
                context=f"Expected {expected} measures but lyric markers sum to {total}",
            )

        logger.debug(f"Lyric timing ok: {len(counts)} lines, {total} measures")
        return counts


def validate_lyric_timing(lyrics: Sequence[str], expected: int) -> list[int]:
    """Convenience function to validate lyric timing."""
    return LyricTimingValidator().validate(lyrics, expected)
