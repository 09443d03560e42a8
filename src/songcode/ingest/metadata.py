"""
Metadata Parser - reads `@key value` lines from the song prelude.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from songcode.constants import (
    BPM_RANGE,
    CAPO_RANGE,
    MAX_NAME_LENGTH,
    MAX_NOTE_LENGTH,
    METADATA_KEYS,
    METADATA_PREFIX,
    ORIGINAL_KEYS,
)
from songcode.core.rhythm import TimeSignature
from songcode.errors import ErrorCode, SongCodeError
from songcode.ingest.definitions import find_prelude_end
from songcode.models.document import Meta, TimeSignatureModel

logger = logging.getLogger(__name__)

_METADATA_RE = re.compile(r"^@(\w+)\s+(.+)$")
_INT_RE = re.compile(r"^-?\d+$")

_TEXT_LIMITS = {
    "name": ("Song name", MAX_NAME_LENGTH),
    "artist": ("Artist name", MAX_NAME_LENGTH),
    "warning": ("Warning", MAX_NOTE_LENGTH),
    "end": ("End", MAX_NOTE_LENGTH),
}


def parse_bpm(value: str, line: int | None = None) -> int:
    """
    Parse a tempo value.

    Raises:
        SongCodeError: INVALID_BPM if not an integer in 0..400
    """
    value = value.strip()
    if not _INT_RE.match(value):
        raise SongCodeError(ErrorCode.INVALID_BPM, "BPM must be a number", line=line, context=value)
    bpm = int(value)
    low, high = BPM_RANGE
    if not low <= bpm <= high:
        raise SongCodeError(
            ErrorCode.INVALID_BPM, f"BPM must be between {low} and {high}", line=line, context=value
        )
    return bpm


class MetadataParser:
    """
    Parses song metadata.

    Only lines before the first section count; `@bpm` and `@time` inside
    a section are section overrides, handled by the section parser.
    """

    def parse(self, text: str) -> Meta:
        """
        Parse metadata lines.

        Args:
            text: Clean song text (LF line endings)

        Returns:
            Meta model; time defaults to 4/4

        Raises:
            SongCodeError: On an unknown key or an invalid value
        """
        values: dict[str, Any] = {}
        lines = text.split("\n")

        for i in range(find_prelude_end(lines)):
            stripped = lines[i].strip()
            if not stripped.startswith(METADATA_PREFIX):
                continue

            line_no = i + 1
            match = _METADATA_RE.match(stripped)
            if not match:
                raise SongCodeError(
                    ErrorCode.INVALID_METADATA,
                    "Invalid metadata format",
                    line=line_no,
                    context=stripped,
                )

            key, value = match.group(1), match.group(2).strip()
            if key not in METADATA_KEYS:
                raise SongCodeError(
                    ErrorCode.INVALID_METADATA,
                    f"Unknown metadata key: {METADATA_PREFIX}{key}",
                    line=line_no,
                )

            values[key] = self._parse_value(key, value, line_no)

        logger.debug(f"Parsed metadata keys: {list(values)}")
        return Meta(**values)

    def _parse_value(self, key: str, value: str, line: int) -> Any:
        if key in _TEXT_LIMITS:
            label, limit = _TEXT_LIMITS[key]
            if len(value) > limit:
                raise SongCodeError(
                    ErrorCode.METADATA_TOO_LONG,
                    f"{label} exceeds maximum length of {limit} characters",
                    line=line,
                )
            return value

        if key == "bpm":
            return parse_bpm(value, line)

        if key == "time":
            return TimeSignatureModel.from_time_sig(TimeSignature.parse(value, line))

        if key == "original":
            if value not in ORIGINAL_KEYS:
                raise SongCodeError(
                    ErrorCode.INVALID_ORIGINAL_KEY, f"Invalid original key: {value}", line=line
                )
            return value

        # capo
        low, high = CAPO_RANGE
        if not _INT_RE.match(value):
            raise SongCodeError(ErrorCode.INVALID_CAPO, "Capo must be a number", line=line)
        capo = int(value)
        if not low <= capo <= high:
            raise SongCodeError(
                ErrorCode.INVALID_CAPO, f"Capo must be between {low} and {high}", line=line
            )
        return capo


def parse_metadata(text: str) -> Meta:
    """Convenience function to parse metadata."""
    return MetadataParser().parse(text)
