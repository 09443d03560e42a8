"""
Pattern Definition Parser - reads `$n` blocks from the song prelude.

The prelude is everything before the first section: metadata lines,
pattern definitions and blank lines. A definition is either inline:

    $1 A;G;D;A

or spread over the following lines, up to a blank line or a line that
starts with `$`, `@`, `_` or `--`:

    $2
    [A;G]2
    :
    D;E
"""

from __future__ import annotations

import logging
import re

from songcode.constants import (
    LYRIC_SEPARATOR,
    METADATA_PREFIX,
    MODIFIER_PREFIX,
    PATTERN_PREFIX,
)
from songcode.errors import ErrorCode, SongCodeError

logger = logging.getLogger(__name__)

_DEFINITION_RE = re.compile(r"^\$(\S+)(?:\s+(.+))?$")
_BLOCK_STOPS = (PATTERN_PREFIX, METADATA_PREFIX, MODIFIER_PREFIX, LYRIC_SEPARATOR)


def _ends_block(line: str) -> bool:
    stripped = line.strip()
    return not stripped or stripped.startswith(_BLOCK_STOPS)


def _block_end(lines: list[str], start: int) -> int:
    """Index just past the content lines of the definition at lines[start]."""
    i = start + 1
    while i < len(lines) and not _ends_block(lines[i]):
        i += 1
    return i


def find_prelude_end(lines: list[str]) -> int:
    """
    Index of the first section header line.

    Skips blank lines, metadata lines and definition blocks. Returns
    len(lines) when the song has no sections.
    """
    i = 0
    while i < len(lines):
        stripped = lines[i].strip()
        if not stripped or stripped.startswith(METADATA_PREFIX):
            i += 1
        elif stripped.startswith(PATTERN_PREFIX):
            match = _DEFINITION_RE.match(stripped)
            i = i + 1 if match and match.group(2) else _block_end(lines, i)
        else:
            return i
    return i


class PatternDefinitionParser:
    """Parses `$n` pattern definitions out of the prelude."""

    def parse(self, text: str) -> dict[str, str]:
        """
        Parse every definition in the prelude.

        Args:
            text: Clean song text (LF line endings)

        Returns:
            Definition content keyed by id as written ("1", "2", ...).
            Multi-line content is joined with newlines.

        Raises:
            SongCodeError: INVALID_PATTERN_DEFINITION or EMPTY_PATTERN_DEFINITION
        """
        definitions: dict[str, str] = {}
        if not text.strip():
            return definitions

        lines = text.split("\n")
        end = find_prelude_end(lines)
        i = 0

        while i < end:
            stripped = lines[i].strip()
            if not stripped.startswith(PATTERN_PREFIX):
                i += 1
                continue

            line_no = i + 1
            match = _DEFINITION_RE.match(stripped)
            if not match:
                raise SongCodeError(
                    ErrorCode.INVALID_PATTERN_DEFINITION,
                    "Invalid pattern definition",
                    line=line_no,
                    context=stripped,
                )

            key = self._validate_id(match.group(1), line_no)

            if match.group(2):
                content = match.group(2).strip()
                i += 1
            else:
                block_end = _block_end(lines, i)
                content = "\n".join(line.strip() for line in lines[i + 1 : block_end])
                i = block_end

            if not content.strip():
                raise SongCodeError(
                    ErrorCode.EMPTY_PATTERN_DEFINITION,
                    f"Pattern {PATTERN_PREFIX}{key} is empty",
                    line=line_no,
                )

            if key in definitions:
                logger.warning(f"Pattern {PATTERN_PREFIX}{key} redefined at line {line_no}")
            definitions[key] = content

        logger.debug(f"Parsed {len(definitions)} pattern definitions")
        return definitions

    def _validate_id(self, key: str, line: int) -> str:
        if not key.isdigit() or str(int(key)) != key or int(key) <= 0:
            raise SongCodeError(
                ErrorCode.INVALID_PATTERN_DEFINITION,
                f"Pattern ID must be a positive integer, got: {PATTERN_PREFIX}{key}",
                line=line,
            )
        return key


def parse_definitions(text: str) -> dict[str, str]:
    """Convenience function to parse pattern definitions."""
    return PatternDefinitionParser().parse(text)
