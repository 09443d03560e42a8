"""
Section Parser - splits the song body into sections.

A section looks like:

    Verse!soft, no drums
    @bpm 90
    $1
    _repeat 2
    _cutEnd 1-2
    --
    First lyric line _2
    Second lyric line _2

The header is `Name` or `Name!comment`. Before `--` come overrides
(`@bpm`, `@time`), modifiers (`_repeat`, `_cutStart`, `_cutEnd`,
`_before`, `_after`) and pattern lines; after it come lyric lines.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from songcode.constants import (
    COMMENT_SEPARATOR,
    LYRIC_SEPARATOR,
    MEASURE_SEPARATOR,
    METADATA_PREFIX,
    MODIFIER_PREFIX,
    PATTERN_PREFIX,
)
from songcode.core.rhythm import CutModifier, TimeSignature
from songcode.errors import ErrorCode, SongCodeError
from songcode.ingest.definitions import find_prelude_end
from songcode.ingest.metadata import parse_bpm

logger = logging.getLogger(__name__)

_OVERRIDE_RE = re.compile(r"^@(\w+)(?:\s+(.*))?$")
_MODIFIER_RE = re.compile(r"^_([A-Za-z]\w*)(?:\s+(.*))?$")
_REPEAT_RE = re.compile(r"^\d+$")
_TIMING_MARKER_RE = re.compile(r"(?:^|\s)_\d+$")
_SPECIAL_PREFIXES = (PATTERN_PREFIX, METADATA_PREFIX, MODIFIER_PREFIX, LYRIC_SEPARATOR)


@dataclass
class RawSection:
    """A section as written, before patterns are compiled."""

    name: str
    line: int
    comment: str | None = None
    pattern: str = ""
    pattern_line: int | None = None
    repeat: int = 1
    cut_start: CutModifier | None = None
    cut_end: CutModifier | None = None
    before: str | None = None
    after: str | None = None
    bpm: int | None = None
    time: TimeSignature | None = None
    lyrics: list[str] = field(default_factory=list)
    lyric_lines: list[int] = field(default_factory=list)
    has_separator: bool = False

    @property
    def is_instrumental(self) -> bool:
        """True if the section has no lyric lines."""
        return not self.lyrics


class SectionParser:
    """
    Parses the sections that follow the prelude.

    A new section starts at a plain line preceded by a blank line, once
    the current section has reached its lyrics or has a pattern line.
    """

    def parse(self, text: str) -> list[RawSection]:
        """
        Parse all sections.

        Args:
            text: Clean song text (LF line endings)

        Returns:
            Sections in order

        Raises:
            SongCodeError: MISSING_SECTION_NAME, MISSING_LYRIC_SEPARATOR or
                INVALID_MODIFIER
        """
        sections: list[RawSection] = []
        lines = text.split("\n")
        i = find_prelude_end(lines)

        while i < len(lines):
            if not lines[i].strip():
                i += 1
                continue
            section, i = self._parse_section(lines, i)
            sections.append(section)

        logger.debug(f"Parsed {len(sections)} sections")
        return sections

    def _parse_section(self, lines: list[str], start: int) -> tuple[RawSection, int]:
        section = self._parse_header(lines[start].strip(), start + 1)
        i = start + 1

        while i < len(lines):
            stripped = lines[i].strip()
            if stripped and self._starts_new_section(section, stripped, lines[i - 1]):
                break

            i += 1
            if not stripped:
                continue

            if section.has_separator:
                section.lyrics.append(stripped)
                section.lyric_lines.append(i)
            elif stripped == LYRIC_SEPARATOR:
                section.has_separator = True
            else:
                self._parse_body_line(section, stripped, i)

        return section, i

    def _starts_new_section(self, section: RawSection, stripped: str, previous: str) -> bool:
        if previous.strip() or stripped.startswith(_SPECIAL_PREFIXES):
            return False
        return section.has_separator or bool(section.pattern)

    def _parse_header(self, header: str, line: int) -> RawSection:
        if header.startswith((MODIFIER_PREFIX, LYRIC_SEPARATOR)):
            raise SongCodeError(
                ErrorCode.MISSING_SECTION_NAME,
                "Section name cannot be empty",
                line=line,
                context=header,
            )

        name, _, comment = header.partition(COMMENT_SEPARATOR)
        if not name.strip():
            raise SongCodeError(
                ErrorCode.MISSING_SECTION_NAME,
                "Section name cannot be empty",
                line=line,
                context=header,
            )

        return RawSection(name=name.strip(), line=line, comment=comment.strip() or None)

    def _parse_body_line(self, section: RawSection, stripped: str, line: int) -> None:
        if stripped.startswith(METADATA_PREFIX):
            self._parse_override(section, stripped, line)
            return

        match = _MODIFIER_RE.match(stripped)
        if match:
            self._parse_modifier(section, match.group(1), (match.group(2) or "").strip(), line)
            return

        if _TIMING_MARKER_RE.search(stripped):
            raise SongCodeError(
                ErrorCode.MISSING_LYRIC_SEPARATOR,
                f"Missing '{LYRIC_SEPARATOR}' before the lyrics of section '{section.name}'",
                line=line,
                context=stripped,
            )

        if section.pattern:
            section.pattern += MEASURE_SEPARATOR + stripped
        else:
            section.pattern = stripped
            section.pattern_line = line

    def _parse_override(self, section: RawSection, stripped: str, line: int) -> None:
        match = _OVERRIDE_RE.match(stripped)
        key = match.group(1) if match else ""
        value = (match.group(2) or "").strip() if match else ""

        if key == "bpm" and value:
            section.bpm = parse_bpm(value, line)
        elif key == "time" and value:
            section.time = TimeSignature.parse(value, line)
        else:
            raise SongCodeError(
                ErrorCode.INVALID_MODIFIER,
                "Section overrides are @bpm N and @time N/D",
                line=line,
                context=stripped,
            )

    def _parse_modifier(self, section: RawSection, key: str, value: str, line: int) -> None:
        if not value:
            raise SongCodeError(
                ErrorCode.INVALID_MODIFIER,
                f"Modifier {MODIFIER_PREFIX}{key} needs a value",
                line=line,
            )

        if key == "repeat":
            if not _REPEAT_RE.match(value) or int(value) < 1:
                raise SongCodeError(
                    ErrorCode.INVALID_MODIFIER,
                    "Repeat must be a positive integer",
                    line=line,
                    context=value,
                )
            section.repeat = int(value)
        elif key == "cutStart":
            section.cut_start = CutModifier.parse(value, line)
        elif key == "cutEnd":
            section.cut_end = CutModifier.parse(value, line)
        elif key == "before":
            section.before = value
        elif key == "after":
            section.after = value
        else:
            raise SongCodeError(
                ErrorCode.INVALID_MODIFIER,
                f"Unknown modifier: {MODIFIER_PREFIX}{key}",
                line=line,
            )


def parse_sections(text: str) -> list[RawSection]:
    """Convenience function to parse sections."""
    return SectionParser().parse(text)
