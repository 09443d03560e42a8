"""
Pattern Registry - resolves, normalizes and deduplicates section patterns.

Each section names its pattern either inline ("A;G;D") or by reference
to a `$n` definition. The registry resolves references, normalizes the
text so trivially different spellings compare equal, and hands out
letter IDs (A, B, ..., Z, AA, AB, ...) in first-use order.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from songcode.constants import LINE_BREAK, PATTERN_PREFIX
from songcode.errors import ErrorCode, SongCodeError

logger = logging.getLogger(__name__)

_REFERENCE_RE = re.compile(r"^\$(\w+)$")


def pattern_id(index: int) -> str:
    """
    Letter ID for the index-th distinct pattern.

    0 -> "A", 25 -> "Z", 26 -> "AA", 27 -> "AB"
    """
    letters = ""
    n = index + 1
    while n > 0:
        n, rem = divmod(n - 1, 26)
        letters = chr(ord("A") + rem) + letters
    return letters


def normalize_pattern(pattern: str) -> str:
    """
    Normalize pattern text for comparison.

    - Tabs become spaces
    - Lines are joined with `;`, lines holding only `:` stay line breaks
    - Runs of `;` and of whitespace collapse
    - Spaces around `[`, `]` and `;` are removed
    """
    if not pattern:
        return ""

    lines = [line.strip() for line in pattern.replace("\t", " ").split("\n")]
    parts: list[str] = []
    for line in lines:
        if not line:
            continue
        if line == LINE_BREAK:
            if parts:
                parts.append(LINE_BREAK)
            continue
        if parts and parts[-1] != LINE_BREAK:
            parts.append(";")
        parts.append(line)

    normalized = "".join(parts)
    normalized = re.sub(r";+", ";", normalized)
    normalized = re.sub(r"\s+", " ", normalized)
    normalized = re.sub(r"\s*\[\s*", "[", normalized)
    normalized = re.sub(r"\s*\]\s*", "]", normalized)
    normalized = re.sub(r"\s*;\s*", ";", normalized)
    return normalized.strip()


@dataclass
class PatternAssignment:
    """Result of assigning IDs to section patterns."""

    patterns: dict[str, str] = field(default_factory=dict)  # id -> normalized text
    section_ids: list[str] = field(default_factory=list)  # section index -> id


class PatternRegistry:
    """
    Resolves `$n` references and deduplicates patterns.

    The registry is built from the song's pattern definitions and is
    read-only afterwards.
    """

    def __init__(self, definitions: dict[str, str] | None = None):
        """
        Initialize the registry.

        Args:
            definitions: `$n` definitions, keyed by n as written
        """
        self.definitions = dict(definitions or {})

    def resolve(self, pattern: str, line: int | None = None) -> str:
        """
        Resolve a section pattern to its text.

        Args:
            pattern: Inline pattern text or a `$n` reference
            line: Source line, for error reporting

        Raises:
            SongCodeError: UNKNOWN_PATTERN_REFERENCE for an undefined `$n`
        """
        match = _REFERENCE_RE.match(pattern.strip())
        if not match:
            return pattern

        key = match.group(1)
        if key not in self.definitions:
            raise SongCodeError(
                ErrorCode.UNKNOWN_PATTERN_REFERENCE,
                f"Unknown pattern reference: {PATTERN_PREFIX}{key}",
                line=line,
            )
        return self.definitions[key]

    def assign(
        self,
        section_patterns: list[str],
        lines: list[int | None] | None = None,
    ) -> PatternAssignment:
        """
        Assign letter IDs to the patterns of every section.

        Args:
            section_patterns: Raw pattern of each section, in order
            lines: Source line of each section, for error reporting

        Returns:
            PatternAssignment with the id -> text map and per-section ids
        """
        result = PatternAssignment()
        seen: dict[str, str] = {}

        for index, raw in enumerate(section_patterns):
            line = lines[index] if lines else None
            normalized = normalize_pattern(self.resolve(raw, line))

            if normalized not in seen:
                new_id = pattern_id(len(seen))
                seen[normalized] = new_id
                result.patterns[new_id] = normalized
                logger.debug(f"Pattern {new_id}: {normalized!r}")

            result.section_ids.append(seen[normalized])

        referenced: set[str] = set()
        for raw in section_patterns:
            match = _REFERENCE_RE.match(raw.strip())
            if match:
                referenced.add(match.group(1))
        for key in sorted(set(self.definitions) - referenced):
            logger.debug(f"Pattern definition {PATTERN_PREFIX}{key} is never used")

        return result
