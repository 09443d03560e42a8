"""
Chord primitives - ChordToken.

A chord token is split into a base (root letter, accidental, minor marker)
and a free-form extension. The extension is not interpreted: "7", "maj7sus4"
and "add9" are all kept verbatim for display.
"""

from __future__ import annotations

from dataclasses import dataclass

from songcode.constants import ACCIDENTALS, CHORD_ROOTS, MINOR_MARKER
from songcode.errors import ErrorCode, SongCodeError


@dataclass(frozen=True)
class ChordToken:
    """
    A chord as written in a pattern.

    Examples:
        ChordToken.parse("Am7") = ChordToken("Am", "7")
        ChordToken.parse("F#maj7") = ChordToken("F#", "maj7")
        ChordToken.parse("Bbm7b5") = ChordToken("Bbm", "7b5")

    Immutable and hashable.
    """

    root: str
    extension: str = ""

    @property
    def is_minor(self) -> bool:
        """True if the base carries the minor marker."""
        return self.root.endswith(MINOR_MARKER)

    def to_json(self) -> list[str]:
        """Serialize as a [root, extension] pair."""
        return [self.root, self.extension]

    def __str__(self) -> str:
        return f"{self.root}{self.extension}"

    @classmethod
    def parse(cls, token: str) -> ChordToken:
        """
        Parse a chord token.

        The root must be a natural note letter. An optional accidental
        follows, then an 'm' is read as the minor marker unless it starts
        'maj'. Everything after that is the extension.

        Args:
            token: Chord text such as "C", "Am7", "F#maj7"

        Returns:
            The parsed ChordToken

        Raises:
            SongCodeError: INVALID_CHORD for empty input or a bad root
        """
        text = token.strip() if token else ""
        if not text:
            raise SongCodeError(ErrorCode.INVALID_CHORD, "Invalid chord notation: empty chord")

        if text[0] not in CHORD_ROOTS:
            raise SongCodeError(
                ErrorCode.INVALID_CHORD,
                f'Invalid chord notation: "{token}" - must start with A-G',
                context=token,
            )

        pos = 1
        if pos < len(text) and text[pos] in ACCIDENTALS:
            pos += 1

        if pos < len(text) and text[pos] == MINOR_MARKER:
            next_char = text[pos + 1] if pos + 1 < len(text) else ""
            if next_char != "a":
                pos += 1

        return cls(text[:pos], text[pos:])


def parse_chord(token: str) -> ChordToken:
    """Convenience function to parse a chord token."""
    return ChordToken.parse(token)
