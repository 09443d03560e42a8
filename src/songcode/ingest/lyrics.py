"""
Lyric Transformer - turns raw lyric lines into LyricLine values.

    "Amazing grace _4"      -> text "Amazing grace", 4 measures, normal
    "***Guitar solo*** _8"  -> text "Guitar solo", 8 measures, info
    ":::Watch drums::: _2"  -> text "Watch drums", 2 measures, musician
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from songcode.arrangement.validator import parse_lyric_timing
from songcode.constants import INFO_MARKER, MUSICIAN_MARKER, LyricStyle, PromptStyle

_PROMPT_STYLES = {
    LyricStyle.NORMAL: PromptStyle.DEFAULT,
    LyricStyle.INFO: PromptStyle.INFO,
    LyricStyle.MUSICIAN: PromptStyle.MUSICIAN,
}


@dataclass(frozen=True)
class LyricLine:
    """A lyric line with its measure span and display style."""

    text: str
    measures: int
    style: LyricStyle = LyricStyle.NORMAL

    @property
    def prompt_style(self) -> PromptStyle:
        """Style tag used by prompter content items."""
        return _PROMPT_STYLES[self.style]

    def to_dict(self) -> dict[str, Any]:
        return {"text": self.text, "measures": self.measures, "style": self.style.value}


def _strip_marker(text: str, marker: str) -> str | None:
    """Inner text if `text` is wrapped in `marker`, else None."""
    if len(text) >= 2 * len(marker) and text.startswith(marker) and text.endswith(marker):
        return text[len(marker) : -len(marker)].strip()
    return None


class LyricTransformer:
    """Splits timing markers and style markers off lyric lines."""

    def transform_line(self, lyric: str, line: int | None = None) -> LyricLine:
        """
        Transform one lyric line.

        Raises:
            SongCodeError: If the `_N` marker is missing or malformed
        """
        text, measures = parse_lyric_timing(lyric, line)

        inner = _strip_marker(text, INFO_MARKER)
        if inner is not None:
            return LyricLine(inner, measures, LyricStyle.INFO)

        inner = _strip_marker(text, MUSICIAN_MARKER)
        if inner is not None:
            return LyricLine(inner, measures, LyricStyle.MUSICIAN)

        return LyricLine(text, measures)

    def transform(
        self, lyrics: Sequence[str], lines: Sequence[int] | None = None
    ) -> list[LyricLine]:
        """
        Transform every lyric line of a section.

        Args:
            lyrics: Raw lyric lines
            lines: Source line of each lyric, for error reporting

        Returns:
            LyricLine per input line, in order
        """
        return [
            self.transform_line(lyric, lines[i] if lines else None)
            for i, lyric in enumerate(lyrics)
        ]
