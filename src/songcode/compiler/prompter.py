"""
Prompter - builds the linear display stream.

The prompter is what a musician reads while playing: tempo changes and,
for each lyric line, the chords that go with it. Repeated chord runs
are folded ("A G A G" shows as "A G" x2).
"""

from __future__ import annotations

from collections.abc import Sequence

from songcode.constants import PromptStyle
from songcode.core.measure import Measure
from songcode.core.rhythm import TimeSignature
from songcode.ingest.lyrics import LyricLine
from songcode.models.document import ChordBlock, ContentItem, TempoItem


def optimize_pattern(measures: Sequence[Measure]) -> tuple[int, list[Measure]]:
    """
    Fold a measure list into (multiplier, shortest repeating half).

    While the list has an even length above one and its halves are
    equal, keep the first half and double the multiplier.

    Examples:
        [A, G, A, G]  -> (2, [A, G])
        [A, A, A, A]  -> (4, [A])
        [A, G, D]     -> (1, [A, G, D])

    Args:
        measures: Measures of one lyric line

    Returns:
        Tuple of (multiplier, measures)
    """
    pattern = list(measures)
    repeats = 1

    while len(pattern) > 1 and len(pattern) % 2 == 0:
        half = len(pattern) // 2
        if pattern[:half] != pattern[half:]:
            break
        pattern = pattern[:half]
        repeats *= 2

    return repeats, pattern


class PromptItemBuilder:
    """Builds prompter tempo and content items."""

    def build_tempo_item(self, bpm: int, time_sig: TimeSignature) -> TempoItem:
        """
        Build a tempo change item.

        Args:
            bpm: Tempo in BPM
            time_sig: Time signature in effect

        Returns:
            TempoItem with time rendered as N/D
        """
        return TempoItem(bpm=bpm, time=str(time_sig))

    def build_content_item(
        self,
        measures: Sequence[Measure],
        lyric: LyricLine | str = "",
    ) -> ContentItem:
        """
        Build a content item for one lyric line.

        Args:
            measures: Measures played under the line
            lyric: The lyric line, or plain text for an instrumental run

        Returns:
            ContentItem with the folded chord pattern
        """
        if isinstance(lyric, LyricLine):
            text, style = lyric.text, lyric.prompt_style
        else:
            text, style = lyric, PromptStyle.DEFAULT

        repeats, pattern = optimize_pattern(measures)
        return ContentItem(
            style=style,
            chords=[ChordBlock(repeats=repeats, pattern=[m.to_json() for m in pattern])],
            lyrics=text,
        )
