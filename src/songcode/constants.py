"""
Constants and enums for the SongCode converter.

No magic strings - use enums and named constants for constrained values.
"""

from enum import Enum


class Symbol(str, Enum):
    """
    Non-chord symbols that can occupy a measure position.

    Each symbol takes one position when beats are divided.
    """

    REPEAT = "%"  # Replay the previous position or measure
    SILENCE = "_"  # Band stops
    REMOVER = "="  # Subtracts its share of beats from the measure
    BLANK = "-"  # Empty bar, nothing to play


class LyricStyle(str, Enum):
    """Display style of a lyric line."""

    NORMAL = "normal"
    INFO = "info"  # ***Solo***
    MUSICIAN = "musician"  # :::Watch drummer:::


class PromptStyle(str, Enum):
    """Style tag of a prompter content item."""

    DEFAULT = "default"
    INFO = "info"
    MUSICIAN = "musicianInfo"


# Pattern syntax
LOOP_OPEN = "["
LOOP_CLOSE = "]"
LINE_BREAK = ":"
MEASURE_SEPARATOR = ";"

# Serialized forms of the non-measure pattern elements
LOOP_START_TOKEN = "loopStart"
LOOP_END_PREFIX = "loopEnd:"
LINE_BREAK_TOKEN = "newLine"

# Symbols allowed to stand alone as a whole measure
WHOLE_MEASURE_SYMBOLS: frozenset[str] = frozenset(
    {Symbol.REPEAT.value, Symbol.SILENCE.value, Symbol.BLANK.value}
)

# Symbols allowed as one position among several
POSITION_SYMBOLS: frozenset[str] = frozenset({Symbol.REPEAT.value, Symbol.SILENCE.value})

# Chord spelling
CHORD_ROOTS = "ABCDEFG"
ACCIDENTALS = "#b"
MINOR_MARKER = "m"

# Recursion guard for nested loops
MAX_LOOP_DEPTH = 32

# Time signatures
ALLOWED_DENOMINATORS: frozenset[int] = frozenset({2, 4})
DEFAULT_NUMERATOR = 4
DEFAULT_DENOMINATOR = 4

# Metadata limits
METADATA_KEYS: tuple[str, ...] = (
    "name",
    "artist",
    "bpm",
    "time",
    "original",
    "capo",
    "warning",
    "end",
)
MAX_NAME_LENGTH = 100
MAX_NOTE_LENGTH = 200
BPM_RANGE = (0, 400)
CAPO_RANGE = (1, 20)

# Keys accepted by @original
ORIGINAL_KEYS: frozenset[str] = frozenset(
    f"{root}{accidental}{minor}"
    for root, accidentals in (
        ("A", ("", "#", "b")),
        ("B", ("", "b")),
        ("C", ("", "#")),
        ("D", ("", "#", "b")),
        ("E", ("", "b")),
        ("F", ("", "#")),
        ("G", ("", "#", "b")),
    )
    for accidental in accidentals
    for minor in ("", "m")
)

# Section markup
LYRIC_SEPARATOR = "--"
COMMENT_SEPARATOR = "!"
METADATA_PREFIX = "@"
PATTERN_PREFIX = "$"
MODIFIER_PREFIX = "_"
INFO_MARKER = "***"
MUSICIAN_MARKER = ":::"
