"""
Ingestion - from raw song text to sections, definitions and metadata.

- SongReader: decoding and line endings
- MetadataParser: `@key value` prelude lines
- PatternDefinitionParser: `$n` prelude blocks
- SectionParser: headers, overrides, modifiers, patterns, lyrics
- LyricTransformer: `_N` timing and style markers
"""

from songcode.ingest.definitions import PatternDefinitionParser, find_prelude_end, parse_definitions
from songcode.ingest.lyrics import LyricLine, LyricTransformer
from songcode.ingest.metadata import MetadataParser, parse_bpm, parse_metadata
from songcode.ingest.reader import SongReader, read_song
from songcode.ingest.sections import RawSection, SectionParser, parse_sections

__all__ = [
    "LyricLine",
    "LyricTransformer",
    "MetadataParser",
    "PatternDefinitionParser",
    "RawSection",
    "SectionParser",
    "SongReader",
    "find_prelude_end",
    "parse_bpm",
    "parse_definitions",
    "parse_metadata",
    "parse_sections",
    "read_song",
]
