"""
Output models for converted songs.
"""

from songcode.models.document import (
    ChordBlock,
    ContentItem,
    Document,
    LyricObject,
    Meta,
    PatternDefinition,
    PatternReference,
    PrompterItem,
    SectionObject,
    TempoItem,
    TimeSignatureModel,
)

__all__ = [
    "ChordBlock",
    "ContentItem",
    "Document",
    "LyricObject",
    "Meta",
    "PatternDefinition",
    "PatternReference",
    "PrompterItem",
    "SectionObject",
    "TempoItem",
    "TimeSignatureModel",
]
