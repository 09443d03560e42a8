"""
Document model - the structured output of a conversion.

A Document contains:
- Meta (song-level metadata, time signature always present)
- Patterns (distinct chord patterns keyed by letter ID)
- Sections (pattern reference, modifiers and lyrics per section)
- Prompter (linear stream of tempo and content items for display)

This is the stable, inspectable interface handed to consumers.
"""

from __future__ import annotations

import json
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field

from songcode.constants import DEFAULT_DENOMINATOR, DEFAULT_NUMERATOR, LyricStyle, PromptStyle
from songcode.core.rhythm import TimeSignature


class TimeSignatureModel(BaseModel):
    """Time signature as it appears in the output."""

    numerator: int = Field(DEFAULT_NUMERATOR, ge=1, description="Beats per measure")
    denominator: int = Field(DEFAULT_DENOMINATOR, description="Beat unit (2 or 4)")

    model_config = {"frozen": True}

    @classmethod
    def from_time_sig(cls, time_sig: TimeSignature) -> TimeSignatureModel:
        """Create from a core TimeSignature."""
        return cls(numerator=time_sig.numerator, denominator=time_sig.denominator)

    def to_time_sig(self) -> TimeSignature:
        """Convert back to a core TimeSignature."""
        return TimeSignature(self.numerator, self.denominator)


class Meta(BaseModel):
    """Song-level metadata. Absent values are left out of the output."""

    name: str | None = Field(None, description="Song name")
    artist: str | None = Field(None, description="Artist name")
    bpm: int | None = Field(None, ge=0, le=400, description="Tempo in BPM")
    time: TimeSignatureModel = Field(
        default_factory=TimeSignatureModel, description="Global time signature"
    )
    original: str | None = Field(None, description="Original key of the song")
    capo: int | None = Field(None, ge=1, le=20, description="Capo fret")
    warning: str | None = Field(None, description="Warning shown before playing")
    end: str | None = Field(None, description="Note shown at the end")

    model_config = {"frozen": True}


class PatternDefinition(BaseModel):
    """A compiled pattern: source text, element JSON and measure count."""

    sc: str = Field(..., description="Normalized SongCode source")
    elements: list[Any] | None = Field(
        None, alias="json", description="Compiled elements (None for the null pattern)"
    )
    measures: int = Field(0, ge=0, description="Measures played, loops multiplied out")

    model_config = {"frozen": True, "populate_by_name": True}


class PatternReference(BaseModel):
    """How a section uses its pattern."""

    id: str | None = Field(None, description="Pattern ID (None if the section has no pattern)")
    repeat: int = Field(1, ge=1, description="Times the pattern is played")
    bpm: int | None = Field(None, description="Tempo override")
    time: TimeSignatureModel | None = Field(None, description="Time signature override")
    cut_start: list[int] | None = Field(
        None, alias="cutStart", description="[measures, beats] cut from the start"
    )
    cut_end: list[int] | None = Field(
        None, alias="cutEnd", description="[measures, beats] cut from the end"
    )
    before: PatternDefinition | None = Field(None, description="Pattern played before")
    after: PatternDefinition | None = Field(None, description="Pattern played after")

    model_config = {"frozen": True, "populate_by_name": True}


class LyricObject(BaseModel):
    """One lyric line with its measure span."""

    text: str = Field(..., description="Lyric text without markers")
    measures: int = Field(..., gt=0, description="Measures this line spans")
    style: LyricStyle = Field(LyricStyle.NORMAL, description="Display style")

    model_config = {"frozen": True}


class SectionObject(BaseModel):
    """A section of the song."""

    name: str = Field(..., description="Section name (e.g., 'Verse', 'Chorus')")
    comment: str | None = Field(None, description="Free comment after '!'")
    pattern: PatternReference = Field(..., description="Pattern and modifiers")
    measures: int = Field(0, description="Final measure count after modifiers")
    lyrics: list[LyricObject] = Field(default_factory=list, description="Lyric lines")

    model_config = {"frozen": True}


class TempoItem(BaseModel):
    """Prompter tempo change."""

    type: Literal["tempo"] = "tempo"
    bpm: int = Field(..., description="Tempo in BPM")
    time: str = Field(..., description="Time signature as N/D")

    model_config = {"frozen": True}


class ChordBlock(BaseModel):
    """A run of measures played `repeats` times."""

    repeats: int = Field(1, ge=1, description="Times the pattern is played")
    pattern: list[list[list[str]]] = Field(..., description="Measures of chord positions")

    model_config = {"frozen": True}


class ContentItem(BaseModel):
    """Prompter content: chords shown alongside a lyric line."""

    type: Literal["content"] = "content"
    style: PromptStyle = Field(PromptStyle.DEFAULT, description="Display style")
    chords: list[ChordBlock] = Field(default_factory=list, description="Chord blocks")
    lyrics: str = Field("", description="Lyric text")

    model_config = {"frozen": True}


PrompterItem = TempoItem | ContentItem


class Document(BaseModel):
    """
    The converted song.

    Serializes to JSON or YAML with the wire key names
    (`json`, `cutStart`, `cutEnd`).
    """

    meta: Meta = Field(default_factory=Meta, description="Song metadata")
    patterns: dict[str, PatternDefinition] = Field(
        default_factory=dict, description="Patterns by ID, in first-use order"
    )
    sections: list[SectionObject] = Field(default_factory=list, description="Sections in order")
    prompter: list[PrompterItem] = Field(default_factory=list, description="Display stream")

    model_config = {"frozen": True}

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "meta": self.meta.model_dump(mode="json", exclude_none=True),
            "patterns": {
                pid: p.model_dump(mode="json", by_alias=True) for pid, p in self.patterns.items()
            },
            "sections": [s.model_dump(mode="json", by_alias=True) for s in self.sections],
            "prompter": [item.model_dump(mode="json") for item in self.prompter],
        }

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def to_yaml(self) -> str:
        """Serialize to YAML string."""
        return yaml.safe_dump(
            self.to_dict(), default_flow_style=False, sort_keys=False, allow_unicode=True
        )

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Document:
        """Create from dictionary."""
        return cls.model_validate(d)

    @classmethod
    def from_json(cls, json_str: str) -> Document:
        """Deserialize from JSON string."""
        return cls.from_dict(json.loads(json_str))

    @property
    def total_measures(self) -> int:
        """Measures across all sections."""
        return sum(s.measures for s in self.sections)
