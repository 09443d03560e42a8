"""
SongCode Converter - compiles a song to a Document.

This is the central conversion pipeline:
    Text -> Sections + Patterns -> Validated Measures -> Document

The converter:
1. Reads the text and parses metadata, definitions and sections
2. Deduplicates section patterns and assigns letter IDs
3. Compiles every pattern (and every before/after pattern)
4. Validates beat division and lyric timing per section
5. Expands, resolves and stacks measures into the prompter stream
6. Assembles the Document

Conversion is fail-fast: the first SongCodeError aborts it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from songcode.arrangement.modifiers import SectionModifiers
from songcode.arrangement.repeats import RepeatSymbolResolver
from songcode.arrangement.stacker import stack_measures
from songcode.arrangement.validator import LyricTimingValidator, TimeSignatureValidator
from songcode.compiler.prompter import PromptItemBuilder
from songcode.constants import MAX_LOOP_DEPTH
from songcode.core.measure import Measure
from songcode.core.rhythm import TimeSignature
from songcode.errors import ErrorCode, SongCodeError
from songcode.ingest.definitions import PatternDefinitionParser
from songcode.ingest.lyrics import LyricLine, LyricTransformer
from songcode.ingest.metadata import MetadataParser
from songcode.ingest.reader import SongReader
from songcode.ingest.sections import RawSection, SectionParser
from songcode.models.document import (
    Document,
    LyricObject,
    Meta,
    PatternDefinition,
    PatternReference,
    PrompterItem,
    SectionObject,
    TimeSignatureModel,
)
from songcode.patterns.compiler import CompiledPattern, PatternCompiler
from songcode.patterns.registry import PatternRegistry, normalize_pattern

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConverterOptions:
    """Settings for a converter."""

    default_time: TimeSignature = TimeSignature.COMMON_TIME  # used when @time is absent
    max_loop_depth: int = MAX_LOOP_DEPTH


@dataclass
class SectionPlan:
    """A section with its patterns compiled and its measures counted."""

    raw: RawSection
    pattern_id: str
    pattern: CompiledPattern
    modifiers: SectionModifiers
    time_sig: TimeSignature
    measures: int
    lyrics: list[LyricLine]


class SongCodeConverter:
    """
    Converts SongCode text to a Document.

    The converter holds only configuration and stateless helpers, so one
    instance can convert any number of songs.
    """

    def __init__(self, options: ConverterOptions | None = None):
        """
        Initialize the converter.

        Args:
            options: Converter settings (defaults if None)
        """
        self.options = options or ConverterOptions()
        self.reader = SongReader()
        self.metadata_parser = MetadataParser()
        self.definition_parser = PatternDefinitionParser()
        self.section_parser = SectionParser()
        self.pattern_compiler = PatternCompiler(self.options.max_loop_depth)
        self.lyric_validator = LyricTimingValidator()
        self.lyric_transformer = LyricTransformer()
        self.repeat_resolver = RepeatSymbolResolver()
        self.item_builder = PromptItemBuilder()

    def convert(self, source: str | bytes) -> Document:
        """
        Convert a song.

        Args:
            source: SongCode text or UTF-8 bytes

        Returns:
            The converted Document

        Raises:
            SongCodeError: On the first parsing or validation failure
        """
        text = self.reader.read(source)

        meta = self._parse_meta(text)
        definitions = self.definition_parser.parse(text)
        sections = self.section_parser.parse(text)
        global_time = meta.time.to_time_sig()

        assignment = PatternRegistry(definitions).assign(
            [s.pattern for s in sections],
            [self._section_line(s) for s in sections],
        )
        logger.debug(f"{len(sections)} sections use {len(assignment.patterns)} distinct patterns")

        first_use: dict[str, RawSection] = {}
        for section, pid in zip(sections, assignment.section_ids):
            first_use.setdefault(pid, section)
        patterns = {
            pid: self._compile(source_text, self._section_line(first_use[pid]))
            for pid, source_text in assignment.patterns.items()
        }

        plans = [
            self._plan_section(section, assignment.section_ids[i], patterns, global_time)
            for i, section in enumerate(sections)
        ]
        logger.debug("Validation passed")

        document = Document(
            meta=meta,
            patterns={pid: self._pattern_definition(p) for pid, p in patterns.items()},
            sections=[self._section_object(plan) for plan in plans],
            prompter=self._build_prompter(meta, global_time, plans),
        )
        logger.debug(
            f"Converted {len(document.sections)} sections, "
            f"{document.total_measures} measures, {len(document.prompter)} prompter items"
        )
        return document

    def _parse_meta(self, text: str) -> Meta:
        meta = self.metadata_parser.parse(text)
        if "time" not in meta.model_fields_set:
            default = TimeSignatureModel.from_time_sig(self.options.default_time)
            meta = meta.model_copy(update={"time": default})
        return meta

    def _compile(self, source: str, line: int | None) -> CompiledPattern:
        """Compile a pattern, attaching the source line to any error."""
        try:
            return self.pattern_compiler.compile(source)
        except SongCodeError as exc:
            if exc.line is None:
                exc.line = line
            raise

    def _section_line(self, section: RawSection) -> int:
        return section.pattern_line or section.line

    def _plan_section(
        self,
        section: RawSection,
        pattern_id: str,
        patterns: dict[str, CompiledPattern],
        global_time: TimeSignature,
    ) -> SectionPlan:
        """Compile modifiers and validate one section."""
        pattern = patterns[pattern_id]
        before: CompiledPattern | None = None
        after: CompiledPattern | None = None
        if section.before:
            before = self._compile(normalize_pattern(section.before), section.line)
        if section.after:
            after = self._compile(normalize_pattern(section.after), section.line)
        time_sig = section.time or global_time

        validator = TimeSignatureValidator(time_sig)
        validator.validate_pattern(pattern, self._section_line(section))
        for extra in (before, after):
            if extra is not None:
                validator.validate_pattern(extra, section.line)

        modifiers = SectionModifiers(
            repeat=section.repeat,
            cut_start=section.cut_start,
            cut_end=section.cut_end,
            before=before,
            after=after,
        )
        played = pattern.measures * modifiers.repeat
        if modifiers.cut_slots > played:
            raise SongCodeError(
                ErrorCode.CUTS_EXCEED_SECTION,
                f"Cuts remove more measures than section '{section.name}' plays",
                line=section.line,
                context=f"Cuts remove {modifiers.cut_slots} of {played} measures",
            )
        measures = modifiers.final_measures(pattern.measures)

        self.lyric_validator.validate(section.lyrics, measures, section.lyric_lines, section.name)
        lyrics = self.lyric_transformer.transform(section.lyrics, section.lyric_lines)

        logger.debug(f"Section '{section.name}': pattern {pattern_id}, {measures} measures")
        return SectionPlan(section, pattern_id, pattern, modifiers, time_sig, measures, lyrics)

    def _stack(self, plan: SectionPlan) -> list[Measure]:
        """Expand, resolve and stack the measures a section plays."""
        mods = plan.modifiers
        measures = self.repeat_resolver.resolve(plan.pattern.expand())
        before = self.repeat_resolver.resolve(mods.before.expand()) if mods.before else None
        after = self.repeat_resolver.resolve(mods.after.expand()) if mods.after else None
        return stack_measures(measures, mods, before, after)

    def _build_prompter(
        self, meta: Meta, global_time: TimeSignature, plans: list[SectionPlan]
    ) -> list[PrompterItem]:
        prompter: list[PrompterItem] = []

        if meta.bpm:
            prompter.append(self.item_builder.build_tempo_item(meta.bpm, global_time))

        for plan in plans:
            if plan.raw.bpm:
                prompter.append(self.item_builder.build_tempo_item(plan.raw.bpm, plan.time_sig))

            measures = self._stack(plan)

            if not plan.lyrics:
                if measures:
                    prompter.append(self.item_builder.build_content_item(measures))
                continue

            offset = 0
            for lyric in plan.lyrics:
                chunk = measures[offset : offset + lyric.measures]
                offset += lyric.measures
                prompter.append(self.item_builder.build_content_item(chunk, lyric))

        return prompter

    def _pattern_definition(self, pattern: CompiledPattern) -> PatternDefinition:
        return PatternDefinition(
            sc=pattern.source, elements=pattern.to_json(), measures=pattern.measures
        )

    def _section_object(self, plan: SectionPlan) -> SectionObject:
        raw, mods = plan.raw, plan.modifiers
        reference = PatternReference(
            id=plan.pattern_id,
            repeat=mods.repeat,
            bpm=raw.bpm,
            time=TimeSignatureModel.from_time_sig(raw.time) if raw.time else None,
            cut_start=mods.cut_start.to_json() if mods.cut_start else None,
            cut_end=mods.cut_end.to_json() if mods.cut_end else None,
            before=self._pattern_definition(mods.before) if mods.before else None,
            after=self._pattern_definition(mods.after) if mods.after else None,
        )
        return SectionObject(
            name=raw.name,
            comment=raw.comment,
            pattern=reference,
            measures=plan.measures,
            lyrics=[LyricObject(**lyric.to_dict()) for lyric in plan.lyrics],
        )


def convert(source: str | bytes, options: ConverterOptions | None = None) -> Document:
    """
    Convenience function to convert a song.

    Args:
        source: SongCode text or UTF-8 bytes
        options: Converter settings

    Returns:
        The converted Document
    """
    return SongCodeConverter(options).convert(source)
