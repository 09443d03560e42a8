"""
Compiler - turns parsed songs into Documents.

- SongCodeConverter: the full conversion pipeline
- PromptItemBuilder / optimize_pattern: the prompter display stream
"""

from songcode.compiler.converter import ConverterOptions, SongCodeConverter, convert
from songcode.compiler.prompter import PromptItemBuilder, optimize_pattern

__all__ = [
    "ConverterOptions",
    "PromptItemBuilder",
    "SongCodeConverter",
    "convert",
    "optimize_pattern",
]
