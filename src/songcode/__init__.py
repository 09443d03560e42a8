"""
SongCode - compiles chord/lyric notation into structured song documents.

    from songcode import convert

    document = convert(open("song.sc").read())
    print(document.to_json())
"""

from songcode.compiler import ConverterOptions, SongCodeConverter, convert
from songcode.errors import ErrorCode, SongCodeError
from songcode.models import Document

__version__ = "0.1.0"

__all__ = [
    "ConverterOptions",
    "Document",
    "ErrorCode",
    "SongCodeConverter",
    "SongCodeError",
    "convert",
]
