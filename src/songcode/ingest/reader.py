"""
Song Reader - turns raw input into clean text.
"""

from __future__ import annotations

import logging

from songcode.errors import ErrorCode, SongCodeError

logger = logging.getLogger(__name__)

_BOM = "\ufeff"


class SongReader:
    """
    Decodes and normalizes SongCode input.

    - Bytes are decoded as UTF-8, a leading BOM is dropped
    - NUL characters are rejected (binary input)
    - CRLF and lone CR become LF
    """

    def read(self, raw: str | bytes) -> str:
        """
        Read raw input.

        Args:
            raw: File content as text or bytes

        Returns:
            Text with LF line endings

        Raises:
            SongCodeError: INVALID_ENCODING for undecodable or binary input
        """
        if isinstance(raw, bytes):
            try:
                text = raw.decode("utf-8")
            except UnicodeDecodeError as exc:
                raise SongCodeError(
                    ErrorCode.INVALID_ENCODING,
                    "Input is not valid UTF-8",
                    context=f"Undecodable byte at offset {exc.start}",
                ) from exc
        else:
            text = raw

        if not text:
            return text

        if text.startswith(_BOM):
            text = text[len(_BOM) :]

        if "\x00" in text:
            line = text.count("\n", 0, text.index("\x00")) + 1
            raise SongCodeError(
                ErrorCode.INVALID_ENCODING,
                "Input contains NUL characters",
                line=line,
            )

        text = text.replace("\r\n", "\n").replace("\r", "\n")
        logger.debug(f"Read {len(text)} characters, {len(text.splitlines())} lines")
        return text


def read_song(raw: str | bytes) -> str:
    """Convenience function to read raw input."""
    return SongReader().read(raw)
