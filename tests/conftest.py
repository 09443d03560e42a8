"""
Pytest configuration and shared fixtures.
"""

import tempfile
from pathlib import Path

import pytest

from songcode.compiler.converter import SongCodeConverter
from songcode.patterns.compiler import PatternCompiler

AMAZING_GRACE = """\
@name Amazing Grace
@artist Traditional
@bpm 90
@time 3/4
@original G
@capo 2

$1
G;G;C;G

$2 [D;G]2

Verse!gentle
$1
_repeat 2
--
Amazing grace how sweet _4
That saved a wretch _4

Chorus
@bpm 100
$2
_after D
--
***Solo*** _2
:::Watch drums::: _3
"""


@pytest.fixture
def temp_dir() -> Path:
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def song_text() -> str:
    """A complete song with metadata, definitions, modifiers and styled lyrics."""
    return AMAZING_GRACE


@pytest.fixture
def song_path(temp_dir: Path, song_text: str) -> Path:
    """The sample song written to disk."""
    path = temp_dir / "amazing_grace.sc"
    path.write_text(song_text, encoding="utf-8")
    return path


@pytest.fixture
def converter() -> SongCodeConverter:
    """A converter with default options."""
    return SongCodeConverter()


@pytest.fixture
def compiler() -> PatternCompiler:
    """A pattern compiler with the default loop depth."""
    return PatternCompiler()
