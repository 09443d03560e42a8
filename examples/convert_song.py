#!/usr/bin/env python3
"""
Example: Convert a SongCode file and walk through the result.

Usage:
    python examples/convert_song.py
    # Creates: examples/output/amazing_grace.json and .yaml

This shows the whole pipeline:
1. The song text is parsed and validated
2. Patterns are deduplicated and given letter IDs
3. Sections get their final measure counts
4. The prompter stream is what a display walks through while playing
"""

from pathlib import Path

from songcode import SongCodeConverter, SongCodeError


def main() -> None:
    """Convert the demo song to JSON and YAML."""
    examples_dir = Path(__file__).parent
    output_dir = examples_dir / "output"
    output_dir.mkdir(exist_ok=True)

    song_file = examples_dir / "amazing_grace.sc"

    print("SongCode Converter")
    print("=" * 40)
    print(f"Song: {song_file.name}")
    print()

    converter = SongCodeConverter()
    document = converter.convert(song_file.read_bytes())

    meta = document.meta
    print(f"  Name: {meta.name}")
    print(f"  Artist: {meta.artist}")
    print(f"  Tempo: {meta.bpm} BPM, {meta.time.numerator}/{meta.time.denominator}")
    print(f"  Total measures: {document.total_measures}")
    print()

    print("Patterns:")
    for pid, pattern in document.patterns.items():
        print(f"  {pid}: {pattern.sc!r} ({pattern.measures} measures)")
    print()

    print("Sections:")
    for section in document.sections:
        comment = f" ({section.comment})" if section.comment else ""
        print(
            f"  {section.name}{comment}: pattern {section.pattern.id}, "
            f"{section.measures} measures"
        )
    print()

    print("Prompter:")
    for item in document.prompter:
        if item.type == "tempo":
            print(f"  -- tempo {item.bpm} BPM, {item.time}")
            continue
        for block in item.chords:
            bars = " | ".join(
                " ".join("".join(position) for position in measure) for measure in block.pattern
            )
            repeats = f" x{block.repeats}" if block.repeats > 1 else ""
            print(f"  [{item.style.value}] {item.lyrics or '(instrumental)'}: {bars}{repeats}")
    print()

    json_path = output_dir / "amazing_grace.json"
    json_path.write_text(document.to_json(), encoding="utf-8")
    yaml_path = output_dir / "amazing_grace.yaml"
    yaml_path.write_text(document.to_yaml(), encoding="utf-8")
    print(f"Wrote {json_path}")
    print(f"Wrote {yaml_path}")
    print()

    # Errors carry a catalog code and a location
    print("Error reporting:")
    broken = "Verse\nA;G;D\n--\nToo short _2\n"
    try:
        converter.convert(broken)
    except SongCodeError as e:
        print(f"  {e}")
        print(f"  {e.to_dict()}")


if __name__ == "__main__":
    main()
