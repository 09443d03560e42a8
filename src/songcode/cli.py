#!/usr/bin/env python3
"""
Entry point for the songcode command line tool.

    songcode convert song.sc                  JSON on stdout
    songcode convert song.sc --format yaml -o song.yaml
    songcode check song.sc                    validate only, exit 0/1
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from songcode.compiler.converter import SongCodeConverter
from songcode.errors import SongCodeError
from songcode.models.document import Document

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

FORMATS = ("json", "yaml")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    parser = argparse.ArgumentParser(
        prog="songcode", description="Compile SongCode files to structured documents"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    convert_parser = subparsers.add_parser(
        "convert", parents=[common], help="Convert a SongCode file"
    )
    convert_parser.add_argument("file", type=Path, help="SongCode file to convert")
    convert_parser.add_argument(
        "--format",
        choices=FORMATS,
        default="json",
        help="Output format (default: json)",
    )
    convert_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        help="Write output to this path instead of stdout",
    )

    check_parser = subparsers.add_parser(
        "check", parents=[common], help="Validate a SongCode file"
    )
    check_parser.add_argument("file", type=Path, help="SongCode file to validate")

    return parser


def render(document: Document, fmt: str) -> str:
    """Render a document in the given output format."""
    if fmt == "yaml":
        return document.to_yaml()
    return document.to_json() + "\n"


def main(argv: list[str] | None = None) -> int:
    """Main entry point. Returns the process exit code."""
    args = build_parser().parse_args(argv)

    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        raw = args.file.read_bytes()
    except OSError as e:
        logger.error(f"Cannot read {args.file}: {e}")
        return 1

    try:
        document = SongCodeConverter().convert(raw)
    except SongCodeError as e:
        logger.error(f"{args.file}: {e}")
        return 1

    if args.command == "check":
        logger.info(
            f"{args.file}: OK ({len(document.sections)} sections, "
            f"{document.total_measures} measures)"
        )
        return 0

    output = render(document, args.format)
    if args.output:
        args.output.write_text(output, encoding="utf-8")
        logger.info(f"Wrote {args.output}")
    else:
        sys.stdout.write(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
