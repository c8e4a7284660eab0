"""Command-line entry for vcal_lite.

Parses a VCAL file and prints its property tree followed by the derived
event fields. Useful for checking what an imported .vcs file will produce.
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import NoReturn, TextIO

import yaml

from vcal_lite.config_loader import load_config
from vcal_lite.exceptions import VCalError, VCalParseError
from vcal_lite.lite_logging import apply_root_level, configure_vcal_logging
from vcal_lite.parser.vcal_models import VCalDocument
from vcal_lite.parser.vcal_parser import VCalParser

logger = logging.getLogger(__name__)

INDENT = "  "


def _create_parser() -> argparse.ArgumentParser:
    """Create argument parser for vcal_lite CLI.

    Returns:
        Configured argument parser
    """
    parser = argparse.ArgumentParser(
        prog="vcal-lite",
        description="vcal_lite - dump the structure of a vCalendar (VCAL) file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  vcal-lite event.vcs                 # Print tree and derived fields
  cat event.vcs | vcal-lite -         # Read from stdin
  vcal-lite --strict event.vcs        # Fail on unbalanced BEGIN/END
        """,
    )
    parser.add_argument("path", help="VCAL file to parse, or '-' for stdin")
    parser.add_argument(
        "--config",
        metavar="PATH",
        help="YAML config file (default: $VCAL_LITE_CONFIG or ./vcal_lite.yaml)",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Treat unmatched END and unclosed BEGIN as errors",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


def format_document(document: VCalDocument) -> list[str]:
    """Render a parsed document as indented text lines."""
    lines = []
    for depth, node in document.walk():
        label = f"{node.name}:{node.value}" if node.is_begin else node.name
        lines.append(f"{INDENT * depth}{label}")

    lines.append(f"dtstart={document.dtstart!r}")
    lines.append(f"tzid={document.tzid!r}")
    lines.append(f"duration={document.duration!r}")
    lines.append(f"rrule={document.rrule!r}")
    lines.append(f"all_day={document.all_day}")
    return lines


def _read_input(path: str, stdin: TextIO) -> bytes:
    if path == "-":
        return stdin.buffer.read() if hasattr(stdin, "buffer") else stdin.read().encode("utf-8")
    return Path(path).read_bytes()


def main(argv: list[str] | None = None) -> NoReturn:
    """Run the vcal_lite CLI.

    Exit status is 0 on success and 1 when the file cannot be read or parsed.
    """
    args = _create_parser().parse_args(argv)
    configure_vcal_logging(debug_mode=args.debug)

    try:
        config = load_config(args.config)
        if not args.debug:
            apply_root_level(config.log_level)
        if args.strict:
            config = replace(config, strict_blocks=True)
        content = _read_input(args.path, sys.stdin)
        document = VCalParser(config).parse(content)
    except OSError as exc:
        print(f"vcal-lite: cannot read {args.path}: {exc}", file=sys.stderr)
        sys.exit(1)
    except VCalParseError as exc:
        print(f"vcal-lite: parse failed: {exc}", file=sys.stderr)
        sys.exit(1)
    except (VCalError, yaml.YAMLError) as exc:
        print(f"vcal-lite: {exc}", file=sys.stderr)
        sys.exit(1)

    logger.debug("Parsed %s: %d nodes", args.path, len(document.nodes))
    for line in format_document(document):
        print(line)
    sys.exit(0)


if __name__ == "__main__":
    main()
