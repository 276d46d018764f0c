"""Command-line entry point: dump the doctext of one call site as YAML or JSON.

    doctext settings.py 12 --function configure
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

import yaml

from .errors import DoctextError
from .options import DoctextOptions, load_options
from .reader import DoctextReader

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="doctext",
        description="Extract doctext from the dict literal passed to a call.",
    )
    parser.add_argument("file", type=Path, help="Python source file")
    parser.add_argument("line", type=int, help="Line of the call expression")
    parser.add_argument("--function", default=None, help="Name of the called function")
    parser.add_argument("--config", type=Path, default=None, help="Options YAML file")
    parser.add_argument("--marker", default=None, help="Comment marker (overrides config)")
    parser.add_argument("--json", action="store_true", help="Print JSON instead of YAML")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        options = load_options(args.config) if args.config else DoctextOptions()
    except (OSError, ValueError) as e:
        print(f"doctext: invalid config: {e}", file=sys.stderr)
        return 1
    if args.marker:
        options.marker = args.marker

    reader = DoctextReader.create(options=options)
    try:
        result = reader.read_file(args.file, args.line, args.function)
    except DoctextError as e:
        print(f"doctext: {e}", file=sys.stderr)
        return 1

    logger.info("Read %d documented keys from %s", len(result.matched), args.file)
    data = result.to_dict()
    if args.json:
        print(json.dumps(data, indent=2))
    else:
        print(yaml.safe_dump(data, sort_keys=False, allow_unicode=True), end="")
    return 0
