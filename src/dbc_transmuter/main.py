"""
dbc-transmuter - Entry Point

Reads a DBC file, decodes it and writes the messages and problems as JSON.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from .core.errors import NoMessagesError
from .core.parser import DBCParser
from .utils.logging_config import setup_logging

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_PROBLEMS = 2  # --strict and at least one error problem


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dbc-transmuter",
        description="Decode a DBC file into JSON messages, signals and problems",
    )
    parser.add_argument("dbc_file", type=Path, help="Path to the DBC file")
    parser.add_argument(
        "-o", "--output", type=Path, default=None, help="Write JSON here instead of stdout"
    )
    parser.add_argument("--encoding", default="utf-8", help="DBC file encoding")
    parser.add_argument("--indent", type=int, default=2, help="JSON indentation")
    parser.add_argument(
        "--problems-only", action="store_true", help="Only output the problem list"
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help=f"Exit with code {EXIT_PROBLEMS} when an error problem was found",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug console logging")
    parser.add_argument("--log-dir", type=Path, default=None, help="Directory for log files")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """
    Command line entry point.

    Returns:
        Exit code (0 for success)
    """
    args = build_arg_parser().parse_args(argv)

    logger = setup_logging(
        log_dir=args.log_dir,
        console_level=logging.DEBUG if args.verbose else logging.WARNING,
    )

    try:
        result = DBCParser().parse_file(args.dbc_file, encoding=args.encoding)
    except (FileNotFoundError, NoMessagesError) as e:
        logger.error(str(e))
        return EXIT_FAILURE

    payload = result.to_dict()
    if args.problems_only:
        payload = {"problems": payload["problems"]}
    text = json.dumps(payload, indent=args.indent, ensure_ascii=False)

    if args.output is None:
        sys.stdout.write(text + "\n")
    else:
        args.output.write_text(text + "\n", encoding="utf-8")
        logger.info(f"Wrote {args.output}")

    if args.strict and result.has_errors:
        return EXIT_PROBLEMS
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
