from __future__ import annotations

import argparse
import sys
from typing import Sequence

from . import __version__
from .codegen.cli_integration import (
    add_generate_args,
    err_console,
    handle_generate_command,
    handle_language_info_command,
    handle_languages_command,
)
from .logging_config import get_logger, setup_logging

logger = get_logger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Build the ``cstr-enum`` argument parser with its subcommands."""
    parser = argparse.ArgumentParser(
        prog="cstr-enum",
        description="Generate conversions between enum variants and C-string names",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  cstr-enum generate constants.py
  cstr-enum generate constants.py -o constants_cstr.py
  cstr-enum generate constants.py -l c -o constants_cstr.h
  cstr-enum languages
        """.strip(),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        help="Logging level (default: WARNING)",
    )
    parser.add_argument("--log-file", metavar="FILE", help="Also write logs to FILE")

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    generate = subparsers.add_parser(
        "generate",
        help="Generate conversion code for a declaration module",
        description="Generate as_cstr/from_cstr implementations for derive targets",
    )
    add_generate_args(generate)
    generate.set_defaults(func=handle_generate_command)

    languages = subparsers.add_parser("languages", help="List supported languages")
    languages.set_defaults(func=handle_languages_command)

    language_info = subparsers.add_parser(
        "language-info", help="Show details about a target language"
    )
    language_info.add_argument("language", help="Language name or alias")
    language_info.set_defaults(func=handle_language_info_command)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line interface.

    Args:
        argv: Arguments without the program name (defaults to ``sys.argv``).

    Returns:
        Process exit code.
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        setup_logging(args.log_level, args.log_file)
    except OSError as e:
        err_console.print(f"[red]✗ Cannot open log file:[/red] {e}")
        return 1

    logger.debug("Running command: %s", args.command)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
