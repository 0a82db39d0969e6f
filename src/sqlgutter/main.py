"""
SQL Gutter - Command line entry point

Formats SQL files (or standard input) and prints the result, rewrites
files in place, or checks that they are already formatted.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config import KeywordCase, UserPreferences
from .formatter import SqlFormatter
from .loaders import LoaderFactory, SqlParseError
from .utils import format_parse_error

import logging
logger = logging.getLogger(__name__)


EXIT_OK = 0
EXIT_CHECK_FAILED = 1
EXIT_PARSE_ERROR = 2

STDIN_NAME = "-"


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="sqlgutter",
        description="Format SQL with keywords right-aligned into a shared gutter",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  sqlgutter query.sql                 Print the formatted query
  sqlgutter --in-place *.sql          Rewrite files
  sqlgutter --check *.sql             Exit 1 if any file would change
  cat query.sql | sqlgutter -         Format standard input
        """
    )

    parser.add_argument(
        'files',
        nargs='*',
        default=[STDIN_NAME],
        help="SQL files to format ('-' for standard input, the default)"
    )
    parser.add_argument(
        '--keyword-case',
        choices=[case.value for case in KeywordCase],
        help='Casing of emitted keywords (default: from preferences, else upper)'
    )
    parser.add_argument(
        '--dialect',
        help='SQL dialect of the input, as named by sqlglot (default: from preferences)'
    )
    parser.add_argument(
        '--parser',
        choices=sorted(LoaderFactory.supported_types()),
        help="Input kind: SQL text parsed by sqlglot, or node-sql-parser AST JSON"
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        '--in-place', '-i',
        action='store_true',
        help='Rewrite files instead of printing the result'
    )
    mode.add_argument(
        '--check',
        action='store_true',
        help='Only report files that are not formatted'
    )
    parser.add_argument(
        '--no-terminator',
        action='store_true',
        help="Do not append ';' to formatted statements"
    )
    parser.add_argument(
        '--config',
        type=Path,
        help='Preferences file (default: ~/.sqlgutter/preferences.json)'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Log debug information to standard error'
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )
    return parser


def _read(name: str) -> str:
    if name == STDIN_NAME:
        return sys.stdin.read()
    return Path(name).read_text(encoding="utf-8")


def _with_newline(text: str) -> str:
    return text if text.endswith("\n") else text + "\n"


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the command line.

    Args:
        argv: Arguments without the program name (sys.argv[1:] if None)

    Returns:
        Exit code: 0 on success, 1 when --check finds unformatted input,
        2 when some input could not be parsed
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if args.in_place and STDIN_NAME in args.files:
        parser.error("--in-place cannot be used with standard input")

    preferences = UserPreferences(args.config) if args.config else UserPreferences.get_instance()
    overrides = {
        "keyword_case": args.keyword_case,
        "dialect": args.dialect,
        "parser": args.parser,
    }
    if args.no_terminator:
        overrides["insert_terminator"] = False
    options = preferences.to_formatter_options(**overrides)
    logger.debug(f"Formatter options: {options.to_dict()}")

    formatter = SqlFormatter(options)
    exit_code = EXIT_OK

    for name in args.files:
        display_name = "<stdin>" if name == STDIN_NAME else name
        try:
            original = _read(name)
        except OSError as e:
            print(f"{display_name}: {e}", file=sys.stderr)
            exit_code = EXIT_PARSE_ERROR
            continue

        try:
            formatted = _with_newline(formatter.format(original)) if original.strip() else original
        except SqlParseError as e:
            print(f"{display_name}: {format_parse_error(e, include_original=args.verbose)}", file=sys.stderr)
            exit_code = EXIT_PARSE_ERROR
            continue

        if args.check:
            if formatted != original:
                print(f"would reformat {display_name}", file=sys.stderr)
                exit_code = max(exit_code, EXIT_CHECK_FAILED)
        elif args.in_place:
            if formatted != original:
                Path(name).write_text(formatted, encoding="utf-8")
                logger.info(f"Reformatted {display_name}")
        else:
            sys.stdout.write(formatted)

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
