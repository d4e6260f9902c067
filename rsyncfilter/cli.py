#!/usr/bin/env python3
"""Command-line interface for rsyncfilter.

Subcommands:
- ``translate``: show the regular expression generated for rules
- ``check``: report whether paths are excluded by a set of rules

Example:
    >>> from rsyncfilter.cli import parse_arguments
    >>> args = parse_arguments(["check", "--root", "/data", "--exclude", "*.o", "a.o"])
"""

import argparse
import sys
from typing import List, Optional

from rsyncfilter.core.constants import RSYNCFILTER_VERSION, ConfigKey
from rsyncfilter.core.validators import InvalidArgumentError, PatternSyntaxError
from rsyncfilter.infrastructure.config_manager import ConfigError, ConfigManager
from rsyncfilter.infrastructure.logger import Logger, LogLevel, set_global_logger
from rsyncfilter.rules.engine import FilterList
from rsyncfilter.rules.patterns import PatternKind, compile

DESCRIPTION = "rsyncfilter - rsync-compatible exclude rule matching"

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_USAGE = 2


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    pass


def parse_arguments(args: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        args: Argument list to parse (defaults to sys.argv[1:])

    Returns:
        Parsed arguments namespace

    Raises:
        SystemExit: On invalid arguments or --help/--version
    """
    parser = argparse.ArgumentParser(
        prog="rsyncfilter",
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Show the expression generated for a rule
  rsyncfilter translate '*.java' 'build/'

  # Check paths against an exclude file
  rsyncfilter check --root /srv/project --exclude-from excludes.txt src/Main.java build/out.o
        """,
    )

    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {RSYNCFILTER_VERSION}",
    )
    parser.add_argument(
        "-c",
        "--config",
        metavar="FILE",
        type=str,
        help="Configuration file path (YAML format)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    translate = subparsers.add_parser("translate", help="Print the expression for each rule")
    translate.add_argument("rules", metavar="RULE", nargs="+", help="Filter rule text")

    check = subparsers.add_parser("check", help="Report whether paths are excluded")
    check.add_argument(
        "-r",
        "--root",
        metavar="DIR",
        type=str,
        help="Absolute transfer root (default: rules.root from config)",
    )
    check.add_argument(
        "-e",
        "--exclude",
        metavar="RULE",
        action="append",
        default=[],
        help="Exclude rule (repeatable)",
    )
    check.add_argument(
        "-f",
        "--exclude-from",
        metavar="FILE",
        action="append",
        default=[],
        help="Read exclude rules from FILE (repeatable)",
    )
    check.add_argument("paths", metavar="PATH", nargs="+", help="Paths to check")

    return parser.parse_args(args)


def setup_logging(config: ConfigManager, debug: bool) -> Logger:
    """Create the global logger from configuration."""
    level = LogLevel.DEBUG if debug else config.get("logging.level", "WARNING")
    logger = Logger(name="rsyncfilter", level=level)

    log_file = config.get("logging.file")
    if log_file:
        logger.add_handler(logger.create_file_handler(log_file))

    set_global_logger(logger)
    return logger


def load_filters(args: argparse.Namespace, config: ConfigManager, logger: Logger) -> FilterList:
    """Build the filter list from config files, --exclude-from and --exclude.

    Raises:
        CLIError: If a rules file cannot be read
    """
    files = config.get(f"{ConfigKey.RULES}.{ConfigKey.RULES_FILES}", [])
    if isinstance(files, str):
        files = [files]

    patterns = []
    for rules_file in list(files) + args.exclude_from:
        try:
            patterns.extend(FilterList.from_file(rules_file, logger=logger))
        except OSError as e:
            raise CLIError(f"Cannot read rules file {rules_file}: {e}") from e

    rules = FilterList(patterns, logger=logger)
    rules.extend(args.exclude)
    return rules


def run_translate(args: argparse.Namespace) -> int:
    """Print the generated expression, or the inert kind, for each rule."""
    for text in args.rules:
        pattern = compile(text)
        if pattern.kind is PatternKind.COMPILED:
            print(pattern.expression)
        else:
            print(f"<{pattern.kind.value}>")
    return EXIT_OK


def run_check(args: argparse.Namespace, config: ConfigManager, logger: Logger) -> int:
    """Print ``excluded`` or ``included`` for each path."""
    root = args.root or config.get(f"{ConfigKey.RULES}.{ConfigKey.RULES_ROOT}")
    if not root:
        raise CLIError("No transfer root given (use --root or rules.root)")

    rules = load_filters(args, config, logger)
    with logger.add_context(root=root):
        for path in args.paths:
            verdict = "excluded" if rules.is_excluded(root, path) else "included"
            print(f"{verdict}\t{path}")
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the ``rsyncfilter`` console script.

    Returns:
        Process exit code
    """
    args = parse_arguments(argv)

    try:
        config = ConfigManager(args.config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE

    logger = setup_logging(config, args.debug)

    try:
        if args.command == "translate":
            return run_translate(args)
        return run_check(args, config, logger)
    except PatternSyntaxError as e:
        logger.error("Invalid filter rule", rule=e.pattern)
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR
    except (CLIError, InvalidArgumentError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE


if __name__ == "__main__":
    sys.exit(main())
