#!/usr/bin/env python3
"""Command-line interface for Ownerguard.

This module provides the CI entry point:
- Argument parsing and validation
- Configuration file loading and merging
- Changed-path collection (arguments, file, or stdin)
- Exit codes separating "could not run" from "found violations"

Example:
    >>> from ownerguard.cli import parse_arguments
    >>> args = parse_arguments(['--codeowners', 'CODEOWNERS', 'src/app.py'])
"""

import argparse
import os
import sys
import traceback
from typing import Any, Dict, List, Mapping, Optional, TextIO

from ownerguard.context import load_event, read_required_context
from ownerguard.core.constants import ConfigKey, ErrorCode, ExitCode, OWNERGUARD_VERSION
from ownerguard.core.errors import ConfigurationError, PatternError
from ownerguard.infrastructure.config_manager import ConfigManager, ConfigSource
from ownerguard.infrastructure.logger import Logger

DESCRIPTION = "Ownerguard - fail a change set when a changed file has no codeowner"

STDIN_MARKER = "-"


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
        CLIError: If no changed paths were given
    """
    parser = argparse.ArgumentParser(
        prog="ownerguard",
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Check explicit paths against .github/CODEOWNERS
  ownerguard src/app.py docs/index.md

  # Check the files changed on a branch
  git diff --name-only origin/main... | ownerguard --files-from -

  # Use another rule file and require pull request context
  ownerguard --codeowners CODEOWNERS --files-from changed.txt --require-context
        """,
    )

    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {OWNERGUARD_VERSION}",
    )

    parser.add_argument(
        "paths",
        metavar="PATH",
        nargs="*",
        help="Changed file paths to check",
    )

    parser.add_argument(
        "-f",
        "--files-from",
        metavar="FILE",
        type=str,
        help="Read changed paths from FILE, one per line ('-' for stdin)",
    )

    rules_group = parser.add_argument_group("rule options")

    rules_group.add_argument(
        "-o",
        "--codeowners",
        metavar="FILE",
        type=str,
        help="Rule file path (default: .github/CODEOWNERS)",
    )

    rules_group.add_argument(
        "-c",
        "--config",
        metavar="FILE",
        type=str,
        help="Configuration file path (YAML format)",
    )

    rules_group.add_argument(
        "--ignore-case",
        action="store_true",
        default=None,
        help="Match patterns case-insensitively",
    )

    rules_group.add_argument(
        "--require-context",
        action="store_true",
        help="Fail unless GITHUB_TOKEN is set and a pull request number is available "
        "(the token is only checked for presence)",
    )

    log_group = parser.add_argument_group("logging options")

    log_group.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging (shows the rule covering each file)",
    )

    log_group.add_argument(
        "--log-file",
        metavar="FILE",
        type=str,
        help="Also write logs to FILE",
    )

    parsed = parser.parse_args(args)
    _validate_arguments(parsed)
    return parsed


def _validate_arguments(args: argparse.Namespace) -> None:
    """
    Validate parsed arguments.

    Raises:
        CLIError: If validation fails
    """
    if not args.paths and not args.files_from:
        raise CLIError(
            "No changed paths given: pass PATH arguments or --files-from\n"
            "Use --help for usage information"
        )

    if args.files_from and args.files_from != STDIN_MARKER:
        if not os.path.isfile(args.files_from):
            raise CLIError(f"Changed-path list does not exist: {args.files_from}")

    if args.config and not os.path.isfile(args.config):
        raise CLIError(f"Configuration file does not exist: {args.config}")


def build_config_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Build configuration dictionary from command-line arguments.

    Only options given on the command line appear in the result, so that
    file and environment settings are not overridden by defaults.
    """
    section: Dict[str, Any] = {}

    if args.codeowners:
        section["codeowners_path"] = args.codeowners

    if args.ignore_case:
        section["ignore_case"] = True

    logging_section: Dict[str, Any] = {}
    if args.debug:
        logging_section["level"] = "DEBUG"
    if args.log_file:
        logging_section["file"] = args.log_file
    if logging_section:
        section["logging"] = logging_section

    return {"ownerguard": section}


def load_config(args: argparse.Namespace, environ: Mapping[str, str]) -> ConfigManager:
    """
    Resolve configuration from defaults, file, environment and arguments.

    Raises:
        ConfigurationError: If the configuration file cannot be loaded
    """
    config = ConfigManager(config_file=args.config, environ=environ)
    config.load_dict(build_config_from_args(args), ConfigSource.CLI_ARGS)
    return config


def read_changed_paths(args: argparse.Namespace, stdin: Optional[TextIO] = None) -> List[str]:
    """
    Collect changed paths from arguments and --files-from.

    Blank lines are skipped; order is preserved. Paths keep any surrounding
    spaces, as positional paths do.
    """
    paths = list(args.paths)

    if args.files_from == STDIN_MARKER:
        paths.extend(_clean_lines(stdin if stdin is not None else sys.stdin))
    elif args.files_from:
        try:
            with open(args.files_from, "r", encoding="utf-8") as f:
                paths.extend(_clean_lines(f))
        except OSError as e:
            raise CLIError(f"Failed to read changed-path list: {args.files_from}\n{e}")

    return paths


def _clean_lines(stream: TextIO) -> List[str]:
    # Only line terminators are dropped; spaces can be part of a file name
    return [line.rstrip("\r\n") for line in stream if line.strip()]


def setup_logging(config: ConfigManager) -> Logger:
    """
    Setup logging based on configuration.

    Args:
        config: Resolved configuration

    Returns:
        Configured logger instance

    Raises:
        ConfigurationError: If the log level is unknown or the log file cannot be opened
    """
    level = config.get(ConfigKey.LOG_LEVEL, "INFO")
    try:
        logger = Logger("ownerguard", level=level)
    except (KeyError, TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid log level: {level!r}") from e

    log_file = config.get(ConfigKey.LOG_FILE)
    if log_file:
        try:
            handler = logger.create_file_handler(log_file)
        except OSError as e:
            raise ConfigurationError(
                f"Cannot open log file {log_file}: {e}", ErrorCode.PERMISSION_DENIED
            ) from e
        logger.add_handler(handler)

    return logger


def main(
    argv: Optional[List[str]] = None,
    environ: Optional[Mapping[str, str]] = None,
    stdin: Optional[TextIO] = None,
) -> int:
    """
    Main CLI entry point.

    Args:
        argv: Argument list (defaults to sys.argv[1:])
        environ: Environment mapping (defaults to os.environ)
        stdin: Stream for --files-from - (defaults to sys.stdin)

    Returns:
        Process exit code
    """
    if environ is None:
        environ = os.environ

    try:
        args = parse_arguments(argv)
        config = load_config(args, environ)
        logger = setup_logging(config)

        context = None
        if args.require_context:
            context = read_required_context(environ, load_event(environ))

        changed_paths = read_changed_paths(args, stdin)

        from ownerguard.main import run_ownerguard

        return int(run_ownerguard(config, changed_paths, logger, context))

    except (CLIError, ConfigurationError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return int(ExitCode.CONFIGURATION_ERROR)

    except PatternError as e:
        print(f"Error: {e}", file=sys.stderr)
        return int(ExitCode.PATTERN_ERROR)

    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return int(ExitCode.INTERRUPTED)

    except Exception as e:
        print(f"Unexpected error: {e}", file=sys.stderr)
        traceback.print_exc()
        return int(ExitCode.INTERNAL_ERROR)


if __name__ == "__main__":
    sys.exit(main())
