#!/usr/bin/env python3
"""Command-line interface for ksfilter.

This module provides the ``ksfilter`` command:
- Argument parsing
- Configuration file and environment loading
- Keyspace filter compilation with logged diagnostics
- Printing the server-side clause and the keyspaces kept client-side

Example:
    >>> from ksfilter.cli import parse_arguments
    >>> args = parse_arguments(["-s", "ks1", "-s", "!/.*2/", "ks1", "ks2"])
"""

import argparse
import sys
from typing import List, Optional, TextIO

from ksfilter.core.constants import DEFAULT_LABEL, KSFILTER_VERSION, ConfigKey
from ksfilter.infrastructure.config_manager import ConfigError, ConfigManager, ConfigSource
from ksfilter.infrastructure.logger import Logger, create_console_handler
from ksfilter.rules.compiler import KeyspaceFilter

DESCRIPTION = "ksfilter - keyspace filtering for schema metadata refreshes"


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
        prog="ksfilter",
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Spec syntax:
  ks1        include keyspace ks1
  !system    exclude keyspace system
  /KS.*/     include keyspaces matching the regex
  !/.*2/     exclude keyspaces matching the regex

Examples:
  # Show the server-side clause for exact names
  ksfilter -s ks1 -s ks2

  # Check which keyspaces a configured filter keeps
  ksfilter --config ksfilter.yaml system ks1 ks2
        """,
    )

    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {KSFILTER_VERSION}",
    )

    parser.add_argument(
        "-c",
        "--config",
        metavar="FILE",
        type=str,
        help="Configuration file path (YAML format)",
    )

    parser.add_argument(
        "-s",
        "--spec",
        metavar="SPEC",
        action="append",
        dest="specs",
        help="Filter spec, repeatable (overrides the configured list)",
    )

    parser.add_argument(
        "--label",
        default=DEFAULT_LABEL,
        help=f"Label used in diagnostics (default: {DEFAULT_LABEL})",
    )

    parser.add_argument(
        "--no-env",
        action="store_true",
        help="Ignore KSFILTER_* environment variables",
    )

    log_group = parser.add_argument_group("logging options")
    log_group.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (default: from config, WARNING)",
    )
    log_group.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    parser.add_argument(
        "keyspaces",
        metavar="KEYSPACE",
        nargs="*",
        help="Keyspace names to test against the filter",
    )

    return parser.parse_args(args)


def load_config(args: argparse.Namespace) -> ConfigManager:
    """
    Build the configuration from file, environment and arguments.

    Args:
        args: Parsed arguments namespace

    Returns:
        Configuration manager with every source loaded

    Raises:
        ConfigError: If the config file cannot be loaded
    """
    config = ConfigManager(load_environment=not args.no_env)

    if args.config:
        config.load_file(args.config)

    if args.specs is not None:
        config.set(ConfigKey.REFRESHED_KEYSPACES, list(args.specs), ConfigSource.CLI_ARGS)
    if args.log_level:
        config.set(ConfigKey.LOG_LEVEL, args.log_level, ConfigSource.CLI_ARGS)

    return config


def setup_logging(args: argparse.Namespace, config: ConfigManager) -> Logger:
    """
    Setup logging based on arguments and configuration.

    Raises:
        CLIError: If the configured level is unknown
    """
    log_level = "DEBUG" if args.debug else str(config.get(ConfigKey.LOG_LEVEL, "WARNING"))

    try:
        return Logger("ksfilter.cli", level=log_level, handlers=[create_console_handler(sys.stderr)])
    except KeyError:
        raise CLIError(f"Unknown log level: {log_level}")


def report(keyspace_filter: KeyspaceFilter, keyspaces: List[str], out: TextIO) -> None:
    """Print the server clause, then every keyspace the filter keeps."""
    clause = keyspace_filter.server_clause().strip()
    print(f"server clause: {clause or '(none)'}", file=out)
    for keyspace in keyspace_filter.filter(keyspaces):
        print(keyspace, file=out)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Returns:
        Process exit code
    """
    try:
        args = parse_arguments(argv)
        config = load_config(args)
        logger = setup_logging(args, config)

        logger.debug("Compiling keyspace filter", label=args.label, config=args.config or "-")

        keyspace_filter = KeyspaceFilter.from_config(config, label=args.label, logger=logger)
        report(keyspace_filter, args.keyspaces, sys.stdout)
        return 0

    except ConfigError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    except CLIError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
