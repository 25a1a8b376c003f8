"""Command-line argument parsing for timesafer.

This module sets up the subcommands and global logging options of the
``timesafer`` inspection tool.
"""

import argparse
from typing import Optional

from timesafer.timezone.service import BACKENDS


def _add_logging_arguments(parser: argparse.ArgumentParser) -> None:
    group = parser.add_argument_group("logging")
    group.add_argument(
        "--log-level",
        choices=["DEBUG", "VERBOSE", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        help="Console log level (default from settings)",
    )
    verbosity = group.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Log at VERBOSE level")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log errors")
    group.add_argument("--no-log-colors", action="store_true", help="Disable colored log output")


def create_parser(prog: Optional[str] = None) -> argparse.ArgumentParser:
    """Create the argument parser for the timesafer command.

    Returns:
        Configured ArgumentParser with one subparser per command
    """
    parser = argparse.ArgumentParser(
        prog=prog or "timesafer",
        description="Strict Central European Time dates and timestamps",
        epilog=(
            "Examples:\n"
            "  timesafer now\n"
            "  timesafer time 2022 3 2 15 33 40\n"
            "  timesafer parse-time 2022-12-31T23:59:00Z\n"
            "  timesafer parse-date 2020-02-29"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--backend",
        choices=BACKENDS,
        help="Timezone backend used to load Europe/Berlin (default from settings)",
    )
    _add_logging_arguments(parser)

    commands = parser.add_subparsers(dest="command", metavar="COMMAND")
    commands.required = True

    now = commands.add_parser("now", help="Print the current CET time")
    now.add_argument("--date", action="store_true", help="Print only the CET calendar day")

    time_cmd = commands.add_parser("time", help="Validate components and print the CET timestamp")
    for name in ("year", "month", "day", "hour", "minute", "second"):
        time_cmd.add_argument(name, type=int)
    time_cmd.add_argument("nanosecond", type=int, nargs="?", default=0)

    date_cmd = commands.add_parser("date", help="Validate components and print the date")
    for name in ("year", "month", "day"):
        date_cmd.add_argument(name, type=int)

    parse_time = commands.add_parser(
        "parse-time", help="Parse an RFC 3339 timestamp and print it in CET"
    )
    parse_time.add_argument("text")
    parse_time.add_argument(
        "--assume-local",
        action="store_true",
        help="Read a timestamp without UTC offset as CET wall time",
    )

    parse_date = commands.add_parser("parse-date", help="Parse a YYYY-MM-DD date")
    parse_date.add_argument("text")

    return parser
