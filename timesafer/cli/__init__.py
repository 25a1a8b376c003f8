"""Command-line interface for timesafer.

Exit status is 0 on success, 1 when a value is rejected or the zone cannot be
loaded, and 2 on usage errors (reported by argparse).
"""

import argparse
import sys
from typing import Optional, Sequence

from timesafer.config.settings import TimesaferSettings, get_settings
from timesafer.core.date import CETDate
from timesafer.core.moment import CETTime
from timesafer.exceptions import TimesaferError
from timesafer.timezone.service import CET, load_cet
from timesafer.utils.logging import apply_command_line_overrides, get_logger, setup_logging

from .parser import create_parser

logger = get_logger(__name__)


def run_command(args: argparse.Namespace, cet: CET, settings: TimesaferSettings) -> str:
    """Execute one parsed command and return the text to print.

    Raises:
        TimesaferError: If a value is rejected.
    """
    if args.command == "now":
        current = cet.now()
        return current.date().to_text() if args.date else current.to_text()

    if args.command == "time":
        moment = cet.time_at(
            args.year, args.month, args.day, args.hour, args.minute, args.second, args.nanosecond
        )
        return moment.to_text()

    if args.command == "date":
        return cet.date_at(args.year, args.month, args.day).to_text()

    if args.command == "parse-time":
        moment = CETTime.from_text(args.text, cet, assume_local=settings.assume_local_offset)
        logger.verbose("Parsed %r as %s", args.text, moment)  # type: ignore[attr-defined]
        return moment.to_text()

    if args.command == "parse-date":
        return CETDate.from_text(args.text).to_text()

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the timesafer command line tool.

    Args:
        argv: Arguments without the program name; defaults to sys.argv[1:]

    Returns:
        Process exit code
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    settings = apply_command_line_overrides(get_settings(), args)
    setup_logging(settings)

    try:
        cet = load_cet(settings.timezone_backend)
        output = run_command(args, cet, settings)
    except TimesaferError as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(output)
    return 0


def main_entry() -> None:
    """Console script entry point."""
    sys.exit(main())


__all__ = ["create_parser", "main", "main_entry", "run_command"]
