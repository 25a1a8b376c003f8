"""Logging configuration and setup utilities."""

import logging
import os
import sys
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from timesafer.config.settings import TimesaferSettings

# Custom log level between INFO(20) and DEBUG(10)
VERBOSE = 15
logging.addLevelName(VERBOSE, "VERBOSE")

# Loggers of libraries timesafer depends on
THIRD_PARTY_LOGGERS = ("dateutil", "pydantic", "pydantic_settings")


def verbose(self: logging.Logger, message: Any, *args: Any, **kwargs: Any) -> None:
    """Add verbose() method to Logger class for detailed diagnostic logging.

    Example:
        >>> logger = logging.getLogger(__name__)
        >>> logger.verbose("Parsed %s into %s", text, moment)
    """
    if self.isEnabledFor(VERBOSE):
        self._log(VERBOSE, message, args, **kwargs)


# Add verbose method to all Logger instances
logging.Logger.verbose = verbose  # type: ignore[attr-defined]


def get_log_level(level_name: str) -> int:
    """Get numeric log level from string name, including custom VERBOSE level.

    Args:
        level_name: Log level name (DEBUG, VERBOSE, INFO, WARNING, ERROR, CRITICAL),
            case insensitive

    Returns:
        Numeric log level value

    Raises:
        AttributeError: If level name is not recognized
    """
    level_name = level_name.upper()
    if level_name == "VERBOSE":
        return VERBOSE
    level: int = getattr(logging, level_name)
    return level


class AutoColoredFormatter(logging.Formatter):
    """Formatter that auto-detects terminal color support."""

    COLORS = {
        "ERROR": "\033[31m",
        "INFO": "\033[34m",
        "VERBOSE": "\033[32m",
        "WARNING": "\033[33m",
        "DEBUG": "\033[35m",
        "CRITICAL": "\033[31m\033[1m",
    }
    RESET = "\033[0m"

    def __init__(self, *args: Any, enable_colors: bool = True, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.use_colors = enable_colors and self._detect_color_support()

    def _detect_color_support(self) -> bool:
        """Auto-detect whether stderr is a color capable terminal."""
        if not hasattr(sys.stderr, "isatty") or not sys.stderr.isatty():
            return False
        if "NO_COLOR" in os.environ:
            return False
        term = os.environ.get("TERM", "").lower()
        if term == "dumb":
            return False
        return bool(term) or (os.name == "nt" and "WT_SESSION" in os.environ)

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with colors if supported."""
        formatted = super().format(record)
        if not self.use_colors or record.levelname not in self.COLORS:
            return formatted

        colored_level = f"{self.COLORS[record.levelname]}{record.levelname}{self.RESET}"
        return formatted.replace(record.levelname, colored_level, 1)


def setup_logging(settings: "TimesaferSettings") -> logging.Logger:
    """Set up console logging for the timesafer namespace.

    Library code only emits records; this is called by the command line
    entry point, never on import.

    Args:
        settings: Settings providing the logging configuration

    Returns:
        Configured ``timesafer`` logger
    """
    console_level = get_log_level(settings.logging.console_level)

    logger = logging.getLogger("timesafer")
    logger.setLevel(console_level)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(console_level)
    handler.setFormatter(
        AutoColoredFormatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%H:%M:%S",
            enable_colors=settings.logging.console_colors,
        )
    )
    logger.addHandler(handler)

    third_party_level = get_log_level(settings.logging.third_party_level)
    for name in THIRD_PARTY_LOGGERS:
        logging.getLogger(name).setLevel(third_party_level)

    logger.debug("Logging initialized at %s level", settings.logging.console_level)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance under the timesafer namespace.

    Args:
        name: Logger name, typically the module's __name__ value

    Returns:
        Logger named ``timesafer.<name>`` unless name is already namespaced
    """
    if name == "timesafer" or name.startswith("timesafer."):
        return logging.getLogger(name)
    return logging.getLogger(f"timesafer.{name}")


def apply_command_line_overrides(settings: "TimesaferSettings", args: Any) -> "TimesaferSettings":
    """Apply command-line argument overrides to logging settings.

    Priority: Command-line > Environment > YAML > Defaults. Modifies the
    settings object in-place and returns it for convenience.
    """
    if getattr(args, "log_level", None):
        settings.logging.console_level = args.log_level.upper()

    if getattr(args, "verbose", False):
        settings.logging.console_level = "VERBOSE"

    if getattr(args, "quiet", False):
        settings.logging.console_level = "ERROR"

    if getattr(args, "no_log_colors", False):
        settings.logging.console_colors = False

    if getattr(args, "backend", None):
        settings.timezone_backend = args.backend

    if getattr(args, "assume_local", False):
        settings.assume_local_offset = True

    return settings
