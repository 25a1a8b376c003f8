"""Timesafer exceptions for error handling."""

from typing import Any, Optional


class TimesaferError(Exception):
    """Base exception for all timesafer errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class LoadError(TimesaferError):
    """Exception raised when the fixed timezone cannot be loaded."""

    def __init__(self, message: str, zone_name: str):
        super().__init__(message)
        self.zone_name = zone_name


class ValidationError(TimesaferError, ValueError):
    """Exception raised when components do not denote a real calendar value."""

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None):
        super().__init__(message)
        self.field = field
        self.value = value


class ParseError(TimesaferError, ValueError):
    """Exception raised when text cannot be parsed into a date or time."""

    def __init__(self, message: str, text: str, component: Optional[str] = None):
        super().__init__(message)
        self.text = text
        self.component = component


class ParseFormatError(ParseError):
    """Exception raised when text does not have the canonical shape."""



class ParseRangeError(ParseError):
    """Exception raised when well-formed text denotes an out-of-range value."""
