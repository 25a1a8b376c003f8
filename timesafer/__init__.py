"""timesafer - strict Central European Time dates and timestamps.

Every moment is constructed through one fixed-zone clock, every component is
validated instead of silently rolled over, and dates and timestamps round-trip
through canonical text.
"""

from timesafer.core import CETDate, CETTime
from timesafer.exceptions import (
    LoadError,
    ParseError,
    ParseFormatError,
    ParseRangeError,
    TimesaferError,
    ValidationError,
)
from timesafer.timezone import CET, CET_ZONE_NAME, get_cet, load_cet, must_cet

__version__ = "1.0.0"
__author__ = "timesafer developers"
__description__ = "Strict, fixed-timezone (CET) dates and timestamps with round-trip text codecs"

__all__ = [
    "CET",
    "CETDate",
    "CETTime",
    "CET_ZONE_NAME",
    "LoadError",
    "ParseError",
    "ParseFormatError",
    "ParseRangeError",
    "TimesaferError",
    "ValidationError",
    "__author__",
    "__description__",
    "__version__",
    "get_cet",
    "load_cet",
    "must_cet",
]
