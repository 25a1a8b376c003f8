"""
Timezone package for timesafer.

Provides the fixed Central European Time clock with a clean public API.
Uses zoneinfo + pytz fallback strategy for loading the Europe/Berlin zone.

Example usage:
    >>> from timesafer.timezone import must_cet
    >>>
    >>> cet = must_cet()
    >>> moment = cet.time_at(2022, 3, 2, 15, 33, 40)
    >>> moment.to_text()
    '2022-03-02T15:33:40+01:00'
    >>>
    >>> # Out-of-range components raise instead of rolling over
    >>> cet.date_at(2022, 2, 29)
    Traceback (most recent call last):
    ...
    timesafer.exceptions.ValidationError: ...
"""

from .service import (
    BACKENDS,
    CET,
    CET_ZONE_NAME,
    get_cet,
    load_cet,
    must_cet,
    reset_cet,
)

__all__ = [
    "BACKENDS",
    "CET",
    "CET_ZONE_NAME",
    "get_cet",
    "load_cet",
    "must_cet",
    "reset_cet",
]
