"""
Strict value types and text codecs for timesafer.

Contains the CET date and moment value types, the Gregorian calendar rules
they are validated against, and the normalize-then-compare constructor.
"""

from .calendar import days_in_month, is_leap_year
from .date import CETDate
from .moment import CETTime
from .strict import construct_date, construct_moment, strict_wall_time

__all__ = [
    "CETDate",
    "CETTime",
    "construct_date",
    "construct_moment",
    "days_in_month",
    "is_leap_year",
    "strict_wall_time",
]
