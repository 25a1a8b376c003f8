"""Gregorian calendar rules shared by the date codec and value types."""

from datetime import MAXYEAR, MINYEAR

from timesafer.exceptions import ValidationError

# Days per month in a common year, January first
_MONTH_DAYS = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)


def is_leap_year(year: int) -> bool:
    """Return True if year is a Gregorian leap year."""
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def days_in_month(year: int, month: int) -> int:
    """Return the number of days in the given month of the given year.

    Args:
        year: Calendar year
        month: Month number, 1-12

    Raises:
        ValueError: If month is outside 1-12
    """
    if not 1 <= month <= 12:
        raise ValueError(f"month must be between 1 and 12, got {month}")
    if month == 2 and is_leap_year(year):
        return 29
    return _MONTH_DAYS[month - 1]


def check_date_fields(year: int, month: int, day: int) -> None:
    """Check that (year, month, day) names a real calendar day.

    Raises:
        ValidationError: Naming the first invalid component
    """
    if not MINYEAR <= year <= MAXYEAR:
        raise ValidationError(
            f"year must be between {MINYEAR} and {MAXYEAR}, got {year}", "year", year
        )
    if not 1 <= month <= 12:
        raise ValidationError(f"month must be between 1 and 12, got {month}", "month", month)
    last_day = days_in_month(year, month)
    if not 1 <= day <= last_day:
        raise ValidationError(
            f"day must be between 1 and {last_day} for {year}-{month:02d}, got {day}", "day", day
        )
