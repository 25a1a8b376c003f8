"""Strict construction of moments and dates from discrete components.

A lenient constructor rolls overflowing components forward (day 32 of a
31-day month becomes the 1st of the next month, month 13 becomes January of
the next year). Construction here runs that lenient normalization and then
compares every component of the result with what was asked for; any
difference means the components did not denote a real calendar value.
Calendar rules (leap years, month lengths, carries, DST gaps) therefore come
from datetime and dateutil instead of being re-derived.
"""

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

from dateutil.relativedelta import relativedelta

from timesafer.core.calendar import days_in_month
from timesafer.core.date import CETDate
from timesafer.core.moment import NANOS_PER_SECOND, CETTime
from timesafer.exceptions import ValidationError

if TYPE_CHECKING:
    from timesafer.timezone.service import CET

logger = logging.getLogger(__name__)

FIELDS = ("year", "month", "day", "hour", "minute", "second", "nanosecond")

# Inclusive bounds of the fields whose range does not depend on other fields
_SIMPLE_BOUNDS = {
    "month": (1, 12),
    "hour": (0, 23),
    "minute": (0, 59),
    "second": (0, 59),
    "nanosecond": (0, NANOS_PER_SECOND - 1),
}


def _require_ints(components: tuple) -> None:
    for name, value in zip(FIELDS, components):
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"{name} must be an int, got {type(value).__name__}")


def _format_components(components: tuple) -> str:
    year, month, day, hour, minute, second, nanosecond = components
    return (
        f"{year:04d}-{month:02d}-{day:02d} "
        f"{hour:02d}:{minute:02d}:{second:02d}.{nanosecond:09d}"
    )


def _out_of_range_field(components: tuple) -> Optional[str]:
    """Name the first component outside its own range, if any."""
    values = dict(zip(FIELDS, components))
    if values["year"] < 1:
        return "year"
    for name in FIELDS[1:]:
        if name == "day":
            if values["day"] < 1 or values["day"] > days_in_month(values["year"], values["month"]):
                return "day"
            continue
        low, high = _SIMPLE_BOUNDS[name]
        if not low <= values[name] <= high:
            return name
    return None


def _reject(components: tuple, field: str, zone_name: Optional[str] = None) -> ValidationError:
    where = f" in {zone_name}" if zone_name else ""
    text = _format_components(components)
    value = dict(zip(FIELDS, components))[field]
    logger.debug("Rejected %s%s: %s=%r", text, where, field, value)
    return ValidationError(
        f"{text} is not a valid time{where}: {field} {value} is out of range", field, value
    )


def _compare(
    requested: tuple, normalized: datetime, nanosecond: int, zone_name: Optional[str]
) -> None:
    actual = (
        normalized.year,
        normalized.month,
        normalized.day,
        normalized.hour,
        normalized.minute,
        normalized.second,
        nanosecond,
    )
    if actual == requested:
        return
    # Prefer naming the component that is out of its own range; a wall time
    # skipped by a DST transition has none, so fall back to the first change.
    field = _out_of_range_field(requested)
    if field is None:
        field = next(name for name, a, r in zip(FIELDS, actual, requested) if a != r)
    raise _reject(requested, field, zone_name)


def lenient_datetime(
    year: int, month: int, day: int, hour: int, minute: int, second: int, nanosecond: int
) -> tuple[datetime, int]:
    """Build a naive datetime, rolling overflowing components forward.

    Returns:
        Tuple of the normalized naive datetime and its nanosecond-of-second.

    Raises:
        OverflowError: If the result falls outside the datetime range.
        ValueError: If the result falls outside the datetime range.
    """
    carry_seconds, nanosecond = divmod(nanosecond, NANOS_PER_SECOND)
    normalized = datetime(year, 1, 1) + relativedelta(
        months=month - 1,
        days=day - 1,
        hours=hour,
        minutes=minute,
        seconds=second + carry_seconds,
    )
    return normalized.replace(microsecond=nanosecond // 1000), nanosecond


def strict_wall_time(
    year: int,
    month: int,
    day: int,
    hour: int = 0,
    minute: int = 0,
    second: int = 0,
    nanosecond: int = 0,
) -> tuple[datetime, int]:
    """Validate components as a zone-less wall time.

    Returns:
        Tuple of the naive datetime and the nanosecond-of-second.

    Raises:
        ValidationError: If any component is out of range.
        TypeError: If any component is not an int.
    """
    requested = (year, month, day, hour, minute, second, nanosecond)
    _require_ints(requested)
    if year < 1:
        raise _reject(requested, "year")

    try:
        naive, normalized_nanosecond = lenient_datetime(*requested)
    except (OverflowError, ValueError) as e:
        field = _out_of_range_field(requested) or "year"
        raise _reject(requested, field) from e

    _compare(requested, naive, normalized_nanosecond, None)
    return naive, normalized_nanosecond


def construct_moment(
    cet: "CET",
    year: int,
    month: int,
    day: int,
    hour: int = 0,
    minute: int = 0,
    second: int = 0,
    nanosecond: int = 0,
) -> CETTime:
    """Construct a CET moment, rejecting components the calendar would correct.

    Besides field overflow this rejects wall times that do not exist in the
    zone (skipped by a daylight-saving transition).

    Raises:
        ValidationError: If the components do not denote a real CET moment.
        TypeError: If any component is not an int.
    """
    requested = (year, month, day, hour, minute, second, nanosecond)
    naive, normalized_nanosecond = strict_wall_time(*requested)

    try:
        aware = cet.localize(naive)
    except OverflowError as e:
        raise _reject(requested, "year", cet.name) from e
    try:
        local = cet.convert(aware.astimezone(timezone.utc))
    except OverflowError:
        # Only reachable on the first hour of year 1, before any DST rules
        local = aware

    _compare(requested, local, normalized_nanosecond, cet.name)
    return CETTime(cet, local, normalized_nanosecond)


def construct_date(cet: "CET", year: int, month: int, day: int) -> CETDate:
    """Construct a CET date as midnight of that day projected to its date.

    Raises:
        ValidationError: If the components do not denote a real calendar day.
        TypeError: If any component is not an int.
    """
    return construct_moment(cet, year, month, day).date()
