"""Fixed Central European Time clock for timesafer.

Loads the Europe/Berlin rule-set with a zoneinfo + pytz fallback strategy.
The clock is the single entry point for obtaining the current time and for
constructing validated moments and dates.
"""

import importlib.util
import logging
import time
from datetime import datetime
from typing import TYPE_CHECKING, Any, Optional

from timesafer.core.moment import NANOS_PER_SECOND, CETTime
from timesafer.core.strict import construct_date, construct_moment
from timesafer.exceptions import LoadError, ValidationError

if TYPE_CHECKING:
    from timesafer.core.date import CETDate

logger = logging.getLogger(__name__)

# IANA identifier of the one zone this library supports
CET_ZONE_NAME = "Europe/Berlin"

BACKENDS = ("auto", "zoneinfo", "pytz")

# Check for timezone library availability
ZONEINFO_AVAILABLE = importlib.util.find_spec("zoneinfo") is not None
PYTZ_AVAILABLE = importlib.util.find_spec("pytz") is not None

# Import timezone libraries at top level if available
ZoneInfo = None
if ZONEINFO_AVAILABLE:
    from zoneinfo import ZoneInfo

pytz = None
if PYTZ_AVAILABLE:
    import pytz


class CET:
    """Central European Time clock.

    Holds only the opaque tzinfo rule-set for Europe/Berlin. Instances are
    immutable; obtain one through load_cet(), must_cet() or get_cet().
    """

    __slots__ = ("_tz",)

    def __init__(self, tz: Any) -> None:
        object.__setattr__(self, "_tz", tz)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("CET is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError("CET is immutable")

    def __reduce__(self) -> tuple:
        return (self.__class__, (self._tz,))

    @property
    def tzinfo(self) -> Any:
        """The underlying tzinfo object (zoneinfo or pytz)."""
        return self._tz

    @property
    def name(self) -> str:
        """IANA name of the zone."""
        return getattr(self._tz, "key", None) or getattr(self._tz, "zone", None) or str(self._tz)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CET):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)

    def __repr__(self) -> str:
        return f"CET({self.name!r})"

    def localize(self, naive: datetime) -> datetime:
        """Attach the zone to a naive wall-clock datetime.

        Ambiguous wall times resolve to their first occurrence (daylight saving
        time) for both backends.
        """
        if hasattr(self._tz, "localize"):
            return self._tz.localize(naive, is_dst=True)
        return naive.replace(tzinfo=self._tz)

    def convert(self, aware: datetime) -> datetime:
        """Express a timezone-aware datetime in this zone."""
        return aware.astimezone(self._tz)

    def now(self) -> CETTime:
        """Get the current instant in this zone with nanosecond resolution."""
        seconds, nanosecond = divmod(time.time_ns(), NANOS_PER_SECOND)
        current = datetime.fromtimestamp(seconds, self._tz)
        return CETTime(self, current.replace(microsecond=nanosecond // 1000), nanosecond)

    def time_at(
        self,
        year: int,
        month: int,
        day: int,
        hour: int = 0,
        minute: int = 0,
        second: int = 0,
        nanosecond: int = 0,
    ) -> CETTime:
        """Construct a moment from components, rejecting any that would overflow.

        Raises:
            ValidationError: If the components do not denote a real CET moment.
        """
        return construct_moment(self, year, month, day, hour, minute, second, nanosecond)

    def date_at(self, year: int, month: int, day: int) -> "CETDate":
        """Construct a date from components, rejecting any that would overflow.

        Raises:
            ValidationError: If the components do not denote a real calendar day.
        """
        return construct_date(self, year, month, day)

    def from_datetime(self, dt: datetime) -> CETTime:
        """Reinterpret a timezone-aware datetime as a CET moment.

        Raises:
            ValidationError: If dt is naive.
            TypeError: If dt is not a datetime object.
        """
        if not isinstance(dt, datetime):
            raise TypeError(f"Expected datetime object, got {type(dt)}")
        if dt.tzinfo is None or dt.utcoffset() is None:
            raise ValidationError("datetime must be timezone-aware", "tzinfo", dt)
        try:
            local = self.convert(dt)
        except OverflowError as e:
            raise ValidationError(
                f"{dt.isoformat()} is outside the supported range", "year", dt.year
            ) from e
        return CETTime(self, local)


def _zone_loaders(backend: str) -> list[tuple[str, Any]]:
    loaders = []
    if backend in ("auto", "zoneinfo") and ZONEINFO_AVAILABLE and ZoneInfo is not None:
        loaders.append(("zoneinfo", ZoneInfo))
    if backend in ("auto", "pytz") and PYTZ_AVAILABLE and pytz is not None:
        loaders.append(("pytz", pytz.timezone))
    return loaders


def load_cet(backend: str = "auto") -> CET:
    """Load the Europe/Berlin zone from the host timezone database.

    Args:
        backend: "zoneinfo", "pytz", or "auto" to try zoneinfo first and
            fall back to pytz.

    Returns:
        Loaded CET clock.

    Raises:
        LoadError: If no backend can resolve the zone.
        ValueError: If backend is not a known backend name.
    """
    if backend not in BACKENDS:
        raise ValueError(f"Unknown timezone backend {backend!r}, expected one of {BACKENDS}")

    loaders = _zone_loaders(backend)
    if not loaders:
        raise LoadError(
            f"No timezone library available for backend {backend!r}. "
            "Install Python 3.9+ for zoneinfo or install the pytz package.",
            CET_ZONE_NAME,
        )

    failures = []
    last_error: Optional[Exception] = None
    for library, loader in loaders:
        try:
            tz = loader(CET_ZONE_NAME)
        except (KeyError, OSError, ValueError) as e:
            # ZoneInfoNotFoundError and pytz.UnknownTimeZoneError are KeyErrors
            logger.warning("Failed to load %s using %s: %s", CET_ZONE_NAME, library, e)
            failures.append(f"{library}: {e!r}")
            last_error = e
            continue

        logger.info("Loaded timezone %s using %s", CET_ZONE_NAME, library)
        return CET(tz)

    raise LoadError(
        f"Failed to load timezone {CET_ZONE_NAME}: {'; '.join(failures)}", CET_ZONE_NAME
    ) from last_error


def must_cet(backend: str = "auto") -> CET:
    """Load the CET clock or terminate the process.

    Only for contexts where the timezone database is a deployment invariant.

    Raises:
        SystemExit: If the zone cannot be loaded.
    """
    try:
        return load_cet(backend)
    except LoadError as e:
        logger.critical("Cannot continue without timezone %s: %s", e.zone_name, e)
        raise SystemExit(f"timesafer: {e}") from e


# Process-wide clock, loaded lazily
_cet_instance: Optional[CET] = None


def get_cet() -> CET:
    """Get the process-wide CET clock, loading it on first use.

    Raises:
        LoadError: If the zone cannot be loaded.
    """
    # Module-level access without the global statement
    if globals()["_cet_instance"] is None:
        globals()["_cet_instance"] = load_cet()
    return globals()["_cet_instance"]


def reset_cet() -> None:
    """Forget the process-wide clock (primarily for testing)."""
    globals()["_cet_instance"] = None
