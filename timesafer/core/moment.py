"""CET moment value type and its RFC 3339 text codec."""

import re
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any, Optional

from pydantic import GetCoreSchemaHandler, GetJsonSchemaHandler
from pydantic.json_schema import JsonSchemaValue
from pydantic_core import CoreSchema, core_schema

from timesafer.core.date import CETDate
from timesafer.exceptions import ParseFormatError, ParseRangeError, ValidationError

if TYPE_CHECKING:
    from timesafer.timezone.service import CET

NANOS_PER_SECOND = 1_000_000_000

_EPOCH = datetime(1970, 1, 1)

_RFC3339_RE = re.compile(
    r"(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})"
    r"[Tt](?P<hour>\d{2}):(?P<minute>\d{2}):(?P<second>\d{2})"
    r"(?:\.(?P<fraction>\d{1,9}))?"
    r"(?P<offset>[Zz]|[+-]\d{2}:\d{2}(?::\d{2})?)?",
    re.ASCII,
)

# Same shape truncated after the minutes
_MINUTE_PRECISION_RE = re.compile(
    r"\d{4}-\d{2}-\d{2}[Tt]\d{2}:\d{2}(?:[.Zz+-].*)?", re.ASCII | re.DOTALL
)


def _format_fraction(nanosecond: int) -> str:
    if nanosecond == 0:
        return ""
    if nanosecond % 1_000_000 == 0:
        return f".{nanosecond // 1_000_000:03d}"
    if nanosecond % 1_000 == 0:
        return f".{nanosecond // 1_000:06d}"
    return f".{nanosecond:09d}"


def _format_offset(offset: timedelta) -> str:
    total = int(offset.total_seconds())
    sign = "-" if total < 0 else "+"
    hours, rest = divmod(abs(total), 3600)
    minutes, seconds = divmod(rest, 60)
    text = f"{sign}{hours:02d}:{minutes:02d}"
    if seconds:
        # Local mean time before 1893 is not a whole number of minutes
        text += f":{seconds:02d}"
    return text


def _parse_offset(offset_text: str, text: str) -> timezone:
    if offset_text in ("Z", "z"):
        return timezone.utc
    sign = -1 if offset_text[0] == "-" else 1
    parts = [int(part) for part in offset_text[1:].split(":")]
    hours, minutes = parts[0], parts[1]
    seconds = parts[2] if len(parts) > 2 else 0
    if hours > 23 or minutes > 59 or seconds > 59:
        raise ParseRangeError(
            f"UTC offset {offset_text!r} in {text!r} is out of range", text, "offset"
        )
    return timezone(sign * timedelta(hours=hours, minutes=minutes, seconds=seconds))


class CETTime:
    """An absolute instant expressed in Central European Time.

    Carries nanosecond precision alongside a timezone-aware datetime (which
    itself stops at microseconds). Instances are immutable and always valid;
    obtain them from CET.now(), CET.time_at(), CET.from_datetime() or
    CETTime.from_text(). The constructor expects ``dt`` to already be
    expressed in the clock's zone.
    """

    __slots__ = ("_cet", "_dt", "_nanosecond")

    def __init__(self, cet: "CET", dt: datetime, nanosecond: Optional[int] = None) -> None:
        if dt.tzinfo is None or dt.utcoffset() is None:
            raise ValidationError("CETTime requires a timezone-aware datetime", "tzinfo", dt)
        if nanosecond is None:
            nanosecond = dt.microsecond * 1_000
        elif not 0 <= nanosecond < NANOS_PER_SECOND or nanosecond // 1_000 != dt.microsecond:
            raise ValidationError(
                f"nanosecond {nanosecond} does not match microsecond {dt.microsecond}",
                "nanosecond",
                nanosecond,
            )
        object.__setattr__(self, "_cet", cet)
        object.__setattr__(self, "_dt", dt)
        object.__setattr__(self, "_nanosecond", nanosecond)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("CETTime is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError("CETTime is immutable")

    def __reduce__(self) -> tuple:
        return (self.__class__, (self._cet, self._dt, self._nanosecond))

    @property
    def cet(self) -> "CET":
        """The clock this moment belongs to."""
        return self._cet

    @property
    def year(self) -> int:
        return self._dt.year

    @property
    def month(self) -> int:
        return self._dt.month

    @property
    def day(self) -> int:
        return self._dt.day

    @property
    def hour(self) -> int:
        return self._dt.hour

    @property
    def minute(self) -> int:
        return self._dt.minute

    @property
    def second(self) -> int:
        return self._dt.second

    @property
    def nanosecond(self) -> int:
        return self._nanosecond

    def utcoffset(self) -> timedelta:
        """UTC offset in effect at this moment (+01:00 or +02:00 in modern times)."""
        return self._dt.utcoffset()  # type: ignore[return-value]

    def to_datetime(self) -> datetime:
        """Timezone-aware datetime for this moment, truncated to microseconds."""
        return self._dt

    def date(self) -> CETDate:
        """Local CET calendar day of this moment."""
        return CETDate(self._dt.year, self._dt.month, self._dt.day)

    def _instant(self) -> tuple[timedelta, int]:
        # UTC instant as an epoch offset, honoring fold across the full datetime range
        wall = self._dt.replace(tzinfo=None, fold=0) - _EPOCH
        return wall - self.utcoffset(), self._nanosecond

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CETTime):
            return NotImplemented
        return self._instant() == other._instant()

    def __hash__(self) -> int:
        return hash(self._instant())

    def __repr__(self) -> str:
        return f"CETTime({self.to_text()!r})"

    def __str__(self) -> str:
        return self.to_text()

    def _format(self, fraction: str) -> str:
        dt = self._dt
        return (
            f"{dt.year:04d}-{dt.month:02d}-{dt.day:02d}"
            f"T{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d}"
            f"{fraction}{_format_offset(self.utcoffset())}"
        )

    def rfc3339(self) -> str:
        """Render with second precision, e.g. ``2022-03-02T15:33:40+01:00``."""
        return self._format("")

    def to_text(self) -> str:
        """Render as ``YYYY-MM-DDTHH:MM:SS[.fff]+HH:MM``.

        The fraction is omitted when zero and given in milliseconds when the
        value is millisecond aligned; otherwise six or nine digits are used so
        that from_text() restores the exact value.
        """
        return self._format(_format_fraction(self._nanosecond))

    @classmethod
    def from_text(
        cls, text: str, cet: Optional["CET"] = None, assume_local: bool = False
    ) -> "CETTime":
        """Parse an RFC 3339 timestamp and reinterpret it in CET.

        The offset in the text only locates the instant; the returned fields
        are always the CET wall time, so ``2022-12-31T23:59:00Z`` yields
        2023-01-01 00:59:00.

        Args:
            text: Timestamp text; seconds are mandatory.
            cet: Clock to express the result in. Defaults to get_cet().
            assume_local: Read text without an offset as CET wall time
                instead of rejecting it.

        Raises:
            ParseFormatError: If the text does not have the RFC 3339 shape.
            ParseRangeError: If a component is out of range.
            LoadError: If no clock was given and the zone cannot be loaded.
            TypeError: If text is not a string.
        """
        if not isinstance(text, str):
            raise TypeError(f"Expected string, got {type(text)}")

        match = _RFC3339_RE.fullmatch(text)
        if match is None:
            if _MINUTE_PRECISION_RE.fullmatch(text):
                raise ParseFormatError(f"timestamp {text!r} has no seconds", text, "second")
            raise ParseFormatError(
                f"timestamp {text!r} is not in RFC 3339 format (YYYY-MM-DDTHH:MM:SS[.f]±HH:MM)",
                text,
                "format",
            )

        if cet is None:
            from timesafer.timezone.service import get_cet  # noqa: PLC0415

            cet = get_cet()

        from timesafer.core.strict import construct_moment, strict_wall_time  # noqa: PLC0415

        fraction = match["fraction"]
        components = (
            int(match["year"]),
            int(match["month"]),
            int(match["day"]),
            int(match["hour"]),
            int(match["minute"]),
            int(match["second"]),
            int(fraction.ljust(9, "0")) if fraction else 0,
        )

        offset_text = match["offset"]
        if offset_text is None:
            if not assume_local:
                raise ParseFormatError(
                    f"timestamp {text!r} has no UTC offset or Z designator", text, "offset"
                )
            try:
                return construct_moment(cet, *components)
            except ValidationError as e:
                raise ParseRangeError(f"timestamp {text!r}: {e.message}", text, e.field) from e

        offset = _parse_offset(offset_text, text)
        try:
            naive, nanosecond = strict_wall_time(*components)
        except ValidationError as e:
            raise ParseRangeError(f"timestamp {text!r}: {e.message}", text, e.field) from e

        try:
            local = cet.convert(naive.replace(tzinfo=offset))
        except OverflowError as e:
            # The UTC instant is unrepresentable near datetime.min; the text is
            # still exact when its offset is the zone's own offset there.
            try:
                local = cet.localize(naive)
            except OverflowError:
                local = None
            if local is None or local.utcoffset() != offset.utcoffset(None):
                raise ParseRangeError(
                    f"timestamp {text!r} is outside the supported range in {cet.name}",
                    text,
                    "year",
                ) from e
        return cls(cet, local, nanosecond)

    @classmethod
    def _coerce(cls, value: Any) -> "CETTime":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            return cls.from_text(value)
        if isinstance(value, datetime):
            from timesafer.timezone.service import get_cet  # noqa: PLC0415

            return get_cet().from_datetime(value)
        raise ValueError(f"Expected CETTime, datetime or RFC 3339 text, got {type(value).__name__}")

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls._coerce,
            serialization=core_schema.to_string_ser_schema(),
        )

    @classmethod
    def __get_pydantic_json_schema__(
        cls, schema: CoreSchema, handler: GetJsonSchemaHandler
    ) -> JsonSchemaValue:
        return {"type": "string", "format": "date-time"}
