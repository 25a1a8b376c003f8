"""CET calendar date value type and its ``YYYY-MM-DD`` text codec."""

import re
from dataclasses import dataclass
from datetime import date
from typing import Any

from pydantic import GetCoreSchemaHandler, GetJsonSchemaHandler
from pydantic.json_schema import JsonSchemaValue
from pydantic_core import CoreSchema, core_schema

from timesafer.core.calendar import check_date_fields
from timesafer.exceptions import ParseFormatError, ParseRangeError, ValidationError

_DIGITS_RE = re.compile(r"[0-9]+")

# Segment widths; None means any width
_SEGMENT_WIDTHS = (("year", None), ("month", 2), ("day", 2))


@dataclass(frozen=True)
class CETDate:
    """A calendar day in Central European Time, without a time of day.

    Usually obtained from CETTime.date(), CET.date_at() or CETDate.from_text().
    Direct construction applies the same validation.

    Raises:
        ValidationError: If the fields do not denote a real calendar day.
    """

    year: int
    month: int
    day: int

    def __post_init__(self) -> None:
        for name in ("year", "month", "day"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"{name} must be an int, got {type(value).__name__}")
        check_date_fields(self.year, self.month, self.day)

    def __str__(self) -> str:
        return self.to_text()

    def to_text(self) -> str:
        """Render as ``YYYY-MM-DD``; the year is not zero padded."""
        return f"{self.year}-{self.month:02d}-{self.day:02d}"

    def to_date(self) -> date:
        """Convert to a standard library date."""
        return date(self.year, self.month, self.day)

    @classmethod
    def from_text(cls, text: str) -> "CETDate":
        """Parse ``YYYY-MM-DD`` text strictly.

        Month and day must be exactly two digits; ``2020-1-1`` is rejected.

        Raises:
            ParseFormatError: If the text does not have the canonical shape.
            ParseRangeError: If a component is out of range.
            TypeError: If text is not a string.
        """
        if not isinstance(text, str):
            raise TypeError(f"Expected string, got {type(text)}")

        segments = text.split("-")
        if len(segments) != 3:
            raise ParseFormatError(
                f"date {text!r} must have three hyphen-separated parts (YYYY-MM-DD), "
                f"got {len(segments)}",
                text,
                "date",
            )

        values = []
        for (name, width), segment in zip(_SEGMENT_WIDTHS, segments):
            if width is not None and len(segment) != width:
                raise ParseFormatError(
                    f"{name} in date {text!r} must be exactly {width} digits, got {segment!r}",
                    text,
                    name,
                )
            if not _DIGITS_RE.fullmatch(segment):
                raise ParseFormatError(
                    f"{name} in date {text!r} is not a non-negative integer: {segment!r}",
                    text,
                    name,
                )
            values.append(int(segment))

        try:
            return cls(*values)
        except ValidationError as e:
            raise ParseRangeError(f"date {text!r}: {e.message}", text, e.field) from e

    @classmethod
    def _coerce(cls, value: Any) -> "CETDate":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            return cls.from_text(value)
        raise ValueError(f"Expected CETDate or YYYY-MM-DD text, got {type(value).__name__}")

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
        return {"type": "string", "format": "date"}
