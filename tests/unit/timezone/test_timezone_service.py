"""
Unit tests for timesafer's fixed CET clock.

This module tests:
- Zone loading with zoneinfo, pytz fallback and failure reporting
- The fatal loader and the cached process-wide clock
- Current time and conversion of aware datetimes
- Value semantics of the clock itself
"""

import pickle
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, patch
from zoneinfo import ZoneInfo

import pytest

from timesafer.exceptions import LoadError, ValidationError
from timesafer.timezone.service import (
    CET,
    CET_ZONE_NAME,
    get_cet,
    load_cet,
    must_cet,
    reset_cet,
)


class TestLoadCet:
    """Test load_cet function."""

    def test_load_cet_when_default_then_uses_zoneinfo(self) -> None:
        """Test default loading resolves Europe/Berlin through zoneinfo."""
        cet = load_cet()

        assert cet.name == "Europe/Berlin"
        assert isinstance(cet.tzinfo, ZoneInfo)

    def test_load_cet_when_pytz_backend_then_uses_pytz(self) -> None:
        """Test explicit pytz backend."""
        cet = load_cet("pytz")

        assert cet.name == CET_ZONE_NAME
        assert hasattr(cet.tzinfo, "localize")

    def test_load_cet_when_unknown_backend_then_raises_value_error(self) -> None:
        """Test unknown backend names are rejected."""
        with pytest.raises(ValueError, match="Unknown timezone backend"):
            load_cet("dateutil")

    def test_load_cet_when_zoneinfo_fails_then_falls_back_to_pytz(self) -> None:
        """Test zoneinfo lookup failure falls back to pytz."""
        with (
            patch("timesafer.timezone.service.ZoneInfo", side_effect=KeyError("no tzdata")),
            patch("timesafer.timezone.service.logger") as mock_logger,
        ):
            cet = load_cet()

        assert cet.name == CET_ZONE_NAME
        assert hasattr(cet.tzinfo, "localize")
        mock_logger.warning.assert_called_once()
        mock_logger.info.assert_called_with(
            "Loaded timezone %s using %s", CET_ZONE_NAME, "pytz"
        )

    def test_load_cet_when_all_backends_fail_then_raises_load_error(self) -> None:
        """Test LoadError carries the zone name and the last cause."""
        mock_pytz = MagicMock()
        mock_pytz.timezone.side_effect = KeyError("unknown zone")

        with (
            patch("timesafer.timezone.service.ZoneInfo", side_effect=OSError("no database")),
            patch("timesafer.timezone.service.pytz", mock_pytz),
        ):
            with pytest.raises(LoadError, match="Failed to load timezone Europe/Berlin") as exc_info:
                load_cet()

        assert exc_info.value.zone_name == CET_ZONE_NAME
        assert isinstance(exc_info.value.__cause__, KeyError)
        mock_pytz.timezone.assert_called_once_with(CET_ZONE_NAME)

    def test_load_cet_when_zoneinfo_backend_fails_then_does_not_fall_back(self) -> None:
        """Test an explicit backend is the only one tried."""
        with patch("timesafer.timezone.service.ZoneInfo", side_effect=KeyError("no tzdata")):
            with pytest.raises(LoadError):
                load_cet("zoneinfo")

    @patch("timesafer.timezone.service.ZONEINFO_AVAILABLE", False)
    @patch("timesafer.timezone.service.PYTZ_AVAILABLE", False)
    def test_load_cet_when_no_libraries_then_raises_load_error(self) -> None:
        """Test LoadError when no timezone library is available."""
        with pytest.raises(LoadError, match="No timezone library available"):
            load_cet()


class TestMustCet:
    """Test the fatal loader."""

    def test_must_cet_when_zone_available_then_returns_clock(self) -> None:
        """Test successful load returns the clock."""
        assert must_cet() == load_cet()

    def test_must_cet_when_load_fails_then_exits(self) -> None:
        """Test failure terminates via SystemExit after a critical log."""
        error = LoadError("Failed to load timezone Europe/Berlin", CET_ZONE_NAME)
        with (
            patch("timesafer.timezone.service.load_cet", side_effect=error),
            patch("timesafer.timezone.service.logger") as mock_logger,
        ):
            with pytest.raises(SystemExit) as exc_info:
                must_cet()

        assert "Europe/Berlin" in str(exc_info.value.code)
        assert exc_info.value.__cause__ is error
        mock_logger.critical.assert_called_once()


class TestGetCet:
    """Test the cached process-wide clock."""

    def test_get_cet_when_called_twice_then_returns_cached_instance(self) -> None:
        """Test the clock is loaded once."""
        assert get_cet() is get_cet()

    def test_get_cet_when_reset_then_loads_again(self) -> None:
        """Test reset_cet forgets the cached clock."""
        first = get_cet()
        reset_cet()
        second = get_cet()

        assert first is not second
        assert first == second

    def test_get_cet_when_load_fails_then_raises_load_error(self) -> None:
        """Test get_cet propagates LoadError instead of exiting."""
        error = LoadError("Failed", CET_ZONE_NAME)
        with patch("timesafer.timezone.service.load_cet", side_effect=error):
            with pytest.raises(LoadError):
                get_cet()


class TestCetValueSemantics:
    """Test equality, hashing and immutability of the clock."""

    def test_eq_when_different_backends_then_equal(self, cet: CET, pytz_cet: CET) -> None:
        """Test clocks for the same zone are equal regardless of backend."""
        assert cet == pytz_cet
        assert hash(cet) == hash(pytz_cet)

    def test_repr_when_called_then_names_zone(self, cet: CET) -> None:
        assert repr(cet) == "CET('Europe/Berlin')"

    def test_setattr_when_called_then_raises(self, cet: CET) -> None:
        """Test the clock cannot be mutated."""
        with pytest.raises(AttributeError):
            cet._tz = timezone.utc  # type: ignore[misc]

    def test_pickle_when_round_tripped_then_equal(self, any_cet: CET) -> None:
        assert pickle.loads(pickle.dumps(any_cet)) == any_cet


class TestNow:
    """Test the current time accessor."""

    def test_now_when_called_then_matches_system_clock(self, any_cet: CET) -> None:
        """Test now() is the current instant expressed in CET."""
        before = datetime.now(timezone.utc)
        current = any_cet.now()
        after = datetime.now(timezone.utc)

        instant = current.to_datetime()
        assert before - timedelta(seconds=1) <= instant <= after + timedelta(seconds=1)
        assert current.utcoffset() in (timedelta(hours=1), timedelta(hours=2))
        assert current.cet == any_cet

    def test_now_when_clock_fixed_then_keeps_nanoseconds(self, any_cet: CET) -> None:
        """Test nanosecond resolution and CET local fields."""
        # 2022-12-31T23:59:00.123456789Z
        with patch("timesafer.timezone.service.time.time_ns", return_value=1_672_531_140_123_456_789):
            current = any_cet.now()

        assert (current.year, current.month, current.day) == (2023, 1, 1)
        assert (current.hour, current.minute, current.second) == (0, 59, 0)
        assert current.nanosecond == 123_456_789
        assert current.to_text() == "2023-01-01T00:59:00.123456789+01:00"


class TestFromDatetime:
    """Test reinterpreting aware datetimes in CET."""

    def test_from_datetime_when_utc_then_converts(self, any_cet: CET) -> None:
        moment = any_cet.from_datetime(datetime(2022, 7, 1, 10, 0, tzinfo=timezone.utc))

        assert moment.hour == 12
        assert moment.utcoffset() == timedelta(hours=2)

    def test_from_datetime_when_microseconds_then_kept_as_nanoseconds(self, cet: CET) -> None:
        moment = cet.from_datetime(datetime(2022, 1, 1, 0, 0, 0, 250, tzinfo=timezone.utc))

        assert moment.nanosecond == 250_000

    def test_from_datetime_when_naive_then_raises(self, cet: CET) -> None:
        with pytest.raises(ValidationError, match="timezone-aware"):
            cet.from_datetime(datetime(2022, 1, 1))

    def test_from_datetime_when_not_datetime_then_raises_type_error(self, cet: CET) -> None:
        with pytest.raises(TypeError, match="Expected datetime object"):
            cet.from_datetime("2022-01-01T00:00:00Z")  # type: ignore[arg-type]
