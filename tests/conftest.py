"""Shared test configuration and fixtures for timesafer tests."""

import logging
import os
from collections.abc import Iterator

import pytest

from timesafer.config.settings import ENV_PREFIX, reset_settings
from timesafer.timezone.service import CET, load_cet, reset_cet


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Iterator[None]:
    """Keep TIMESAFER_* variables, cached globals and logger state out of tests."""
    for key in list(os.environ):
        if key.upper().startswith(ENV_PREFIX):
            monkeypatch.delenv(key)
    # Point user config lookup at an empty directory
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.chdir(tmp_path)

    package_logger = logging.getLogger("timesafer")
    saved_handlers = list(package_logger.handlers)
    saved_level = package_logger.level

    reset_settings()
    reset_cet()
    yield
    reset_settings()
    reset_cet()

    package_logger.handlers[:] = saved_handlers
    package_logger.setLevel(saved_level)


@pytest.fixture(scope="session")
def cet() -> CET:
    """CET clock backed by zoneinfo."""
    return load_cet("zoneinfo")


@pytest.fixture(scope="session")
def pytz_cet() -> CET:
    """CET clock backed by pytz."""
    return load_cet("pytz")


@pytest.fixture(scope="session", params=["zoneinfo", "pytz"])
def any_cet(request: pytest.FixtureRequest) -> CET:
    """CET clock for each supported backend."""
    return load_cet(request.param)
