"""Configuration for the timesafer command line tool."""

from .settings import LoggingSettings, TimesaferSettings, get_settings, reset_settings

__all__ = ["LoggingSettings", "TimesaferSettings", "get_settings", "reset_settings"]
