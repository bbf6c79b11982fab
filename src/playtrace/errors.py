"""Exception types for the analytics client."""

from __future__ import annotations


class AnalyticsError(Exception):
    """Base exception for analytics client errors."""
    pass


class ConfigurationError(AnalyticsError):
    """Configuration is missing or invalid (e.g. no API key)."""
    pass


class InvalidEventError(AnalyticsError):
    """An event could not be built from the given arguments."""
    pass
