class SafeZoneError(Exception):
    """Base class for all errors raised by safezone."""


class ConfigurationError(SafeZoneError, ValueError):
    """Zone configuration is invalid and was rejected at load time."""


class InvalidPointError(SafeZoneError, ValueError):
    """A coordinate is missing, malformed or out of range."""


class LocationError(SafeZoneError):
    """A location provider failed to produce a position."""


class ApiError(SafeZoneError):
    """A request to the upstream tracking API failed."""
