"""
Error kinds raised by the solarmon core.

The API layer maps these onto HTTP status codes (see ``solarmon.api.main``).
There is no "unknown plant" error: telemetry lookups for an unseen plant
return empty results.

CHANGELOG:
- 2026-10-19: Initial creation
"""


class SolarmonError(Exception):
    """Base class for all solarmon errors."""


class InvalidArgumentError(SolarmonError, ValueError):
    """An argument is outside the accepted domain (e.g. capacity <= 0)."""


class StorageUnavailableError(SolarmonError):
    """The persistence medium could not be read or written."""
