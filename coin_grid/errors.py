"""Exception hierarchy.

Only failures that callers are expected to recover from get a dedicated type;
programming errors keep raising ``ValueError``.
"""


class CoinGridError(Exception):
    """Base class for recoverable engine failures."""


class SnapshotError(CoinGridError):
    """Persisted snapshot text is not valid JSON or does not match the schema."""


class AddressingError(CoinGridError):
    """Coordinates cannot be mapped onto the grid (NaN or infinite)."""


class SensorUnavailableError(CoinGridError):
    """No location source could be started."""
