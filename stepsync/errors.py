"""
Errors - Exceptions raised at the core's boundaries.

The core itself never raises on data anomalies (unknown types,
vanished entities, stale debits); it degrades and logs. These
exceptions cover misuse: payloads that are not snapshots at all,
and sessions driven after they ended.
"""


class StepsyncError(Exception):
    """Base class for stepsync errors."""


class SnapshotValidationError(StepsyncError):
    """Raised when a snapshot payload cannot be interpreted at all."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(f"Snapshot validation failed with {len(errors)} error(s)")


class SessionError(StepsyncError):
    """Raised when a session is used outside its lifecycle."""
