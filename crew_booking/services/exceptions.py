"""Error taxonomy for the crew booking engine.

Every error raised while acting on a crew member carries ``crew_id`` and
``action`` so callers can tell the admin exactly which assignment failed.
HTTP status mapping lives in ``crew_booking.main``.
"""
from typing import Optional


class BookingEngineError(Exception):
    """Base class for all booking engine errors."""

    def __init__(self, message: str, crew_id: Optional[str] = None, action: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.crew_id = crew_id
        self.action = action

    def attribute(self, crew_id: str, action: str) -> "BookingEngineError":
        """Attach the crew member and action unless a store already did."""
        if self.crew_id is None:
            self.crew_id = crew_id
        if self.action is None:
            self.action = action
        return self


class ValidationError(BookingEngineError):
    """Missing or invalid input. Nothing was persisted."""

    def __init__(self, message: str, field: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.field = field


class NotFoundError(BookingEngineError):
    """Target of an update/delete does not exist."""

    def __init__(self, entity: str, identifier: str, **kwargs):
        super().__init__(f"{entity} not found: {identifier}", **kwargs)
        self.entity = entity
        self.identifier = identifier


class ConflictError(BookingEngineError):
    """A booking already exists for this event and crew member."""


class NetworkError(BookingEngineError):
    """Transient store failure. Safe for the caller to retry."""


class InvalidStateError(BookingEngineError):
    """Operation is not valid in the reconciler's current mode."""


class PartialBatchError(BookingEngineError):
    """Some items of a best-effort batch failed.

    ``failures`` holds the per-crew results with ``ok=False``.
    """

    def __init__(self, failures: list):
        crew_ids = ", ".join(f.crew_id for f in failures)
        super().__init__(f"{len(failures)} crew booking(s) failed: {crew_ids}", action="commit")
        self.failures = failures

    @classmethod
    def from_results(cls, results: list) -> Optional["PartialBatchError"]:
        """Build an error from commit results, or None when every item succeeded."""
        failures = [r for r in results if not r.ok]
        if not failures:
            return None
        return cls(failures)
