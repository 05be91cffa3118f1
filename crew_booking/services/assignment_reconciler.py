"""Assignment reconciler — keeps an event's crew roster in sync with Bookings.

A reconciler is in one of two modes:

- ``Draft``: the event has no id yet. Crew changes are staged in memory and
  nothing touches the Booking Store.
- ``Committed``: the event exists. Every add/remove/edit maps to exactly one
  Booking Store write.

``commit`` moves Draft -> Committed once the event is saved, creating one
Booking per staged item. It is best effort: each item is attempted
independently and reported back in a ``CrewResult``; the event itself is
never rolled back.

All operations for one event are serialized through a shared per-event lock,
so two reconcilers working on the same event cannot interleave their writes.
"""
import asyncio
import logging
import uuid
import weakref
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import AsyncIterator, NoReturn, Optional, Union

from crew_booking.models.booking import Booking, BookingStatus, PaymentStatus
from crew_booking.services.exceptions import (
    BookingEngineError,
    ConflictError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from crew_booking.services.stores import BookingStore

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class StagedAssignment:
    """A crew assignment held in memory until the event is first saved."""

    crew_id: str
    salary: str = ""
    payment_status: PaymentStatus = PaymentStatus.pending
    assigned_at: datetime = field(default_factory=_utcnow)

    def placeholder(self) -> Booking:
        """Transient, unsaved Booking used to display a staged assignment."""
        return Booking(
            booking_id=None,
            event_id=None,
            crew_id=self.crew_id,
            status=BookingStatus.pending,
            assigned_at=self.assigned_at,
            responded_at=None,
            salary=self.salary,
            payment_status=self.payment_status,
        )


@dataclass
class Draft:
    items: list[StagedAssignment] = field(default_factory=list)


@dataclass(frozen=True)
class Committed:
    event_id: str


AssignmentState = Union[Draft, Committed]


@dataclass
class CrewResult:
    """Outcome of creating one staged assignment during ``commit``."""

    crew_id: str
    ok: bool
    booking_id: Optional[str] = None
    error: Optional[Exception] = None


def _unhandled_state(state: object) -> NoReturn:
    raise TypeError(f"Unknown assignment state: {state!r}")


def _payment_status(value, crew_id: str, action: str) -> PaymentStatus:
    try:
        return PaymentStatus(value)
    except ValueError:
        raise ValidationError(
            f"Invalid payment status: {value}",
            field="payment_status",
            crew_id=crew_id,
            action=action,
        )


class EventLockRegistry:
    """Hands out one asyncio.Lock per key. Idle locks are garbage collected."""

    def __init__(self):
        self._locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = weakref.WeakValueDictionary()

    def lock_for(self, key: str) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock


# Process-wide registry shared by every reconciler and the lifecycle manager.
event_locks = EventLockRegistry()


class AssignmentReconciler:
    """Applies crew add/remove/edit intents for a single event."""

    def __init__(
        self,
        bookings: BookingStore,
        state: Optional[AssignmentState] = None,
        locks: EventLockRegistry = event_locks,
    ):
        self.bookings = bookings
        self.state: AssignmentState = state if state is not None else Draft()
        self._locks = locks
        self._draft_key = f"draft:{uuid.uuid4()}"

    @classmethod
    def for_draft(cls, bookings: BookingStore, **kwargs) -> "AssignmentReconciler":
        return cls(bookings, Draft(), **kwargs)

    @classmethod
    def for_event(cls, bookings: BookingStore, event_id: str, **kwargs) -> "AssignmentReconciler":
        return cls(bookings, Committed(event_id), **kwargs)

    @property
    def is_draft(self) -> bool:
        return isinstance(self.state, Draft)

    def _state_key(self) -> str:
        state = self.state
        if isinstance(state, Draft):
            return self._draft_key
        if isinstance(state, Committed):
            return state.event_id
        _unhandled_state(state)

    @asynccontextmanager
    async def _serialized(self) -> AsyncIterator[AssignmentState]:
        """Hold the lock for the current state; re-acquire if a commit moved us meanwhile."""
        while True:
            key = self._state_key()
            async with self._locks.lock_for(key):
                if key == self._state_key():
                    yield self.state
                    return

    async def _booking_for(self, event_id: str, crew_id: str) -> Optional[Booking]:
        bookings = await self.bookings.list_bookings_for_event(event_id)
        return next((b for b in bookings if b.crew_id == crew_id), None)

    async def add_crew(
        self,
        crew_id: str,
        salary: str = "",
        payment_status: PaymentStatus = PaymentStatus.pending,
    ) -> Booking:
        """Assign a crew member. Returns the created Booking, or a placeholder in Draft mode."""
        payment_status = _payment_status(payment_status, crew_id, "add")
        async with self._serialized() as state:
            if isinstance(state, Draft):
                if any(item.crew_id == crew_id for item in state.items):
                    raise ConflictError(
                        f"Crew member {crew_id} is already assigned to this draft",
                        crew_id=crew_id,
                        action="add",
                    )
                item = StagedAssignment(crew_id=crew_id, salary=salary, payment_status=payment_status)
                state.items.append(item)
                logger.debug("Staged crew %s on draft %s", crew_id, self._draft_key)
                return item.placeholder()

            if isinstance(state, Committed):
                try:
                    booking = await self.bookings.create_booking(
                        state.event_id,
                        crew_id,
                        status=BookingStatus.pending,
                        assigned_at=_utcnow(),
                        salary=salary,
                        payment_status=payment_status,
                    )
                except BookingEngineError as exc:
                    exc.attribute(crew_id, "add")
                    raise
                logger.info("Assigned crew %s to event %s", crew_id, state.event_id)
                return booking

            _unhandled_state(state)

    async def remove_crew(self, crew_id: str) -> bool:
        """Unassign a crew member. Returns False when there was nothing to remove."""
        async with self._serialized() as state:
            if isinstance(state, Draft):
                before = len(state.items)
                state.items = [item for item in state.items if item.crew_id != crew_id]
                return len(state.items) < before

            if isinstance(state, Committed):
                try:
                    booking = await self._booking_for(state.event_id, crew_id)
                    if booking is None:
                        logger.info("Crew %s has no booking on event %s; nothing to remove", crew_id, state.event_id)
                        return False
                    await self.bookings.delete_booking(booking.booking_id)
                except NotFoundError:
                    logger.info("Booking for crew %s on event %s was already gone", crew_id, state.event_id)
                    return False
                except BookingEngineError as exc:
                    exc.attribute(crew_id, "remove")
                    raise
                logger.info("Removed crew %s from event %s", crew_id, state.event_id)
                return True

            _unhandled_state(state)

    async def update_assignment(
        self,
        crew_id: str,
        salary: Optional[str] = None,
        payment_status: Optional[PaymentStatus] = None,
    ) -> Booking:
        """Edit salary and/or payment status of an existing assignment."""
        patch: dict = {}
        if salary is not None:
            patch["salary"] = salary
        if payment_status is not None:
            patch["payment_status"] = _payment_status(payment_status, crew_id, "update")

        async with self._serialized() as state:
            if isinstance(state, Draft):
                item = next((i for i in state.items if i.crew_id == crew_id), None)
                if item is None:
                    raise NotFoundError("Staged assignment", crew_id, crew_id=crew_id, action="update")
                for key, value in patch.items():
                    setattr(item, key, value)
                return item.placeholder()

            if isinstance(state, Committed):
                try:
                    booking = await self._booking_for(state.event_id, crew_id)
                    if booking is None:
                        raise NotFoundError("Booking", f"crew {crew_id} on event {state.event_id}")
                    updated = await self.bookings.update_booking(booking.booking_id, patch)
                except BookingEngineError as exc:
                    exc.attribute(crew_id, "update")
                    raise
                logger.info("Updated crew %s on event %s: %s", crew_id, state.event_id, sorted(patch))
                return updated

            _unhandled_state(state)

    async def _create_staged(self, event_id: str, item: StagedAssignment) -> Booking:
        return await self.bookings.create_booking(
            event_id,
            item.crew_id,
            status=BookingStatus.pending,
            assigned_at=_utcnow(),
            salary=item.salary,
            payment_status=item.payment_status,
        )

    async def commit(self, event_id: str) -> list[CrewResult]:
        """Turn staged items into Bookings for a freshly saved event.

        Every item is attempted even if others fail. The reconciler ends in
        Committed mode regardless; failed crew must be re-added by the caller.
        """
        async with self._serialized() as state:
            if not isinstance(state, Draft):
                raise InvalidStateError(
                    f"Reconciler is already committed to event {state.event_id}", action="commit"
                )
            async with self._locks.lock_for(event_id):
                items = list(state.items)
                outcomes = await asyncio.gather(
                    *(self._create_staged(event_id, item) for item in items),
                    return_exceptions=True,
                )

                results: list[CrewResult] = []
                for item, outcome in zip(items, outcomes):
                    if isinstance(outcome, Booking):
                        results.append(CrewResult(crew_id=item.crew_id, ok=True, booking_id=outcome.booking_id))
                        continue
                    if not isinstance(outcome, Exception):
                        raise outcome
                    if isinstance(outcome, BookingEngineError):
                        outcome.attribute(item.crew_id, "add")
                    logger.warning("Could not book crew %s on event %s: %s", item.crew_id, event_id, outcome)
                    results.append(CrewResult(crew_id=item.crew_id, ok=False, error=outcome))

                state.items.clear()
                self.state = Committed(event_id)

        failed = sum(1 for r in results if not r.ok)
        logger.info(
            "Committed %d staged crew to event %s (%d failed)", len(results), event_id, failed
        )
        return results

    async def discard(self) -> None:
        """Drop all staged items. Only meaningful before the event is saved."""
        async with self._serialized() as state:
            if isinstance(state, Draft):
                state.items.clear()
                return
            if isinstance(state, Committed):
                raise InvalidStateError(
                    f"Cannot discard assignments of saved event {state.event_id}", action="discard"
                )
            _unhandled_state(state)

    async def assignments(self) -> list[Booking]:
        """Current assignment set: staged placeholders or the event's Bookings."""
        async with self._serialized() as state:
            if isinstance(state, Draft):
                return [item.placeholder() for item in state.items]
            if isinstance(state, Committed):
                return await self.bookings.list_bookings_for_event(state.event_id)
            _unhandled_state(state)
