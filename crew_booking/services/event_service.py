"""Event lifecycle service.

Responsibilities:
- Required-field and status validation before anything is persisted
- Create: save the event, then commit the draft crew through the reconciler
- Update: plain field patch; crew changes go through the reconciler separately
- Delete: cascade the event's Bookings so their crew become available again
"""
import calendar
import logging
from datetime import date
from typing import Any, Optional

from crew_booking.models.event import Event, EventStatus
from crew_booking.schemas.event import EventDraft
from crew_booking.services.assignment_reconciler import (
    AssignmentReconciler,
    CrewResult,
    EventLockRegistry,
    event_locks,
)
from crew_booking.services.exceptions import NotFoundError, ValidationError
from crew_booking.services.stores import BookingStore, EventStore

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("title", "date", "time")
TEXT_FIELDS = ("location", "duration", "customer_name", "customer_email", "customer_phone", "package_type", "notes")


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _check_status(value: Any) -> EventStatus:
    """Any enum member is accepted; status is operator-driven, not a strict workflow."""
    try:
        return EventStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in EventStatus)
        raise ValidationError(f"Invalid event status '{value}'. Must be one of: {allowed}", field="status")


def validate_draft(draft: EventDraft) -> None:
    missing = [name for name in REQUIRED_FIELDS if _is_blank(getattr(draft, name))]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}", field=missing[0])
    _check_status(draft.status)


def validate_patch(patch: dict[str, Any]) -> dict[str, Any]:
    blanked = [name for name in REQUIRED_FIELDS if name in patch and _is_blank(patch[name])]
    if blanked:
        raise ValidationError(f"Required fields cannot be cleared: {', '.join(blanked)}", field=blanked[0])
    nulled = [name for name in TEXT_FIELDS if name in patch and patch[name] is None]
    if nulled:
        raise ValidationError(f"Use an empty string to clear: {', '.join(nulled)}", field=nulled[0])
    if "status" in patch:
        patch = {**patch, "status": _check_status(patch["status"])}
    return patch


def month_range(month: int, year: int) -> tuple[date, date]:
    """First and last calendar day of a month."""
    if not 1 <= month <= 12:
        raise ValidationError(f"Invalid month: {month}", field="month")
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


class EventLifecycleManager:
    """Orchestrates event create/update/delete around the assignment reconciler."""

    def __init__(self, events: EventStore, bookings: BookingStore, locks: EventLockRegistry = event_locks):
        self.events = events
        self.bookings = bookings
        self._locks = locks

    async def create(self, draft: EventDraft, reconciler: AssignmentReconciler) -> tuple[Event, list[CrewResult]]:
        """Persist a new event and book its staged crew.

        A ValidationError blocks the save entirely. Once the event is stored the
        save counts as successful even if some crew bookings fail; those are
        reported in the returned results.
        """
        validate_draft(draft)
        event = await self.events.create_event(draft)
        results = await reconciler.commit(event.event_id)
        logger.info(
            "Created event '%s' (%s) with %d/%d crew booked",
            event.title, event.event_id, sum(1 for r in results if r.ok), len(results),
        )
        return event, results

    async def update(self, event_id: str, patch: dict[str, Any]) -> Event:
        patch = validate_patch(patch)
        event = await self.events.update_event(event_id, patch)
        logger.info("Updated event %s fields %s", event_id, sorted(patch))
        return event

    async def delete(self, event_id: str) -> int:
        """Delete an event and every Booking that references it. Returns bookings removed."""
        async with self._locks.lock_for(event_id):
            await self.events.get_event(event_id)
            deleted = 0
            for booking in await self.bookings.list_bookings_for_event(event_id):
                try:
                    await self.bookings.delete_booking(booking.booking_id)
                except NotFoundError:
                    continue
                deleted += 1
            await self.events.delete_event(event_id)
        logger.info("Deleted event %s and %d related bookings", event_id, deleted)
        return deleted

    async def get(self, event_id: str) -> Event:
        return await self.events.get_event(event_id)

    async def list_events(self, month: Optional[int] = None, year: Optional[int] = None) -> list[Event]:
        if month is None and year is None:
            return await self.events.list_events()
        if month is None or year is None:
            missing = "month" if month is None else "year"
            raise ValidationError("month and year must be given together", field=missing)
        start, end = month_range(month, year)
        return await self.events.list_events(start, end)
