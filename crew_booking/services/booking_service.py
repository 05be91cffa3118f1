"""Crew-side booking actions: accepting, declining and progressing a booking."""
import logging
from datetime import datetime, timezone

from crew_booking.models.booking import Booking, BookingStatus
from crew_booking.services.assignment_reconciler import EventLockRegistry, event_locks
from crew_booking.services.exceptions import ValidationError
from crew_booking.services.stores import BookingStore

logger = logging.getLogger(__name__)

RESPONSE_ACTIONS = {
    "accept": BookingStatus.accepted,
    "decline": BookingStatus.declined,
}

PROGRESS_STATUSES = (
    BookingStatus.accepted,
    BookingStatus.in_progress,
    BookingStatus.completed,
    BookingStatus.uploaded,
)


async def respond_to_booking(
    bookings: BookingStore,
    booking_id: str,
    action: str,
    locks: EventLockRegistry = event_locks,
) -> Booking:
    """Record a crew member's accept/decline answer."""
    if action not in RESPONSE_ACTIONS:
        raise ValidationError(f"Invalid action '{action}'. Must be accept or decline", field="action")
    booking = await bookings.get_booking(booking_id)
    async with locks.lock_for(booking.event_id):
        booking = await bookings.update_booking(booking_id, {
            "status": RESPONSE_ACTIONS[action],
            "responded_at": datetime.now(timezone.utc),
        })
    logger.info("Crew %s %s booking %s", booking.crew_id, booking.status.value, booking_id)
    return booking


async def set_booking_status(
    bookings: BookingStore,
    booking_id: str,
    status: str,
    locks: EventLockRegistry = event_locks,
) -> Booking:
    """Move a booking along the shoot workflow (accepted -> in_progress -> completed -> uploaded)."""
    try:
        new_status = BookingStatus(status)
    except ValueError:
        new_status = None
    if new_status not in PROGRESS_STATUSES:
        allowed = ", ".join(s.value for s in PROGRESS_STATUSES)
        raise ValidationError(f"Invalid status '{status}'. Must be one of: {allowed}", field="status")

    booking = await bookings.get_booking(booking_id)
    async with locks.lock_for(booking.event_id):
        booking = await bookings.update_booking(booking_id, {"status": new_status})
    logger.info("Booking %s moved to %s", booking_id, new_status.value)
    return booking
