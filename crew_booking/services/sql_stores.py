"""SQLAlchemy implementations of the store contracts.

Each store wraps one request-scoped Session. Methods are coroutines to satisfy
the async contracts; the session work itself is synchronous and never yields
mid-transaction, so concurrent calls on one session cannot interleave.
"""
import logging
from datetime import date, datetime, timezone
from typing import Any, Optional

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session, joinedload

from crew_booking.models.booking import Booking, BookingStatus, PaymentStatus
from crew_booking.models.crew import Crew
from crew_booking.models.event import Event
from crew_booking.models.inquiry import Inquiry
from crew_booking.schemas.event import EventDraft
from crew_booking.services.exceptions import ConflictError, NetworkError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

BOOKING_PATCH_FIELDS = ("salary", "payment_status", "status", "responded_at", "notes")
EVENT_PROTECTED_FIELDS = ("event_id", "created_at", "updated_at")


def _commit(db: Session, what: str) -> None:
    """Commit, turning connection-level failures into NetworkError."""
    try:
        db.commit()
    except OperationalError as exc:
        db.rollback()
        logger.error("Database unavailable while trying to %s: %s", what, exc)
        raise NetworkError(f"Database unavailable while trying to {what}") from exc


def _commit_event(db: Session, what: str) -> None:
    """Commit an event write, reporting constraint violations as ValidationError."""
    try:
        _commit(db, what)
    except IntegrityError as exc:
        db.rollback()
        logger.warning("Rejected event write while trying to %s: %s", what, exc.orig)
        raise ValidationError(f"Event data violates a database constraint while trying to {what}") from exc


class SqlBookingStore:
    def __init__(self, db: Session):
        self.db = db

    def _get(self, booking_id: str) -> Booking:
        booking = self.db.query(Booking).filter(Booking.booking_id == booking_id).first()
        if not booking:
            raise NotFoundError("Booking", booking_id)
        return booking

    async def create_booking(
        self,
        event_id: str,
        crew_id: str,
        status: BookingStatus = BookingStatus.pending,
        assigned_at: Optional[datetime] = None,
        salary: str = "",
        payment_status: PaymentStatus = PaymentStatus.pending,
    ) -> Booking:
        if not self.db.query(Event).filter(Event.event_id == event_id).first():
            raise NotFoundError("Event", event_id, crew_id=crew_id, action="add")
        if not self.db.query(Crew).filter(Crew.crew_id == crew_id).first():
            raise NotFoundError("Crew", crew_id, crew_id=crew_id, action="add")

        existing = (
            self.db.query(Booking)
            .filter(Booking.event_id == event_id, Booking.crew_id == crew_id)
            .first()
        )
        if existing:
            raise ConflictError(
                f"Booking already exists for crew {crew_id} on event {event_id}",
                crew_id=crew_id,
                action="add",
            )

        booking = Booking(
            event_id=event_id,
            crew_id=crew_id,
            status=status,
            assigned_at=assigned_at or datetime.now(timezone.utc),
            salary=salary,
            payment_status=payment_status,
        )
        self.db.add(booking)
        try:
            _commit(self.db, "create booking")
        except IntegrityError as exc:
            # Lost a race against another writer on the unique (event_id, crew_id) pair
            self.db.rollback()
            raise ConflictError(
                f"Booking already exists for crew {crew_id} on event {event_id}",
                crew_id=crew_id,
                action="add",
            ) from exc
        self.db.refresh(booking)
        logger.info("Created booking %s for crew %s on event %s", booking.booking_id, crew_id, event_id)
        return booking

    async def update_booking(self, booking_id: str, patch: dict[str, Any]) -> Booking:
        booking = self._get(booking_id)
        for field, value in patch.items():
            if field in BOOKING_PATCH_FIELDS:
                setattr(booking, field, value)
        _commit(self.db, "update booking")
        self.db.refresh(booking)
        logger.info("Updated booking %s: %s", booking_id, sorted(patch))
        return booking

    async def delete_booking(self, booking_id: str) -> None:
        booking = self._get(booking_id)
        self.db.delete(booking)
        _commit(self.db, "delete booking")
        logger.info("Deleted booking %s", booking_id)

    async def get_booking(self, booking_id: str) -> Booking:
        return self._get(booking_id)

    async def list_bookings_for_event(self, event_id: str) -> list[Booking]:
        return (
            self.db.query(Booking)
            .filter(Booking.event_id == event_id)
            .order_by(Booking.assigned_at)
            .all()
        )

    async def list_bookings_for_crew(self, crew_id: str) -> list[Booking]:
        if not self.db.query(Crew).filter(Crew.crew_id == crew_id).first():
            raise NotFoundError("Crew", crew_id, crew_id=crew_id, action="list")
        return (
            self.db.query(Booking)
            .options(joinedload(Booking.event))
            .filter(Booking.crew_id == crew_id)
            .order_by(Booking.assigned_at.desc())
            .all()
        )


class SqlEventStore:
    def __init__(self, db: Session):
        self.db = db

    def _get(self, event_id: str) -> Event:
        event = self.db.query(Event).filter(Event.event_id == event_id).first()
        if not event:
            raise NotFoundError("Event", event_id)
        return event

    def _check_inquiry(self, inquiry_id: Optional[str]) -> None:
        if inquiry_id and not self.db.query(Inquiry).filter(Inquiry.inquiry_id == inquiry_id).first():
            raise NotFoundError("Inquiry", inquiry_id)

    async def create_event(self, draft: EventDraft) -> Event:
        self._check_inquiry(draft.inquiry_id)
        event = Event(**draft.model_dump())
        self.db.add(event)
        _commit_event(self.db, "create event")
        self.db.refresh(event)
        logger.info("Created event '%s' (%s)", event.title, event.event_id)
        return event

    async def update_event(self, event_id: str, patch: dict[str, Any]) -> Event:
        event = self._get(event_id)
        if "inquiry_id" in patch:
            self._check_inquiry(patch["inquiry_id"])
        for field, value in patch.items():
            if hasattr(event, field) and field not in EVENT_PROTECTED_FIELDS:
                setattr(event, field, value)
        event.updated_at = datetime.now(timezone.utc)
        _commit_event(self.db, "update event")
        self.db.refresh(event)
        logger.info("Updated event %s", event_id)
        return event

    async def delete_event(self, event_id: str) -> None:
        event = self._get(event_id)
        self.db.delete(event)
        _commit(self.db, "delete event")
        logger.info("Deleted event %s", event_id)

    async def get_event(self, event_id: str) -> Event:
        return self._get(event_id)

    async def list_events(self, start: Optional[date] = None, end: Optional[date] = None) -> list[Event]:
        query = self.db.query(Event)
        if start:
            query = query.filter(Event.date >= start)
        if end:
            query = query.filter(Event.date <= end)
        return query.order_by(Event.date, Event.time).all()


class SqlCrewRoster:
    def __init__(self, db: Session):
        self.db = db

    async def list_crew(self) -> list[Crew]:
        return self.db.query(Crew).filter(Crew.is_active.is_(True)).order_by(Crew.name).all()


class SqlInquiryProvider:
    def __init__(self, db: Session):
        self.db = db

    async def list_inquiries(self) -> list[Inquiry]:
        return self.db.query(Inquiry).order_by(Inquiry.created_at.desc()).all()
