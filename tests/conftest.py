"""Pytest fixtures — SQLite database for the HTTP layer, in-memory fakes for the engine."""
import uuid
from datetime import date, datetime, timezone
from typing import Any, Optional

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from crew_booking.database import Base, get_db
from crew_booking.main import app

# Import all models so they register with Base.metadata
from crew_booking.models.inquiry import Inquiry                                # noqa: F401
from crew_booking.models.crew import Crew                                      # noqa: F401
from crew_booking.models.event import Event, EventStatus                       # noqa: F401
from crew_booking.models.booking import Booking, BookingStatus, PaymentStatus  # noqa: F401
from crew_booking.schemas.event import EventDraft
from crew_booking.services.assignment_reconciler import EventLockRegistry
from crew_booking.services.exceptions import ConflictError, NotFoundError

SQLITE_URL = "sqlite:///./test.db"


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh SQLite engine for each test."""
    engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db(db_engine):
    """Yield a database session for seeding and direct assertions."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(db_engine):
    """FastAPI TestClient with the database dependency overridden to use SQLite."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)

    def _override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helpers: seed read-only collaborators straight into the database
# ---------------------------------------------------------------------------
def create_test_crew(db, name: str = "Crew Member", is_active: bool = True) -> dict:
    """Insert a crew member and return its fields as a dict."""
    crew = Crew(
        name=name,
        email=f"{name.lower().replace(' ', '.')}.{uuid.uuid4().hex[:6]}@studio.test",
        is_active=is_active,
    )
    db.add(crew)
    db.commit()
    db.refresh(crew)
    return {"crew_id": crew.crew_id, "name": crew.name, "email": crew.email}


def create_test_inquiry(db, name: str = "Jane Customer", email: str = "jane@customer.test") -> dict:
    inquiry = Inquiry(
        case_id=f"CASE-{uuid.uuid4().hex[:8].upper()}",
        name=name,
        email=email,
        subject="Wedding shoot",
        message="Are you available in June?",
    )
    db.add(inquiry)
    db.commit()
    db.refresh(inquiry)
    return {"inquiry_id": inquiry.inquiry_id, "name": inquiry.name, "email": inquiry.email}


# ---------------------------------------------------------------------------
# In-memory store fakes for engine tests
# ---------------------------------------------------------------------------
class FakeBookingStore:
    """Booking store that records every call and can be told to fail per crew member."""

    def __init__(self):
        self.bookings: dict[str, Booking] = {}
        self.calls: list[tuple] = []
        self.fail_create: dict[str, Exception] = {}

    def seed(self, event_id: str, crew_id: str, status: BookingStatus = BookingStatus.pending) -> Booking:
        booking = Booking(
            booking_id=str(uuid.uuid4()),
            event_id=event_id,
            crew_id=crew_id,
            status=status,
            assigned_at=datetime.now(timezone.utc),
            responded_at=None,
            salary="",
            payment_status=PaymentStatus.pending,
        )
        self.bookings[booking.booking_id] = booking
        return booking

    def calls_to(self, name: str) -> list[tuple]:
        return [c for c in self.calls if c[0] == name]

    async def create_booking(self, event_id, crew_id, status, assigned_at, salary="",
                             payment_status=PaymentStatus.pending) -> Booking:
        self.calls.append(("create_booking", event_id, crew_id))
        if crew_id in self.fail_create:
            raise self.fail_create[crew_id]
        if any(b.event_id == event_id and b.crew_id == crew_id for b in self.bookings.values()):
            raise ConflictError(f"Booking already exists for crew {crew_id}")
        booking = Booking(
            booking_id=str(uuid.uuid4()),
            event_id=event_id,
            crew_id=crew_id,
            status=status,
            assigned_at=assigned_at,
            responded_at=None,
            salary=salary,
            payment_status=payment_status,
        )
        self.bookings[booking.booking_id] = booking
        return booking

    async def update_booking(self, booking_id: str, patch: dict[str, Any]) -> Booking:
        self.calls.append(("update_booking", booking_id, dict(patch)))
        booking = self.bookings.get(booking_id)
        if booking is None:
            raise NotFoundError("Booking", booking_id)
        for field, value in patch.items():
            setattr(booking, field, value)
        return booking

    async def delete_booking(self, booking_id: str) -> None:
        self.calls.append(("delete_booking", booking_id))
        if self.bookings.pop(booking_id, None) is None:
            raise NotFoundError("Booking", booking_id)

    async def get_booking(self, booking_id: str) -> Booking:
        booking = self.bookings.get(booking_id)
        if booking is None:
            raise NotFoundError("Booking", booking_id)
        return booking

    async def list_bookings_for_event(self, event_id: str) -> list[Booking]:
        self.calls.append(("list_bookings_for_event", event_id))
        return [b for b in self.bookings.values() if b.event_id == event_id]

    async def list_bookings_for_crew(self, crew_id: str) -> list[Booking]:
        self.calls.append(("list_bookings_for_crew", crew_id))
        mine = [b for b in self.bookings.values() if b.crew_id == crew_id]
        return sorted(mine, key=lambda b: b.assigned_at, reverse=True)


class FakeEventStore:
    def __init__(self):
        self.events: dict[str, Event] = {}
        self.calls: list[tuple] = []

    async def create_event(self, draft: EventDraft) -> Event:
        self.calls.append(("create_event", draft.title))
        event = Event(event_id=str(uuid.uuid4()), **draft.model_dump())
        self.events[event.event_id] = event
        return event

    async def update_event(self, event_id: str, patch: dict[str, Any]) -> Event:
        self.calls.append(("update_event", event_id))
        event = await self.get_event(event_id)
        for field, value in patch.items():
            setattr(event, field, value)
        return event

    async def delete_event(self, event_id: str) -> None:
        self.calls.append(("delete_event", event_id))
        if self.events.pop(event_id, None) is None:
            raise NotFoundError("Event", event_id)

    async def get_event(self, event_id: str) -> Event:
        event = self.events.get(event_id)
        if event is None:
            raise NotFoundError("Event", event_id)
        return event

    async def list_events(self, start: Optional[date] = None, end: Optional[date] = None) -> list[Event]:
        return [
            e for e in self.events.values()
            if (start is None or e.date >= start) and (end is None or e.date <= end)
        ]


class FakeCrewRoster:
    def __init__(self, crew: list[Crew]):
        self.crew = crew

    async def list_crew(self) -> list[Crew]:
        return list(self.crew)


class FakeInquiryProvider:
    def __init__(self, inquiries: list[Inquiry]):
        self.inquiries = inquiries

    async def list_inquiries(self) -> list[Inquiry]:
        return list(self.inquiries)


def make_crew(*names: str) -> list[Crew]:
    """Unsaved Crew objects whose crew_id equals the name, e.g. make_crew("A", "B")."""
    return [Crew(crew_id=name, name=f"Crew {name}", email=f"{name.lower()}@studio.test", is_active=True)
            for name in names]


@pytest.fixture
def booking_store():
    return FakeBookingStore()


@pytest.fixture
def event_store():
    return FakeEventStore()


@pytest.fixture
def locks():
    """A private lock registry so tests never share locks."""
    return EventLockRegistry()
