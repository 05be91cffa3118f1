"""Store contracts consumed by the booking engine.

The reconciler, lifecycle manager and inquiry linker only talk to these
interfaces; ``sql_stores`` provides the SQLAlchemy-backed implementation and
the test suite provides in-memory fakes.
"""
from datetime import date, datetime
from typing import Any, Optional, Protocol

from crew_booking.models.booking import Booking, BookingStatus, PaymentStatus
from crew_booking.models.crew import Crew
from crew_booking.models.event import Event
from crew_booking.models.inquiry import Inquiry
from crew_booking.schemas.event import EventDraft


class BookingStore(Protocol):
    async def create_booking(
        self,
        event_id: str,
        crew_id: str,
        status: BookingStatus,
        assigned_at: datetime,
        salary: str = "",
        payment_status: PaymentStatus = PaymentStatus.pending,
    ) -> Booking:
        """Raises ConflictError if the crew member is already booked on the event."""

    async def update_booking(self, booking_id: str, patch: dict[str, Any]) -> Booking:
        """Raises NotFoundError if the booking does not exist."""

    async def delete_booking(self, booking_id: str) -> None:
        """Raises NotFoundError if the booking does not exist."""

    async def get_booking(self, booking_id: str) -> Booking:
        """Raises NotFoundError if the booking does not exist."""

    async def list_bookings_for_event(self, event_id: str) -> list[Booking]:
        ...

    async def list_bookings_for_crew(self, crew_id: str) -> list[Booking]:
        """Newest first, each with its event loaded. Raises NotFoundError for an unknown crew member."""


class EventStore(Protocol):
    async def create_event(self, draft: EventDraft) -> Event:
        ...

    async def update_event(self, event_id: str, patch: dict[str, Any]) -> Event:
        """Raises NotFoundError if the event does not exist."""

    async def delete_event(self, event_id: str) -> None:
        """Raises NotFoundError if the event does not exist."""

    async def get_event(self, event_id: str) -> Event:
        """Raises NotFoundError if the event does not exist."""

    async def list_events(self, start: Optional[date] = None, end: Optional[date] = None) -> list[Event]:
        ...


class CrewRosterProvider(Protocol):
    async def list_crew(self) -> list[Crew]:
        """Active crew members only."""


class InquiryProvider(Protocol):
    async def list_inquiries(self) -> list[Inquiry]:
        ...
