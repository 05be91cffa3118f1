"""Pydantic schemas for Bookings and crew assignments."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from crew_booking.models.booking import BookingStatus, PaymentStatus
from crew_booking.schemas.event import EventOut


class AssignmentOut(BaseModel):
    """One crew assignment as shown next to an event, joined with the crew name."""

    crew_id: str
    name: str
    status: BookingStatus
    salary: str
    payment_status: PaymentStatus
    assigned_at: Optional[datetime] = None
    responded_at: Optional[datetime] = None
    booking_id: Optional[str] = None  # None while the event is still a draft


class CrewAssignIn(BaseModel):
    crew_id: str
    salary: str = ""
    payment_status: PaymentStatus = PaymentStatus.pending


class AssignmentUpdate(BaseModel):
    salary: Optional[str] = None
    payment_status: Optional[PaymentStatus] = None


class BookingOut(BaseModel):
    booking_id: str
    event_id: str
    crew_id: str
    status: BookingStatus
    assigned_at: datetime
    responded_at: Optional[datetime] = None
    salary: str
    payment_status: PaymentStatus
    notes: Optional[str] = None

    model_config = {"from_attributes": True}


class BookingRespond(BaseModel):
    action: str  # accept, decline


class BookingStatusUpdate(BaseModel):
    status: str  # accepted, in_progress, completed, uploaded


class CrewBookingOut(BookingOut):
    """A booking from the crew member's side, with the event it is for."""

    event: EventOut
