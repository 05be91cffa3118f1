"""Pydantic schemas for shooting Events."""
from __future__ import annotations
import datetime as dt
from typing import Optional
from pydantic import BaseModel, field_validator

from crew_booking.models.booking import PaymentStatus
from crew_booking.models.event import EventStatus


def _none_if_blank(value: Optional[str]) -> Optional[str]:
    """An empty inquiry id means "not linked"."""
    if value is None or not value.strip():
        return None
    return value


class EventDraft(BaseModel):
    """An event as edited before its first save. Required fields are checked on create."""

    title: str = ""
    date: Optional[dt.date] = None
    time: str = ""
    status: EventStatus = EventStatus.scheduled
    location: str = ""
    duration: str = ""
    customer_name: str = ""
    customer_email: str = ""
    customer_phone: str = ""
    package_type: str = ""
    notes: str = ""
    inquiry_id: Optional[str] = None

    @field_validator("inquiry_id")
    @classmethod
    def _blank_inquiry_is_unlinked(cls, value: Optional[str]) -> Optional[str]:
        return _none_if_blank(value)


class StagedCrewIn(BaseModel):
    crew_id: str
    salary: str = ""
    payment_status: PaymentStatus = PaymentStatus.pending


class EventCreate(EventDraft):
    assigned_crew: list[StagedCrewIn] = []

    def draft(self) -> EventDraft:
        return EventDraft(**self.model_dump(exclude={"assigned_crew"}))


class EventUpdate(BaseModel):
    title: Optional[str] = None
    date: Optional[dt.date] = None
    time: Optional[str] = None
    status: Optional[EventStatus] = None
    location: Optional[str] = None
    duration: Optional[str] = None
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    package_type: Optional[str] = None
    notes: Optional[str] = None
    inquiry_id: Optional[str] = None

    @field_validator("inquiry_id")
    @classmethod
    def _blank_inquiry_is_unlinked(cls, value: Optional[str]) -> Optional[str]:
        return _none_if_blank(value)


class EventOut(BaseModel):
    event_id: str
    title: str
    date: dt.date
    time: str
    status: EventStatus
    location: str
    duration: str
    customer_name: str
    customer_email: str
    customer_phone: str
    package_type: str
    notes: str
    inquiry_id: Optional[str] = None
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None

    model_config = {"from_attributes": True}


class CrewResultOut(BaseModel):
    crew_id: str
    ok: bool
    booking_id: Optional[str] = None
    error: Optional[str] = None


class EventCreateResult(BaseModel):
    event: EventOut
    crew_results: list[CrewResultOut] = []


class EventDeleteResult(BaseModel):
    event_id: str
    deleted_bookings_count: int


class InquiryLinkRequest(BaseModel):
    draft: EventDraft
    inquiry_id: Optional[str] = None  # None clears the link
