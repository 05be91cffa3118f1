"""Shooting Event ORM model."""
import uuid
import enum
from sqlalchemy import Column, String, Date, DateTime, Text, ForeignKey, Enum as SAEnum
from sqlalchemy.sql import func
from crew_booking.database import Base


class EventStatus(str, enum.Enum):
    scheduled = "scheduled"
    in_progress = "in-progress"
    completed = "completed"
    edited = "edited"
    sent_to_customer = "sent-to-customer"
    cancelled = "cancelled"


class Event(Base):
    __tablename__ = "shooting_events"

    event_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(255), nullable=False)
    date = Column(Date, nullable=False, index=True)
    time = Column(String(20), nullable=False)
    status = Column(SAEnum(EventStatus), nullable=False, default=EventStatus.scheduled)
    location = Column(String(500), nullable=False, default="")
    duration = Column(String(100), nullable=False, default="")
    customer_name = Column(String(255), nullable=False, default="")
    customer_email = Column(String(255), nullable=False, default="")
    customer_phone = Column(String(50), nullable=False, default="")
    package_type = Column(String(100), nullable=False, default="")
    notes = Column(Text, nullable=False, default="")
    inquiry_id = Column(String(36), ForeignKey("inquiries.inquiry_id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
