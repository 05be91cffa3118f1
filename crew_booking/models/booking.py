"""Booking ORM model — the persisted link between a crew member and an event."""
import uuid
import enum
from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime, Text, ForeignKey, UniqueConstraint, Enum as SAEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from crew_booking.database import Base


class BookingStatus(str, enum.Enum):
    pending = "pending"
    accepted = "accepted"
    declined = "declined"
    in_progress = "in_progress"
    completed = "completed"
    uploaded = "uploaded"


class PaymentStatus(str, enum.Enum):
    pending = "pending"
    completed = "completed"


class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        UniqueConstraint("event_id", "crew_id", name="uq_bookings_event_crew"),
    )

    booking_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    event_id = Column(
        String(36),
        ForeignKey("shooting_events.event_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    crew_id = Column(String(36), ForeignKey("crew.crew_id"), nullable=False)
    status = Column(SAEnum(BookingStatus), nullable=False, default=BookingStatus.pending)
    assigned_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    responded_at = Column(DateTime(timezone=True), nullable=True)
    salary = Column(String(50), nullable=False, default="")
    payment_status = Column(SAEnum(PaymentStatus), nullable=False, default=PaymentStatus.pending)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    event = relationship("Event")
