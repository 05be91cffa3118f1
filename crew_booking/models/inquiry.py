"""Customer Inquiry ORM model."""
import uuid
import enum
from sqlalchemy import Column, String, Text, DateTime, Enum as SAEnum
from sqlalchemy.sql import func
from crew_booking.database import Base


class InquiryStatus(str, enum.Enum):
    unread = "unread"
    read = "read"
    replied = "replied"


class Inquiry(Base):
    __tablename__ = "inquiries"

    inquiry_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    case_id = Column(String(50), nullable=False, unique=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    subject = Column(String(255), nullable=True)
    message = Column(Text, nullable=False)
    status = Column(SAEnum(InquiryStatus), nullable=False, default=InquiryStatus.unread)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
