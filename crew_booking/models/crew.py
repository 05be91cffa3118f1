"""Crew ORM model. Read-only from the booking engine's point of view."""
import uuid
import enum
from sqlalchemy import Column, String, Boolean, DateTime, Enum as SAEnum
from sqlalchemy.sql import func
from crew_booking.database import Base


class CrewRole(str, enum.Enum):
    super_admin = "super_admin"
    crew = "crew"


class Crew(Base):
    __tablename__ = "crew"

    crew_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(150), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    role = Column(SAEnum(CrewRole), nullable=False, default=CrewRole.crew)
    is_active = Column(Boolean, nullable=False, default=True)
    phone = Column(String(50), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
