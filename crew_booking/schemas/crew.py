"""Pydantic schemas for the read-only Crew roster and Inquiries."""
from typing import Optional
from pydantic import BaseModel

from crew_booking.models.crew import CrewRole
from crew_booking.models.inquiry import InquiryStatus


class CrewOut(BaseModel):
    crew_id: str
    name: str
    email: str
    role: CrewRole
    is_active: bool
    phone: Optional[str] = None

    model_config = {"from_attributes": True}


class InquiryOut(BaseModel):
    inquiry_id: str
    case_id: str
    name: str
    email: str
    subject: Optional[str] = None
    message: str
    status: InquiryStatus

    model_config = {"from_attributes": True}
