"""Crew roster, crew-side booking list and inquiry routes."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from crew_booking.database import get_db
from crew_booking.schemas.booking import CrewBookingOut
from crew_booking.schemas.crew import CrewOut, InquiryOut
from crew_booking.services.sql_stores import SqlBookingStore, SqlCrewRoster, SqlInquiryProvider

router = APIRouter()
inquiries_router = APIRouter()


@router.get("/", response_model=list[CrewOut])
async def list_crew(db: Session = Depends(get_db)):
    """Active crew members, by name."""
    return await SqlCrewRoster(db).list_crew()


@router.get("/{crew_id}/bookings", response_model=list[CrewBookingOut])
async def list_crew_bookings(crew_id: str, db: Session = Depends(get_db)):
    """A crew member's bookings, newest assignment first, each with its event details."""
    return await SqlBookingStore(db).list_bookings_for_crew(crew_id)


@inquiries_router.get("/", response_model=list[InquiryOut])
async def list_inquiries(db: Session = Depends(get_db)):
    return await SqlInquiryProvider(db).list_inquiries()
