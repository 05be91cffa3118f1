"""Booking routes used from the crew side: respond to and progress a booking."""
import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from crew_booking.database import get_db
from crew_booking.schemas.booking import BookingOut, BookingRespond, BookingStatusUpdate
from crew_booking.services import booking_service
from crew_booking.services.sql_stores import SqlBookingStore

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/{booking_id}", response_model=BookingOut)
async def get_booking(booking_id: str, db: Session = Depends(get_db)):
    return await SqlBookingStore(db).get_booking(booking_id)


@router.post("/{booking_id}/respond", response_model=BookingOut)
async def respond_to_booking(booking_id: str, payload: BookingRespond, db: Session = Depends(get_db)):
    """Accept or decline a booking."""
    return await booking_service.respond_to_booking(SqlBookingStore(db), booking_id, payload.action)


@router.put("/{booking_id}/status", response_model=BookingOut)
async def set_booking_status(booking_id: str, payload: BookingStatusUpdate, db: Session = Depends(get_db)):
    return await booking_service.set_booking_status(SqlBookingStore(db), booking_id, payload.status)
