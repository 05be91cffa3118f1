"""Crew assignment routes for a saved event — one reconciler call per request."""
import logging
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from crew_booking.database import get_db
from crew_booking.schemas.booking import AssignmentOut, AssignmentUpdate, CrewAssignIn
from crew_booking.schemas.crew import CrewOut
from crew_booking.services.assignment_reconciler import AssignmentReconciler
from crew_booking.services.availability_service import assignment_views, check_crew_availability
from crew_booking.services.sql_stores import SqlBookingStore, SqlCrewRoster, SqlEventStore

logger = logging.getLogger(__name__)
router = APIRouter()


async def _reconciler(event_id: str, db: Session) -> AssignmentReconciler:
    await SqlEventStore(db).get_event(event_id)
    return AssignmentReconciler.for_event(SqlBookingStore(db), event_id)


@router.get("/{event_id}/crew", response_model=list[AssignmentOut])
async def list_assignments(event_id: str, db: Session = Depends(get_db)):
    """Crew currently assigned to the event, with names and booking status."""
    reconciler = await _reconciler(event_id, db)
    result = await check_crew_availability(SqlCrewRoster(db), reconciler)
    return result["assigned"]


@router.get("/{event_id}/crew/available", response_model=list[CrewOut])
async def list_available_crew(event_id: str, db: Session = Depends(get_db)):
    """Active crew not yet assigned to the event."""
    reconciler = await _reconciler(event_id, db)
    result = await check_crew_availability(SqlCrewRoster(db), reconciler)
    return result["available"]


@router.post("/{event_id}/crew", response_model=AssignmentOut, status_code=status.HTTP_201_CREATED)
async def add_crew(event_id: str, payload: CrewAssignIn, db: Session = Depends(get_db)):
    reconciler = await _reconciler(event_id, db)
    booking = await reconciler.add_crew(payload.crew_id, salary=payload.salary, payment_status=payload.payment_status)
    roster = await SqlCrewRoster(db).list_crew()
    return assignment_views([booking], roster)[0]


@router.patch("/{event_id}/crew/{crew_id}", response_model=AssignmentOut)
async def update_assignment(event_id: str, crew_id: str, payload: AssignmentUpdate, db: Session = Depends(get_db)):
    """Edit salary and/or payment status of one assignment."""
    reconciler = await _reconciler(event_id, db)
    booking = await reconciler.update_assignment(
        crew_id, salary=payload.salary, payment_status=payload.payment_status,
    )
    roster = await SqlCrewRoster(db).list_crew()
    return assignment_views([booking], roster)[0]


@router.delete("/{event_id}/crew/{crew_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_crew(event_id: str, crew_id: str, db: Session = Depends(get_db)):
    """Unassign a crew member. Succeeds even if they were not assigned."""
    reconciler = await _reconciler(event_id, db)
    await reconciler.remove_crew(crew_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
