"""Shooting event API routes — delegates to EventLifecycleManager for all writes."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from crew_booking.database import get_db
from crew_booking.schemas.event import (
    CrewResultOut,
    EventCreate,
    EventCreateResult,
    EventDeleteResult,
    EventDraft,
    EventOut,
    EventUpdate,
    InquiryLinkRequest,
)
from crew_booking.services.assignment_reconciler import AssignmentReconciler
from crew_booking.services.event_service import EventLifecycleManager
from crew_booking.services.inquiry_linker import InquiryLinker
from crew_booking.services.sql_stores import SqlBookingStore, SqlEventStore, SqlInquiryProvider

logger = logging.getLogger(__name__)
router = APIRouter()


def _manager(db: Session) -> EventLifecycleManager:
    return EventLifecycleManager(SqlEventStore(db), SqlBookingStore(db))


@router.post("/", response_model=EventCreateResult, status_code=status.HTTP_201_CREATED)
async def create_event(payload: EventCreate, db: Session = Depends(get_db)):
    """Create an event and book the crew staged on the draft.

    The event is saved even if individual bookings fail; check ``crew_results``.
    """
    reconciler = AssignmentReconciler.for_draft(SqlBookingStore(db))
    for staged in payload.assigned_crew:
        await reconciler.add_crew(staged.crew_id, salary=staged.salary, payment_status=staged.payment_status)

    event, results = await _manager(db).create(payload.draft(), reconciler)
    return EventCreateResult(
        event=EventOut.model_validate(event),
        crew_results=[
            CrewResultOut(
                crew_id=r.crew_id,
                ok=r.ok,
                booking_id=r.booking_id,
                error=str(r.error) if r.error else None,
            )
            for r in results
        ],
    )


@router.get("/", response_model=list[EventOut])
async def list_events(
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None),
    db: Session = Depends(get_db),
):
    """List events, optionally restricted to one calendar month."""
    return await _manager(db).list_events(month=month, year=year)


@router.post("/draft/inquiry", response_model=EventDraft)
async def link_inquiry(payload: InquiryLinkRequest, db: Session = Depends(get_db)):
    """Fill (or clear) a draft's customer fields from an inquiry. Nothing is persisted."""
    linker = InquiryLinker(SqlInquiryProvider(db))
    if payload.inquiry_id:
        return await linker.select_inquiry(payload.draft, payload.inquiry_id)
    return linker.clear_inquiry(payload.draft)


@router.get("/{event_id}", response_model=EventOut)
async def get_event(event_id: str, db: Session = Depends(get_db)):
    return await _manager(db).get(event_id)


@router.patch("/{event_id}", response_model=EventOut)
async def update_event(event_id: str, payload: EventUpdate, db: Session = Depends(get_db)):
    """Partial update of event fields. Crew changes use the /crew endpoints."""
    return await _manager(db).update(event_id, payload.model_dump(exclude_unset=True))


@router.delete("/{event_id}", response_model=EventDeleteResult)
async def delete_event(event_id: str, db: Session = Depends(get_db)):
    """Delete an event together with all of its bookings."""
    deleted = await _manager(db).delete(event_id)
    return EventDeleteResult(event_id=event_id, deleted_bookings_count=deleted)
