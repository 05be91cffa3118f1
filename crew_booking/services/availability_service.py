"""Crew availability — who can still be assigned to an event.

Pure functions over the roster and the current assignment set; nothing is
cached, callers recompute after every roster or assignment change.
"""
import logging
from typing import Iterable

from crew_booking.models.booking import Booking
from crew_booking.models.crew import Crew
from crew_booking.schemas.booking import AssignmentOut
from crew_booking.services.assignment_reconciler import AssignmentReconciler
from crew_booking.services.stores import CrewRosterProvider

logger = logging.getLogger(__name__)

UNKNOWN_CREW_NAME = "Unknown"


def available_crew(roster: Iterable[Crew], assignments: Iterable[Booking]) -> list[Crew]:
    """Roster members without an assignment, in roster order.

    Any assignment occupies the slot whatever its status. A crew member who
    declined stays unavailable until explicitly removed.
    """
    occupied = {a.crew_id for a in assignments}
    return [crew for crew in roster if crew.crew_id not in occupied]


def assignment_views(assignments: Iterable[Booking], roster: Iterable[Crew]) -> list[AssignmentOut]:
    """Join assignments with crew names for display."""
    names = {crew.crew_id: crew.name for crew in roster}
    return [
        AssignmentOut(
            crew_id=a.crew_id,
            name=names.get(a.crew_id, UNKNOWN_CREW_NAME),
            status=a.status,
            salary=a.salary or "",
            payment_status=a.payment_status,
            assigned_at=a.assigned_at,
            responded_at=a.responded_at,
            booking_id=a.booking_id,
        )
        for a in assignments
    ]


async def check_crew_availability(
    roster_provider: CrewRosterProvider,
    reconciler: AssignmentReconciler,
) -> dict:
    """Fetch roster and assignments, return both the assigned views and the available crew."""
    roster = await roster_provider.list_crew()
    assignments = await reconciler.assignments()
    available = available_crew(roster, assignments)
    logger.debug("%d of %d crew available", len(available), len(roster))
    return {
        "assigned": assignment_views(assignments, roster),
        "available": available,
    }
