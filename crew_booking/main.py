"""FastAPI application entry point."""
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from crew_booking.config import settings
from crew_booking.database import Base, engine

# Import routers
from crew_booking.routers import events, assignments, bookings, crew

# Import all models so Base.metadata knows about them
from crew_booking.models.inquiry import Inquiry    # noqa: F401
from crew_booking.models.crew import Crew          # noqa: F401
from crew_booking.models.event import Event        # noqa: F401
from crew_booking.models.booking import Booking    # noqa: F401

from crew_booking.services.exceptions import (
    BookingEngineError,
    ConflictError,
    InvalidStateError,
    NetworkError,
    NotFoundError,
    ValidationError,
)

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Studio Crew Booking",
    description="Crew assignment and booking engine for studio shooting events",
    version="0.1.0",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(events.router, prefix="/api/events", tags=["Events"])
app.include_router(assignments.router, prefix="/api/events", tags=["Crew Assignments"])
app.include_router(bookings.router, prefix="/api/bookings", tags=["Bookings"])
app.include_router(crew.router, prefix="/api/crew", tags=["Crew"])
app.include_router(crew.inquiries_router, prefix="/api/inquiries", tags=["Inquiries"])

ERROR_STATUS = (
    (ValidationError, 422),
    (NotFoundError, 404),
    (ConflictError, 409),
    (InvalidStateError, 409),
    (NetworkError, 503),
)


@app.exception_handler(BookingEngineError)
async def booking_engine_error_handler(request: Request, exc: BookingEngineError):
    """Map engine errors to HTTP, keeping the crew member and action in the body."""
    status_code = next((code for cls, code in ERROR_STATUS if isinstance(exc, cls)), 400)
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "crew_id": exc.crew_id, "action": exc.action},
    )


@app.on_event("startup")
def on_startup():
    """Create database tables on startup (for SQLite dev mode)."""
    if settings.DATABASE_URL.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)


@app.get("/api/health")
def health_check():
    return {"status": "ok"}
