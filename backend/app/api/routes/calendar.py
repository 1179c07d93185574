"""
Venue calendar endpoints: occupancy and per-day conflicts over a date window.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import get_logger
from app.db.session import get_db
from app.schemas.booking import BookingStatusLiteral
from app.schemas.occupancy import CalendarConflictsResponse, VenueOccupancyEntry
from app.services.occupancy_service import get_calendar_conflicts, get_occupancy

logger = get_logger(__name__)
router = APIRouter(prefix="/calendar", tags=["Calendar"])


@router.get("/occupancy", response_model=list[VenueOccupancyEntry])
async def occupancy_endpoint(
    start: date = Query(...),
    end: date = Query(...),
    venue: Optional[str] = Query(None),
    status: Optional[BookingStatusLiteral] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """Every booking session (or synthetic all-day slot) dated inside [start, end]."""
    return await get_occupancy(db, start, end, venue=venue, status=status)


@router.get("/conflicts", response_model=CalendarConflictsResponse)
async def conflicts_endpoint(
    start: date = Query(...),
    end: date = Query(...),
    db: AsyncSession = Depends(get_db),
):
    """Days in [start, end] where a venue has overlapping sessions."""
    days = await get_calendar_conflicts(db, start, end)
    if days:
        logger.info("calendar_conflicts_found", start=start.isoformat(), end=end.isoformat(), days=len(days))
    return CalendarConflictsResponse(start=start, end=end, days=days)
