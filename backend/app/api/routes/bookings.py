"""
Booking endpoints with venue conflict protection.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.schemas.booking import (
    BookingCancel,
    BookingCancelResponse,
    BookingCreate,
    BookingResponse,
    BookingStatusLiteral,
    BookingUpdate,
    ConflictCheckResponse,
)
from app.schemas.occupancy import VenueOccupancyEntry
from app.services.booking_service import (
    cancel_booking,
    create_booking,
    get_booking,
    list_bookings,
    update_booking,
    validate_booking_schedule,
)
from app.services.occupancy_service import check_booking_conflicts, expand_booking_to_occupancy

router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking_endpoint(
    booking_data: BookingCreate,
    db: AsyncSession = Depends(get_db),
):
    """
    Create a booking.

    Sessions are validated (HH:MM times, end after start, dates inside the
    event range) and checked against existing tentative/booked bookings.
    Overlapping a session in the same venue on the same day returns 409
    with the conflicting venue/day pairs.
    """
    return await create_booking(db, booking_data)


@router.get("", response_model=list[BookingResponse])
async def list_bookings_endpoint(
    status_filter: Optional[BookingStatusLiteral] = Query(None, alias="status"),
    on_date: Optional[date] = Query(None, alias="date"),
    db: AsyncSession = Depends(get_db),
):
    """List bookings, optionally by status and by a day the event covers."""
    return await list_bookings(db, status=status_filter, on_date=on_date)


@router.post("/check-conflicts", response_model=ConflictCheckResponse)
async def check_conflicts_endpoint(
    booking_data: BookingCreate,
    exclude_booking_id: Optional[int] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """Dry-run the conflict check for a booking without saving it."""
    validate_booking_schedule(booking_data)
    return await check_booking_conflicts(db, booking_data, exclude_booking_id=exclude_booking_id)


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking_endpoint(booking_id: int, db: AsyncSession = Depends(get_db)):
    return await get_booking(db, booking_id)


@router.patch("/{booking_id}", response_model=BookingResponse)
async def update_booking_endpoint(
    booking_id: int,
    booking_data: BookingUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Partially update a booking; schedule changes are conflict-checked again."""
    return await update_booking(db, booking_id, booking_data)


@router.post("/{booking_id}/cancel", response_model=BookingCancelResponse)
async def cancel_booking_endpoint(
    booking_id: int,
    cancel_data: Optional[BookingCancel] = None,
    db: AsyncSession = Depends(get_db),
):
    """Cancel a booking and release its venues."""
    booking = await cancel_booking(db, booking_id, reason=cancel_data.reason if cancel_data else None)
    return BookingCancelResponse(
        message="Booking cancelled successfully",
        booking_id=booking.id,
        status=booking.status,
        cancelled_at=booking.cancelled_at,
    )


@router.get("/{booking_id}/occupancy", response_model=list[VenueOccupancyEntry])
async def booking_occupancy_endpoint(booking_id: int, db: AsyncSession = Depends(get_db)):
    """The booking expanded into one entry per session per day."""
    booking = await get_booking(db, booking_id)
    return expand_booking_to_occupancy(booking)
