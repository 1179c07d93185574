"""
Booking service: create, update, cancel and list banquet bookings.

CONFLICT STRATEGY: Check-then-insert
====================================

Problem:
  Two sales staff book "Hall A" for overlapping evenings. Nothing in the
  schema ties a session's time window to other bookings, so a unique
  constraint cannot catch it.

Solution:
  Before every insert (and every schedule-changing update) the candidate
  booking is expanded into per-day occupancy entries and compared against
  the stored tentative/booked bookings for the same days
  (occupancy_service.check_booking_conflicts). Any overlap aborts the
  write with VenueConflict (HTTP 409) carrying the venue/day pairs.

  Touching sessions (one ends 12:00, the next starts 12:00) are allowed.
  Cancelled and closed bookings never block a venue.

Validation happens first, so malformed schedules fail with 400 before any
query runs.
"""

import uuid
from datetime import date, datetime, timezone
from types import SimpleNamespace
from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import InvalidDateRange, NotFound, ValidationError, VenueConflict
from app.core.logging import get_logger
from app.core.metrics import record_booking_attempt
from app.models.booking import Booking, BookingSession, BookingStatus
from app.schemas.booking import BookingCreate, BookingUpdate, SessionCreate
from app.services.occupancy_service import check_booking_conflicts
from app.services.time_slots import parse_time, validate_time_range

logger = get_logger(__name__)

SCHEDULE_FIELDS = frozenset({
    "event_date", "event_end_date", "event_duration", "hall",
    "event_start_time", "event_end_time", "sessions",
})


def validate_booking_schedule(booking) -> int:
    """
    Check a booking's dates, fallback times and sessions.
    Returns the event duration in days.
    """
    start = booking.event_date
    end = booking.event_end_date
    if end is not None and end < start:
        raise InvalidDateRange(start, end)

    duration = (end - start).days + 1 if end is not None else 1
    requested = getattr(booking, "event_duration", None)
    if requested is not None and requested > 1 and end is None:
        raise ValidationError(
            "event_end_date is required when event_duration is more than 1 day",
            field="event_end_date",
        )
    if requested is not None and requested != duration:
        raise ValidationError(
            f"event_duration {requested} does not match the {duration}-day date range",
            field="event_duration",
            value=requested,
        )

    if booking.event_start_time and booking.event_end_time:
        validate_time_range(booking.event_start_time, booking.event_end_time, field="event_end_time")
    elif booking.event_start_time:
        parse_time(booking.event_start_time, "event_start_time")
    elif booking.event_end_time:
        parse_time(booking.event_end_time, "event_end_time")

    last = end or start
    for index, session in enumerate(booking.sessions or []):
        if not session.venue or not session.venue.strip():
            raise ValidationError("Session venue is required", field=f"sessions[{index}].venue")
        validate_time_range(session.start_time, session.end_time, field=f"sessions[{index}].end_time")
        if not start <= session.session_date <= last:
            raise ValidationError(
                f"Session date {session.session_date} is outside the event dates {start} to {last}",
                field=f"sessions[{index}].session_date",
                value=str(session.session_date),
            )

    return duration


def _generate_booking_number(event_date: date) -> str:
    return f"BK-{event_date:%Y%m%d}-{uuid.uuid4().hex[:6].upper()}"


def _build_session(data: SessionCreate) -> BookingSession:
    return BookingSession(
        session_name=data.session_name,
        session_label=data.session_label,
        venue=data.venue,
        start_time=data.start_time,
        end_time=data.end_time,
        session_date=data.session_date,
        pax_count=data.pax_count,
        special_instructions=data.special_instructions,
    )


async def _ensure_no_conflicts(db: AsyncSession, candidate, exclude_booking_id: Optional[int] = None) -> None:
    result = await check_booking_conflicts(db, candidate, exclude_booking_id=exclude_booking_id)
    if result.has_conflict:
        record_booking_attempt("conflict")
        raise VenueConflict([c.model_dump(mode="json") for c in result.conflicts])


async def create_booking(db: AsyncSession, data: BookingCreate) -> Booking:
    """Validate, check venue conflicts, then persist the booking with its sessions."""
    try:
        duration = validate_booking_schedule(data)
    except ValidationError:
        record_booking_attempt("invalid")
        raise

    await _ensure_no_conflicts(db, data)

    booking = Booking(
        booking_number=_generate_booking_number(data.event_date),
        client_name=data.client_name,
        contact_number=data.contact_number,
        email=data.email,
        event_type=data.event_type,
        event_date=data.event_date,
        event_end_date=data.event_end_date,
        event_duration=duration,
        hall=data.hall,
        event_start_time=data.event_start_time,
        event_end_time=data.event_end_time,
        confirmed_pax=data.confirmed_pax,
        status=data.status,
        notes=data.notes,
        sessions=[_build_session(s) for s in data.sessions],
    )
    db.add(booking)
    await db.flush()
    await db.refresh(booking)

    record_booking_attempt("success")
    logger.info(
        "booking_created",
        booking_id=booking.id,
        booking_number=booking.booking_number,
        event_date=booking.event_date.isoformat(),
        days=duration,
        sessions=len(booking.sessions),
    )
    return booking


async def get_booking(db: AsyncSession, booking_id: int) -> Booking:
    result = await db.execute(select(Booking).where(Booking.id == booking_id))
    booking = result.scalar_one_or_none()
    if not booking:
        raise NotFound("Booking", booking_id)
    return booking


async def list_bookings(
    db: AsyncSession,
    status: Optional[str] = None,
    on_date: Optional[date] = None,
) -> list[Booking]:
    """Bookings filtered by status and/or a day the event covers."""
    query = select(Booking)
    if status:
        query = query.where(Booking.status == status)
    if on_date:
        query = query.where(
            Booking.event_date <= on_date,
            func.coalesce(Booking.event_end_date, Booking.event_date) >= on_date,
        )

    result = await db.execute(query.order_by(Booking.event_date.asc(), Booking.id.asc()))
    return list(result.scalars().all())


def _merged_schedule(booking: Booking, changes: dict, sessions: Optional[list[SessionCreate]]):
    """The booking's schedule as it would look after the update, without touching the row."""
    fields = {
        name: changes.get(name, getattr(booking, name))
        for name in ("event_date", "event_end_date", "hall", "event_start_time", "event_end_time")
    }
    return SimpleNamespace(
        id=booking.id,
        booking_number=booking.booking_number,
        client_name=booking.client_name,
        event_type=changes.get("event_type", booking.event_type),
        status=changes.get("status", booking.status),
        confirmed_pax=changes.get("confirmed_pax", booking.confirmed_pax),
        event_duration=changes.get("event_duration"),
        sessions=sessions if sessions is not None else list(booking.sessions),
        **fields,
    )


async def update_booking(db: AsyncSession, booking_id: int, data: BookingUpdate) -> Booking:
    """
    Partial update. Schedule changes are re-validated and re-checked for
    conflicts (ignoring the booking itself); status changes are logged.
    """
    booking = await get_booking(db, booking_id)
    changes = data.model_dump(exclude_unset=True, exclude={"sessions"})
    new_sessions = data.sessions if "sessions" in data.model_fields_set else None

    schedule_changed = bool(SCHEDULE_FIELDS & data.model_fields_set)
    reactivated = (
        booking.status in (BookingStatus.CANCELLED.value, BookingStatus.CLOSED.value)
        and changes.get("status") in (BookingStatus.TENTATIVE.value, BookingStatus.BOOKED.value)
    )

    if schedule_changed or reactivated:
        candidate = _merged_schedule(booking, changes, new_sessions)
        try:
            duration = validate_booking_schedule(candidate)
        except ValidationError:
            record_booking_attempt("invalid")
            raise
        if candidate.status in (BookingStatus.TENTATIVE.value, BookingStatus.BOOKED.value):
            await _ensure_no_conflicts(db, candidate, exclude_booking_id=booking.id)
        changes["event_duration"] = duration

    old_status = booking.status
    for field, value in changes.items():
        setattr(booking, field, value)
    if new_sessions is not None:
        booking.sessions = [_build_session(s) for s in new_sessions]
    if changes.get("status") == BookingStatus.CANCELLED.value and booking.cancelled_at is None:
        booking.cancelled_at = datetime.now(timezone.utc)
    elif old_status == BookingStatus.CANCELLED.value and booking.status != old_status:
        booking.cancelled_at = None
        booking.cancellation_reason = None

    await db.flush()
    await db.refresh(booking)

    if schedule_changed or reactivated:
        record_booking_attempt("success")
    if booking.status != old_status:
        logger.info(
            "booking_status_changed",
            booking_id=booking.id,
            from_status=old_status,
            to_status=booking.status,
        )
    logger.info("booking_updated", booking_id=booking.id, fields=sorted(data.model_fields_set))
    return booking


async def cancel_booking(db: AsyncSession, booking_id: int, reason: Optional[str] = None) -> Booking:
    """Cancel a booking, releasing its venues for conflict purposes."""
    booking = await get_booking(db, booking_id)

    if booking.status == BookingStatus.CANCELLED.value:
        raise ValidationError("Booking is already cancelled", field="status", value=booking.status)

    old_status = booking.status
    booking.status = BookingStatus.CANCELLED.value
    booking.cancelled_at = datetime.now(timezone.utc)
    booking.cancellation_reason = reason
    await db.flush()
    await db.refresh(booking)

    logger.info(
        "booking_cancelled",
        booking_id=booking.id,
        from_status=old_status,
        reason=reason,
    )
    return booking
