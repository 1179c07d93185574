"""
Venue occupancy: multi-day expansion and time-overlap conflict detection.

EXPANSION
=========
A booking is expanded into one VenueOccupancyEntry per (session, calendar day):

  - single-day booking with sessions: one entry per session, on the session's date
  - multi-day booking with sessions: every session repeats on every day of
    [event_date, event_end_date], labelled "Day n" (or "<label> (Day n)")
  - booking without sessions: one synthetic entry per day from hall /
    event_start_time / event_end_time, labelled Start / Middle / End

Missing fallback fields default to DEFAULT_VENUE ("TBD") and
DEFAULT_SESSION_START/END ("09:00"-"18:00"). These defaults take part in
conflict detection like any real venue or time.

The expander is duck-typed: it reads attributes only, so it accepts ORM
Booking rows and unsaved BookingCreate payloads alike.

CONFLICTS
=========
detect_venue_conflicts() works on the entries of one calendar day: group by
venue, sort by start minute, flag the venue when a session ends after the
next one starts. Checking adjacent pairs is enough: if any two sessions
overlap, the earlier one also overlaps its immediate successor.
"""

from collections import defaultdict
from datetime import date, timedelta
from typing import Iterable, Optional, Sequence

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.exceptions import InvalidDateRange, ValidationError
from app.core.logging import get_logger
from app.core.metrics import occupancy_entries_expanded, venue_conflicts_detected
from app.models.booking import Booking, BLOCKING_STATUSES
from app.schemas.booking import ConflictCheckResponse, VenueConflictItem
from app.schemas.occupancy import DayConflicts, VenueOccupancyEntry
from app.services.time_slots import parse_time, ranges_overlap

logger = get_logger(__name__)


def _day_position_label(offset: int, total_days: int) -> Optional[str]:
    if total_days == 1:
        return None
    if offset == 0:
        return "Start"
    if offset == total_days - 1:
        return "End"
    return "Middle"


def expand_booking_to_occupancy(booking) -> list[VenueOccupancyEntry]:
    """Expand a booking into per-day, per-venue occupancy entries."""
    start = booking.event_date
    end = booking.event_end_date or start
    if end < start:
        raise InvalidDateRange(start, end)

    total_days = (end - start).days + 1
    sessions = list(getattr(booking, "sessions", None) or [])
    common = {
        "booking_id": getattr(booking, "id", None),
        "booking_number": getattr(booking, "booking_number", None),
        "client_name": getattr(booking, "client_name", None),
        "event_type": getattr(booking, "event_type", None),
        "status": getattr(booking, "status", None),
    }
    default_pax = getattr(booking, "confirmed_pax", 0) or 0
    entries: list[VenueOccupancyEntry] = []

    if sessions and total_days == 1:
        for session in sessions:
            entries.append(_session_entry(common, session, session.session_date,
                                          session.session_label, default_pax))

    elif sessions:
        for offset in range(total_days):
            day = start + timedelta(days=offset)
            for session in sessions:
                if session.session_label:
                    label = f"{session.session_label} (Day {offset + 1})"
                else:
                    label = f"Day {offset + 1}"
                entries.append(_session_entry(common, session, day, label, default_pax))

    else:
        settings = get_settings()
        for offset in range(total_days):
            entries.append(VenueOccupancyEntry(
                **common,
                venue=getattr(booking, "hall", None) or settings.DEFAULT_VENUE,
                session_name=common["event_type"] or "Event",
                session_label=_day_position_label(offset, total_days),
                date=start + timedelta(days=offset),
                start_time=getattr(booking, "event_start_time", None) or settings.DEFAULT_SESSION_START,
                end_time=getattr(booking, "event_end_time", None) or settings.DEFAULT_SESSION_END,
                pax_count=default_pax,
            ))

    return entries


def _session_entry(common: dict, session, day: date, label: Optional[str], default_pax: int) -> VenueOccupancyEntry:
    return VenueOccupancyEntry(
        **common,
        venue=session.venue,
        session_name=session.session_name,
        session_label=label,
        date=day,
        start_time=session.start_time,
        end_time=session.end_time,
        pax_count=session.pax_count or default_pax,
        special_instructions=getattr(session, "special_instructions", None),
    )


def detect_venue_conflicts(entries_for_day: Iterable[VenueOccupancyEntry]) -> set[str]:
    """Return the venues whose sessions overlap in time on one calendar day."""
    by_venue: dict[str, list[tuple[int, int]]] = defaultdict(list)
    for entry in entries_for_day:
        by_venue[entry.venue].append((parse_time(entry.start_time), parse_time(entry.end_time)))

    conflicted: set[str] = set()
    for venue, slots in by_venue.items():
        if len(slots) < 2:
            continue
        slots.sort()
        for (_, current_end), (next_start, _) in zip(slots, slots[1:]):
            if current_end > next_start:
                conflicted.add(venue)
                break
    return conflicted


def group_entries_by_day(entries: Iterable[VenueOccupancyEntry]) -> dict[date, list[VenueOccupancyEntry]]:
    grouped: dict[date, list[VenueOccupancyEntry]] = defaultdict(list)
    for entry in entries:
        grouped[entry.date].append(entry)
    return grouped


async def load_bookings_in_range(
    db: AsyncSession,
    start: date,
    end: date,
    statuses: Optional[Sequence[str]] = None,
    exclude_booking_id: Optional[int] = None,
) -> list[Booking]:
    """Bookings whose [event_date, event_end_date] range intersects [start, end]."""
    query = select(Booking).where(
        Booking.event_date <= end,
        func.coalesce(Booking.event_end_date, Booking.event_date) >= start,
    )
    if statuses:
        query = query.where(Booking.status.in_(statuses))
    if exclude_booking_id is not None:
        query = query.where(Booking.id != exclude_booking_id)

    result = await db.execute(query.order_by(Booking.event_date.asc(), Booking.id.asc()))
    return list(result.scalars().all())


async def check_booking_conflicts(
    db: AsyncSession,
    candidate,
    exclude_booking_id: Optional[int] = None,
) -> ConflictCheckResponse:
    """
    Check a (possibly unsaved) booking against stored tentative/booked bookings.

    A venue/day is reported when the candidate's own sessions overlap each
    other there, or when one of them overlaps an existing booking's session.
    Overlaps purely between existing bookings are not the candidate's concern.
    """
    candidate_entries = expand_booking_to_occupancy(candidate)
    occupancy_entries_expanded.observe(len(candidate_entries))
    if not candidate_entries:
        return ConflictCheckResponse(has_conflict=False, conflicts=[])

    first_day = min(e.date for e in candidate_entries)
    last_day = max(e.date for e in candidate_entries)
    others = await load_bookings_in_range(
        db, first_day, last_day, statuses=BLOCKING_STATUSES, exclude_booking_id=exclude_booking_id,
    )
    existing_by_day = group_entries_by_day(
        entry for booking in others for entry in expand_booking_to_occupancy(booking)
    )

    conflicts: list[VenueConflictItem] = []
    for day, day_entries in sorted(group_entries_by_day(candidate_entries).items()):
        flagged = detect_venue_conflicts(day_entries)
        for entry in day_entries:
            if entry.venue in flagged:
                continue
            if _overlaps_any(entry, existing_by_day.get(day, [])):
                flagged.add(entry.venue)
        conflicts.extend(VenueConflictItem(date=day, venue=venue) for venue in sorted(flagged))

    if conflicts:
        venue_conflicts_detected.inc(len(conflicts))
        logger.warning(
            "venue_conflict_detected",
            booking_id=exclude_booking_id,
            conflicts=[f"{c.date.isoformat()}:{c.venue}" for c in conflicts],
        )
    return ConflictCheckResponse(has_conflict=bool(conflicts), conflicts=conflicts)


def _overlaps_any(entry: VenueOccupancyEntry, others: Iterable[VenueOccupancyEntry]) -> bool:
    start, end = parse_time(entry.start_time), parse_time(entry.end_time)
    for other in others:
        if other.venue != entry.venue:
            continue
        if ranges_overlap(start, end, parse_time(other.start_time), parse_time(other.end_time)):
            return True
    return False


def _validate_window(start: date, end: date) -> None:
    if end < start:
        raise InvalidDateRange(start, end, field="end")
    max_days = get_settings().CALENDAR_MAX_DAYS
    if (end - start).days + 1 > max_days:
        raise ValidationError(f"Calendar window cannot exceed {max_days} days", field="end", value=str(end))


async def get_occupancy(
    db: AsyncSession,
    start: date,
    end: date,
    venue: Optional[str] = None,
    status: Optional[str] = None,
) -> list[VenueOccupancyEntry]:
    """All occupancy entries dated inside [start, end], ordered for display."""
    _validate_window(start, end)
    bookings = await load_bookings_in_range(db, start, end, statuses=[status] if status else None)

    entries = [
        entry
        for booking in bookings
        for entry in expand_booking_to_occupancy(booking)
        if start <= entry.date <= end and (venue is None or entry.venue == venue)
    ]
    entries.sort(key=lambda e: (e.date, e.venue, parse_time(e.start_time)))
    return entries


async def get_calendar_conflicts(db: AsyncSession, start: date, end: date) -> list[DayConflicts]:
    """Per-day conflicted venues across tentative and booked bookings."""
    _validate_window(start, end)
    bookings = await load_bookings_in_range(db, start, end, statuses=BLOCKING_STATUSES)
    by_day = group_entries_by_day(
        entry
        for booking in bookings
        for entry in expand_booking_to_occupancy(booking)
        if start <= entry.date <= end
    )

    days = []
    for day, day_entries in sorted(by_day.items()):
        venues = detect_venue_conflicts(day_entries)
        if venues:
            days.append(DayConflicts(date=day, venues=sorted(venues)))
    return days
