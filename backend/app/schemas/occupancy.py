"""
Derived, never-persisted occupancy records and calendar responses.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel


class VenueOccupancyEntry(BaseModel):
    """One venue's use for one time block on one calendar day."""

    booking_id: Optional[int] = None
    booking_number: Optional[str] = None
    client_name: Optional[str] = None
    event_type: Optional[str] = None
    status: Optional[str] = None
    venue: str
    session_name: str
    session_label: Optional[str] = None
    date: date
    start_time: str
    end_time: str
    pax_count: int = 0
    special_instructions: Optional[str] = None

    model_config = {"frozen": True}


class DayConflicts(BaseModel):
    date: date
    venues: list[str]


class CalendarConflictsResponse(BaseModel):
    start: date
    end: date
    days: list[DayConflicts]
