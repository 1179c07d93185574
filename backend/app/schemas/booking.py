"""
Pydantic schemas for booking-related request/response validation.

Structural checks (types, required fields) live here and fail with 422.
Schedule rules (time format, end after start, dates inside the event range)
are enforced by the booking service and fail with 400.
"""

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from app.schemas.common import reject_explicit_nulls

BookingStatusLiteral = Literal["tentative", "booked", "cancelled", "closed"]

# Columns that exist on every booking; a PATCH may omit them but not null them
NON_NULLABLE_UPDATE_FIELDS = (
    "client_name", "contact_number", "event_type", "event_date",
    "confirmed_pax", "status", "sessions",
)


def _strip_venue(value: Optional[str]) -> Optional[str]:
    # Conflict checks compare venue names exactly, so stored and checked names must match
    return value.strip() if isinstance(value, str) else value


def _clean_hall(value: Optional[str]) -> Optional[str]:
    return _strip_venue(value) or None


class SessionCreate(BaseModel):
    session_name: str = Field(..., min_length=1, max_length=100)
    session_label: Optional[str] = Field(None, max_length=100)
    venue: str = Field(..., max_length=255)
    start_time: str
    end_time: str
    session_date: date
    pax_count: int = Field(default=0, ge=0)
    special_instructions: Optional[str] = None

    @field_validator("venue")
    @classmethod
    def strip_venue(cls, value: str) -> str:
        return _strip_venue(value)


class SessionResponse(SessionCreate):
    id: int

    model_config = {"from_attributes": True}


class BookingCreate(BaseModel):
    client_name: str = Field(..., min_length=1, max_length=255)
    contact_number: str = Field(..., min_length=1, max_length=32)
    email: Optional[EmailStr] = None
    event_type: str = Field(..., min_length=1, max_length=100)
    event_date: date
    event_end_date: Optional[date] = None
    event_duration: Optional[int] = Field(None, ge=1)
    hall: Optional[str] = Field(None, max_length=255)
    event_start_time: Optional[str] = None
    event_end_time: Optional[str] = None
    confirmed_pax: int = Field(default=0, ge=0)
    status: Literal["tentative", "booked"] = "booked"
    notes: Optional[str] = None
    sessions: list[SessionCreate] = Field(default_factory=list)

    @field_validator("hall")
    @classmethod
    def clean_hall(cls, value: Optional[str]) -> Optional[str]:
        return _clean_hall(value)


class BookingUpdate(BaseModel):
    client_name: Optional[str] = Field(None, min_length=1, max_length=255)
    contact_number: Optional[str] = Field(None, min_length=1, max_length=32)
    email: Optional[EmailStr] = None
    event_type: Optional[str] = Field(None, min_length=1, max_length=100)
    event_date: Optional[date] = None
    event_end_date: Optional[date] = None
    event_duration: Optional[int] = Field(None, ge=1)
    hall: Optional[str] = Field(None, max_length=255)
    event_start_time: Optional[str] = None
    event_end_time: Optional[str] = None
    confirmed_pax: Optional[int] = Field(None, ge=0)
    status: Optional[BookingStatusLiteral] = None
    notes: Optional[str] = None
    sessions: Optional[list[SessionCreate]] = None

    @field_validator("hall")
    @classmethod
    def clean_hall(cls, value: Optional[str]) -> Optional[str]:
        return _clean_hall(value)

    @model_validator(mode="after")
    def required_fields_not_null(self):
        reject_explicit_nulls(self, NON_NULLABLE_UPDATE_FIELDS)
        return self


class BookingResponse(BaseModel):
    id: int
    booking_number: str
    client_name: str
    contact_number: str
    email: Optional[str]
    event_type: str
    event_date: date
    event_end_date: Optional[date]
    event_duration: int
    hall: Optional[str]
    event_start_time: Optional[str]
    event_end_time: Optional[str]
    confirmed_pax: int
    status: str
    notes: Optional[str]
    cancelled_at: Optional[datetime]
    cancellation_reason: Optional[str]
    sessions: list[SessionResponse]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class BookingCancel(BaseModel):
    reason: Optional[str] = Field(None, max_length=500)


class BookingCancelResponse(BaseModel):
    message: str
    booking_id: int
    status: str
    cancelled_at: datetime


class VenueConflictItem(BaseModel):
    date: date
    venue: str


class ConflictCheckResponse(BaseModel):
    has_conflict: bool
    conflicts: list[VenueConflictItem]
