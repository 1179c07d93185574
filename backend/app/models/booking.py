"""
Booking model: a confirmed (or tentative) banquet reservation and its sessions.

Key design decisions:
- Sessions are owned by the booking (cascade delete-orphan); they have no
  lifecycle of their own
- hall / event_start_time / event_end_time are the fallback schedule used
  when a booking carries no sessions
- Status field allows cancellation without deleting records
- Times are stored as zero-padded "HH:MM" strings, validated in the service layer
"""

import enum

from sqlalchemy import (
    Column, Integer, String, Date, DateTime, Text, ForeignKey, Index, CheckConstraint,
)
from sqlalchemy.orm import relationship

from app.db.base import Base, TimestampMixin


class BookingStatus(str, enum.Enum):
    TENTATIVE = "tentative"
    BOOKED = "booked"
    CANCELLED = "cancelled"
    CLOSED = "closed"


# Statuses that occupy a venue for conflict purposes
BLOCKING_STATUSES = (BookingStatus.TENTATIVE.value, BookingStatus.BOOKED.value)


class Booking(Base, TimestampMixin):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    booking_number = Column(String(32), unique=True, nullable=False)

    # Client
    client_name = Column(String(255), nullable=False)
    contact_number = Column(String(32), nullable=False)
    email = Column(String(255), nullable=True)
    event_type = Column(String(100), nullable=False)

    # Schedule
    event_date = Column(Date, nullable=False)
    event_end_date = Column(Date, nullable=True)
    event_duration = Column(Integer, nullable=False, default=1)
    hall = Column(String(255), nullable=True)
    event_start_time = Column(String(5), nullable=True)
    event_end_time = Column(String(5), nullable=True)

    confirmed_pax = Column(Integer, nullable=False, default=0)
    status = Column(String(20), nullable=False, default=BookingStatus.BOOKED.value)
    notes = Column(Text, nullable=True)

    # Cancellation metadata
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    cancellation_reason = Column(String(500), nullable=True)

    sessions = relationship(
        "BookingSession",
        back_populates="booking",
        cascade="all, delete-orphan",
        order_by="BookingSession.id",
        lazy="selectin",
    )

    __table_args__ = (
        CheckConstraint("event_duration > 0", name="check_booking_duration_positive"),
        CheckConstraint("confirmed_pax >= 0", name="check_booking_pax_non_negative"),
        CheckConstraint(
            "status IN ('tentative', 'booked', 'cancelled', 'closed')",
            name="check_booking_status",
        ),
        # Range lookups for conflict checks and calendar windows
        Index("ix_bookings_event_range", "event_date", "event_end_date"),
        Index("ix_bookings_status", "status"),
    )

    @property
    def last_date(self):
        return self.event_end_date or self.event_date

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, number={self.booking_number}, date={self.event_date}, status={self.status})>"


class BookingSession(Base):
    __tablename__ = "booking_sessions"

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(
        Integer, ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True
    )
    session_name = Column(String(100), nullable=False)
    session_label = Column(String(100), nullable=True)
    venue = Column(String(255), nullable=False)
    start_time = Column(String(5), nullable=False)
    end_time = Column(String(5), nullable=False)
    session_date = Column(Date, nullable=False)
    pax_count = Column(Integer, nullable=False, default=0)
    special_instructions = Column(Text, nullable=True)

    booking = relationship("Booking", back_populates="sessions")

    __table_args__ = (
        CheckConstraint("pax_count >= 0", name="check_session_pax_non_negative"),
        Index("ix_booking_sessions_venue_date", "venue", "session_date"),
    )

    def __repr__(self) -> str:
        return f"<BookingSession(id={self.id}, venue={self.venue}, {self.start_time}-{self.end_time})>"
