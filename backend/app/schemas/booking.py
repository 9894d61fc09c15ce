# backend/app/schemas/booking.py
"""
Booking request schemas.

Dates and times stay strings here; the service normalizes them to
``YYYY-MM-DD`` / ``HH:MM`` and reports bad values as 400s.
"""

from typing import Optional

from pydantic import Field

from ..core.enums import BookingStatus, CancelledBy
from .base import CamelModel


class BookingCreate(CamelModel):
    counselor_id: str = Field(..., min_length=1, description="Counselor to book")
    guest_name: str = Field(..., min_length=1, max_length=200)
    guest_email: str = Field(..., min_length=3, max_length=320)
    guest_phone: Optional[str] = Field(None, max_length=40)
    booking_date: str = Field(..., description="YYYY-MM-DD")
    booking_time: str = Field(..., description="HH:MM")
    duration: Optional[int] = Field(None, description="Minutes, 15 to 240")
    discussion_topic: Optional[str] = Field(None, max_length=2000)


class BookingUpdate(CamelModel):
    booking_date: Optional[str] = None
    booking_time: Optional[str] = None
    duration: Optional[int] = None
    discussion_topic: Optional[str] = Field(None, max_length=2000)


class BookingConfirm(CamelModel):
    meeting_link: str = Field(..., description="Video call link sent to the guest")


class BookingCancel(CamelModel):
    reason: Optional[str] = Field(None, max_length=1000)
    cancelled_by: CancelledBy = CancelledBy.ADMIN


class BookingStatusFilter(CamelModel):
    status: BookingStatus


class AvailabilityResponse(CamelModel):
    available: bool
