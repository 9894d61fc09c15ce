"""Booking domain events and their publisher."""

from app.events.booking_events import (
    BookingCancelled,
    BookingConfirmed,
    BookingCreated,
    BookingEvent,
    BookingReminder,
)
from app.events.publisher import EventPublisher

__all__ = [
    "BookingEvent",
    "BookingCreated",
    "BookingConfirmed",
    "BookingCancelled",
    "BookingReminder",
    "EventPublisher",
]
