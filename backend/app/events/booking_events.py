"""Booking domain events that trigger guest notifications."""
from dataclasses import asdict, dataclass
from typing import Any, ClassVar, Dict, Optional

from app.core.enums import BookingNotificationType


@dataclass
class BookingEvent:
    booking_id: str

    notification_type: ClassVar[BookingNotificationType]

    def to_dict(self) -> Dict[str, Any]:
        return {"event_type": self.notification_type.value, **asdict(self)}


@dataclass
class BookingCreated(BookingEvent):
    """Fired after a booking request is stored."""

    counselor_id: Optional[str] = None

    notification_type: ClassVar[BookingNotificationType] = BookingNotificationType.CONFIRMATION


@dataclass
class BookingConfirmed(BookingEvent):
    """Fired after a counselor/admin confirms a booking with a meeting link."""

    meeting_link: Optional[str] = None

    notification_type: ClassVar[BookingNotificationType] = BookingNotificationType.APPROVAL


@dataclass
class BookingCancelled(BookingEvent):
    """Fired after a booking is cancelled."""

    cancelled_by: Optional[str] = None  # 'user', 'admin' or 'counselor'

    notification_type: ClassVar[BookingNotificationType] = BookingNotificationType.CANCELLATION


@dataclass
class BookingReminder(BookingEvent):
    """Fired when a reminder is due for a confirmed booking."""

    notification_type: ClassVar[BookingNotificationType] = BookingNotificationType.REMINDER
