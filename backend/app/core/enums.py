# backend/app/core/enums.py
"""
Enumerations shared across services, schemas and routes.

Values are the wire values stored on items, so they must not change.
"""

from enum import Enum


class RoleName(str, Enum):
    """User roles."""

    ADMIN = "ADMIN"
    USER = "USER"
    COUNSELOR = "COUNSELOR"


class BookingStatus(str, Enum):
    """Booking lifecycle states."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    NO_SHOW = "no-show"


# Statuses that occupy a counselor slot
ACTIVE_BOOKING_STATUSES = frozenset({BookingStatus.PENDING.value, BookingStatus.CONFIRMED.value})


class CancelledBy(str, Enum):
    USER = "user"
    ADMIN = "admin"
    COUNSELOR = "counselor"


class BlogStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class ActivityType(str, Enum):
    """Lead activity kinds."""

    CONTACTED = "contacted"
    FOLLOW_UP = "follow_up"
    MEETING_SCHEDULED = "meeting_scheduled"
    MEETING_COMPLETED = "meeting_completed"
    INTERESTED = "interested"
    NOT_INTERESTED = "not_interested"
    CONVERTED = "converted"
    CLOSED = "closed"
    OTHER = "other"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class BookingNotificationType(str, Enum):
    """Booking emails dispatched after a lifecycle transition."""

    CONFIRMATION = "confirmation"
    APPROVAL = "approval"
    CANCELLATION = "cancellation"
    REMINDER = "reminder"
