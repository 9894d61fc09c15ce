# backend/app/repositories/booking_repository.py
"""
Booking Repository for the counseling platform.

Owns two namespaces:
- ``bookings``: the booking items themselves
- ``booking-slots``: one lock item per occupied ``counselorId#date#time``
  triple, created with a conditional write so two concurrent creates for
  the same slot cannot both succeed

A lock younger than ``SLOT_LOCK_TAKEOVER_SECONDS`` always wins, since its
holder may still be between claiming the slot and writing the booking.
An older lock whose holder booking is gone, no longer pending/confirmed,
or has moved to another slot is stale and may be taken over.
"""

from datetime import datetime, timedelta
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.constants import BOOKING_SLOTS_TABLE, BOOKINGS_TABLE
from ..core.enums import ACTIVE_BOOKING_STATUSES, BookingStatus
from ..core.timezone_utils import booking_start_utc, parse_iso_utc, utc_now, utc_now_iso
from .base_repository import BaseRepository
from .item_store import IItemStore, IndexSpec, Item, SqlItemStore
from .query_pipeline import EntitySchema

logger = logging.getLogger(__name__)


def slot_key(counselor_id: str, booking_date: str, booking_time: str) -> str:
    return f"{counselor_id}#{booking_date}#{booking_time}"


def booking_start(booking: Item) -> Optional[datetime]:
    """Start of a booking as an aware UTC datetime, or None if unparseable."""
    try:
        return booking_start_utc(booking["bookingDate"], booking["bookingTime"])
    except (KeyError, TypeError, ValueError):
        return None


class BookingRepository(BaseRepository):
    """
    Repository for booking data access plus the slot-lock namespace.

    Status transitions live in BookingService; this layer only reads,
    writes and guards slots.
    """

    schema = EntitySchema(
        entity=BOOKINGS_TABLE,
        searchable_fields=("guestName", "guestEmail", "discussionTopic"),
        equality_fields=("isActive", "status", "counselorId", "userId", "guestEmail", "bookingDate"),
        indexes=(
            IndexSpec("counselorId-index", ("counselorId",)),
            IndexSpec("counselorId-bookingDate-index", ("counselorId", "bookingDate")),
            IndexSpec("userId-index", ("userId",)),
            IndexSpec("guestEmail-index", ("guestEmail",)),
            IndexSpec("status-index", ("status",)),
        ),
    )

    def __init__(
        self,
        db: Session,
        store: Optional[IItemStore] = None,
        slot_store: Optional[IItemStore] = None,
        lock_takeover_after: Optional[timedelta] = None,
    ):
        super().__init__(db, store)
        if lock_takeover_after is None:
            lock_takeover_after = timedelta(seconds=settings.slot_lock_takeover_seconds)
        self.lock_takeover_after = lock_takeover_after
        self.slot_store: IItemStore = slot_store or SqlItemStore(
            db, settings.table_name(BOOKING_SLOTS_TABLE), primary_key="slotKey"
        )

    # Slot availability

    def find_slot_bookings(
        self, counselor_id: str, booking_date: str, booking_time: str
    ) -> List[Item]:
        """Pending/confirmed bookings occupying the triple."""
        candidates = self.query_index(
            "counselorId-bookingDate-index",
            {"counselorId": counselor_id, "bookingDate": booking_date},
            {"bookingTime": booking_time},
        )
        return [b for b in candidates if b.get("status") in ACTIVE_BOOKING_STATUSES]

    def check_time_conflict(
        self,
        counselor_id: str,
        booking_date: str,
        booking_time: str,
        exclude_booking_id: Optional[str] = None,
    ) -> bool:
        """
        Check whether the slot is already taken.

        Args:
            counselor_id: Counselor the slot belongs to
            booking_date: ``YYYY-MM-DD``
            booking_time: ``HH:MM``
            exclude_booking_id: Booking to ignore (the one being rescheduled)

        Returns:
            True if another pending/confirmed booking holds the slot
        """
        return any(
            b["id"] != exclude_booking_id
            for b in self.find_slot_bookings(counselor_id, booking_date, booking_time)
        )

    # Slot locks

    def _lock_is_stale(self, lock: Item) -> bool:
        claimed_at = parse_iso_utc(lock.get("createdAt"))
        if claimed_at is not None and utc_now() - claimed_at < self.lock_takeover_after:
            return False
        holder = self.get_by_id(lock.get("bookingId"))
        if holder is None or holder.get("status") not in ACTIVE_BOOKING_STATUSES:
            return True
        return (
            slot_key(holder["counselorId"], holder["bookingDate"], holder["bookingTime"])
            != lock["slotKey"]
        )

    def acquire_slot(
        self, counselor_id: str, booking_date: str, booking_time: str, booking_id: str
    ) -> bool:
        """
        Claim the slot for ``booking_id`` with a conditional write.

        Returns:
            True if the lock is now held by ``booking_id``
        """
        key = slot_key(counselor_id, booking_date, booking_time)
        lock = {
            "slotKey": key,
            "bookingId": booking_id,
            "counselorId": counselor_id,
            "bookingDate": booking_date,
            "bookingTime": booking_time,
            "createdAt": utc_now_iso(),
        }
        if self.slot_store.put_if_absent(lock):
            return True

        holder = self.slot_store.get(key)
        if holder is None:
            return self.slot_store.put_if_absent(lock)
        if holder.get("bookingId") == booking_id:
            return True
        if self._lock_is_stale(holder):
            logger.info(f"Taking over stale slot lock {key} from booking {holder.get('bookingId')}")
            self.slot_store.hard_delete(key)
            return self.slot_store.put_if_absent(lock)
        return False

    def release_slot(
        self, counselor_id: str, booking_date: str, booking_time: str, booking_id: str
    ) -> None:
        """Drop the lock if ``booking_id`` still holds it."""
        key = slot_key(counselor_id, booking_date, booking_time)
        holder = self.slot_store.get(key)
        if holder is not None and holder.get("bookingId") == booking_id:
            self.slot_store.hard_delete(key)

    def release_slot_for(self, booking: Item) -> None:
        self.release_slot(
            booking["counselorId"], booking["bookingDate"], booking["bookingTime"], booking["id"]
        )

    # Lookups

    def get_counselor_bookings_for_date(self, counselor_id: str, booking_date: str) -> List[Item]:
        bookings = self.query_index(
            "counselorId-bookingDate-index",
            {"counselorId": counselor_id, "bookingDate": booking_date},
        )
        return sorted(bookings, key=lambda b: b.get("bookingTime") or "")

    def find_upcoming(
        self, criteria: Optional[Dict[str, Any]] = None, now: Optional[datetime] = None
    ) -> List[Item]:
        """Pending/confirmed bookings starting at or after ``now``, soonest first."""
        current = now or utc_now()
        upcoming = []
        for booking in self.store.scan(criteria or None):
            if booking.get("status") not in ACTIVE_BOOKING_STATUSES:
                continue
            start = booking_start(booking)
            if start is not None and start >= current:
                upcoming.append((start, booking))
        upcoming.sort(key=lambda pair: pair[0])
        return [booking for _, booking in upcoming]

    def find_needing_reminder(
        self, now: Optional[datetime] = None, window_hours: Optional[int] = None
    ) -> List[Item]:
        """Confirmed bookings starting within the reminder window with no reminder sent yet."""
        current = now or utc_now()
        horizon = current + timedelta(hours=window_hours or settings.reminder_window_hours)
        due = []
        for booking in self.query_index(
            "status-index", {"status": BookingStatus.CONFIRMED.value}
        ):
            if booking.get("reminderEmailSent"):
                continue
            start = booking_start(booking)
            if start is not None and current <= start <= horizon:
                due.append(booking)
        return due

    def get_stats(self) -> Dict[str, Any]:
        bookings = self.store.scan()

        def count(status: BookingStatus) -> int:
            return sum(1 for b in bookings if b.get("status") == status.value)

        return {
            "total": len(bookings),
            "pending": count(BookingStatus.PENDING),
            "confirmed": count(BookingStatus.CONFIRMED),
            "cancelled": count(BookingStatus.CANCELLED),
            "completed": count(BookingStatus.COMPLETED),
            "noShow": count(BookingStatus.NO_SHOW),
        }
