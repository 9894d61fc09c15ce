# backend/app/services/booking_service.py
"""
Booking Service for the counseling platform.

Owns the booking lifecycle:

    pending -> confirmed -> completed | no-show
    pending | confirmed -> cancelled

Slot uniqueness is enforced twice: a read-check that produces the friendly
conflict message, then a conditional write on the slot-lock item that
settles races between concurrent creates. Guest emails are dispatched after
the primary write and can never fail a transition.
"""

from datetime import datetime
import logging
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.orm import Session

from ..core.constants import DEFAULT_BOOKING_DURATION, MAX_BOOKING_DURATION, MIN_BOOKING_DURATION
from ..core.enums import (
    ACTIVE_BOOKING_STATUSES,
    BookingNotificationType,
    BookingStatus,
    CancelledBy,
)
from ..core.exceptions import (
    BookingConflictException,
    InvalidStateTransitionException,
    NotFoundException,
    ValidationException,
)
from ..core.timezone_utils import booking_start_utc, utc_now, utc_now_iso
from ..events.booking_events import (
    BookingCancelled,
    BookingConfirmed,
    BookingCreated,
    BookingEvent,
)
from ..events.publisher import EventPublisher
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..principal import Caller
from ..repositories.booking_repository import BookingRepository
from ..repositories.counselor_repository import CounselorRepository
from ..repositories.factory import RepositoryFactory
from ..repositories.item_store import Item
from ..repositories.query_pipeline import PageResult, PaginationOptions
from .base import BaseService
from .notification_service import NotificationService

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("bookingDate", "bookingTime", "duration", "discussionTopic")
LOCKED_STATUSES = (BookingStatus.CANCELLED.value, BookingStatus.COMPLETED.value)


def _normalize_date(value: Any) -> str:
    try:
        return datetime.strptime(str(value)[:10], "%Y-%m-%d").strftime("%Y-%m-%d")
    except ValueError:
        raise ValidationException("Booking date must be in YYYY-MM-DD format", details={"bookingDate": value})


def _normalize_time(value: Any) -> str:
    try:
        return datetime.strptime(str(value).strip()[:5], "%H:%M").strftime("%H:%M")
    except ValueError:
        raise ValidationException("Booking time must be in HH:MM format", details={"bookingTime": value})


def _normalize_duration(value: Any) -> int:
    if value is None:
        return DEFAULT_BOOKING_DURATION
    try:
        duration = int(value)
    except (TypeError, ValueError):
        raise ValidationException("Duration must be a whole number of minutes")
    if duration < MIN_BOOKING_DURATION or duration > MAX_BOOKING_DURATION:
        raise ValidationException(
            f"Duration must be between {MIN_BOOKING_DURATION} and {MAX_BOOKING_DURATION} minutes",
            details={"duration": duration},
        )
    return duration


class BookingService(BaseService):
    """
    Service layer for booking operations.

    Notifications go through ``event_publisher`` (Celery) when one is
    configured and are delivered inline otherwise.
    """

    def __init__(
        self,
        db: Session,
        notification_service: Optional[NotificationService] = None,
        event_publisher: Optional[EventPublisher] = None,
        repository: Optional[BookingRepository] = None,
        counselor_repository: Optional[CounselorRepository] = None,
    ):
        """
        Initialize booking service.

        Args:
            db: Database session
            notification_service: Email sender used for inline delivery
            event_publisher: Optional publisher for asynchronous delivery
            repository: Optional booking repository override
            counselor_repository: Optional counselor repository override
        """
        super().__init__(db)
        self.notification_service = notification_service or NotificationService()
        self.event_publisher = event_publisher
        self.repository = repository or RepositoryFactory.create_booking_repository(db)
        self.counselor_repository = (
            counselor_repository or RepositoryFactory.create_counselor_repository(db)
        )

    # Helpers

    def _get_or_404(self, booking_id: str) -> Item:
        booking = self.repository.get_by_id(booking_id)
        if booking is None:
            raise NotFoundException("Booking not found", details={"booking_id": booking_id})
        return booking

    def _ensure_future(self, booking_date: str, booking_time: str) -> None:
        if booking_start_utc(booking_date, booking_time) <= utc_now():
            raise ValidationException("Booking must be scheduled for a future date and time")

    def _claim_slot(self, counselor_id: str, booking_date: str, booking_time: str, booking_id: str) -> None:
        if not self.repository.acquire_slot(counselor_id, booking_date, booking_time, booking_id):
            prometheus_metrics.record_slot_lock("acquire", "conflict")
            raise BookingConflictException()
        prometheus_metrics.record_slot_lock("acquire", "ok")

    def _release_slot(self, booking: Item) -> None:
        self.repository.release_slot_for(booking)
        prometheus_metrics.record_slot_lock("release", "ok")

    def _dispatch(self, event: BookingEvent) -> None:
        """Best-effort notification; never raises."""
        try:
            if self.event_publisher is not None:
                self.event_publisher.publish(event)
            else:
                self.deliver_notification(event.notification_type, event.booking_id)
        except Exception as e:
            self.logger.error(
                f"Failed to dispatch {event.notification_type.value} notification "
                f"for booking {event.booking_id}: {str(e)}"
            )

    # Creation

    @BaseService.measure_operation("create_booking")
    def create_booking(self, data: Mapping[str, Any], caller: Optional[Caller] = None) -> Item:
        """
        Create a pending booking.

        Args:
            data: counselorId, guestName, guestEmail, guestPhone, bookingDate,
                bookingTime, duration, discussionTopic
            caller: Optional authenticated user, recorded as ``userId``

        Returns:
            The stored booking

        Raises:
            NotFoundException: Counselor does not exist
            ValidationException: Counselor inactive, bad input or start not in the future
            BookingConflictException: Slot already taken
        """
        counselor_id = data.get("counselorId")
        booking_date = _normalize_date(data.get("bookingDate"))
        booking_time = _normalize_time(data.get("bookingTime"))
        duration = _normalize_duration(data.get("duration"))

        counselor = self.counselor_repository.get_by_id(counselor_id) if counselor_id else None
        if counselor is None:
            raise NotFoundException("Counselor not found", details={"counselor_id": counselor_id})
        if not counselor.get("isActive"):
            raise ValidationException("Counselor is currently not accepting bookings")

        if self.repository.check_time_conflict(counselor_id, booking_date, booking_time):
            raise BookingConflictException()
        self._ensure_future(booking_date, booking_time)

        booking = self.repository.new_item(
            {
                "counselorId": counselor_id,
                "userId": data.get("userId") or (caller.id if caller else None),
                "guestName": (data.get("guestName") or "").strip(),
                "guestEmail": (data.get("guestEmail") or "").strip().lower(),
                "guestPhone": data.get("guestPhone"),
                "bookingDate": booking_date,
                "bookingTime": booking_time,
                "duration": duration,
                "discussionTopic": data.get("discussionTopic"),
                "status": BookingStatus.PENDING.value,
                "confirmationEmailSent": False,
                "reminderEmailSent": False,
            }
        )

        self._claim_slot(counselor_id, booking_date, booking_time, booking["id"])
        try:
            self.repository.save(booking)
        except Exception:
            self._release_slot(booking)
            raise

        self.log_operation("booking_created", booking_id=booking["id"], counselor_id=counselor_id)
        self._dispatch(BookingCreated(booking_id=booking["id"], counselor_id=counselor_id))
        return self.repository.get_by_id(booking["id"]) or booking

    # Transitions

    @BaseService.measure_operation("confirm_booking")
    def confirm_booking(self, booking_id: str, meeting_link: Optional[str]) -> Item:
        booking = self._get_or_404(booking_id)
        if booking["status"] != BookingStatus.PENDING.value:
            raise InvalidStateTransitionException(
                "Only pending bookings can be confirmed", current_status=booking["status"]
            )
        link = (meeting_link or "").strip()
        if not link:
            raise ValidationException("Meeting link is required to confirm booking")

        updated = self.repository.update(
            booking_id, {"status": BookingStatus.CONFIRMED.value, "meetingLink": link}
        )
        self.log_operation("booking_confirmed", booking_id=booking_id)
        self._dispatch(BookingConfirmed(booking_id=booking_id, meeting_link=link))
        return self.repository.get_by_id(booking_id) or updated

    @BaseService.measure_operation("cancel_booking")
    def cancel_booking(
        self,
        booking_id: str,
        reason: Optional[str] = None,
        cancelled_by: str = CancelledBy.ADMIN.value,
    ) -> Item:
        booking = self._get_or_404(booking_id)
        try:
            canceller = CancelledBy(cancelled_by).value
        except ValueError:
            raise ValidationException(
                "cancelledBy must be one of user, admin or counselor",
                details={"cancelledBy": cancelled_by},
            )

        status = booking["status"]
        if status == BookingStatus.CANCELLED.value:
            raise InvalidStateTransitionException("Booking is already cancelled", current_status=status)
        if status == BookingStatus.COMPLETED.value:
            raise InvalidStateTransitionException("Cannot cancel completed bookings", current_status=status)
        if status not in ACTIVE_BOOKING_STATUSES:
            raise InvalidStateTransitionException(
                "Only pending or confirmed bookings can be cancelled", current_status=status
            )

        updated = self.repository.update(
            booking_id,
            {
                "status": BookingStatus.CANCELLED.value,
                "cancellationReason": reason,
                "cancelledAt": utc_now_iso(),
                "cancelledBy": canceller,
            },
        )
        self._release_slot(booking)
        self.log_operation("booking_cancelled", booking_id=booking_id, cancelled_by=canceller)
        self._dispatch(BookingCancelled(booking_id=booking_id, cancelled_by=canceller))
        return updated

    def _finish(self, booking_id: str, target: BookingStatus, message: str) -> Item:
        booking = self._get_or_404(booking_id)
        if booking["status"] != BookingStatus.CONFIRMED.value:
            raise InvalidStateTransitionException(message, current_status=booking["status"])
        updated = self.repository.update(booking_id, {"status": target.value})
        self._release_slot(booking)
        self.log_operation(f"booking_{target.value}", booking_id=booking_id)
        return updated

    @BaseService.measure_operation("complete_booking")
    def complete_booking(self, booking_id: str) -> Item:
        return self._finish(
            booking_id, BookingStatus.COMPLETED, "Only confirmed bookings can be marked as completed"
        )

    @BaseService.measure_operation("mark_no_show")
    def mark_no_show(self, booking_id: str) -> Item:
        return self._finish(
            booking_id, BookingStatus.NO_SHOW, "Only confirmed bookings can be marked as no-show"
        )

    @BaseService.measure_operation("update_booking")
    def update_booking(self, booking_id: str, data: Mapping[str, Any]) -> Item:
        """
        Update date/time/duration/topic.

        A changed date or time re-checks the new slot, claims its lock and
        only then releases the old one.
        """
        booking = self._get_or_404(booking_id)
        if booking["status"] in LOCKED_STATUSES:
            raise InvalidStateTransitionException(
                f"Cannot update {booking['status']} bookings", current_status=booking["status"]
            )

        changes: Dict[str, Any] = {k: data[k] for k in UPDATABLE_FIELDS if data.get(k) is not None}
        if "bookingDate" in changes:
            changes["bookingDate"] = _normalize_date(changes["bookingDate"])
        if "bookingTime" in changes:
            changes["bookingTime"] = _normalize_time(changes["bookingTime"])
        if "duration" in changes:
            changes["duration"] = _normalize_duration(changes["duration"])
        if not changes:
            return booking

        new_date = changes.get("bookingDate", booking["bookingDate"])
        new_time = changes.get("bookingTime", booking["bookingTime"])
        moved = (new_date, new_time) != (booking["bookingDate"], booking["bookingTime"])
        holds_slot = booking["status"] in ACTIVE_BOOKING_STATUSES

        if moved:
            if self.repository.check_time_conflict(
                booking["counselorId"], new_date, new_time, exclude_booking_id=booking_id
            ):
                raise BookingConflictException()
            self._ensure_future(new_date, new_time)
            if holds_slot:
                self._claim_slot(booking["counselorId"], new_date, new_time, booking_id)

        try:
            updated = self.repository.update(booking_id, changes)
        except Exception:
            if moved and holds_slot:
                self.repository.release_slot(booking["counselorId"], new_date, new_time, booking_id)
            raise

        if moved and holds_slot:
            self._release_slot(booking)
        self.log_operation("booking_updated", booking_id=booking_id, moved=moved)
        return updated

    @BaseService.measure_operation("delete_booking")
    def delete_booking(self, booking_id: str) -> None:
        """Hard delete; frees the slot if the booking held it."""
        booking = self._get_or_404(booking_id)
        self.repository.delete(booking_id)
        self._release_slot(booking)
        self.log_operation("booking_deleted", booking_id=booking_id)

    # Reads

    @BaseService.measure_operation("check_availability")
    def check_availability(self, counselor_id: str, booking_date: Any, booking_time: Any) -> bool:
        return not self.repository.check_time_conflict(
            counselor_id, _normalize_date(booking_date), _normalize_time(booking_time)
        )

    def get_booking(self, booking_id: str) -> Item:
        return self._get_or_404(booking_id)

    @BaseService.measure_operation("list_bookings")
    def list_bookings(
        self,
        filters: Optional[Mapping[str, Any]] = None,
        options: Optional[PaginationOptions] = None,
        search: Optional[str] = None,
    ) -> PageResult:
        criteria = dict(filters or {})
        if criteria.get("guestEmail"):
            criteria["guestEmail"] = str(criteria["guestEmail"]).strip().lower()
        return self.repository.find_all(criteria, options, search)

    def get_counselor_bookings(
        self, counselor_id: str, options: Optional[PaginationOptions] = None
    ) -> PageResult:
        return self.repository.find_all(
            None, options, partition={"counselorId": counselor_id}, index_name="counselorId-index"
        )

    def get_user_bookings(self, user_id: str, options: Optional[PaginationOptions] = None) -> PageResult:
        return self.repository.find_all(
            None, options, partition={"userId": user_id}, index_name="userId-index"
        )

    def get_bookings_by_email(
        self, email: str, options: Optional[PaginationOptions] = None
    ) -> PageResult:
        return self.repository.find_all(
            None,
            options,
            partition={"guestEmail": email.strip().lower()},
            index_name="guestEmail-index",
        )

    def get_upcoming_bookings(
        self,
        *,
        user_id: Optional[str] = None,
        email: Optional[str] = None,
        counselor_id: Optional[str] = None,
        limit: int = 10,
    ) -> List[Item]:
        criteria: Dict[str, Any] = {}
        if user_id:
            criteria["userId"] = user_id
        if email:
            criteria["guestEmail"] = email.strip().lower()
        if counselor_id:
            criteria["counselorId"] = counselor_id
        return self.repository.find_upcoming(criteria)[:limit]

    def get_counselor_bookings_for_date(self, counselor_id: str, booking_date: Any) -> List[Item]:
        return self.repository.get_counselor_bookings_for_date(
            counselor_id, _normalize_date(booking_date)
        )

    def get_stats(self) -> Dict[str, Any]:
        return self.repository.get_stats()

    # Notifications

    def deliver_notification(self, notification_type: Any, booking_id: str) -> bool:
        """
        Send one booking email and record the sent flag on success.

        Called inline or from the Celery worker.

        Returns:
            True if the email was accepted by the provider
        """
        kind = BookingNotificationType(notification_type)
        booking = self.repository.get_by_id(booking_id)
        if booking is None:
            self.logger.warning(f"Booking {booking_id} vanished before {kind.value} email")
            return False
        counselor = self.counselor_repository.get_by_id(booking.get("counselorId"))

        sent = self.notification_service.send_booking_notification(kind, booking, counselor)
        if sent and kind == BookingNotificationType.CONFIRMATION:
            self.repository.update(booking_id, {"confirmationEmailSent": True})
        elif sent and kind == BookingNotificationType.REMINDER:
            self.repository.update(booking_id, {"reminderEmailSent": True})
        return sent

    @BaseService.measure_operation("send_reminders")
    def send_reminders(self, now: Optional[datetime] = None) -> int:
        """
        Send reminders for confirmed bookings starting within the window.

        One failing booking is logged and skipped; the batch continues.

        Returns:
            Number of reminders sent
        """
        sent = 0
        due = self.repository.find_needing_reminder(now)
        for booking in due:
            try:
                if self.deliver_notification(BookingNotificationType.REMINDER, booking["id"]):
                    sent += 1
            except Exception as e:
                self.logger.error(f"Reminder for booking {booking['id']} failed: {str(e)}")
        self.logger.info(f"Reminder scan sent {sent} of {len(due)} due reminders")
        return sent
