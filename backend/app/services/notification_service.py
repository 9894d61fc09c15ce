# backend/app/services/notification_service.py
"""
Notification Service for the counseling platform.

Renders booking emails with Jinja2 templates and sends them through the
EmailService. Every public method returns True/False; delivery problems
are logged and counted, never raised, so a failed email cannot fail the
booking transition that triggered it.
"""

import logging
import time
from typing import Any, Dict, Mapping, Optional

from jinja2.exceptions import TemplateError

from ..core.enums import BookingNotificationType
from ..core.exceptions import ServiceException
from ..monitoring.prometheus_metrics import prometheus_metrics
from .base import BaseService
from .email import EmailService
from .email_subjects import EmailSubject
from .template_registry import TemplateRegistry
from .template_service import TemplateService

logger = logging.getLogger(__name__)

_TEMPLATES = {
    BookingNotificationType.CONFIRMATION: (TemplateRegistry.BOOKING_CONFIRMATION, EmailSubject.booking_confirmation),
    BookingNotificationType.APPROVAL: (TemplateRegistry.BOOKING_APPROVAL, EmailSubject.booking_approval),
    BookingNotificationType.CANCELLATION: (TemplateRegistry.BOOKING_CANCELLATION, EmailSubject.booking_cancellation),
    BookingNotificationType.REMINDER: (TemplateRegistry.BOOKING_REMINDER, EmailSubject.booking_reminder),
}


class NotificationService(BaseService):
    """
    Booking notification sender.

    Uses dependency injection for TemplateService and EmailService.
    """

    def __init__(
        self,
        template_service: Optional[TemplateService] = None,
        email_service: Optional[EmailService] = None,
    ) -> None:
        super().__init__()
        self.template_service = template_service or TemplateService()
        self.email_service = email_service or EmailService()

    @staticmethod
    def _build_context(
        booking: Mapping[str, Any], counselor: Optional[Mapping[str, Any]]
    ) -> Dict[str, Any]:
        return {
            "guest_name": booking.get("guestName") or "there",
            "counselor_name": (counselor or {}).get("fullName") or "your counselor",
            "booking_date": booking.get("bookingDate"),
            "booking_time": booking.get("bookingTime"),
            "duration": booking.get("duration"),
            "discussion_topic": booking.get("discussionTopic"),
            "meeting_link": booking.get("meetingLink"),
            "cancellation_reason": booking.get("cancellationReason"),
        }

    @BaseService.measure_operation("send_booking_notification")
    def send_booking_notification(
        self,
        notification_type: BookingNotificationType,
        booking: Mapping[str, Any],
        counselor: Optional[Mapping[str, Any]] = None,
    ) -> bool:
        """
        Render and send one booking email to the guest.

        Args:
            notification_type: Which booking email to send
            booking: Booking item
            counselor: Counselor item used for the email body

        Returns:
            True if the provider accepted the email
        """
        event_type = BookingNotificationType(notification_type).value
        recipient = booking.get("guestEmail")
        if not recipient:
            self.logger.warning(f"Booking {booking.get('id')} has no guest email; skipping {event_type}")
            prometheus_metrics.record_notification_outcome(event_type, "skipped")
            return False

        template_name, subject_builder = _TEMPLATES[BookingNotificationType(event_type)]
        subject = subject_builder()
        prometheus_metrics.record_notification_attempt(event_type)
        start = time.monotonic()
        try:
            html = self.template_service.render_template(
                template_name,
                context=self._build_context(booking, counselor),
                subject=subject,
            )
            self.email_service.send_email(to_email=recipient, subject=subject, html_content=html)
        except (ServiceException, TemplateError) as e:
            self.logger.error(
                f"Failed to send {event_type} email for booking {booking.get('id')}: {str(e)}"
            )
            prometheus_metrics.record_notification_outcome(event_type, "failed")
            return False
        finally:
            prometheus_metrics.observe_notification_dispatch(event_type, time.monotonic() - start)

        prometheus_metrics.record_notification_outcome(event_type, "sent")
        self.log_operation("booking_email_sent", event_type=event_type, booking_id=booking.get("id"))
        return True

    def send_booking_confirmation(self, booking, counselor=None) -> bool:
        return self.send_booking_notification(BookingNotificationType.CONFIRMATION, booking, counselor)

    def send_booking_approval(self, booking, counselor=None) -> bool:
        return self.send_booking_notification(BookingNotificationType.APPROVAL, booking, counselor)

    def send_cancellation_notification(self, booking, counselor=None) -> bool:
        return self.send_booking_notification(BookingNotificationType.CANCELLATION, booking, counselor)

    def send_reminder(self, booking, counselor=None) -> bool:
        return self.send_booking_notification(BookingNotificationType.REMINDER, booking, counselor)
