# backend/tests/unit/test_notification_service.py
"""Unit tests for booking email rendering and delivery outcomes."""

from unittest.mock import MagicMock

from jinja2.exceptions import TemplateNotFound
import pytest

from app.core.exceptions import ServiceException
from app.services.email import EmailService
from app.services.notification_service import NotificationService
from app.services.template_registry import TemplateRegistry
from app.services.template_service import TemplateService

BOOKING = {
    "id": "01BOOKING",
    "guestName": "Gita Guest",
    "guestEmail": "gita@example.com",
    "bookingDate": "2099-06-15",
    "bookingTime": "10:00",
    "duration": 60,
    "discussionTopic": "Portfolio review",
    "meetingLink": "https://meet.example.com/abc",
}
COUNSELOR = {"id": "01COUNSELOR", "fullName": "Dr. Cora"}


@pytest.fixture
def email_service():
    service = MagicMock(spec=EmailService)
    service.send_email.return_value = {"id": "msg_1"}
    return service


@pytest.fixture
def notification_service(email_service):
    return NotificationService(template_service=TemplateService(), email_service=email_service)


class TestTemplates:
    @pytest.mark.parametrize(
        "template_name",
        [
            TemplateRegistry.BOOKING_CONFIRMATION,
            TemplateRegistry.BOOKING_APPROVAL,
            TemplateRegistry.BOOKING_CANCELLATION,
            TemplateRegistry.BOOKING_REMINDER,
        ],
    )
    def test_every_booking_template_exists(self, template_name):
        assert TemplateService().template_exists(template_name)

    def test_missing_template_raises(self):
        with pytest.raises(TemplateNotFound):
            TemplateService().render_template("email/nope.html")


class TestSendBookingNotification:
    def test_approval_includes_meeting_link(self, notification_service, email_service):
        assert notification_service.send_booking_approval(BOOKING, COUNSELOR) is True

        kwargs = email_service.send_email.call_args.kwargs
        assert kwargs["to_email"] == "gita@example.com"
        assert "https://meet.example.com/abc" in kwargs["html_content"]

    def test_confirmation_names_guest_and_counselor(self, notification_service, email_service):
        notification_service.send_booking_confirmation(BOOKING, COUNSELOR)

        html = email_service.send_email.call_args.kwargs["html_content"]
        assert "Gita Guest" in html
        assert "Dr. Cora" in html

    def test_missing_recipient_is_skipped(self, notification_service, email_service):
        sent = notification_service.send_reminder({**BOOKING, "guestEmail": None})

        assert sent is False
        email_service.send_email.assert_not_called()

    def test_provider_failure_returns_false(self, notification_service, email_service):
        email_service.send_email.side_effect = ServiceException("Email sending failed: boom")

        assert notification_service.send_cancellation_notification(BOOKING) is False


class TestConsoleEmail:
    def test_console_provider_logs_instead_of_sending(self):
        result = EmailService(provider="console").send_email(
            to_email="a@example.com", subject="Hi", html_content="<p>Hello <b>there</b></p>"
        )

        assert result == {"id": None, "provider": "console"}

    def test_resend_without_key_fails(self):
        service = EmailService(provider="resend")
        service.api_key = None

        with pytest.raises(ServiceException):
            service.send_email(to_email="a@example.com", subject="Hi", html_content="<p>x</p>")
