# backend/app/services/email.py
"""
Email Service for the counseling platform.

Sends email through the Resend API. When ``EMAIL_PROVIDER=console`` the
message is logged instead of sent, which is what local development and
tests use.
"""

import logging
import re
from typing import Any, Dict, Optional

import resend

from ..core.config import settings
from ..core.exceptions import ServiceException
from .base import BaseService

logger = logging.getLogger(__name__)

_TAG_RE = re.compile(r"<[^>]+>")
_SPACE_RE = re.compile(r"\s+")


class EmailService(BaseService):
    """
    Service for sending emails using Resend API.

    Uses dependency injection pattern - no singleton.
    """

    def __init__(self, provider: Optional[str] = None, api_key: Optional[str] = None):
        """
        Initialize email service.

        Args:
            provider: ``resend`` or ``console`` (defaults to settings)
            api_key: Resend API key (defaults to settings)
        """
        super().__init__()
        self.provider = (provider or settings.email_provider or "console").lower()
        self.api_key = api_key or settings.resend_api_key
        self.from_email = settings.from_email

    @staticmethod
    def _html_to_text(html_content: str) -> str:
        """Convert HTML content to plain text for better deliverability"""
        return _SPACE_RE.sub(" ", _TAG_RE.sub("", html_content)).strip()

    @BaseService.measure_operation("send_email")
    def send_email(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        text_content: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Send an email.

        Args:
            to_email: Recipient email address
            subject: Email subject
            html_content: HTML content of the email
            text_content: Optional plain text version

        Returns:
            Dict containing the provider response

        Raises:
            ServiceException: If email sending fails
        """
        text_content = text_content or self._html_to_text(html_content)

        if self.provider == "console":
            self.logger.info(f"[console email] to={to_email} subject={subject!r}\n{text_content}")
            return {"id": None, "provider": "console"}

        if not self.api_key:
            raise ServiceException("Resend API key not configured")

        resend.api_key = self.api_key
        email_data = {
            "from": self.from_email,
            "to": to_email,
            "subject": subject,
            "html": html_content,
            "text": text_content,
        }
        try:
            response = resend.Emails.send(email_data)
        except Exception as e:
            error_msg = str(e) or "Unknown error"
            self.logger.error(f"Failed to send email to {to_email}: {error_msg}")
            self.log_operation("email_failed", to_email=to_email, subject=subject, error=error_msg)
            raise ServiceException(f"Email sending failed: {error_msg}")

        self.logger.info(f"Email sent successfully to {to_email} - Subject: {subject}")
        return dict(response) if response else {}

