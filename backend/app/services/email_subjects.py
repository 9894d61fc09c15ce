"""
Centralized email subject builders.

Keep subjects in code (not templates) for versioning and logging.
Bodies remain in Jinja templates.
"""

from app.core.constants import BRAND_NAME


class EmailSubject:
    """Static builders for booking email subjects."""

    @staticmethod
    def booking_confirmation() -> str:
        return f"We received your session request - {BRAND_NAME}"

    @staticmethod
    def booking_approval() -> str:
        return f"Your counseling session is confirmed - {BRAND_NAME}"

    @staticmethod
    def booking_cancellation() -> str:
        return f"Your counseling session has been cancelled - {BRAND_NAME}"

    @staticmethod
    def booking_reminder() -> str:
        return f"Reminder: your counseling session is coming up - {BRAND_NAME}"
