"""Template paths used by the notification service, relative to app/templates."""


class TemplateRegistry:
    BOOKING_CONFIRMATION = "email/booking_confirmation.html"
    BOOKING_APPROVAL = "email/booking_approval.html"
    BOOKING_CANCELLATION = "email/booking_cancellation.html"
    BOOKING_REMINDER = "email/booking_reminder.html"
