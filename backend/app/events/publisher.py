"""Event publisher - queues booking events for background delivery."""
import logging
from typing import Any, Dict, Protocol

from app.core.enums import BookingNotificationType

logger = logging.getLogger(__name__)

DELIVER_NOTIFICATION_TASK = "app.tasks.notification_tasks.deliver_booking_notification"


class Event(Protocol):
    """Protocol for event types."""

    booking_id: str
    notification_type: BookingNotificationType

    def to_dict(self) -> Dict[str, Any]:
        ...


class EventPublisher:
    """Publishes booking events to the Celery ``notifications`` queue."""

    def publish(self, event: Event) -> None:
        """
        Queue an event for background processing.

        The worker reloads the booking by id, so only the id and the
        notification type travel through the broker.
        """
        from app.tasks.enqueue import enqueue_task

        enqueue_task(
            DELIVER_NOTIFICATION_TASK,
            args=(event.notification_type.value, event.booking_id),
            queue="notifications",
        )
        logger.debug(f"Queued {type(event).__name__} for booking {event.booking_id}")
