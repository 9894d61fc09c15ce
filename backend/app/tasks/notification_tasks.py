# backend/app/tasks/notification_tasks.py
"""
Celery tasks for booking notifications.

``deliver_booking_notification`` renders and sends one booking email and
records the sent flag. ``send_booking_reminders`` is driven by beat and
scans for confirmed bookings entering the reminder window.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Iterator

from celery.utils.log import get_task_logger
from sqlalchemy.orm import Session

from app.database import SessionLocal
from app.services.booking_service import BookingService
from app.tasks.celery_app import celery_app

if TYPE_CHECKING:
    from celery import Task

logger = get_task_logger(__name__)


@contextmanager
def _session_scope() -> Iterator[Session]:
    """Provide transactional scope for use in tasks."""
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@celery_app.task(
    bind=True,
    name="app.tasks.notification_tasks.deliver_booking_notification",
    max_retries=3,
    default_retry_delay=60,
    queue="notifications",
)
def deliver_booking_notification(self: "Task[Any, Any]", notification_type: str, booking_id: str) -> bool:
    """Send one booking email, retrying while the provider refuses it."""
    with _session_scope() as session:
        sent = BookingService(session).deliver_notification(notification_type, booking_id)
    if sent:
        return True
    if self.request.retries < self.max_retries:
        logger.warning(
            "Booking %s notification %s not delivered; retry %s of %s",
            booking_id,
            notification_type,
            self.request.retries + 1,
            self.max_retries,
        )
        raise self.retry()
    logger.error("Booking %s notification %s was not delivered", booking_id, notification_type)
    return False


@celery_app.task(
    name="app.tasks.notification_tasks.send_booking_reminders",
    queue="notifications",
)
def send_booking_reminders() -> int:
    """Send reminders for every booking due one; returns the number sent."""
    with _session_scope() as session:
        sent = BookingService(session).send_reminders()
    if sent:
        logger.info("Sent %s booking reminders", sent)
    return sent
