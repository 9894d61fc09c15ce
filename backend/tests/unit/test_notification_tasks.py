# backend/tests/unit/test_notification_tasks.py
"""Tests for queueing booking events and the Celery notification tasks."""

from unittest.mock import MagicMock, patch

import pytest

from app.events.booking_events import BookingConfirmed
from app.events.publisher import DELIVER_NOTIFICATION_TASK, EventPublisher
from app.tasks import notification_tasks
from app.tasks.enqueue import enqueue_task


class TestEventPublisher:
    @patch("app.tasks.enqueue.enqueue_task")
    def test_publish_sends_only_type_and_id(self, mock_enqueue):
        EventPublisher().publish(BookingConfirmed(booking_id="01B", meeting_link="https://m"))

        mock_enqueue.assert_called_once_with(
            DELIVER_NOTIFICATION_TASK, args=("approval", "01B"), queue="notifications"
        )

    def test_event_payload(self):
        event = BookingConfirmed(booking_id="01B", meeting_link="https://m")

        assert event.to_dict() == {
            "event_type": "approval",
            "booking_id": "01B",
            "meeting_link": "https://m",
        }


class TestEnqueueTask:
    @patch("app.tasks.celery_app.celery_app.send_task")
    def test_sends_by_name(self, mock_send):
        mock_send.return_value = MagicMock(id="task-1")

        result = enqueue_task("some.task", args=(1,), queue="notifications")

        assert result.id == "task-1"
        mock_send.assert_called_once_with("some.task", args=(1,), kwargs={}, queue="notifications")


class TestNotificationTasks:
    @patch.object(notification_tasks, "SessionLocal")
    @patch.object(notification_tasks, "BookingService")
    def test_deliver_commits_and_returns_result(self, mock_service_cls, mock_session_local):
        session = mock_session_local.return_value
        mock_service_cls.return_value.deliver_notification.return_value = True

        assert notification_tasks.deliver_booking_notification("confirmation", "01B") is True

        mock_service_cls.return_value.deliver_notification.assert_called_once_with("confirmation", "01B")
        session.commit.assert_called_once()
        session.close.assert_called_once()

    @patch.object(notification_tasks, "SessionLocal")
    @patch.object(notification_tasks, "BookingService")
    def test_undelivered_notification_is_retried(self, mock_service_cls, mock_session_local):
        mock_service_cls.return_value.deliver_notification.return_value = False

        with patch.object(
            notification_tasks.deliver_booking_notification, "retry", side_effect=RuntimeError("retry")
        ) as mock_retry:
            with pytest.raises(RuntimeError, match="retry"):
                notification_tasks.deliver_booking_notification("reminder", "01B")

        mock_retry.assert_called_once()
        mock_session_local.return_value.commit.assert_called_once()

    @patch.object(notification_tasks, "SessionLocal")
    @patch.object(notification_tasks, "BookingService")
    def test_gives_up_once_retries_are_spent(self, mock_service_cls, mock_session_local):
        mock_service_cls.return_value.deliver_notification.return_value = False
        task = notification_tasks.deliver_booking_notification

        with patch.object(task, "max_retries", 0), patch.object(task, "retry") as mock_retry:
            assert task("reminder", "01B") is False

        mock_retry.assert_not_called()

    @patch.object(notification_tasks, "SessionLocal")
    @patch.object(notification_tasks, "BookingService")
    def test_reminder_scan_rolls_back_on_error(self, mock_service_cls, mock_session_local):
        session = mock_session_local.return_value
        mock_service_cls.return_value.send_reminders.side_effect = RuntimeError("db gone")

        with pytest.raises(RuntimeError):
            notification_tasks.send_booking_reminders()

        session.rollback.assert_called_once()
        session.close.assert_called_once()
