# backend/tests/unit/test_booking_service.py
"""
Unit tests for the booking lifecycle, slot locking and reminders.

Repositories run against the in-memory item store; notifications are mocked.
"""

from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest

from app.core.enums import BookingNotificationType, BookingStatus
from app.core.exceptions import (
    BookingConflictException,
    InvalidStateTransitionException,
    NotFoundException,
    ValidationException,
)
from app.events.booking_events import BookingCreated
from app.repositories.booking_repository import slot_key
from app.services.booking_service import BookingService
from app.services.counselor_service import CounselorService

FUTURE_DATE = "2099-06-15"


def booking_payload(counselor_id, **overrides):
    payload = {
        "counselorId": counselor_id,
        "guestName": "Gita Guest",
        "guestEmail": "  Gita@Example.com ",
        "guestPhone": "+91 90000 00000",
        "bookingDate": FUTURE_DATE,
        "bookingTime": "10:00",
        "duration": 60,
        "discussionTopic": "Portfolio review",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def counselor(unit_db):
    return CounselorService(unit_db).create_counselor(
        {"fullName": "Dr. Cora", "email": "cora@example.com", "specialties": ["UX"]}
    )


@pytest.fixture
def mock_notification_service():
    service = MagicMock()
    service.send_booking_notification.return_value = True
    return service


@pytest.fixture
def booking_service(unit_db, mock_notification_service):
    return BookingService(unit_db, notification_service=mock_notification_service)


class TestCreateBooking:
    def test_creates_pending_booking_and_sends_confirmation(
        self, booking_service, counselor, mock_notification_service, user_caller
    ):
        booking = booking_service.create_booking(booking_payload(counselor["id"]), user_caller)

        assert booking["status"] == BookingStatus.PENDING.value
        assert booking["guestEmail"] == "gita@example.com"
        assert booking["userId"] == user_caller.id
        assert booking["confirmationEmailSent"] is True
        assert booking["reminderEmailSent"] is False
        kind = mock_notification_service.send_booking_notification.call_args[0][0]
        assert kind == BookingNotificationType.CONFIRMATION

    def test_guest_booking_has_no_user(self, booking_service, counselor):
        booking = booking_service.create_booking(booking_payload(counselor["id"]))

        assert booking["userId"] is None

    def test_unknown_counselor_is_not_found(self, booking_service):
        with pytest.raises(NotFoundException):
            booking_service.create_booking(booking_payload("01NOPE"))

    def test_inactive_counselor_is_rejected(self, unit_db, booking_service, counselor):
        CounselorService(unit_db).delete_counselor(counselor["id"])

        with pytest.raises(ValidationException):
            booking_service.create_booking(booking_payload(counselor["id"]))

    def test_past_slot_is_rejected(self, booking_service, counselor):
        with pytest.raises(ValidationException):
            booking_service.create_booking(booking_payload(counselor["id"], bookingDate="2001-01-01"))

    @pytest.mark.parametrize("duration", [5, 500, "long"])
    def test_duration_out_of_bounds(self, booking_service, counselor, duration):
        with pytest.raises(ValidationException):
            booking_service.create_booking(booking_payload(counselor["id"], duration=duration))

    def test_bad_time_format(self, booking_service, counselor):
        with pytest.raises(ValidationException):
            booking_service.create_booking(booking_payload(counselor["id"], bookingTime="ten"))

    def test_notification_failure_does_not_fail_create(
        self, booking_service, counselor, mock_notification_service
    ):
        mock_notification_service.send_booking_notification.side_effect = RuntimeError("smtp down")

        booking = booking_service.create_booking(booking_payload(counselor["id"]))

        assert booking["status"] == BookingStatus.PENDING.value
        assert booking["confirmationEmailSent"] is False

    def test_publisher_receives_event_instead_of_inline_send(
        self, unit_db, counselor, mock_notification_service
    ):
        publisher = MagicMock()
        service = BookingService(
            unit_db, notification_service=mock_notification_service, event_publisher=publisher
        )

        booking = service.create_booking(booking_payload(counselor["id"]))

        event = publisher.publish.call_args[0][0]
        assert isinstance(event, BookingCreated)
        assert event.booking_id == booking["id"]
        mock_notification_service.send_booking_notification.assert_not_called()


class TestSlotLocking:
    def test_same_slot_conflicts(self, booking_service, counselor):
        booking_service.create_booking(booking_payload(counselor["id"]))

        with pytest.raises(BookingConflictException):
            booking_service.create_booking(booking_payload(counselor["id"], guestEmail="b@example.com"))

    def test_lock_settles_race_past_read_check(self, booking_service, counselor):
        booking_service.create_booking(booking_payload(counselor["id"]))

        # Simulate a concurrent create that passed the read-check before the first write landed
        with patch.object(booking_service.repository, "check_time_conflict", return_value=False):
            with pytest.raises(BookingConflictException):
                booking_service.create_booking(booking_payload(counselor["id"]))

    def test_stale_lock_is_taken_over(self, booking_service, counselor):
        booking_service.repository.slot_store.put(
            {
                "slotKey": slot_key(counselor["id"], FUTURE_DATE, "10:00"),
                "bookingId": "01GHOST",
                "createdAt": "2000-01-01T00:00:00.000Z",
            }
        )

        booking = booking_service.create_booking(booking_payload(counselor["id"]))

        assert booking["status"] == BookingStatus.PENDING.value

    def test_fresh_lock_is_never_taken_over(self, booking_service, counselor):
        repo = booking_service.repository
        assert repo.acquire_slot(counselor["id"], FUTURE_DATE, "10:00", "01BOOKINGA") is True

        assert repo.acquire_slot(counselor["id"], FUTURE_DATE, "10:00", "01BOOKINGB") is False
        assert repo.acquire_slot(counselor["id"], FUTURE_DATE, "10:00", "01BOOKINGA") is True

    def test_create_between_rival_claim_and_save_conflicts(self, booking_service, counselor):
        repo = booking_service.repository
        real_save = repo.save

        def save_after_rival(item):
            with pytest.raises(BookingConflictException):
                booking_service.create_booking(
                    booking_payload(counselor["id"], guestEmail="b@example.com")
                )
            return real_save(item)

        with patch.object(repo, "save", side_effect=save_after_rival):
            booking_service.create_booking(booking_payload(counselor["id"]))

        assert len(repo.find_slot_bookings(counselor["id"], FUTURE_DATE, "10:00")) == 1

    def test_create_cannot_take_slot_being_rescheduled_into(self, booking_service, counselor):
        booking = booking_service.create_booking(booking_payload(counselor["id"]))
        repo = booking_service.repository
        real_update = repo.update

        def update_after_rival(booking_id, changes):
            with pytest.raises(BookingConflictException):
                booking_service.create_booking(
                    booking_payload(counselor["id"], bookingTime="14:00", guestEmail="b@example.com")
                )
            return real_update(booking_id, changes)

        with patch.object(repo, "update", side_effect=update_after_rival):
            booking_service.update_booking(booking["id"], {"bookingTime": "14:00"})

        assert len(repo.find_slot_bookings(counselor["id"], FUTURE_DATE, "14:00")) == 1

    def test_cancel_frees_the_slot(self, booking_service, counselor):
        first = booking_service.create_booking(booking_payload(counselor["id"]))
        booking_service.cancel_booking(first["id"], "changed plans", "user")

        assert booking_service.check_availability(counselor["id"], FUTURE_DATE, "10:00") is True
        second = booking_service.create_booking(booking_payload(counselor["id"]))
        assert second["id"] != first["id"]

    def test_reschedule_moves_the_lock(self, booking_service, counselor):
        booking = booking_service.create_booking(booking_payload(counselor["id"]))

        moved = booking_service.update_booking(booking["id"], {"bookingTime": "14:00"})

        assert moved["bookingTime"] == "14:00"
        assert booking_service.check_availability(counselor["id"], FUTURE_DATE, "10:00") is True
        assert booking_service.check_availability(counselor["id"], FUTURE_DATE, "14:00") is False
        booking_service.create_booking(booking_payload(counselor["id"]))

    def test_reschedule_into_taken_slot_conflicts(self, booking_service, counselor):
        booking_service.create_booking(booking_payload(counselor["id"], bookingTime="09:00"))
        other = booking_service.create_booking(booking_payload(counselor["id"]))

        with pytest.raises(BookingConflictException):
            booking_service.update_booking(other["id"], {"bookingTime": "09:00"})


class TestTransitions:
    def test_confirm_then_complete(self, booking_service, counselor, mock_notification_service):
        booking = booking_service.create_booking(booking_payload(counselor["id"]))

        confirmed = booking_service.confirm_booking(booking["id"], " https://meet.example.com/x ")
        completed = booking_service.complete_booking(booking["id"])

        assert confirmed["status"] == BookingStatus.CONFIRMED.value
        assert confirmed["meetingLink"] == "https://meet.example.com/x"
        assert completed["status"] == BookingStatus.COMPLETED.value
        kinds = [c[0][0] for c in mock_notification_service.send_booking_notification.call_args_list]
        assert kinds == [BookingNotificationType.CONFIRMATION, BookingNotificationType.APPROVAL]

    def test_confirm_requires_meeting_link(self, booking_service, counselor):
        booking = booking_service.create_booking(booking_payload(counselor["id"]))

        with pytest.raises(ValidationException):
            booking_service.confirm_booking(booking["id"], "   ")

    def test_confirm_twice_is_invalid(self, booking_service, counselor):
        booking = booking_service.create_booking(booking_payload(counselor["id"]))
        booking_service.confirm_booking(booking["id"], "https://meet.example.com/x")

        with pytest.raises(InvalidStateTransitionException):
            booking_service.confirm_booking(booking["id"], "https://meet.example.com/y")

    def test_complete_requires_confirmed(self, booking_service, counselor):
        booking = booking_service.create_booking(booking_payload(counselor["id"]))

        with pytest.raises(InvalidStateTransitionException):
            booking_service.complete_booking(booking["id"])
        with pytest.raises(InvalidStateTransitionException):
            booking_service.mark_no_show(booking["id"])

    def test_cannot_cancel_twice_or_after_completion(self, booking_service, counselor):
        first = booking_service.create_booking(booking_payload(counselor["id"]))
        booking_service.cancel_booking(first["id"])
        with pytest.raises(InvalidStateTransitionException):
            booking_service.cancel_booking(first["id"])

        second = booking_service.create_booking(booking_payload(counselor["id"], bookingTime="11:00"))
        booking_service.confirm_booking(second["id"], "https://meet.example.com/x")
        booking_service.complete_booking(second["id"])
        with pytest.raises(InvalidStateTransitionException):
            booking_service.cancel_booking(second["id"])

    def test_cancel_records_who_and_why(self, booking_service, counselor):
        booking = booking_service.create_booking(booking_payload(counselor["id"]))

        cancelled = booking_service.cancel_booking(booking["id"], "sick", "counselor")

        assert cancelled["status"] == BookingStatus.CANCELLED.value
        assert cancelled["cancelledBy"] == "counselor"
        assert cancelled["cancellationReason"] == "sick"
        assert cancelled["cancelledAt"]

    def test_cancel_rejects_unknown_canceller(self, booking_service, counselor):
        booking = booking_service.create_booking(booking_payload(counselor["id"]))

        with pytest.raises(ValidationException):
            booking_service.cancel_booking(booking["id"], None, "robot")

    def test_update_of_cancelled_booking_is_invalid(self, booking_service, counselor):
        booking = booking_service.create_booking(booking_payload(counselor["id"]))
        booking_service.cancel_booking(booking["id"])

        with pytest.raises(InvalidStateTransitionException):
            booking_service.update_booking(booking["id"], {"discussionTopic": "new"})

    def test_delete_frees_slot(self, booking_service, counselor):
        booking = booking_service.create_booking(booking_payload(counselor["id"]))

        booking_service.delete_booking(booking["id"])

        with pytest.raises(NotFoundException):
            booking_service.get_booking(booking["id"])
        assert booking_service.check_availability(counselor["id"], FUTURE_DATE, "10:00") is True


class TestReads:
    def test_lookup_by_email_is_case_insensitive(self, booking_service, counselor):
        booking_service.create_booking(booking_payload(counselor["id"]))

        page = booking_service.get_bookings_by_email("GITA@example.com")

        assert page.total == 1

    def test_upcoming_is_soonest_first_and_skips_cancelled(self, booking_service, counselor):
        late = booking_service.create_booking(booking_payload(counselor["id"], bookingTime="16:00"))
        early = booking_service.create_booking(booking_payload(counselor["id"], bookingTime="08:00"))
        dropped = booking_service.create_booking(booking_payload(counselor["id"], bookingTime="12:00"))
        booking_service.cancel_booking(dropped["id"])

        upcoming = booking_service.get_upcoming_bookings(counselor_id=counselor["id"])

        assert [b["id"] for b in upcoming] == [early["id"], late["id"]]

    def test_day_schedule_is_ordered_by_time(self, booking_service, counselor):
        booking_service.create_booking(booking_payload(counselor["id"], bookingTime="15:00"))
        booking_service.create_booking(booking_payload(counselor["id"], bookingTime="09:30"))

        day = booking_service.get_counselor_bookings_for_date(counselor["id"], FUTURE_DATE)

        assert [b["bookingTime"] for b in day] == ["09:30", "15:00"]

    def test_stats_count_statuses(self, booking_service, counselor):
        a = booking_service.create_booking(booking_payload(counselor["id"], bookingTime="08:00"))
        booking_service.create_booking(booking_payload(counselor["id"], bookingTime="09:00"))
        booking_service.cancel_booking(a["id"])

        stats = booking_service.get_stats()

        assert stats["total"] == 2
        assert stats["pending"] == 1
        assert stats["cancelled"] == 1


class TestReminders:
    NOW = datetime(2099, 6, 14, 12, 0, tzinfo=timezone.utc)

    def _confirmed(self, booking_service, counselor, booking_time, booking_date=FUTURE_DATE):
        booking = booking_service.create_booking(
            booking_payload(counselor["id"], bookingTime=booking_time, bookingDate=booking_date)
        )
        return booking_service.confirm_booking(booking["id"], "https://meet.example.com/x")

    def test_sends_only_within_window_and_once(self, booking_service, counselor):
        due = self._confirmed(booking_service, counselor, "10:00")
        self._confirmed(booking_service, counselor, "10:00", booking_date="2099-06-20")

        assert booking_service.send_reminders(self.NOW) == 1
        assert booking_service.get_booking(due["id"])["reminderEmailSent"] is True
        assert booking_service.send_reminders(self.NOW) == 0

    def test_one_failure_does_not_stop_the_batch(
        self, booking_service, counselor, mock_notification_service
    ):
        first = self._confirmed(booking_service, counselor, "09:00")
        second = self._confirmed(booking_service, counselor, "11:00")

        def fail_first(kind, booking, counselor_item=None):
            if booking["id"] == first["id"]:
                raise RuntimeError("provider exploded")
            return True

        mock_notification_service.send_booking_notification.side_effect = fail_first

        assert booking_service.send_reminders(self.NOW) == 1
        assert booking_service.get_booking(first["id"])["reminderEmailSent"] is False
        assert booking_service.get_booking(second["id"])["reminderEmailSent"] is True

    def test_pending_bookings_get_no_reminder(self, booking_service, counselor):
        booking_service.create_booking(booking_payload(counselor["id"]))

        assert booking_service.send_reminders(self.NOW) == 0
