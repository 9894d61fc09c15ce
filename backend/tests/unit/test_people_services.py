# backend/tests/unit/test_people_services.py
"""Unit tests for users, counselors, lead activities and categories."""

import pytest

from app.core.exceptions import (
    DuplicateResourceException,
    ForbiddenException,
    NotFoundException,
    UnauthorizedException,
    ValidationException,
)
from app.principal import Caller
from app.services.category_service import CategoryService
from app.services.counselor_service import CounselorService
from app.services.lead_activity_service import LeadActivityService
from app.services.lead_service import LeadService
from app.services.user_service import UserService


class TestUserService:
    def test_role_defaults_to_user(self, regular_user, user_caller):
        assert regular_user["role"] == "USER"
        assert user_caller.is_admin is False

    def test_admin_role_is_recognised(self, admin_caller):
        assert admin_caller.is_admin is True

    def test_email_is_required(self, unit_db):
        with pytest.raises(ValidationException):
            UserService(unit_db).create_user({"firstName": "No Email"})

    def test_unknown_role_is_rejected(self, unit_db):
        with pytest.raises(ValidationException):
            UserService(unit_db).create_user({"email": "x@example.com", "role": "wizard"})

    def test_role_is_case_insensitive(self, unit_db):
        user = UserService(unit_db).create_user({"email": "c@example.com", "role": "counselor"})

        assert user["role"] == "COUNSELOR"

    def test_duplicate_email_conflicts(self, unit_db, regular_user):
        with pytest.raises(DuplicateResourceException):
            UserService(unit_db).create_user({"email": "USER@example.com"})

    def test_deactivate(self, unit_db, regular_user):
        user = UserService(unit_db).set_active_status(regular_user["id"], False)

        assert user["isActive"] is False


class TestLeadActivityService:
    @pytest.fixture
    def lead(self, unit_db):
        return LeadService(unit_db).create_lead({"fullName": "Lina", "email": "lina@example.com"})

    @pytest.fixture
    def activity_service(self, unit_db):
        return LeadActivityService(unit_db)

    def test_create_requires_caller(self, activity_service, lead):
        with pytest.raises(UnauthorizedException):
            activity_service.create_activity({"leadId": lead["id"]}, None)

    def test_create_for_unknown_lead(self, activity_service, user_caller):
        with pytest.raises(NotFoundException):
            activity_service.create_activity({"leadId": "01NOLEAD"}, user_caller)

    def test_activity_carries_counselor_summary(self, activity_service, lead, user_caller):
        activity = activity_service.create_activity(
            {"leadId": lead["id"], "activityType": "contacted", "remarks": "Left voicemail"}, user_caller
        )

        assert activity["counselorId"] == user_caller.id
        assert activity["counselor"] == {"id": user_caller.id, "name": "Uma User", "email": "user@example.com"}
        assert activity["activityDate"]

    def test_missing_counselor_falls_back(self, activity_service, lead):
        ghost = Caller(id="01GHOST", role="USER", email=None)

        activity = activity_service.create_activity({"leadId": lead["id"]}, ghost)

        assert activity["counselor"] == {"id": "01GHOST", "name": "Unknown", "email": "N/A"}

    def test_invalid_activity_type(self, activity_service, lead, user_caller):
        with pytest.raises(ValidationException):
            activity_service.create_activity({"leadId": lead["id"], "activityType": "carrier-pigeon"}, user_caller)

    def test_only_author_or_admin_may_edit(self, activity_service, lead, user_caller, other_caller, admin_caller):
        activity = activity_service.create_activity({"leadId": lead["id"]}, user_caller)

        with pytest.raises(ForbiddenException):
            activity_service.update_activity(activity["id"], {"remarks": "x"}, other_caller)

        activity_service.delete_activity(activity["id"], admin_caller)
        with pytest.raises(NotFoundException):
            activity_service.get_activity(activity["id"])


class TestCategoryService:
    def test_slug_is_unique(self, unit_db):
        service = CategoryService(unit_db)
        category = service.create_category({"name": "UX Research"})

        assert category["slug"] == "ux-research"
        assert service.get_by_slug("ux-research")["id"] == category["id"]
        with pytest.raises(DuplicateResourceException):
            service.create_category({"name": "ux research"})

    def test_blank_name_is_rejected(self, unit_db):
        with pytest.raises(ValidationException):
            CategoryService(unit_db).create_category({"name": "  "})

    def test_rename_updates_slug(self, unit_db):
        service = CategoryService(unit_db)
        category = service.create_category({"name": "Visual"})

        renamed = service.update_category(category["id"], {"name": "Visual Design"})

        assert renamed["slug"] == "visual-design"


class TestCounselorService:
    @pytest.fixture
    def counselor_service(self, unit_db):
        service = CounselorService(unit_db)
        service.create_counselor(
            {
                "fullName": "Dr. Cora",
                "email": "cora@example.com",
                "yearsOfExperience": 4,
                "specialties": ["UX", "Portfolio"],
                "rating": 4.5,
            }
        )
        service.create_counselor(
            {
                "fullName": "Dev Mentor",
                "email": "dev@example.com",
                "yearsOfExperience": 12,
                "specialties": ["Branding"],
                "rating": 3.5,
            }
        )
        return service

    @pytest.mark.parametrize("rating", [-1, 5.5, "nan", "inf", "great"])
    def test_update_rating_outside_range_is_rejected(self, counselor_service, rating):
        counselor = counselor_service.get_top_rated(1)[0]

        with pytest.raises(ValidationException):
            counselor_service.update_rating(counselor["id"], rating)

    def test_update_rating_accepts_bounds(self, counselor_service):
        counselor = counselor_service.get_top_rated(1)[0]

        assert counselor_service.update_rating(counselor["id"], 0)["rating"] == 0
        assert counselor_service.update_rating(counselor["id"], "5")["rating"] == 5

    def test_create_rejects_nan_rating(self, counselor_service):
        with pytest.raises(ValidationException):
            counselor_service.create_counselor(
                {"fullName": "Nan", "email": "nan@example.com", "rating": float("nan")}
            )

    def test_duplicate_email_conflicts(self, counselor_service):
        with pytest.raises(DuplicateResourceException):
            counselor_service.create_counselor({"fullName": "Copy", "email": " CORA@example.com "})

    def test_lookups(self, counselor_service):
        assert [c["fullName"] for c in counselor_service.get_top_rated()] == ["Dr. Cora", "Dev Mentor"]
        assert [c["fullName"] for c in counselor_service.get_most_experienced(1)] == ["Dev Mentor"]
        assert [c["fullName"] for c in counselor_service.get_by_specialty("ux")] == ["Dr. Cora"]
        assert counselor_service.get_all_specialties() == ["Branding", "Portfolio", "UX"]

    def test_inactive_counselors_drop_out_of_lookups(self, counselor_service):
        mentor = counselor_service.get_most_experienced(1)[0]
        counselor_service.delete_counselor(mentor["id"])

        assert counselor_service.get_all_specialties() == ["Portfolio", "UX"]
        assert counselor_service.get_stats() == {
            "total": 2,
            "active": 1,
            "inactive": 1,
            "averageRating": 4.5,
        }

    def test_stats_average_active_ratings(self, counselor_service):
        stats = counselor_service.get_stats()

        assert stats["active"] == 2
        assert stats["averageRating"] == 4.0
