# backend/tests/unit/test_lead_service.py
"""Unit tests for lead intake and CRM state."""

import pytest

from app.core.exceptions import DuplicateResourceException, NotFoundException
from app.services.lead_service import LeadService


@pytest.fixture
def lead_service(unit_db):
    return LeadService(unit_db)


def lead_data(**overrides):
    data = {
        "fullName": "Lina Lead",
        "email": "lina@example.com",
        "phone": "555-0100",
        "areaOfInterest": "UX Design",
        "message": "Tell me about the course",
    }
    data.update(overrides)
    return data


class TestLeadService:
    def test_create_normalizes_email(self, lead_service):
        lead = lead_service.create_lead(lead_data(email=" Lina@Example.COM "))

        assert lead["email"] == "lina@example.com"
        assert lead["contacted"] is False
        assert lead["isActive"] is True

    def test_duplicate_active_email_is_rejected(self, lead_service):
        lead_service.create_lead(lead_data())

        with pytest.raises(DuplicateResourceException) as exc_info:
            lead_service.create_lead(lead_data(email="LINA@example.com"))
        assert exc_info.value.code == "DUPLICATE_RESOURCE"

    def test_inactive_lead_does_not_block_new_enquiry(self, lead_service):
        first = lead_service.create_lead(lead_data())
        lead_service.set_active_status(first["id"], False)

        second = lead_service.create_lead(lead_data())

        assert second["id"] != first["id"]

    def test_update_to_taken_email_is_rejected(self, lead_service):
        lead_service.create_lead(lead_data())
        other = lead_service.create_lead(lead_data(email="other@example.com"))

        with pytest.raises(DuplicateResourceException):
            lead_service.update_lead(other["id"], {"email": "lina@example.com"})

    def test_update_keeping_own_email_is_allowed(self, lead_service):
        lead = lead_service.create_lead(lead_data())

        updated = lead_service.update_lead(lead["id"], {"email": "lina@example.com", "phone": "555-0199"})

        assert updated["phone"] == "555-0199"

    def test_mark_contacted_records_who_and_when(self, lead_service, admin_caller):
        lead = lead_service.create_lead(lead_data())

        contacted = lead_service.mark_contacted(lead["id"], admin_caller)

        assert contacted["contacted"] is True
        assert contacted["contactedBy"] == admin_caller.id
        assert contacted["contactedAt"]

    def test_mark_not_contacted_keeps_history(self, lead_service, admin_caller):
        lead = lead_service.create_lead(lead_data())
        lead_service.mark_contacted(lead["id"], admin_caller)

        reverted = lead_service.mark_not_contacted(lead["id"])

        assert reverted["contacted"] is False
        assert reverted["contactedBy"] == admin_caller.id

    def test_delete_then_get_is_not_found(self, lead_service):
        lead = lead_service.create_lead(lead_data())
        lead_service.delete_lead(lead["id"])

        with pytest.raises(NotFoundException):
            lead_service.get_lead(lead["id"])

    def test_stats_reflect_net_contact_state(self, lead_service, admin_caller):
        reached = lead_service.create_lead(lead_data())
        reverted = lead_service.create_lead(lead_data(email="ravi@example.com"))
        dropped = lead_service.create_lead(lead_data(email="dara@example.com"))
        lead_service.mark_contacted(reached["id"], admin_caller)
        lead_service.mark_contacted(reverted["id"], admin_caller)
        lead_service.mark_not_contacted(reverted["id"])
        lead_service.set_active_status(dropped["id"], False)

        stats = lead_service.get_stats()

        assert stats == {
            "total": 3,
            "active": 2,
            "inactive": 1,
            "contacted": 1,
            "notContacted": 2,
        }
