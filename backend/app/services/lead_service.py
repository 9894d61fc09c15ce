# backend/app/services/lead_service.py
"""
Lead Service - CRM intake for prospective students.

Only active leads count towards email uniqueness, so a deactivated lead
never blocks the same person from enquiring again.
"""

from typing import Any, Dict, Mapping, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import DuplicateResourceException, NotFoundException
from ..core.timezone_utils import utc_now_iso
from ..principal import Caller
from ..repositories.factory import RepositoryFactory
from ..repositories.item_store import Item
from ..repositories.lead_repository import LeadRepository
from ..repositories.query_pipeline import PageResult, PaginationOptions
from .base import BaseService

LEAD_FIELDS = ("fullName", "email", "phone", "areaOfInterest", "message")


class LeadService(BaseService):
    def __init__(self, db: Session, repository: Optional[LeadRepository] = None):
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_lead_repository(db)

    def _get_or_404(self, lead_id: str) -> Item:
        lead = self.repository.get_by_id(lead_id)
        if lead is None:
            raise NotFoundException("Lead not found", details={"lead_id": lead_id})
        return lead

    @staticmethod
    def _clean(data: Mapping[str, Any]) -> Dict[str, Any]:
        cleaned = {k: data[k] for k in LEAD_FIELDS if k in data and data[k] is not None}
        if "email" in cleaned:
            cleaned["email"] = str(cleaned["email"]).strip().lower()
        return cleaned

    @BaseService.measure_operation("create_lead")
    def create_lead(self, data: Mapping[str, Any]) -> Item:
        """
        Record a new lead.

        Raises:
            DuplicateResourceException: An active lead already uses the email
        """
        fields = self._clean(data)
        if self.repository.active_email_taken(fields.get("email", "")):
            raise DuplicateResourceException("Lead", "email", fields.get("email"))
        lead = self.repository.create({**fields, "contacted": False})
        self.log_operation("lead_created", lead_id=lead["id"])
        return lead

    @BaseService.measure_operation("list_leads")
    def list_leads(
        self,
        filters: Optional[Mapping[str, Any]] = None,
        options: Optional[PaginationOptions] = None,
        search: Optional[str] = None,
    ) -> PageResult:
        return self.repository.find_all(filters, options, search)

    def get_lead(self, lead_id: str) -> Item:
        return self._get_or_404(lead_id)

    @BaseService.measure_operation("update_lead")
    def update_lead(self, lead_id: str, data: Mapping[str, Any]) -> Item:
        lead = self._get_or_404(lead_id)
        changes = self._clean(data)
        new_email = changes.get("email")
        if new_email and new_email != lead.get("email"):
            if self.repository.active_email_taken(new_email, exclude_id=lead_id):
                raise DuplicateResourceException("Lead", "email", new_email)
        return self.repository.update(lead_id, changes) or lead

    @BaseService.measure_operation("delete_lead")
    def delete_lead(self, lead_id: str) -> None:
        self._get_or_404(lead_id)
        self.repository.delete(lead_id)
        self.log_operation("lead_deleted", lead_id=lead_id)

    def set_active_status(self, lead_id: str, is_active: bool) -> Item:
        self._get_or_404(lead_id)
        return self.repository.update(lead_id, {"isActive": bool(is_active)})

    @BaseService.measure_operation("mark_contacted")
    def mark_contacted(self, lead_id: str, caller: Optional[Caller] = None) -> Item:
        self._get_or_404(lead_id)
        return self.repository.update(
            lead_id,
            {
                "contacted": True,
                "contactedAt": utc_now_iso(),
                "contactedBy": caller.id if caller else None,
            },
        )

    def mark_not_contacted(self, lead_id: str) -> Item:
        # contactedAt/contactedBy stay as a record of the last contact
        self._get_or_404(lead_id)
        return self.repository.update(lead_id, {"contacted": False})

    def get_stats(self) -> Dict[str, Any]:
        return self.repository.get_stats()
