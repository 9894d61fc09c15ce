# backend/app/repositories/lead_repository.py
"""
Lead Repository.

Leads are inbound CRM contacts. Equality filters: isActive, contacted;
areaOfInterest is a case-insensitive substring filter.
"""

from typing import Any, Dict, Optional

from ..core.constants import LEADS_TABLE
from .base_repository import BaseRepository
from .item_store import IndexSpec
from .query_pipeline import EntitySchema

LEAD_SORT_FIELDS = ("createdAt", "fullName", "email", "areaOfInterest", "contactedAt", "contacted")


class LeadRepository(BaseRepository):
    schema = EntitySchema(
        entity=LEADS_TABLE,
        searchable_fields=("fullName", "email", "areaOfInterest", "message"),
        equality_fields=("isActive", "contacted"),
        substring_fields=("areaOfInterest",),
        allowed_sort_fields=LEAD_SORT_FIELDS,
        indexes=(
            IndexSpec("email-index", ("email",)),
            IndexSpec("contacted-isActive-index", ("contacted", "isActive")),
        ),
    )

    def active_email_taken(self, email: str, exclude_id: Optional[str] = None) -> bool:
        """True if another active lead already uses this email."""
        found = self.query_index(
            "email-index", {"email": email.strip().lower()}, {"isActive": True}
        )
        return any(lead["id"] != exclude_id for lead in found)

    def get_stats(self) -> Dict[str, Any]:
        leads = self.store.scan()
        active = sum(1 for lead in leads if lead.get("isActive"))
        contacted = sum(1 for lead in leads if lead.get("contacted"))
        return {
            "total": len(leads),
            "active": active,
            "inactive": len(leads) - active,
            "contacted": contacted,
            "notContacted": len(leads) - contacted,
        }
