# backend/app/repositories/lead_activity_repository.py
"""Lead Activity Repository - CRM touch points recorded by counselors."""

from typing import Any, Dict, List, Optional

from ..core.constants import LEAD_ACTIVITIES_TABLE
from .base_repository import BaseRepository
from .item_store import IndexSpec, Item
from .query_pipeline import EntitySchema, PageResult, PaginationOptions, sort_items


class LeadActivityRepository(BaseRepository):
    schema = EntitySchema(
        entity=LEAD_ACTIVITIES_TABLE,
        searchable_fields=("remarks", "activityType"),
        default_sort_by="activityDate",
        default_sort_order="desc",
        equality_fields=("isActive", "leadId", "counselorId", "activityType"),
        indexes=(
            IndexSpec("leadId-index", ("leadId",)),
            IndexSpec("counselorId-index", ("counselorId",)),
        ),
    )

    def find_by_lead(
        self,
        lead_id: str,
        options: Optional[PaginationOptions] = None,
        filters: Optional[Dict[str, Any]] = None,
    ) -> PageResult:
        return self.find_all(
            {"isActive": True, **(filters or {})},
            options,
            partition={"leadId": lead_id},
            index_name="leadId-index",
        )

    def find_by_counselor(
        self, counselor_id: str, options: Optional[PaginationOptions] = None
    ) -> PageResult:
        return self.find_all(
            {"isActive": True},
            options,
            partition={"counselorId": counselor_id},
            index_name="counselorId-index",
        )

    def find_recent(self, limit: int = 10) -> List[Item]:
        activities = self.store.scan({"isActive": True})
        return sort_items(activities, "activityDate", "desc")[:limit]

    def get_stats_for_lead(self, lead_id: str) -> Dict[str, Any]:
        activities = self.query_index("leadId-index", {"leadId": lead_id}, {"isActive": True})
        by_type: Dict[str, Dict[str, Any]] = {}
        for activity in activities:
            entry = by_type.setdefault(
                activity.get("activityType", "other"), {"count": 0, "lastActivity": None}
            )
            entry["count"] += 1
            activity_date = activity.get("activityDate")
            if activity_date and (entry["lastActivity"] is None or activity_date > entry["lastActivity"]):
                entry["lastActivity"] = activity_date
        return {"total": len(activities), "byType": by_type}
