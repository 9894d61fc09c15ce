# backend/app/services/lead_activity_service.py
"""
Lead Activity Service.

Activities belong to the counselor who logged them; only that counselor
or an admin may change or remove one. Listings carry the counselor's
``{id, name, email}``, fetched with one batch read per page.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional

from sqlalchemy.orm import Session

from ..core.enums import ActivityType
from ..core.exceptions import NotFoundException, ValidationException
from ..core.timezone_utils import utc_now_iso
from ..principal import Caller
from ..repositories.factory import RepositoryFactory
from ..repositories.item_store import Item
from ..repositories.lead_activity_repository import LeadActivityRepository
from ..repositories.lead_repository import LeadRepository
from ..repositories.query_pipeline import PageResult, PaginationOptions
from ..repositories.user_repository import UserRepository
from .base import BaseService
from .user_service import user_summary

ACTIVITY_FIELDS = ("activityType", "remarks", "activityDate", "nextFollowUpDate")


class LeadActivityService(BaseService):
    def __init__(
        self,
        db: Session,
        repository: Optional[LeadActivityRepository] = None,
        lead_repository: Optional[LeadRepository] = None,
        user_repository: Optional[UserRepository] = None,
    ):
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_lead_activity_repository(db)
        self.lead_repository = lead_repository or RepositoryFactory.create_lead_repository(db)
        self.user_repository = user_repository or RepositoryFactory.create_user_repository(db)

    def _populate(self, activities: Iterable[Item]) -> List[Item]:
        activities = list(activities)
        users = self.user_repository.get_many(a.get("counselorId") for a in activities)
        return [
            {**a, "counselor": user_summary(users.get(a.get("counselorId")), a.get("counselorId"))}
            for a in activities
        ]

    def _populate_page(self, page: PageResult) -> PageResult:
        page.items = self._populate(page.items)
        return page

    def _get_or_404(self, activity_id: str) -> Item:
        activity = self.repository.get_by_id(activity_id)
        if activity is None or not activity.get("isActive"):
            raise NotFoundException("Lead activity not found", details={"activity_id": activity_id})
        return activity

    @staticmethod
    def _clean(data: Mapping[str, Any]) -> Dict[str, Any]:
        cleaned = {k: data[k] for k in ACTIVITY_FIELDS if k in data and data[k] is not None}
        if "activityType" in cleaned:
            try:
                cleaned["activityType"] = ActivityType(cleaned["activityType"]).value
            except ValueError:
                raise ValidationException(
                    "Invalid activity type", details={"activityType": cleaned["activityType"]}
                )
        return cleaned

    @BaseService.measure_operation("create_activity")
    def create_activity(self, data: Mapping[str, Any], caller: Optional[Caller]) -> Item:
        current = self.require_caller(caller)
        lead_id = data.get("leadId")
        if not lead_id or self.lead_repository.get_by_id(lead_id) is None:
            raise NotFoundException("Lead not found", details={"lead_id": lead_id})
        fields = self._clean(data)
        fields.setdefault("activityType", ActivityType.OTHER.value)
        fields.setdefault("activityDate", utc_now_iso())
        activity = self.repository.create({**fields, "leadId": lead_id, "counselorId": current.id})
        self.log_operation("lead_activity_created", activity_id=activity["id"], lead_id=lead_id)
        return self._populate([activity])[0]

    def get_activity(self, activity_id: str) -> Item:
        return self._populate([self._get_or_404(activity_id)])[0]

    def list_by_lead(
        self,
        lead_id: str,
        options: Optional[PaginationOptions] = None,
        filters: Optional[Mapping[str, Any]] = None,
    ) -> PageResult:
        return self._populate_page(self.repository.find_by_lead(lead_id, options, dict(filters or {})))

    def list_by_counselor(
        self, counselor_id: str, options: Optional[PaginationOptions] = None
    ) -> PageResult:
        return self._populate_page(self.repository.find_by_counselor(counselor_id, options))

    @BaseService.measure_operation("update_activity")
    def update_activity(self, activity_id: str, data: Mapping[str, Any], caller: Optional[Caller]) -> Item:
        activity = self._get_or_404(activity_id)
        self.ensure_owner_or_admin(caller, activity.get("counselorId"), "activity")
        updated = self.repository.update(activity_id, self._clean(data))
        return self._populate([updated])[0]

    @BaseService.measure_operation("delete_activity")
    def delete_activity(self, activity_id: str, caller: Optional[Caller]) -> None:
        activity = self._get_or_404(activity_id)
        self.ensure_owner_or_admin(caller, activity.get("counselorId"), "activity")
        self.repository.soft_delete(activity_id)

    def get_lead_stats(self, lead_id: str) -> Dict[str, Any]:
        return self.repository.get_stats_for_lead(lead_id)

    def get_recent(self, limit: int = 10) -> List[Item]:
        return self._populate(self.repository.find_recent(limit))
