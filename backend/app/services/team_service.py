# backend/app/services/team_service.py
"""Team Service."""

from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import NotFoundException
from ..core.timezone_utils import utc_now_iso
from ..repositories.factory import RepositoryFactory
from ..repositories.item_store import Item
from ..repositories.query_pipeline import PageResult, PaginationOptions
from ..repositories.team_repository import TeamRepository
from .base import BaseService

TEAM_FIELDS = ("name", "designation", "description", "image", "displayOrder")


class TeamService(BaseService):
    def __init__(self, db: Session, repository: Optional[TeamRepository] = None):
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_team_repository(db)

    def _get_or_404(self, member_id: str) -> Item:
        member = self.repository.get_by_id(member_id)
        if member is None or not member.get("isActive"):
            raise NotFoundException("Team member not found", details={"member_id": member_id})
        return member

    @BaseService.measure_operation("create_member")
    def create_member(self, data: Mapping[str, Any]) -> Item:
        fields = {k: data[k] for k in TEAM_FIELDS if data.get(k) is not None}
        fields.setdefault("displayOrder", 0)
        published = bool(data.get("isPublished"))
        return self.repository.create(
            {**fields, "isPublished": published, "publishedAt": utc_now_iso() if published else None}
        )

    def list_members(
        self,
        filters: Optional[Mapping[str, Any]] = None,
        options: Optional[PaginationOptions] = None,
        search: Optional[str] = None,
    ) -> PageResult:
        return self.repository.find_all(filters, options, search)

    def get_published(self) -> List[Item]:
        return self.repository.find_published()

    def get_member(self, member_id: str) -> Item:
        return self._get_or_404(member_id)

    def update_member(self, member_id: str, data: Mapping[str, Any]) -> Item:
        member = self._get_or_404(member_id)
        changes = {k: data[k] for k in TEAM_FIELDS if data.get(k) is not None}
        return self.repository.update(member_id, changes) if changes else member

    def delete_member(self, member_id: str) -> None:
        self._get_or_404(member_id)
        self.repository.soft_delete(member_id)

    def publish(self, member_id: str) -> Item:
        self._get_or_404(member_id)
        return self.repository.update(member_id, {"isPublished": True, "publishedAt": utc_now_iso()})

    def unpublish(self, member_id: str) -> Item:
        self._get_or_404(member_id)
        return self.repository.update(member_id, {"isPublished": False})

    def get_stats(self) -> Dict[str, Any]:
        return self.repository.get_stats()
