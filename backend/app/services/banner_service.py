# backend/app/services/banner_service.py
"""
Banner Service.

The site shows a single hero banner. Publishing one unpublishes the rest in
two separate passes, so two concurrent publishes can leave more than one
published; ``repair`` restores the single-banner state.
"""

from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import NotFoundException
from ..core.timezone_utils import utc_now_iso
from ..principal import Caller
from ..repositories.banner_repository import BannerRepository
from ..repositories.factory import RepositoryFactory
from ..repositories.item_store import Item
from ..repositories.query_pipeline import PageResult, PaginationOptions
from .base import BaseService

BANNER_FIELDS = ("title", "description", "imageUrl", "link", "altText")


class BannerService(BaseService):
    def __init__(self, db: Session, repository: Optional[BannerRepository] = None):
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_banner_repository(db)

    def _get_or_404(self, banner_id: str) -> Item:
        banner = self.repository.get_by_id(banner_id)
        if banner is None or not banner.get("isActive"):
            raise NotFoundException("Banner not found", details={"banner_id": banner_id})
        return banner

    @BaseService.measure_operation("create_banner")
    def create_banner(self, data: Mapping[str, Any], caller: Optional[Caller] = None) -> Item:
        fields = {k: data[k] for k in BANNER_FIELDS if data.get(k) is not None}
        banner = self.repository.create(
            {
                **fields,
                "createdBy": caller.id if caller else None,
                "isPublished": False,
                "publishedAt": None,
            }
        )
        if data.get("isPublished"):
            banner = self.publish_exclusively(banner["id"])
        return banner

    def list_banners(
        self,
        filters: Optional[Mapping[str, Any]] = None,
        options: Optional[PaginationOptions] = None,
        search: Optional[str] = None,
    ) -> PageResult:
        return self.repository.find_all(filters, options, search)

    def get_banner(self, banner_id: str) -> Item:
        return self._get_or_404(banner_id)

    def update_banner(self, banner_id: str, data: Mapping[str, Any]) -> Item:
        banner = self._get_or_404(banner_id)
        changes = {k: data[k] for k in BANNER_FIELDS if data.get(k) is not None}
        return self.repository.update(banner_id, changes) if changes else banner

    def delete_banner(self, banner_id: str) -> None:
        self._get_or_404(banner_id)
        self.repository.soft_delete(banner_id)
        self.log_operation("banner_deleted", banner_id=banner_id)

    @BaseService.measure_operation("publish_banner")
    def publish_exclusively(self, banner_id: str) -> Item:
        self._get_or_404(banner_id)
        others = [b["id"] for b in self.repository.find_published() if b["id"] != banner_id]
        if others:
            self.repository.bulk_update(others, {"isPublished": False})
            self.logger.info(f"Unpublished {len(others)} banner(s) before publishing {banner_id}")
        return self.repository.update(banner_id, {"isPublished": True, "publishedAt": utc_now_iso()})

    def unpublish(self, banner_id: str) -> Item:
        self._get_or_404(banner_id)
        return self.repository.update(banner_id, {"isPublished": False})

    def get_published(self) -> List[Item]:
        return self.repository.find_published()

    @BaseService.measure_operation("repair_banners")
    def repair(self) -> Optional[Item]:
        """Keep the most recently published banner and unpublish the others."""
        published = self.repository.find_published()
        if len(published) > 1:
            extra = [b["id"] for b in published[1:]]
            self.repository.bulk_update(extra, {"isPublished": False})
            self.logger.warning(f"Repaired banners: unpublished {len(extra)} extra published banner(s)")
        return published[0] if published else None

    def get_stats(self) -> Dict[str, Any]:
        return self.repository.get_stats()
