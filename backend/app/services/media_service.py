# backend/app/services/media_service.py
"""
Media Service for reels and videos.

Both collections share one shape, so one service class is instantiated
per namespace. Counters are read-modify-write and never drop below zero.
"""

from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import NotFoundException
from ..core.timezone_utils import utc_now_iso
from ..principal import Caller
from ..repositories.factory import RepositoryFactory
from ..repositories.item_store import Item
from ..repositories.media_repository import MediaRepository
from ..repositories.query_pipeline import PageResult, PaginationOptions
from .base import BaseService
from .storage_service import StorageService

MEDIA_FIELDS = (
    "title",
    "description",
    "videoUrl",
    "thumbnailUrl",
    "duration",
    "fileSize",
    "tags",
    "category",
    "displayOrder",
)


class MediaService(BaseService):
    """Shared reel/video behaviour; ``label`` names the resource in messages."""

    label = "Media"

    def __init__(
        self,
        db: Session,
        repository: MediaRepository,
        storage_service: Optional[StorageService] = None,
    ):
        super().__init__(db)
        self.repository = repository
        self.storage_service = storage_service or StorageService(db)

    def _get_or_404(self, media_id: str) -> Item:
        media = self.repository.get_by_id(media_id)
        if media is None or not media.get("isActive"):
            raise NotFoundException(f"{self.label} not found", details={"id": media_id})
        return media

    @BaseService.measure_operation("create_media")
    def create_media(self, data: Mapping[str, Any], caller: Optional[Caller] = None) -> Item:
        fields = {k: data[k] for k in MEDIA_FIELDS if data.get(k) is not None}
        fields.setdefault("tags", [])
        fields.setdefault("displayOrder", 0)
        published = bool(data.get("isPublished"))
        media = self.repository.create(
            {
                **fields,
                "uploadedBy": caller.id if caller else None,
                "viewCount": 0,
                "likeCount": 0,
                "isPublished": published,
                "publishedAt": utc_now_iso() if published else None,
            }
        )
        self.log_operation("media_created", kind=self.label, media_id=media["id"])
        return media

    def list_media(
        self,
        filters: Optional[Mapping[str, Any]] = None,
        options: Optional[PaginationOptions] = None,
        search: Optional[str] = None,
    ) -> PageResult:
        return self.repository.find_all({"isActive": True, **dict(filters or {})}, options, search)

    def list_published(
        self,
        filters: Optional[Mapping[str, Any]] = None,
        options: Optional[PaginationOptions] = None,
        search: Optional[str] = None,
    ) -> PageResult:
        return self.list_media({**dict(filters or {}), "isPublished": True}, options, search)

    def get_media(self, media_id: str) -> Item:
        return self._get_or_404(media_id)

    def update_media(self, media_id: str, data: Mapping[str, Any]) -> Item:
        media = self._get_or_404(media_id)
        changes = {k: data[k] for k in MEDIA_FIELDS if data.get(k) is not None}
        return self.repository.update(media_id, changes) if changes else media

    @BaseService.measure_operation("delete_media")
    def delete_media(self, media_id: str) -> None:
        """Soft delete, then best-effort removal of the stored files."""
        media = self._get_or_404(media_id)
        self.repository.soft_delete(media_id)
        for url in (media.get("videoUrl"), media.get("thumbnailUrl")):
            if url:
                self.storage_service.delete_by_url(url)

    def publish(self, media_id: str) -> Item:
        self._get_or_404(media_id)
        return self.repository.update(media_id, {"isPublished": True, "publishedAt": utc_now_iso()})

    def unpublish(self, media_id: str) -> Item:
        self._get_or_404(media_id)
        return self.repository.update(media_id, {"isPublished": False})

    def increment_view(self, media_id: str) -> Item:
        self._get_or_404(media_id)
        return self.repository.adjust_counter(media_id, "viewCount", 1)

    def like(self, media_id: str) -> Item:
        self._get_or_404(media_id)
        return self.repository.adjust_counter(media_id, "likeCount", 1)

    def unlike(self, media_id: str) -> Item:
        self._get_or_404(media_id)
        return self.repository.adjust_counter(media_id, "likeCount", -1)

    def get_by_category(self, category: str) -> List[Item]:
        return self.repository.find_by_category(category)

    def get_by_tags(self, tags: List[str]) -> List[Item]:
        return self.repository.find_by_tags(tags)

    def get_by_uploader(self, user_id: str) -> List[Item]:
        return self.repository.find_by_uploader(user_id)

    def get_most_viewed(self, limit: int = 10) -> List[Item]:
        return self.repository.find_most_viewed(limit)

    def get_most_liked(self, limit: int = 10) -> List[Item]:
        return self.repository.find_most_liked(limit)

    def get_recent(self, limit: int = 10) -> List[Item]:
        return self.repository.find_recent(limit)

    def get_categories(self) -> List[str]:
        return self.repository.all_categories()

    def get_tags(self) -> List[str]:
        return self.repository.all_tags()

    def get_stats(self) -> Dict[str, Any]:
        return self.repository.get_stats()


class ReelService(MediaService):
    label = "Reel"

    def __init__(self, db: Session, storage_service: Optional[StorageService] = None):
        super().__init__(db, RepositoryFactory.create_reel_repository(db), storage_service)


class VideoService(MediaService):
    label = "Video"

    def __init__(self, db: Session, storage_service: Optional[StorageService] = None):
        super().__init__(db, RepositoryFactory.create_video_repository(db), storage_service)
