# backend/app/repositories/banner_repository.py
"""Banner Repository - hero banners; at most one is meant to be published."""

from typing import Any, Dict, List

from ..core.constants import BANNERS_TABLE
from .base_repository import BaseRepository
from .item_store import Item
from .query_pipeline import EntitySchema, sort_items
from .team_repository import publication_stats


class BannerRepository(BaseRepository):
    schema = EntitySchema(
        entity=BANNERS_TABLE,
        searchable_fields=("title", "description", "altText"),
        equality_fields=("isActive", "isPublished", "createdBy"),
    )

    def find_published(self) -> List[Item]:
        """Published active banners, most recently published first."""
        banners = self.store.scan({"isActive": True, "isPublished": True})
        return sort_items(banners, "publishedAt", "desc")

    def get_stats(self) -> Dict[str, Any]:
        return publication_stats(self.store.scan())
