# backend/app/repositories/team_repository.py
"""Team Repository - team member cards shown on the public site."""

from typing import Any, Dict, List

from ..core.constants import TEAM_TABLE
from .base_repository import BaseRepository
from .item_store import Item
from .query_pipeline import EntitySchema, sort_items


def publication_stats(items: List[Item]) -> Dict[str, Any]:
    """Counts shared by entities with both a publish flag and a soft-delete flag."""
    published = sum(1 for item in items if item.get("isPublished"))
    active = sum(1 for item in items if item.get("isActive"))
    return {
        "total": len(items),
        "published": published,
        "unpublished": len(items) - published,
        "active": active,
        "inactive": len(items) - active,
    }


class TeamRepository(BaseRepository):
    schema = EntitySchema(
        entity=TEAM_TABLE,
        searchable_fields=("name", "designation", "description"),
        default_sort_by="displayOrder",
        default_sort_order="asc",
        equality_fields=("isActive", "isPublished"),
    )

    def find_published(self) -> List[Item]:
        members = self.store.scan({"isActive": True, "isPublished": True})
        return sort_items(members, "displayOrder", "asc")

    def get_stats(self) -> Dict[str, Any]:
        return publication_stats(self.store.scan())
