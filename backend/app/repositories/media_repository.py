# backend/app/repositories/media_repository.py
"""
Media Repositories.

Reels and videos share one shape and differ only by namespace, so both
repositories come from ``MediaRepository``.
"""

from collections import Counter
from typing import Any, Dict, List, Optional

from ..core.constants import REELS_TABLE, VIDEOS_TABLE
from .base_repository import BaseRepository
from .item_store import IndexSpec, Item
from .query_pipeline import EntitySchema, sort_items


def _media_schema(entity: str) -> EntitySchema:
    return EntitySchema(
        entity=entity,
        searchable_fields=("title", "description", "tags", "category"),
        equality_fields=("isActive", "isPublished", "category", "uploadedBy"),
        array_fields=("tags",),
        indexes=(IndexSpec("uploadedBy-index", ("uploadedBy",)),),
    )


class MediaRepository(BaseRepository):
    """Shared data access for published short/long-form media."""

    def _visible(self) -> List[Item]:
        return self.store.scan({"isActive": True, "isPublished": True})

    def adjust_counter(self, media_id: str, field: str, delta: int) -> Optional[Item]:
        """Add ``delta`` to a counter, clamping at zero."""
        item = self.get_by_id(media_id)
        if item is None:
            return None
        value = max(0, int(item.get(field) or 0) + delta)
        return self.update(media_id, {field: value})

    def find_by_category(self, category: str) -> List[Item]:
        return [m for m in self._visible() if m.get("category") == category]

    def find_by_tags(self, tags: List[str]) -> List[Item]:
        wanted = set(tags)
        return [m for m in self._visible() if wanted.intersection(m.get("tags") or [])]

    def find_by_uploader(self, user_id: str) -> List[Item]:
        return self.query_index("uploadedBy-index", {"uploadedBy": user_id}, {"isActive": True})

    def find_most_viewed(self, limit: int = 10) -> List[Item]:
        return sort_items(self._visible(), "viewCount", "desc")[:limit]

    def find_most_liked(self, limit: int = 10) -> List[Item]:
        return sort_items(self._visible(), "likeCount", "desc")[:limit]

    def find_recent(self, limit: int = 10) -> List[Item]:
        return sort_items(self._visible(), "publishedAt", "desc")[:limit]

    def all_categories(self) -> List[str]:
        return sorted({m["category"] for m in self._visible() if m.get("category")})

    def all_tags(self) -> List[str]:
        tags = set()
        for media in self._visible():
            tags.update(tag for tag in media.get("tags") or [] if isinstance(tag, str))
        return sorted(tags)

    def get_stats(self) -> Dict[str, Any]:
        items = self.store.scan({"isActive": True})
        published = sum(1 for m in items if m.get("isPublished"))
        total_views = sum(int(m.get("viewCount") or 0) for m in items)
        categories = Counter(m["category"] for m in items if m.get("category"))
        return {
            "total": len(items),
            "published": published,
            "unpublished": len(items) - published,
            "totalViews": total_views,
            "totalLikes": sum(int(m.get("likeCount") or 0) for m in items),
            "averageViews": round(total_views / len(items)) if items else 0,
            "categories": [
                {"category": name, "count": count} for name, count in categories.most_common()
            ],
        }


class ReelRepository(MediaRepository):
    schema = _media_schema(REELS_TABLE)


class VideoRepository(MediaRepository):
    schema = _media_schema(VIDEOS_TABLE)
