# backend/app/repositories/blog_repository.py
"""
Blog Repository.

Handles slug lookups, view counters and the aggregate figures used by the
admin dashboard.
"""

from typing import Any, Dict, List, Optional

from ..core.constants import BLOGS_TABLE
from ..core.enums import BlogStatus
from .base_repository import BaseRepository
from .item_store import IndexSpec, Item
from .query_pipeline import EntitySchema, sort_items


class BlogRepository(BaseRepository):
    schema = EntitySchema(
        entity=BLOGS_TABLE,
        searchable_fields=("title", "content", "excerpt", "tags"),
        equality_fields=("isActive", "status", "authorId", "category"),
        array_fields=("tags",),
        indexes=(
            IndexSpec("slug-index", ("slug",)),
            IndexSpec("authorId-index", ("authorId",)),
            IndexSpec("status-index", ("status",)),
        ),
    )

    def find_by_slug(self, slug: str) -> Optional[Item]:
        found = self.query_index("slug-index", {"slug": slug})
        return found[0] if found else None

    def slug_exists(self, slug: str, exclude_id: Optional[str] = None) -> bool:
        return any(blog["id"] != exclude_id for blog in self.query_index("slug-index", {"slug": slug}))

    def increment_view(self, blog_id: str) -> Optional[Item]:
        # Read-modify-write; concurrent readers may lose an increment
        blog = self.get_by_id(blog_id)
        if blog is None:
            return None
        return self.update(blog_id, {"viewCount": int(blog.get("viewCount") or 0) + 1})

    def _published(self) -> List[Item]:
        return self.query_index(
            "status-index", {"status": BlogStatus.PUBLISHED.value}, {"isActive": True}
        )

    def find_most_viewed(self, limit: int = 10) -> List[Item]:
        return sort_items(self._published(), "viewCount", "desc")[:limit]

    def find_recent(self, limit: int = 10) -> List[Item]:
        return sort_items(self._published(), "publishedAt", "desc")[:limit]

    def all_tags(self) -> List[str]:
        tags = set()
        for blog in self._published():
            tags.update(tag for tag in blog.get("tags") or [] if isinstance(tag, str))
        return sorted(tags)

    @staticmethod
    def _summarize(blogs: List[Item]) -> Dict[str, Any]:
        total_views = sum(int(blog.get("viewCount") or 0) for blog in blogs)
        return {
            "total": len(blogs),
            "published": sum(1 for b in blogs if b.get("status") == BlogStatus.PUBLISHED.value),
            "draft": sum(1 for b in blogs if b.get("status") == BlogStatus.DRAFT.value),
            "archived": sum(1 for b in blogs if b.get("status") == BlogStatus.ARCHIVED.value),
            "totalViews": total_views,
            "averageViews": round(total_views / len(blogs)) if blogs else 0,
        }

    def get_stats(self) -> Dict[str, Any]:
        return self._summarize(self.store.scan({"isActive": True}))

    def get_author_stats(self, author_id: str) -> Dict[str, Any]:
        return self._summarize(
            self.query_index("authorId-index", {"authorId": author_id}, {"isActive": True})
        )
