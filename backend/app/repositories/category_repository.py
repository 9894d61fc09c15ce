# backend/app/repositories/category_repository.py
"""Category Repository - blog/content categories addressed by slug."""

from typing import Any, Dict, Optional

from ..core.constants import CATEGORIES_TABLE
from .base_repository import BaseRepository
from .item_store import IndexSpec, Item
from .query_pipeline import EntitySchema


class CategoryRepository(BaseRepository):
    schema = EntitySchema(
        entity=CATEGORIES_TABLE,
        searchable_fields=("name", "description"),
        indexes=(IndexSpec("slug-index", ("slug",)),),
    )

    def find_by_slug(self, slug: str) -> Optional[Item]:
        found = self.query_index("slug-index", {"slug": slug})
        return found[0] if found else None

    def slug_exists(self, slug: str, exclude_id: Optional[str] = None) -> bool:
        return any(c["id"] != exclude_id for c in self.query_index("slug-index", {"slug": slug}))

    def get_stats(self) -> Dict[str, Any]:
        categories = self.store.scan()
        active = sum(1 for c in categories if c.get("isActive"))
        return {"total": len(categories), "active": active, "inactive": len(categories) - active}
