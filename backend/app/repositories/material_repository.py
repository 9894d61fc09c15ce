# backend/app/repositories/material_repository.py
"""Material Repository - downloadable study material."""

from collections import Counter
from typing import Any, Dict, List, Optional

from ..core.constants import MATERIALS_TABLE
from .base_repository import BaseRepository
from .item_store import Item
from .query_pipeline import EntitySchema


class MaterialRepository(BaseRepository):
    schema = EntitySchema(
        entity=MATERIALS_TABLE,
        searchable_fields=("name", "description", "category"),
        equality_fields=("isActive", "isPublished", "category", "fileType", "uploadedBy"),
        array_fields=("tags",),
    )

    def increment_download(self, material_id: str) -> Optional[Item]:
        material = self.get_by_id(material_id)
        if material is None:
            return None
        return self.update(
            material_id, {"downloadCount": int(material.get("downloadCount") or 0) + 1}
        )

    def _active(self) -> List[Item]:
        return self.store.scan({"isActive": True})

    def all_categories(self) -> List[str]:
        return sorted({m["category"] for m in self._active() if m.get("category")})

    def all_tags(self) -> List[str]:
        tags = set()
        for material in self._active():
            tags.update(tag for tag in material.get("tags") or [] if isinstance(tag, str))
        return sorted(tags)

    def category_stats(self) -> List[Dict[str, Any]]:
        per_category: Dict[str, Dict[str, Any]] = {}
        for material in self._active():
            name = material.get("category") or "uncategorized"
            entry = per_category.setdefault(name, {"category": name, "count": 0, "downloads": 0})
            entry["count"] += 1
            entry["downloads"] += int(material.get("downloadCount") or 0)
        return sorted(per_category.values(), key=lambda entry: entry["count"], reverse=True)

    def get_stats(self) -> Dict[str, Any]:
        materials = self._active()
        published = sum(1 for m in materials if m.get("isPublished"))
        categories = Counter(m["category"] for m in materials if m.get("category"))
        return {
            "total": len(materials),
            "published": published,
            "unpublished": len(materials) - published,
            "totalDownloads": sum(int(m.get("downloadCount") or 0) for m in materials),
            "categories": [
                {"category": name, "count": count} for name, count in categories.most_common()
            ],
        }
