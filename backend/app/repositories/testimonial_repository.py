# backend/app/repositories/testimonial_repository.py
"""Testimonial Repository."""

from typing import Any, Dict, List

from ..core.constants import TESTIMONIALS_TABLE
from .base_repository import BaseRepository
from .item_store import IndexSpec, Item
from .query_pipeline import EntitySchema, sort_items


class TestimonialRepository(BaseRepository):
    schema = EntitySchema(
        entity=TESTIMONIALS_TABLE,
        searchable_fields=("name", "message", "designation", "company", "city"),
        equality_fields=("isActive", "isApproved", "isFavorite", "rating", "userId"),
        substring_fields=("city", "state"),
        indexes=(IndexSpec("userId-index", ("userId",)),),
    )

    def find_by_user(self, user_id: str) -> List[Item]:
        return self.query_index("userId-index", {"userId": user_id})

    def message_exists_for_user(self, user_id: str, message: str) -> bool:
        normalized = message.strip()
        return any(
            (t.get("message") or "").strip() == normalized
            for t in self.query_index("userId-index", {"userId": user_id}, {"isActive": True})
        )

    def find_favorites(self) -> List[Item]:
        favorites = self.store.scan({"isActive": True, "isApproved": True, "isFavorite": True})
        return sort_items(favorites, "displayOrder", "asc")

    def get_stats(self) -> Dict[str, Any]:
        testimonials = self.store.scan({"isActive": True})
        approved = [t for t in testimonials if t.get("isApproved")]
        ratings = [int(t["rating"]) for t in approved if t.get("rating") is not None]
        distribution = [
            {"rating": rating, "count": ratings.count(rating)} for rating in range(5, 0, -1)
        ]
        return {
            "total": len(testimonials),
            "approved": len(approved),
            "pending": len(testimonials) - len(approved),
            "favorites": sum(1 for t in approved if t.get("isFavorite")),
            "averageRating": round(sum(ratings) / len(ratings), 1) if ratings else 0,
            "ratingDistribution": distribution,
        }
