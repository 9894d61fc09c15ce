# backend/app/repositories/counselor_repository.py
"""Counselor Repository - counselor profiles, ratings and specialties."""

from typing import Any, Dict, List, Optional

from ..core.constants import COUNSELORS_TABLE
from .base_repository import BaseRepository
from .item_store import IndexSpec, Item
from .query_pipeline import EntitySchema, sort_items


class CounselorRepository(BaseRepository):
    schema = EntitySchema(
        entity=COUNSELORS_TABLE,
        searchable_fields=("fullName", "title", "bio", "specialties"),
        equality_fields=("isActive", "email"),
        array_fields=("specialties",),
        indexes=(IndexSpec("email-index", ("email",)),),
    )

    def email_taken(self, email: str, exclude_id: Optional[str] = None) -> bool:
        found = self.query_index("email-index", {"email": email.strip().lower()})
        return any(c["id"] != exclude_id for c in found)

    def find_active(self) -> List[Item]:
        return self.store.scan({"isActive": True})

    def find_by_specialty(self, specialty: str) -> List[Item]:
        needle = specialty.lower()
        return [
            counselor
            for counselor in self.find_active()
            if any(
                isinstance(s, str) and s.lower() == needle
                for s in counselor.get("specialties") or []
            )
        ]

    def find_top_rated(self, limit: int = 10) -> List[Item]:
        return sort_items(self.find_active(), "rating", "desc")[:limit]

    def find_most_experienced(self, limit: int = 10) -> List[Item]:
        return sort_items(self.find_active(), "yearsOfExperience", "desc")[:limit]

    def all_specialties(self) -> List[str]:
        specialties = set()
        for counselor in self.find_active():
            specialties.update(s for s in counselor.get("specialties") or [] if isinstance(s, str))
        return sorted(specialties)

    def get_stats(self) -> Dict[str, Any]:
        counselors = self.store.scan()
        active = [c for c in counselors if c.get("isActive")]
        ratings = [float(c["rating"]) for c in active if c.get("rating") is not None]
        return {
            "total": len(counselors),
            "active": len(active),
            "inactive": len(counselors) - len(active),
            "averageRating": round(sum(ratings) / len(ratings), 2) if ratings else 0,
        }
