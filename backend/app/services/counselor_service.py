# backend/app/services/counselor_service.py
"""Counselor Service - profiles, ratings and specialty lookups."""

import math
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.orm import Session

from ..core.constants import MAX_RATING, MIN_RATING
from ..core.exceptions import DuplicateResourceException, NotFoundException, ValidationException
from ..repositories.counselor_repository import CounselorRepository
from ..repositories.factory import RepositoryFactory
from ..repositories.item_store import Item
from ..repositories.query_pipeline import PageResult, PaginationOptions
from .base import BaseService

COUNSELOR_FIELDS = (
    "fullName",
    "email",
    "title",
    "yearsOfExperience",
    "bio",
    "avatarUrl",
    "specialties",
    "rating",
)


def _check_rating(rating: Any) -> float:
    try:
        value = float(rating)
    except (TypeError, ValueError):
        raise ValidationException("Rating must be a number", details={"rating": rating})
    if not math.isfinite(value) or value < MIN_RATING or value > MAX_RATING:
        raise ValidationException(
            f"Rating must be between {MIN_RATING} and {MAX_RATING}", details={"rating": rating}
        )
    return value


class CounselorService(BaseService):
    def __init__(self, db: Session, repository: Optional[CounselorRepository] = None):
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_counselor_repository(db)

    def _get_or_404(self, counselor_id: str) -> Item:
        counselor = self.repository.get_by_id(counselor_id)
        if counselor is None:
            raise NotFoundException("Counselor not found", details={"counselor_id": counselor_id})
        return counselor

    @staticmethod
    def _clean(data: Mapping[str, Any]) -> Dict[str, Any]:
        cleaned = {k: data[k] for k in COUNSELOR_FIELDS if k in data and data[k] is not None}
        if "email" in cleaned:
            cleaned["email"] = str(cleaned["email"]).strip().lower()
        if "rating" in cleaned:
            cleaned["rating"] = _check_rating(cleaned["rating"])
        return cleaned

    @BaseService.measure_operation("create_counselor")
    def create_counselor(self, data: Mapping[str, Any]) -> Item:
        fields = self._clean(data)
        if fields.get("email") and self.repository.email_taken(fields["email"]):
            raise DuplicateResourceException("Counselor", "email", fields["email"])
        fields.setdefault("specialties", [])
        fields.setdefault("rating", 0)
        counselor = self.repository.create(fields)
        self.log_operation("counselor_created", counselor_id=counselor["id"])
        return counselor

    def list_counselors(
        self,
        filters: Optional[Mapping[str, Any]] = None,
        options: Optional[PaginationOptions] = None,
        search: Optional[str] = None,
    ) -> PageResult:
        return self.repository.find_all(filters, options, search)

    def get_counselor(self, counselor_id: str) -> Item:
        return self._get_or_404(counselor_id)

    @BaseService.measure_operation("update_counselor")
    def update_counselor(self, counselor_id: str, data: Mapping[str, Any]) -> Item:
        counselor = self._get_or_404(counselor_id)
        changes = self._clean(data)
        new_email = changes.get("email")
        if new_email and new_email != counselor.get("email"):
            if self.repository.email_taken(new_email, exclude_id=counselor_id):
                raise DuplicateResourceException("Counselor", "email", new_email)
        return self.repository.update(counselor_id, changes) or counselor

    def delete_counselor(self, counselor_id: str) -> None:
        self._get_or_404(counselor_id)
        self.repository.soft_delete(counselor_id)

    def update_rating(self, counselor_id: str, rating: Any) -> Item:
        self._get_or_404(counselor_id)
        return self.repository.update(counselor_id, {"rating": _check_rating(rating)})

    def get_by_specialty(self, specialty: str) -> List[Item]:
        return self.repository.find_by_specialty(specialty)

    def get_top_rated(self, limit: int = 10) -> List[Item]:
        return self.repository.find_top_rated(limit)

    def get_most_experienced(self, limit: int = 10) -> List[Item]:
        return self.repository.find_most_experienced(limit)

    def get_all_specialties(self) -> List[str]:
        return self.repository.all_specialties()

    def get_stats(self) -> Dict[str, Any]:
        return self.repository.get_stats()
