# backend/app/services/testimonial_service.py
"""
Testimonial Service.

Anyone may submit a testimonial; it stays hidden until an admin approves
it. Authors and admins may edit or remove their own entries.
"""

from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import ConflictException, NotFoundException, ValidationException
from ..principal import Caller
from ..repositories.factory import RepositoryFactory
from ..repositories.item_store import Item
from ..repositories.query_pipeline import PageResult, PaginationOptions
from ..repositories.testimonial_repository import TestimonialRepository
from .base import BaseService

TESTIMONIAL_FIELDS = (
    "name",
    "email",
    "city",
    "state",
    "country",
    "rating",
    "message",
    "designation",
    "company",
    "profileImage",
    "socialMedia",
    "displayOrder",
)


def _check_rating(rating: Any) -> int:
    try:
        value = int(rating)
    except (TypeError, ValueError):
        raise ValidationException("Rating must be a whole number", details={"rating": rating})
    if value < 1 or value > 5:
        raise ValidationException("Rating must be between 1 and 5", details={"rating": rating})
    return value


class TestimonialService(BaseService):
    def __init__(self, db: Session, repository: Optional[TestimonialRepository] = None):
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_testimonial_repository(db)

    def _get_or_404(self, testimonial_id: str) -> Item:
        testimonial = self.repository.get_by_id(testimonial_id)
        if testimonial is None:
            raise NotFoundException("Testimonial not found", details={"testimonial_id": testimonial_id})
        return testimonial

    @staticmethod
    def _clean(data: Mapping[str, Any]) -> Dict[str, Any]:
        cleaned = {k: data[k] for k in TESTIMONIAL_FIELDS if k in data and data[k] is not None}
        if "rating" in cleaned:
            cleaned["rating"] = _check_rating(cleaned["rating"])
        if "email" in cleaned:
            cleaned["email"] = str(cleaned["email"]).strip().lower()
        return cleaned

    @BaseService.measure_operation("create_testimonial")
    def create_testimonial(self, data: Mapping[str, Any], caller: Optional[Caller] = None) -> Item:
        fields = self._clean(data)
        user_id = caller.id if caller else None
        if user_id and self.repository.message_exists_for_user(user_id, fields.get("message", "")):
            raise ConflictException("You have already submitted this testimonial")
        fields.setdefault("displayOrder", 0)
        testimonial = self.repository.create(
            {**fields, "userId": user_id, "isApproved": False, "isFavorite": False}
        )
        self.log_operation("testimonial_created", testimonial_id=testimonial["id"])
        return testimonial

    def list_testimonials(
        self,
        filters: Optional[Mapping[str, Any]] = None,
        options: Optional[PaginationOptions] = None,
        search: Optional[str] = None,
    ) -> PageResult:
        return self.repository.find_all(filters, options, search)

    def list_approved(
        self,
        filters: Optional[Mapping[str, Any]] = None,
        options: Optional[PaginationOptions] = None,
        search: Optional[str] = None,
    ) -> PageResult:
        criteria = {**dict(filters or {}), "isActive": True, "isApproved": True}
        return self.repository.find_all(criteria, options, search)

    def get_favorites(self) -> List[Item]:
        return self.repository.find_favorites()

    def get_my_testimonials(self, caller: Optional[Caller]) -> List[Item]:
        return self.repository.find_by_user(self.require_caller(caller).id)

    def get_testimonial(self, testimonial_id: str) -> Item:
        return self._get_or_404(testimonial_id)

    @BaseService.measure_operation("update_testimonial")
    def update_testimonial(
        self, testimonial_id: str, data: Mapping[str, Any], caller: Optional[Caller]
    ) -> Item:
        testimonial = self._get_or_404(testimonial_id)
        self.ensure_owner_or_admin(caller, testimonial.get("userId"), "testimonial")
        return self.repository.update(testimonial_id, self._clean(data)) or testimonial

    @BaseService.measure_operation("delete_testimonial")
    def delete_testimonial(self, testimonial_id: str, caller: Optional[Caller]) -> None:
        testimonial = self._get_or_404(testimonial_id)
        self.ensure_owner_or_admin(caller, testimonial.get("userId"), "testimonial")
        self.repository.delete(testimonial_id)
        self.log_operation("testimonial_deleted", testimonial_id=testimonial_id)

    def deactivate_testimonial(self, testimonial_id: str, caller: Optional[Caller]) -> Item:
        testimonial = self._get_or_404(testimonial_id)
        self.ensure_owner_or_admin(caller, testimonial.get("userId"), "testimonial")
        return self.repository.soft_delete(testimonial_id)

    def toggle_favorite(self, testimonial_id: str) -> Item:
        testimonial = self._get_or_404(testimonial_id)
        return self.repository.update(
            testimonial_id, {"isFavorite": not bool(testimonial.get("isFavorite"))}
        )

    def approve(self, testimonial_id: str) -> Item:
        self._get_or_404(testimonial_id)
        return self.repository.update(testimonial_id, {"isApproved": True})

    def reject(self, testimonial_id: str) -> Item:
        self._get_or_404(testimonial_id)
        return self.repository.update(testimonial_id, {"isApproved": False, "isFavorite": False})

    def get_stats(self) -> Dict[str, Any]:
        return self.repository.get_stats()
