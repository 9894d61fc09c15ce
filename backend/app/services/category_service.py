# backend/app/services/category_service.py
"""Category Service."""

from typing import Any, Dict, Mapping, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import DuplicateResourceException, NotFoundException, ValidationException
from ..principal import Caller
from ..repositories.category_repository import CategoryRepository
from ..repositories.factory import RepositoryFactory
from ..repositories.item_store import Item
from ..repositories.query_pipeline import PageResult, PaginationOptions
from ..utils.text import slugify
from .base import BaseService


class CategoryService(BaseService):
    def __init__(self, db: Session, repository: Optional[CategoryRepository] = None):
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_category_repository(db)

    def _get_or_404(self, category_id: str) -> Item:
        category = self.repository.get_by_id(category_id)
        if category is None or not category.get("isActive"):
            raise NotFoundException("Category not found", details={"category_id": category_id})
        return category

    def _unique_slug(self, name: str, exclude_id: Optional[str] = None) -> str:
        slug = slugify(name)
        if not slug:
            raise ValidationException("Category name must contain letters or digits")
        if self.repository.slug_exists(slug, exclude_id=exclude_id):
            raise DuplicateResourceException("Category", "slug", slug)
        return slug

    @BaseService.measure_operation("create_category")
    def create_category(self, data: Mapping[str, Any], caller: Optional[Caller] = None) -> Item:
        name = (data.get("name") or "").strip()
        return self.repository.create(
            {
                "name": name,
                "slug": self._unique_slug(name),
                "description": data.get("description"),
                "createdBy": caller.id if caller else None,
            }
        )

    def list_categories(
        self,
        filters: Optional[Mapping[str, Any]] = None,
        options: Optional[PaginationOptions] = None,
        search: Optional[str] = None,
    ) -> PageResult:
        return self.repository.find_all({"isActive": True, **dict(filters or {})}, options, search)

    def get_category(self, category_id: str) -> Item:
        return self._get_or_404(category_id)

    def get_by_slug(self, slug: str) -> Item:
        category = self.repository.find_by_slug(slug)
        if category is None or not category.get("isActive"):
            raise NotFoundException("Category not found", details={"slug": slug})
        return category

    @BaseService.measure_operation("update_category")
    def update_category(self, category_id: str, data: Mapping[str, Any]) -> Item:
        category = self._get_or_404(category_id)
        changes: Dict[str, Any] = {}
        if data.get("description") is not None:
            changes["description"] = data["description"]
        name = (data.get("name") or "").strip()
        if name and name != category.get("name"):
            changes["name"] = name
            changes["slug"] = self._unique_slug(name, exclude_id=category_id)
        return self.repository.update(category_id, changes) if changes else category

    def delete_category(self, category_id: str) -> None:
        self._get_or_404(category_id)
        self.repository.soft_delete(category_id)

    def get_stats(self) -> Dict[str, Any]:
        return self.repository.get_stats()
