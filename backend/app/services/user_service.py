# backend/app/services/user_service.py
"""
User Service.

Users back authentication lookups and the author/counselor summaries
embedded in content listings. Credential handling lives outside this API.
"""

from typing import Any, Dict, Mapping, Optional

from sqlalchemy.orm import Session

from ..core.enums import RoleName
from ..core.exceptions import DuplicateResourceException, NotFoundException, ValidationException
from ..repositories.factory import RepositoryFactory
from ..repositories.item_store import Item
from ..repositories.query_pipeline import PageResult, PaginationOptions
from ..repositories.user_repository import UserRepository
from .base import BaseService

USER_FIELDS = ("firstName", "lastName", "email", "phoneNumber", "role", "profilePicture")


def user_summary(user: Optional[Mapping[str, Any]], user_id: Optional[str]) -> Dict[str, Any]:
    """``{id, name, email}`` with 'Unknown'/'N/A' fallbacks for missing users."""
    if user is None:
        return {"id": user_id, "name": "Unknown", "email": "N/A"}
    name = " ".join(p for p in (user.get("firstName"), user.get("lastName")) if p).strip()
    return {
        "id": user.get("id", user_id),
        "name": name or "Unknown",
        "email": user.get("email") or "N/A",
    }


class UserService(BaseService):
    def __init__(self, db: Session, repository: Optional[UserRepository] = None):
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_user_repository(db)

    def _get_or_404(self, user_id: str) -> Item:
        user = self.repository.get_by_id(user_id)
        if user is None:
            raise NotFoundException("User not found", details={"user_id": user_id})
        return user

    @staticmethod
    def _clean(data: Mapping[str, Any]) -> Dict[str, Any]:
        cleaned = {k: data[k] for k in USER_FIELDS if k in data and data[k] is not None}
        if "email" in cleaned:
            cleaned["email"] = str(cleaned["email"]).strip().lower()
        if "role" in cleaned:
            try:
                cleaned["role"] = RoleName(str(cleaned["role"]).upper()).value
            except ValueError:
                raise ValidationException("Invalid role", details={"role": cleaned["role"]})
        return cleaned

    @BaseService.measure_operation("create_user")
    def create_user(self, data: Mapping[str, Any]) -> Item:
        fields = self._clean(data)
        if not fields.get("email"):
            raise ValidationException("Email is required")
        if self.repository.email_taken(fields["email"]):
            raise DuplicateResourceException("User", "email", fields["email"])
        fields.setdefault("role", RoleName.USER.value)
        user = self.repository.create(fields)
        self.log_operation("user_created", user_id=user["id"], role=user["role"])
        return user

    def get_user(self, user_id: str) -> Item:
        return self._get_or_404(user_id)

    def list_users(
        self,
        filters: Optional[Mapping[str, Any]] = None,
        options: Optional[PaginationOptions] = None,
        search: Optional[str] = None,
    ) -> PageResult:
        return self.repository.find_all(filters, options, search)

    @BaseService.measure_operation("update_user")
    def update_user(self, user_id: str, data: Mapping[str, Any]) -> Item:
        user = self._get_or_404(user_id)
        changes = self._clean(data)
        new_email = changes.get("email")
        if new_email and new_email != user.get("email"):
            if self.repository.email_taken(new_email, exclude_id=user_id):
                raise DuplicateResourceException("User", "email", new_email)
        return self.repository.update(user_id, changes) or user

    def set_active_status(self, user_id: str, is_active: bool) -> Item:
        self._get_or_404(user_id)
        return self.repository.update(user_id, {"isActive": bool(is_active)})

    def get_stats(self) -> Dict[str, Any]:
        return self.repository.get_stats()
