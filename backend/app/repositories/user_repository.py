# backend/app/repositories/user_repository.py
"""
User Repository.

Users back authentication lookups and the author/counselor population
performed by content services.
"""

from typing import Any, Dict, Optional

from ..core.constants import USERS_TABLE
from .base_repository import BaseRepository
from .item_store import IndexSpec
from .query_pipeline import EntitySchema


class UserRepository(BaseRepository):
    schema = EntitySchema(
        entity=USERS_TABLE,
        searchable_fields=("firstName", "lastName", "email"),
        equality_fields=("isActive", "role"),
        indexes=(IndexSpec("email-index", ("email",)),),
    )

    def email_taken(self, email: str, exclude_id: Optional[str] = None) -> bool:
        found = self.query_index("email-index", {"email": email.strip().lower()})
        return any(user["id"] != exclude_id for user in found)

    def get_stats(self) -> Dict[str, Any]:
        users = self.store.scan()
        active = sum(1 for user in users if user.get("isActive"))
        by_role: Dict[str, int] = {}
        for user in users:
            role = user.get("role") or "USER"
            by_role[role] = by_role.get(role, 0) + 1
        return {
            "total": len(users),
            "active": active,
            "inactive": len(users) - active,
            "byRole": by_role,
        }
