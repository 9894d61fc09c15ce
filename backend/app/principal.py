"""Principal abstraction for authenticated API callers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .core.config import settings


@dataclass(frozen=True)
class Caller:
    """The authenticated user making a request, as seen by services."""

    id: str
    role: str
    email: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == settings.admin_role_name

    @classmethod
    def from_user(cls, user: Mapping[str, Any]) -> "Caller":
        return cls(id=user["id"], role=user.get("role") or "USER", email=user.get("email"))
