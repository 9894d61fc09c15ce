"""
Base schemas shared by every request and response model.

Wire format is camelCase; Python attributes are snake_case. Services take
plain camelCase dicts produced with ``to_payload``.
"""
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model accepting both camelCase and snake_case input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        extra="ignore",
    )

    def to_payload(self) -> Dict[str, Any]:
        """Only fields the client actually sent, keyed by their wire names."""
        return self.model_dump(by_alias=True, exclude_unset=True)


class PageResponse(BaseModel):
    """Standard paginated envelope for list endpoints."""

    items: List[Dict[str, Any]] = Field(description="Items on this page")
    total: int = Field(description="Items matching the filters")
    page: int = Field(description="Current page number", ge=1)
    totalPages: int = Field(description="Number of pages at the requested limit")


class MessageResponse(BaseModel):
    success: bool = True
    message: str
