# backend/app/routes/v1/common.py
"""
Helpers shared by the v1 route modules.

Services are synchronous; routes run them on a worker thread and turn
domain exceptions into HTTP errors.
"""

import asyncio
from typing import Any, Callable, NoReturn, Optional, TypeVar

from fastapi import HTTPException, Query, status

from ...core.constants import DEFAULT_LIMIT, DEFAULT_PAGE, MAX_LIMIT
from ...core.exceptions import DomainException
from ...repositories.query_pipeline import EntitySchema, PaginationOptions

T = TypeVar("T")


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


async def run_service(func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    try:
        return await asyncio.to_thread(func, *args, **kwargs)
    except DomainException as e:
        handle_domain_exception(e)


def pagination_params(
    page: int = Query(DEFAULT_PAGE, ge=1),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_order: Optional[str] = Query(None, alias="sortOrder", pattern="^(asc|desc)$"),
) -> PaginationOptions:
    return PaginationOptions(page=page, limit=limit, sort_by=sort_by, sort_order=sort_order)


def check_sort_field(options: PaginationOptions, schema: EntitySchema) -> PaginationOptions:
    """Reject a ``sortBy`` outside the entity's whitelist, when it has one."""
    if options.sort_by and schema.allowed_sort_fields and options.sort_by not in schema.allowed_sort_fields:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "message": f"Cannot sort by {options.sort_by}",
                "code": "INVALID_SORT_FIELD",
                "details": {"allowed": list(schema.allowed_sort_fields)},
            },
        )
    return options


def drop_none(**filters: Any) -> dict:
    return {k: v for k, v in filters.items() if v is not None}
