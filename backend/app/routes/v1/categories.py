# backend/app/routes/v1/categories.py
"""Category routes - API v1. Reads are public, writes admin-only."""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, status

from ...api.dependencies import get_category_service, require_admin
from ...principal import Caller
from ...repositories.query_pipeline import PaginationOptions
from ...schemas.base import MessageResponse, PageResponse
from ...schemas.content import CategoryCreate, CategoryUpdate
from ...services.category_service import CategoryService
from .common import drop_none, pagination_params, run_service

router = APIRouter(tags=["categories-v1"])


@router.get("/", response_model=PageResponse)
async def list_categories(
    is_active: Optional[bool] = Query(None, alias="isActive"),
    search: Optional[str] = None,
    options: PaginationOptions = Depends(pagination_params),
    category_service: CategoryService = Depends(get_category_service),
) -> Dict[str, Any]:
    page = await run_service(
        category_service.list_categories, drop_none(isActive=is_active), options, search
    )
    return page.to_dict()


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=Dict[str, Any])
async def create_category(
    category_data: CategoryCreate,
    caller: Caller = Depends(require_admin),
    category_service: CategoryService = Depends(get_category_service),
) -> Dict[str, Any]:
    return await run_service(category_service.create_category, category_data.to_payload(), caller)


@router.get("/stats", response_model=Dict[str, Any])
async def get_category_stats(
    _: Caller = Depends(require_admin),
    category_service: CategoryService = Depends(get_category_service),
) -> Dict[str, Any]:
    return await run_service(category_service.get_stats)


@router.get("/slug/{slug}", response_model=Dict[str, Any])
async def get_category_by_slug(
    slug: str,
    category_service: CategoryService = Depends(get_category_service),
) -> Dict[str, Any]:
    return await run_service(category_service.get_by_slug, slug)


@router.get("/{category_id}", response_model=Dict[str, Any])
async def get_category(
    category_id: str,
    category_service: CategoryService = Depends(get_category_service),
) -> Dict[str, Any]:
    return await run_service(category_service.get_category, category_id)


@router.patch("/{category_id}", response_model=Dict[str, Any])
async def update_category(
    category_id: str,
    category_data: CategoryUpdate,
    _: Caller = Depends(require_admin),
    category_service: CategoryService = Depends(get_category_service),
) -> Dict[str, Any]:
    return await run_service(
        category_service.update_category, category_id, category_data.to_payload()
    )


@router.delete("/{category_id}", response_model=MessageResponse)
async def delete_category(
    category_id: str,
    _: Caller = Depends(require_admin),
    category_service: CategoryService = Depends(get_category_service),
) -> MessageResponse:
    await run_service(category_service.delete_category, category_id)
    return MessageResponse(message="Category deleted successfully")
