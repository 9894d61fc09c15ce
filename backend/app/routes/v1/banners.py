# backend/app/routes/v1/banners.py
"""
Hero banner routes - API v1

The site shows the single published banner. Publishing is exclusive;
``/repair`` fixes the rare state where concurrent publishes left several.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, status

from ...api.dependencies import get_banner_service, require_admin
from ...principal import Caller
from ...repositories.query_pipeline import PaginationOptions
from ...schemas.base import MessageResponse, PageResponse
from ...schemas.content import BannerCreate, BannerUpdate
from ...services.banner_service import BannerService
from .common import drop_none, pagination_params, run_service

router = APIRouter(tags=["banners-v1"])


@router.get("/published", response_model=List[Dict[str, Any]])
async def get_published(
    banner_service: BannerService = Depends(get_banner_service),
) -> List[Dict[str, Any]]:
    return await run_service(banner_service.get_published)


@router.get("/", response_model=PageResponse)
async def list_banners(
    is_published: Optional[bool] = Query(None, alias="isPublished"),
    search: Optional[str] = None,
    options: PaginationOptions = Depends(pagination_params),
    banner_service: BannerService = Depends(get_banner_service),
) -> Dict[str, Any]:
    filters = drop_none(isActive=True, isPublished=is_published)
    page = await run_service(banner_service.list_banners, filters, options, search)
    return page.to_dict()


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=Dict[str, Any])
async def create_banner(
    banner_data: BannerCreate,
    caller: Caller = Depends(require_admin),
    banner_service: BannerService = Depends(get_banner_service),
) -> Dict[str, Any]:
    return await run_service(banner_service.create_banner, banner_data.to_payload(), caller)


@router.get("/stats", response_model=Dict[str, Any])
async def get_banner_stats(
    _: Caller = Depends(require_admin),
    banner_service: BannerService = Depends(get_banner_service),
) -> Dict[str, Any]:
    return await run_service(banner_service.get_stats)


@router.post("/repair", response_model=Optional[Dict[str, Any]])
async def repair_banners(
    _: Caller = Depends(require_admin),
    banner_service: BannerService = Depends(get_banner_service),
) -> Optional[Dict[str, Any]]:
    """Returns the banner left published, if any."""
    return await run_service(banner_service.repair)


@router.get("/{banner_id}", response_model=Dict[str, Any])
async def get_banner(
    banner_id: str,
    banner_service: BannerService = Depends(get_banner_service),
) -> Dict[str, Any]:
    return await run_service(banner_service.get_banner, banner_id)


@router.patch("/{banner_id}", response_model=Dict[str, Any])
async def update_banner(
    banner_id: str,
    banner_data: BannerUpdate,
    _: Caller = Depends(require_admin),
    banner_service: BannerService = Depends(get_banner_service),
) -> Dict[str, Any]:
    return await run_service(banner_service.update_banner, banner_id, banner_data.to_payload())


@router.post("/{banner_id}/publish", response_model=Dict[str, Any])
async def publish_banner(
    banner_id: str,
    _: Caller = Depends(require_admin),
    banner_service: BannerService = Depends(get_banner_service),
) -> Dict[str, Any]:
    return await run_service(banner_service.publish_exclusively, banner_id)


@router.post("/{banner_id}/unpublish", response_model=Dict[str, Any])
async def unpublish_banner(
    banner_id: str,
    _: Caller = Depends(require_admin),
    banner_service: BannerService = Depends(get_banner_service),
) -> Dict[str, Any]:
    return await run_service(banner_service.unpublish, banner_id)


@router.delete("/{banner_id}", response_model=MessageResponse)
async def delete_banner(
    banner_id: str,
    _: Caller = Depends(require_admin),
    banner_service: BannerService = Depends(get_banner_service),
) -> MessageResponse:
    await run_service(banner_service.delete_banner, banner_id)
    return MessageResponse(message="Banner deleted successfully")
