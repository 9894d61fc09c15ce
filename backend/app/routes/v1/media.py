# backend/app/routes/v1/media.py
"""
Reel and video routes - API v1

Reels and videos expose the same endpoints, so one builder creates a
router per collection. Browsing and engagement (view, like) are public;
everything else is admin-only.
"""

from typing import Any, Callable, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, status

from ...api.dependencies import get_reel_service, get_video_service, require_admin
from ...principal import Caller
from ...repositories.query_pipeline import PaginationOptions
from ...schemas.base import MessageResponse, PageResponse
from ...schemas.media import MediaCreate, MediaUpdate
from ...services.media_service import MediaService
from .common import drop_none, pagination_params, run_service


def build_media_router(label: str, get_service: Callable[..., MediaService]) -> APIRouter:
    router = APIRouter(tags=[f"{label.lower()}s-v1"])

    # Public

    @router.get("/", response_model=PageResponse)
    async def list_published(
        category: Optional[str] = None,
        tags: Optional[str] = None,
        search: Optional[str] = None,
        options: PaginationOptions = Depends(pagination_params),
        service: MediaService = Depends(get_service),
    ) -> Dict[str, Any]:
        page = await run_service(
            service.list_published, drop_none(category=category, tags=tags), options, search
        )
        return page.to_dict()

    @router.get("/search", response_model=PageResponse)
    async def search_media(
        q: str = Query(..., min_length=1),
        options: PaginationOptions = Depends(pagination_params),
        service: MediaService = Depends(get_service),
    ) -> Dict[str, Any]:
        page = await run_service(service.list_published, None, options, q)
        return page.to_dict()

    @router.get("/trending", response_model=List[Dict[str, Any]])
    async def get_trending(
        limit: int = Query(10, ge=1, le=100),
        service: MediaService = Depends(get_service),
    ) -> List[Dict[str, Any]]:
        return await run_service(service.get_most_viewed, limit)

    @router.get("/most-liked", response_model=List[Dict[str, Any]])
    async def get_most_liked(
        limit: int = Query(10, ge=1, le=100),
        service: MediaService = Depends(get_service),
    ) -> List[Dict[str, Any]]:
        return await run_service(service.get_most_liked, limit)

    @router.get("/recent", response_model=List[Dict[str, Any]])
    async def get_recent(
        limit: int = Query(10, ge=1, le=100),
        service: MediaService = Depends(get_service),
    ) -> List[Dict[str, Any]]:
        return await run_service(service.get_recent, limit)

    @router.get("/meta", response_model=Dict[str, List[str]])
    async def get_meta(service: MediaService = Depends(get_service)) -> Dict[str, List[str]]:
        return {
            "categories": await run_service(service.get_categories),
            "tags": await run_service(service.get_tags),
        }

    @router.get("/tags", response_model=List[Dict[str, Any]])
    async def get_by_tags(
        tags: str = Query(..., description="Comma-separated tags; any match counts"),
        service: MediaService = Depends(get_service),
    ) -> List[Dict[str, Any]]:
        wanted = [tag.strip() for tag in tags.split(",") if tag.strip()]
        return await run_service(service.get_by_tags, wanted)

    @router.get("/category/{category}", response_model=List[Dict[str, Any]])
    async def get_by_category(
        category: str,
        service: MediaService = Depends(get_service),
    ) -> List[Dict[str, Any]]:
        return await run_service(service.get_by_category, category)

    # Admin collection views

    @router.post("/", status_code=status.HTTP_201_CREATED, response_model=Dict[str, Any])
    async def create_media(
        media_data: MediaCreate,
        caller: Caller = Depends(require_admin),
        service: MediaService = Depends(get_service),
    ) -> Dict[str, Any]:
        return await run_service(service.create_media, media_data.to_payload(), caller)

    @router.get("/all", response_model=PageResponse)
    async def list_all(
        is_published: Optional[bool] = Query(None, alias="isPublished"),
        category: Optional[str] = None,
        uploaded_by: Optional[str] = Query(None, alias="uploadedBy"),
        tags: Optional[str] = None,
        search: Optional[str] = None,
        options: PaginationOptions = Depends(pagination_params),
        _: Caller = Depends(require_admin),
        service: MediaService = Depends(get_service),
    ) -> Dict[str, Any]:
        filters = drop_none(
            isPublished=is_published, category=category, uploadedBy=uploaded_by, tags=tags
        )
        page = await run_service(service.list_media, filters, options, search)
        return page.to_dict()

    @router.get("/stats", response_model=Dict[str, Any])
    async def get_stats(
        _: Caller = Depends(require_admin),
        service: MediaService = Depends(get_service),
    ) -> Dict[str, Any]:
        return await run_service(service.get_stats)

    @router.get("/uploader/{user_id}", response_model=List[Dict[str, Any]])
    async def get_by_uploader(
        user_id: str,
        _: Caller = Depends(require_admin),
        service: MediaService = Depends(get_service),
    ) -> List[Dict[str, Any]]:
        return await run_service(service.get_by_uploader, user_id)

    # Single item

    @router.get("/{media_id}", response_model=Dict[str, Any])
    async def get_media(
        media_id: str,
        service: MediaService = Depends(get_service),
    ) -> Dict[str, Any]:
        return await run_service(service.get_media, media_id)

    @router.post("/{media_id}/view", response_model=Dict[str, Any])
    async def record_view(
        media_id: str,
        service: MediaService = Depends(get_service),
    ) -> Dict[str, Any]:
        return await run_service(service.increment_view, media_id)

    @router.post("/{media_id}/like", response_model=Dict[str, Any])
    async def like(
        media_id: str,
        service: MediaService = Depends(get_service),
    ) -> Dict[str, Any]:
        return await run_service(service.like, media_id)

    @router.post("/{media_id}/unlike", response_model=Dict[str, Any])
    async def unlike(
        media_id: str,
        service: MediaService = Depends(get_service),
    ) -> Dict[str, Any]:
        return await run_service(service.unlike, media_id)

    @router.patch("/{media_id}", response_model=Dict[str, Any])
    async def update_media(
        media_id: str,
        media_data: MediaUpdate,
        _: Caller = Depends(require_admin),
        service: MediaService = Depends(get_service),
    ) -> Dict[str, Any]:
        return await run_service(service.update_media, media_id, media_data.to_payload())

    @router.post("/{media_id}/publish", response_model=Dict[str, Any])
    async def publish(
        media_id: str,
        _: Caller = Depends(require_admin),
        service: MediaService = Depends(get_service),
    ) -> Dict[str, Any]:
        return await run_service(service.publish, media_id)

    @router.post("/{media_id}/unpublish", response_model=Dict[str, Any])
    async def unpublish(
        media_id: str,
        _: Caller = Depends(require_admin),
        service: MediaService = Depends(get_service),
    ) -> Dict[str, Any]:
        return await run_service(service.unpublish, media_id)

    @router.delete("/{media_id}", response_model=MessageResponse)
    async def delete_media(
        media_id: str,
        _: Caller = Depends(require_admin),
        service: MediaService = Depends(get_service),
    ) -> MessageResponse:
        await run_service(service.delete_media, media_id)
        return MessageResponse(message=f"{label} deleted successfully")

    return router


reels_router = build_media_router("Reel", get_reel_service)
videos_router = build_media_router("Video", get_video_service)
