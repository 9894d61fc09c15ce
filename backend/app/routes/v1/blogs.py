# backend/app/routes/v1/blogs.py
"""
Blog routes - API v1

Reads are public; a signed-in author or admin also sees drafts. Writing
is admin-only, and the service additionally checks ownership.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, status

from ...api.dependencies import (
    get_blog_service,
    get_current_caller,
    get_current_caller_optional,
    require_admin,
)
from ...core.enums import BlogStatus
from ...principal import Caller
from ...repositories.query_pipeline import PaginationOptions
from ...schemas.base import MessageResponse, PageResponse
from ...schemas.content import BlogCreate, BlogUpdate
from ...services.blog_service import BlogService
from .common import drop_none, pagination_params, run_service

router = APIRouter(tags=["blogs-v1"])


# Static routes


@router.get("/", response_model=PageResponse)
async def list_blogs(
    status_filter: Optional[BlogStatus] = Query(None, alias="status"),
    author_id: Optional[str] = Query(None, alias="authorId"),
    category: Optional[str] = None,
    tags: Optional[str] = Query(None, description="Only posts carrying this tag"),
    search: Optional[str] = None,
    options: PaginationOptions = Depends(pagination_params),
    blog_service: BlogService = Depends(get_blog_service),
) -> Dict[str, Any]:
    filters = drop_none(
        status=status_filter.value if status_filter else None,
        authorId=author_id,
        category=category,
        tags=tags,
    )
    page = await run_service(blog_service.list_blogs, filters, options, search)
    return page.to_dict()


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=Dict[str, Any])
async def create_blog(
    blog_data: BlogCreate,
    caller: Caller = Depends(require_admin),
    blog_service: BlogService = Depends(get_blog_service),
) -> Dict[str, Any]:
    return await run_service(blog_service.create_blog, blog_data.to_payload(), caller)


@router.get("/search", response_model=PageResponse)
async def search_blogs(
    q: str = Query(..., min_length=1),
    options: PaginationOptions = Depends(pagination_params),
    blog_service: BlogService = Depends(get_blog_service),
) -> Dict[str, Any]:
    page = await run_service(blog_service.search_blogs, q, options)
    return page.to_dict()


@router.get("/most-viewed", response_model=List[Dict[str, Any]])
async def get_most_viewed(
    limit: int = Query(10, ge=1, le=100),
    blog_service: BlogService = Depends(get_blog_service),
) -> List[Dict[str, Any]]:
    return await run_service(blog_service.get_most_viewed, limit)


@router.get("/recent", response_model=List[Dict[str, Any]])
async def get_recent(
    limit: int = Query(10, ge=1, le=100),
    blog_service: BlogService = Depends(get_blog_service),
) -> List[Dict[str, Any]]:
    return await run_service(blog_service.get_recent, limit)


@router.get("/tags", response_model=List[str])
async def get_all_tags(blog_service: BlogService = Depends(get_blog_service)) -> List[str]:
    return await run_service(blog_service.get_all_tags)


@router.get("/stats", response_model=Dict[str, Any])
async def get_blog_stats(
    _: Caller = Depends(require_admin),
    blog_service: BlogService = Depends(get_blog_service),
) -> Dict[str, Any]:
    return await run_service(blog_service.get_stats)


@router.get("/my-blogs", response_model=PageResponse)
async def get_my_blogs(
    options: PaginationOptions = Depends(pagination_params),
    caller: Caller = Depends(get_current_caller),
    blog_service: BlogService = Depends(get_blog_service),
) -> Dict[str, Any]:
    page = await run_service(blog_service.list_blogs, {"authorId": caller.id}, options)
    return page.to_dict()


@router.get("/my-stats", response_model=Dict[str, Any])
async def get_my_stats(
    caller: Caller = Depends(get_current_caller),
    blog_service: BlogService = Depends(get_blog_service),
) -> Dict[str, Any]:
    return await run_service(blog_service.get_author_stats, caller)


@router.get("/slug/{slug}", response_model=Dict[str, Any])
async def get_blog_by_slug(
    slug: str,
    caller: Optional[Caller] = Depends(get_current_caller_optional),
    blog_service: BlogService = Depends(get_blog_service),
) -> Dict[str, Any]:
    return await run_service(blog_service.get_blog_by_slug, slug, caller)


# Single blog


@router.get("/{blog_id}", response_model=Dict[str, Any])
async def get_blog(
    blog_id: str,
    caller: Optional[Caller] = Depends(get_current_caller_optional),
    blog_service: BlogService = Depends(get_blog_service),
) -> Dict[str, Any]:
    return await run_service(blog_service.get_blog, blog_id, caller)


@router.patch("/{blog_id}", response_model=Dict[str, Any])
async def update_blog(
    blog_id: str,
    blog_data: BlogUpdate,
    caller: Caller = Depends(require_admin),
    blog_service: BlogService = Depends(get_blog_service),
) -> Dict[str, Any]:
    return await run_service(blog_service.update_blog, blog_id, blog_data.to_payload(), caller)


@router.post("/{blog_id}/publish", response_model=Dict[str, Any])
async def publish_blog(
    blog_id: str,
    caller: Caller = Depends(require_admin),
    blog_service: BlogService = Depends(get_blog_service),
) -> Dict[str, Any]:
    return await run_service(blog_service.publish_blog, blog_id, caller)


@router.post("/{blog_id}/unpublish", response_model=Dict[str, Any])
async def unpublish_blog(
    blog_id: str,
    caller: Caller = Depends(require_admin),
    blog_service: BlogService = Depends(get_blog_service),
) -> Dict[str, Any]:
    return await run_service(blog_service.unpublish_blog, blog_id, caller)


@router.post("/{blog_id}/archive", response_model=Dict[str, Any])
async def archive_blog(
    blog_id: str,
    caller: Caller = Depends(require_admin),
    blog_service: BlogService = Depends(get_blog_service),
) -> Dict[str, Any]:
    return await run_service(blog_service.archive_blog, blog_id, caller)


@router.delete("/{blog_id}", response_model=MessageResponse)
async def delete_blog(
    blog_id: str,
    caller: Caller = Depends(require_admin),
    blog_service: BlogService = Depends(get_blog_service),
) -> MessageResponse:
    await run_service(blog_service.delete_blog, blog_id, caller)
    return MessageResponse(message="Blog deleted successfully")
