# backend/app/routes/v1/testimonials.py
"""
Testimonial routes - API v1

Submitting and browsing are public. Authors manage their own entries;
moderation (approve, reject, favorite) is admin-only.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, status

from ...api.dependencies import (
    get_current_caller,
    get_current_caller_optional,
    get_testimonial_service,
    require_admin,
)
from ...principal import Caller
from ...repositories.query_pipeline import PaginationOptions
from ...schemas.base import MessageResponse, PageResponse
from ...schemas.content import TestimonialCreate, TestimonialUpdate
from ...services.testimonial_service import TestimonialService
from .common import drop_none, pagination_params, run_service

router = APIRouter(tags=["testimonials-v1"])


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=Dict[str, Any])
async def create_testimonial(
    testimonial_data: TestimonialCreate,
    caller: Optional[Caller] = Depends(get_current_caller_optional),
    service: TestimonialService = Depends(get_testimonial_service),
) -> Dict[str, Any]:
    return await run_service(service.create_testimonial, testimonial_data.to_payload(), caller)


@router.get("/", response_model=PageResponse)
async def list_testimonials(
    is_approved: Optional[bool] = Query(None, alias="isApproved"),
    is_favorite: Optional[bool] = Query(None, alias="isFavorite"),
    rating: Optional[int] = Query(None, ge=1, le=5),
    city: Optional[str] = None,
    state: Optional[str] = None,
    search: Optional[str] = None,
    options: PaginationOptions = Depends(pagination_params),
    service: TestimonialService = Depends(get_testimonial_service),
) -> Dict[str, Any]:
    filters = drop_none(
        isActive=True,
        isApproved=is_approved,
        isFavorite=is_favorite,
        rating=rating,
        city=city,
        state=state,
    )
    page = await run_service(service.list_testimonials, filters, options, search)
    return page.to_dict()


@router.get("/published", response_model=PageResponse)
async def list_published(
    options: PaginationOptions = Depends(pagination_params),
    search: Optional[str] = None,
    service: TestimonialService = Depends(get_testimonial_service),
) -> Dict[str, Any]:
    page = await run_service(service.list_approved, None, options, search)
    return page.to_dict()


@router.get("/favorites", response_model=List[Dict[str, Any]])
async def get_favorites(
    service: TestimonialService = Depends(get_testimonial_service),
) -> List[Dict[str, Any]]:
    return await run_service(service.get_favorites)


@router.get("/search", response_model=PageResponse)
async def search_testimonials(
    q: str = Query(..., min_length=1),
    options: PaginationOptions = Depends(pagination_params),
    service: TestimonialService = Depends(get_testimonial_service),
) -> Dict[str, Any]:
    page = await run_service(service.list_approved, None, options, q)
    return page.to_dict()


@router.get("/location", response_model=PageResponse)
async def get_by_location(
    city: Optional[str] = None,
    state: Optional[str] = None,
    options: PaginationOptions = Depends(pagination_params),
    service: TestimonialService = Depends(get_testimonial_service),
) -> Dict[str, Any]:
    page = await run_service(service.list_approved, drop_none(city=city, state=state), options)
    return page.to_dict()


@router.get("/rating/{rating}", response_model=PageResponse)
async def get_by_rating(
    rating: int,
    options: PaginationOptions = Depends(pagination_params),
    service: TestimonialService = Depends(get_testimonial_service),
) -> Dict[str, Any]:
    page = await run_service(service.list_approved, {"rating": rating}, options)
    return page.to_dict()


@router.get("/stats", response_model=Dict[str, Any])
async def get_stats(
    _: Caller = Depends(require_admin),
    service: TestimonialService = Depends(get_testimonial_service),
) -> Dict[str, Any]:
    return await run_service(service.get_stats)


@router.get("/my", response_model=List[Dict[str, Any]])
async def get_my_testimonials(
    caller: Caller = Depends(get_current_caller),
    service: TestimonialService = Depends(get_testimonial_service),
) -> List[Dict[str, Any]]:
    return await run_service(service.get_my_testimonials, caller)


@router.get("/{testimonial_id}", response_model=Dict[str, Any])
async def get_testimonial(
    testimonial_id: str,
    service: TestimonialService = Depends(get_testimonial_service),
) -> Dict[str, Any]:
    return await run_service(service.get_testimonial, testimonial_id)


@router.patch("/{testimonial_id}", response_model=Dict[str, Any])
async def update_testimonial(
    testimonial_id: str,
    testimonial_data: TestimonialUpdate,
    caller: Caller = Depends(get_current_caller),
    service: TestimonialService = Depends(get_testimonial_service),
) -> Dict[str, Any]:
    return await run_service(
        service.update_testimonial, testimonial_id, testimonial_data.to_payload(), caller
    )


@router.delete("/{testimonial_id}", response_model=MessageResponse)
async def delete_testimonial(
    testimonial_id: str,
    caller: Caller = Depends(get_current_caller),
    service: TestimonialService = Depends(get_testimonial_service),
) -> MessageResponse:
    await run_service(service.delete_testimonial, testimonial_id, caller)
    return MessageResponse(message="Testimonial deleted successfully")


@router.post("/{testimonial_id}/deactivate", response_model=Dict[str, Any])
async def deactivate_testimonial(
    testimonial_id: str,
    caller: Caller = Depends(get_current_caller),
    service: TestimonialService = Depends(get_testimonial_service),
) -> Dict[str, Any]:
    return await run_service(service.deactivate_testimonial, testimonial_id, caller)


@router.post("/{testimonial_id}/favorite", response_model=Dict[str, Any])
async def toggle_favorite(
    testimonial_id: str,
    _: Caller = Depends(require_admin),
    service: TestimonialService = Depends(get_testimonial_service),
) -> Dict[str, Any]:
    return await run_service(service.toggle_favorite, testimonial_id)


@router.post("/{testimonial_id}/publish", response_model=Dict[str, Any])
async def approve_testimonial(
    testimonial_id: str,
    _: Caller = Depends(require_admin),
    service: TestimonialService = Depends(get_testimonial_service),
) -> Dict[str, Any]:
    return await run_service(service.approve, testimonial_id)


@router.post("/{testimonial_id}/unpublish", response_model=Dict[str, Any])
async def reject_testimonial(
    testimonial_id: str,
    _: Caller = Depends(require_admin),
    service: TestimonialService = Depends(get_testimonial_service),
) -> Dict[str, Any]:
    return await run_service(service.reject, testimonial_id)
