# backend/app/routes/v1/counselors.py
"""Counselor directory routes - API v1. Browsing is public, management admin-only."""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, status

from ...api.dependencies import get_counselor_service, require_admin
from ...principal import Caller
from ...repositories.query_pipeline import PaginationOptions
from ...schemas.base import MessageResponse, PageResponse
from ...schemas.people import CounselorCreate, CounselorUpdate, RatingUpdate
from ...services.counselor_service import CounselorService
from .common import drop_none, pagination_params, run_service

router = APIRouter(tags=["counselors-v1"])


@router.get("/", response_model=PageResponse)
async def list_counselors(
    is_active: Optional[bool] = Query(None, alias="isActive"),
    specialty: Optional[str] = None,
    search: Optional[str] = None,
    options: PaginationOptions = Depends(pagination_params),
    counselor_service: CounselorService = Depends(get_counselor_service),
) -> Dict[str, Any]:
    filters = drop_none(isActive=is_active, specialties=specialty)
    page = await run_service(counselor_service.list_counselors, filters, options, search)
    return page.to_dict()


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=Dict[str, Any])
async def create_counselor(
    counselor_data: CounselorCreate,
    _: Caller = Depends(require_admin),
    counselor_service: CounselorService = Depends(get_counselor_service),
) -> Dict[str, Any]:
    return await run_service(counselor_service.create_counselor, counselor_data.to_payload())


@router.get("/stats", response_model=Dict[str, Any])
async def get_counselor_stats(
    _: Caller = Depends(require_admin),
    counselor_service: CounselorService = Depends(get_counselor_service),
) -> Dict[str, Any]:
    return await run_service(counselor_service.get_stats)


@router.get("/specialties", response_model=List[str])
async def get_specialties(
    counselor_service: CounselorService = Depends(get_counselor_service),
) -> List[str]:
    return await run_service(counselor_service.get_all_specialties)


@router.get("/top-rated", response_model=List[Dict[str, Any]])
async def get_top_rated(
    limit: int = Query(10, ge=1, le=100),
    counselor_service: CounselorService = Depends(get_counselor_service),
) -> List[Dict[str, Any]]:
    return await run_service(counselor_service.get_top_rated, limit)


@router.get("/most-experienced", response_model=List[Dict[str, Any]])
async def get_most_experienced(
    limit: int = Query(10, ge=1, le=100),
    counselor_service: CounselorService = Depends(get_counselor_service),
) -> List[Dict[str, Any]]:
    return await run_service(counselor_service.get_most_experienced, limit)


@router.get("/specialty/{specialty}", response_model=List[Dict[str, Any]])
async def get_by_specialty(
    specialty: str,
    counselor_service: CounselorService = Depends(get_counselor_service),
) -> List[Dict[str, Any]]:
    return await run_service(counselor_service.get_by_specialty, specialty)


@router.get("/{counselor_id}", response_model=Dict[str, Any])
async def get_counselor(
    counselor_id: str,
    counselor_service: CounselorService = Depends(get_counselor_service),
) -> Dict[str, Any]:
    return await run_service(counselor_service.get_counselor, counselor_id)


@router.patch("/{counselor_id}", response_model=Dict[str, Any])
async def update_counselor(
    counselor_id: str,
    counselor_data: CounselorUpdate,
    _: Caller = Depends(require_admin),
    counselor_service: CounselorService = Depends(get_counselor_service),
) -> Dict[str, Any]:
    return await run_service(
        counselor_service.update_counselor, counselor_id, counselor_data.to_payload()
    )


@router.patch("/{counselor_id}/rating", response_model=Dict[str, Any])
async def update_rating(
    counselor_id: str,
    rating_data: RatingUpdate,
    _: Caller = Depends(require_admin),
    counselor_service: CounselorService = Depends(get_counselor_service),
) -> Dict[str, Any]:
    return await run_service(counselor_service.update_rating, counselor_id, rating_data.rating)


@router.delete("/{counselor_id}", response_model=MessageResponse)
async def delete_counselor(
    counselor_id: str,
    _: Caller = Depends(require_admin),
    counselor_service: CounselorService = Depends(get_counselor_service),
) -> MessageResponse:
    await run_service(counselor_service.delete_counselor, counselor_id)
    return MessageResponse(message="Counselor deleted successfully")
