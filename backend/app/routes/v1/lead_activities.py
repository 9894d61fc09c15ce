# backend/app/routes/v1/lead_activities.py
"""
Lead activity routes - API v1

Signed-in counselors log activities against leads; only the author or an
admin may edit or remove one.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, status

from ...api.dependencies import get_current_caller, get_lead_activity_service
from ...core.enums import ActivityType
from ...principal import Caller
from ...repositories.query_pipeline import PaginationOptions
from ...schemas.base import MessageResponse, PageResponse
from ...schemas.lead import LeadActivityCreate, LeadActivityUpdate
from ...services.lead_activity_service import LeadActivityService
from .common import drop_none, pagination_params, run_service

router = APIRouter(tags=["lead-activities-v1"])


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=Dict[str, Any])
async def create_activity(
    activity_data: LeadActivityCreate,
    caller: Caller = Depends(get_current_caller),
    service: LeadActivityService = Depends(get_lead_activity_service),
) -> Dict[str, Any]:
    return await run_service(service.create_activity, activity_data.to_payload(), caller)


@router.get("/recent", response_model=List[Dict[str, Any]])
async def get_recent_activities(
    limit: int = Query(10, ge=1, le=100),
    _: Caller = Depends(get_current_caller),
    service: LeadActivityService = Depends(get_lead_activity_service),
) -> List[Dict[str, Any]]:
    return await run_service(service.get_recent, limit)


@router.get("/lead/{lead_id}", response_model=PageResponse)
async def list_lead_activities(
    lead_id: str,
    activity_type: Optional[ActivityType] = Query(None, alias="activityType"),
    options: PaginationOptions = Depends(pagination_params),
    _: Caller = Depends(get_current_caller),
    service: LeadActivityService = Depends(get_lead_activity_service),
) -> Dict[str, Any]:
    filters = drop_none(activityType=activity_type.value if activity_type else None)
    page = await run_service(service.list_by_lead, lead_id, options, filters)
    return page.to_dict()


@router.get("/lead/{lead_id}/stats", response_model=Dict[str, Any])
async def get_lead_activity_stats(
    lead_id: str,
    _: Caller = Depends(get_current_caller),
    service: LeadActivityService = Depends(get_lead_activity_service),
) -> Dict[str, Any]:
    return await run_service(service.get_lead_stats, lead_id)


@router.get("/counselor/{counselor_id}", response_model=PageResponse)
async def list_counselor_activities(
    counselor_id: str,
    options: PaginationOptions = Depends(pagination_params),
    _: Caller = Depends(get_current_caller),
    service: LeadActivityService = Depends(get_lead_activity_service),
) -> Dict[str, Any]:
    page = await run_service(service.list_by_counselor, counselor_id, options)
    return page.to_dict()


@router.get("/{activity_id}", response_model=Dict[str, Any])
async def get_activity(
    activity_id: str,
    _: Caller = Depends(get_current_caller),
    service: LeadActivityService = Depends(get_lead_activity_service),
) -> Dict[str, Any]:
    return await run_service(service.get_activity, activity_id)


@router.patch("/{activity_id}", response_model=Dict[str, Any])
async def update_activity(
    activity_id: str,
    activity_data: LeadActivityUpdate,
    caller: Caller = Depends(get_current_caller),
    service: LeadActivityService = Depends(get_lead_activity_service),
) -> Dict[str, Any]:
    return await run_service(
        service.update_activity, activity_id, activity_data.to_payload(), caller
    )


@router.delete("/{activity_id}", response_model=MessageResponse)
async def delete_activity(
    activity_id: str,
    caller: Caller = Depends(get_current_caller),
    service: LeadActivityService = Depends(get_lead_activity_service),
) -> MessageResponse:
    await run_service(service.delete_activity, activity_id, caller)
    return MessageResponse(message="Activity deleted successfully")
