# backend/app/routes/v1/leads.py
"""
Lead (CRM) routes - API v1

The enquiry form posts leads anonymously; the CRM views are admin-only.

Endpoints:
    POST / - Submit an enquiry
    GET / - List leads (admin)
    GET /stats - Lead counts (admin)
    GET /{lead_id} - Lead details (admin)
    PATCH /{lead_id} - Edit a lead (admin)
    DELETE /{lead_id} - Hard delete (admin)
    PATCH /{lead_id}/status - Activate or deactivate (admin)
    POST /{lead_id}/contacted - Mark contacted by the caller (admin)
    POST /{lead_id}/not-contacted - Clear the contacted flag (admin)
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, status

from ...api.dependencies import get_lead_service, require_admin
from ...principal import Caller
from ...repositories.lead_repository import LeadRepository
from ...repositories.query_pipeline import PaginationOptions
from ...schemas.base import MessageResponse, PageResponse
from ...schemas.lead import ActiveStatusUpdate, LeadCreate, LeadUpdate
from ...services.lead_service import LeadService
from .common import check_sort_field, drop_none, pagination_params, run_service

router = APIRouter(tags=["leads-v1"])


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=Dict[str, Any])
async def create_lead(
    lead_data: LeadCreate,
    lead_service: LeadService = Depends(get_lead_service),
) -> Dict[str, Any]:
    return await run_service(lead_service.create_lead, lead_data.to_payload())


@router.get("/", response_model=PageResponse)
async def list_leads(
    is_active: Optional[bool] = Query(None, alias="isActive"),
    contacted: Optional[bool] = None,
    area_of_interest: Optional[str] = Query(None, alias="areaOfInterest"),
    search: Optional[str] = None,
    options: PaginationOptions = Depends(pagination_params),
    _: Caller = Depends(require_admin),
    lead_service: LeadService = Depends(get_lead_service),
) -> Dict[str, Any]:
    check_sort_field(options, LeadRepository.schema)
    filters = drop_none(isActive=is_active, contacted=contacted, areaOfInterest=area_of_interest)
    page = await run_service(lead_service.list_leads, filters, options, search)
    return page.to_dict()


@router.get("/stats", response_model=Dict[str, Any])
async def get_lead_stats(
    _: Caller = Depends(require_admin),
    lead_service: LeadService = Depends(get_lead_service),
) -> Dict[str, Any]:
    return await run_service(lead_service.get_stats)


@router.get("/{lead_id}", response_model=Dict[str, Any])
async def get_lead(
    lead_id: str,
    _: Caller = Depends(require_admin),
    lead_service: LeadService = Depends(get_lead_service),
) -> Dict[str, Any]:
    return await run_service(lead_service.get_lead, lead_id)


@router.patch("/{lead_id}", response_model=Dict[str, Any])
async def update_lead(
    lead_id: str,
    lead_data: LeadUpdate,
    _: Caller = Depends(require_admin),
    lead_service: LeadService = Depends(get_lead_service),
) -> Dict[str, Any]:
    return await run_service(lead_service.update_lead, lead_id, lead_data.to_payload())


@router.delete("/{lead_id}", response_model=MessageResponse)
async def delete_lead(
    lead_id: str,
    _: Caller = Depends(require_admin),
    lead_service: LeadService = Depends(get_lead_service),
) -> MessageResponse:
    await run_service(lead_service.delete_lead, lead_id)
    return MessageResponse(message="Lead deleted successfully")


@router.patch("/{lead_id}/status", response_model=Dict[str, Any])
async def set_lead_status(
    lead_id: str,
    status_data: ActiveStatusUpdate,
    _: Caller = Depends(require_admin),
    lead_service: LeadService = Depends(get_lead_service),
) -> Dict[str, Any]:
    return await run_service(lead_service.set_active_status, lead_id, status_data.is_active)


@router.post("/{lead_id}/contacted", response_model=Dict[str, Any])
async def mark_contacted(
    lead_id: str,
    caller: Caller = Depends(require_admin),
    lead_service: LeadService = Depends(get_lead_service),
) -> Dict[str, Any]:
    return await run_service(lead_service.mark_contacted, lead_id, caller)


@router.post("/{lead_id}/not-contacted", response_model=Dict[str, Any])
async def mark_not_contacted(
    lead_id: str,
    _: Caller = Depends(require_admin),
    lead_service: LeadService = Depends(get_lead_service),
) -> Dict[str, Any]:
    return await run_service(lead_service.mark_not_contacted, lead_id)
