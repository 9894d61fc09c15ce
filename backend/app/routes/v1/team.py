# backend/app/routes/v1/team.py
"""Team member routes - API v1. The published roster is public."""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, status

from ...api.dependencies import get_team_service, require_admin
from ...principal import Caller
from ...repositories.query_pipeline import PaginationOptions
from ...schemas.base import MessageResponse, PageResponse
from ...schemas.content import TeamMemberCreate, TeamMemberUpdate
from ...services.team_service import TeamService
from .common import drop_none, pagination_params, run_service

router = APIRouter(tags=["team-v1"])


@router.get("/published", response_model=List[Dict[str, Any]])
async def get_published_team(
    team_service: TeamService = Depends(get_team_service),
) -> List[Dict[str, Any]]:
    return await run_service(team_service.get_published)


@router.get("/", response_model=PageResponse)
async def list_team(
    is_published: Optional[bool] = Query(None, alias="isPublished"),
    search: Optional[str] = None,
    options: PaginationOptions = Depends(pagination_params),
    _: Caller = Depends(require_admin),
    team_service: TeamService = Depends(get_team_service),
) -> Dict[str, Any]:
    filters = drop_none(isActive=True, isPublished=is_published)
    page = await run_service(team_service.list_members, filters, options, search)
    return page.to_dict()


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=Dict[str, Any])
async def create_member(
    member_data: TeamMemberCreate,
    _: Caller = Depends(require_admin),
    team_service: TeamService = Depends(get_team_service),
) -> Dict[str, Any]:
    return await run_service(team_service.create_member, member_data.to_payload())


@router.get("/stats", response_model=Dict[str, Any])
async def get_team_stats(
    _: Caller = Depends(require_admin),
    team_service: TeamService = Depends(get_team_service),
) -> Dict[str, Any]:
    return await run_service(team_service.get_stats)


@router.get("/{member_id}", response_model=Dict[str, Any])
async def get_member(
    member_id: str,
    team_service: TeamService = Depends(get_team_service),
) -> Dict[str, Any]:
    return await run_service(team_service.get_member, member_id)


@router.patch("/{member_id}", response_model=Dict[str, Any])
async def update_member(
    member_id: str,
    member_data: TeamMemberUpdate,
    _: Caller = Depends(require_admin),
    team_service: TeamService = Depends(get_team_service),
) -> Dict[str, Any]:
    return await run_service(team_service.update_member, member_id, member_data.to_payload())


@router.post("/{member_id}/publish", response_model=Dict[str, Any])
async def publish_member(
    member_id: str,
    _: Caller = Depends(require_admin),
    team_service: TeamService = Depends(get_team_service),
) -> Dict[str, Any]:
    return await run_service(team_service.publish, member_id)


@router.post("/{member_id}/unpublish", response_model=Dict[str, Any])
async def unpublish_member(
    member_id: str,
    _: Caller = Depends(require_admin),
    team_service: TeamService = Depends(get_team_service),
) -> Dict[str, Any]:
    return await run_service(team_service.unpublish, member_id)


@router.delete("/{member_id}", response_model=MessageResponse)
async def delete_member(
    member_id: str,
    _: Caller = Depends(require_admin),
    team_service: TeamService = Depends(get_team_service),
) -> MessageResponse:
    await run_service(team_service.delete_member, member_id)
    return MessageResponse(message="Team member deleted successfully")
