# backend/app/routes/v1/users.py
"""
User directory routes - API v1

Accounts are provisioned by admins; any signed-in user can read and edit
their own profile.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, status

from ...api.dependencies import get_current_caller, get_user_service, require_admin
from ...core.enums import RoleName
from ...principal import Caller
from ...repositories.query_pipeline import PaginationOptions
from ...schemas.base import MessageResponse, PageResponse
from ...schemas.lead import ActiveStatusUpdate
from ...schemas.people import ProfileUpdate, UserCreate, UserUpdate
from ...services.user_service import UserService
from .common import drop_none, pagination_params, run_service

router = APIRouter(tags=["users-v1"])


@router.get("/me", response_model=Dict[str, Any])
async def get_profile(
    caller: Caller = Depends(get_current_caller),
    user_service: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    return await run_service(user_service.get_user, caller.id)


@router.patch("/me", response_model=Dict[str, Any])
async def update_profile(
    profile_data: ProfileUpdate,
    caller: Caller = Depends(get_current_caller),
    user_service: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    return await run_service(user_service.update_user, caller.id, profile_data.to_payload())


@router.get("/", response_model=PageResponse)
async def list_users(
    role: Optional[RoleName] = None,
    is_active: Optional[bool] = Query(None, alias="isActive"),
    search: Optional[str] = None,
    options: PaginationOptions = Depends(pagination_params),
    _: Caller = Depends(require_admin),
    user_service: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    filters = drop_none(role=role.value if role else None, isActive=is_active)
    page = await run_service(user_service.list_users, filters, options, search)
    return page.to_dict()


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=Dict[str, Any])
async def create_user(
    user_data: UserCreate,
    _: Caller = Depends(require_admin),
    user_service: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    return await run_service(user_service.create_user, user_data.to_payload())


@router.get("/stats", response_model=Dict[str, Any])
async def get_user_stats(
    _: Caller = Depends(require_admin),
    user_service: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    return await run_service(user_service.get_stats)


@router.get("/{user_id}", response_model=Dict[str, Any])
async def get_user(
    user_id: str,
    _: Caller = Depends(require_admin),
    user_service: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    return await run_service(user_service.get_user, user_id)


@router.patch("/{user_id}", response_model=Dict[str, Any])
async def update_user(
    user_id: str,
    user_data: UserUpdate,
    _: Caller = Depends(require_admin),
    user_service: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    return await run_service(user_service.update_user, user_id, user_data.to_payload())


@router.patch("/{user_id}/status", response_model=Dict[str, Any])
async def set_user_status(
    user_id: str,
    status_data: ActiveStatusUpdate,
    _: Caller = Depends(require_admin),
    user_service: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    return await run_service(user_service.set_active_status, user_id, status_data.is_active)


@router.delete("/{user_id}", response_model=MessageResponse)
async def deactivate_user(
    user_id: str,
    _: Caller = Depends(require_admin),
    user_service: UserService = Depends(get_user_service),
) -> MessageResponse:
    """Users are deactivated, never physically removed."""
    await run_service(user_service.set_active_status, user_id, False)
    return MessageResponse(message="User deactivated successfully")
