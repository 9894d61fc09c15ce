# backend/app/routes/v1/summary.py
"""Admin dashboard summary - API v1."""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from ...api.dependencies import get_summary_service, require_admin
from ...principal import Caller
from ...services.summary_service import SummaryService
from .common import run_service

router = APIRouter(tags=["summary-v1"])


@router.get("", response_model=Dict[str, Any])
async def get_summary(
    _: Caller = Depends(require_admin),
    summary_service: SummaryService = Depends(get_summary_service),
) -> Dict[str, Any]:
    """Per-collection statistics in one response."""
    return await run_service(summary_service.get_summary)
