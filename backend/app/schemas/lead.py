# backend/app/schemas/lead.py
"""Lead and lead activity request schemas."""

from typing import Optional

from pydantic import Field

from ..core.enums import ActivityType
from .base import CamelModel


class LeadCreate(CamelModel):
    full_name: str = Field(..., min_length=1, max_length=200)
    email: str = Field(..., min_length=3, max_length=320)
    phone: Optional[str] = Field(None, max_length=40)
    area_of_interest: Optional[str] = Field(None, max_length=200)
    message: Optional[str] = Field(None, max_length=5000)


class LeadUpdate(CamelModel):
    full_name: Optional[str] = Field(None, min_length=1, max_length=200)
    email: Optional[str] = Field(None, min_length=3, max_length=320)
    phone: Optional[str] = Field(None, max_length=40)
    area_of_interest: Optional[str] = Field(None, max_length=200)
    message: Optional[str] = Field(None, max_length=5000)


class ActiveStatusUpdate(CamelModel):
    is_active: bool


class LeadActivityCreate(CamelModel):
    lead_id: str = Field(..., min_length=1)
    activity_type: ActivityType = ActivityType.OTHER
    remarks: Optional[str] = Field(None, max_length=5000)
    activity_date: Optional[str] = None
    next_follow_up_date: Optional[str] = None


class LeadActivityUpdate(CamelModel):
    activity_type: Optional[ActivityType] = None
    remarks: Optional[str] = Field(None, max_length=5000)
    activity_date: Optional[str] = None
    next_follow_up_date: Optional[str] = None
