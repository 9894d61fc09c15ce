# backend/app/schemas/__init__.py
"""
Pydantic request/response schemas.

Request bodies are camelCase on the wire; ``to_payload`` hands services
the fields the client actually sent.
"""

from .base import CamelModel, MessageResponse, PageResponse
from .booking import BookingCancel, BookingConfirm, BookingCreate, BookingUpdate
from .content import (
    BannerCreate,
    BannerUpdate,
    BlogCreate,
    BlogUpdate,
    CategoryCreate,
    CategoryUpdate,
    TeamMemberCreate,
    TeamMemberUpdate,
    TestimonialCreate,
    TestimonialUpdate,
)
from .lead import ActiveStatusUpdate, LeadActivityCreate, LeadActivityUpdate, LeadCreate, LeadUpdate
from .media import MaterialCreate, MaterialUpdate, MediaCreate, MediaUpdate
from .people import CounselorCreate, CounselorUpdate, ProfileUpdate, RatingUpdate, UserCreate, UserUpdate

__all__ = [
    "ActiveStatusUpdate",
    "BannerCreate",
    "BannerUpdate",
    "BlogCreate",
    "BlogUpdate",
    "BookingCancel",
    "BookingConfirm",
    "BookingCreate",
    "BookingUpdate",
    "CamelModel",
    "CategoryCreate",
    "CategoryUpdate",
    "CounselorCreate",
    "CounselorUpdate",
    "LeadActivityCreate",
    "LeadActivityUpdate",
    "LeadCreate",
    "LeadUpdate",
    "MaterialCreate",
    "MaterialUpdate",
    "MediaCreate",
    "MediaUpdate",
    "MessageResponse",
    "PageResponse",
    "ProfileUpdate",
    "RatingUpdate",
    "TeamMemberCreate",
    "TeamMemberUpdate",
    "TestimonialCreate",
    "TestimonialUpdate",
    "UserCreate",
    "UserUpdate",
]
