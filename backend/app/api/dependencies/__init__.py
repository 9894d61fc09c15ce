# backend/app/api/dependencies/__init__.py
"""
Central export point for all dependencies.

This module re-exports all dependencies from submodules
for convenient access throughout the application.
"""

from .auth import get_current_caller, get_current_caller_optional, require_admin
from .database import get_db
from .services import (
    get_banner_service,
    get_blog_service,
    get_booking_service,
    get_category_service,
    get_counselor_service,
    get_lead_activity_service,
    get_lead_service,
    get_material_service,
    get_notification_service,
    get_reel_service,
    get_summary_service,
    get_team_service,
    get_testimonial_service,
    get_user_service,
    get_video_service,
)

__all__ = [
    # Auth
    "get_current_caller",
    "get_current_caller_optional",
    "require_admin",
    # Database
    "get_db",
    # Services
    "get_banner_service",
    "get_blog_service",
    "get_booking_service",
    "get_category_service",
    "get_counselor_service",
    "get_lead_activity_service",
    "get_lead_service",
    "get_material_service",
    "get_notification_service",
    "get_reel_service",
    "get_summary_service",
    "get_team_service",
    "get_testimonial_service",
    "get_user_service",
    "get_video_service",
]
