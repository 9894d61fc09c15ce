# backend/app/routes/v1/__init__.py
"""
API v1 Routes

Versioned API endpoints under /api/v1.
All new endpoints should be added here.
"""

from . import (
    banners,
    blogs,
    bookings,
    categories,
    counselors,
    health,
    lead_activities,
    leads,
    materials,
    media,
    summary,
    team,
    testimonials,
    users,
)

__all__ = [
    "banners",
    "blogs",
    "bookings",
    "categories",
    "counselors",
    "health",
    "lead_activities",
    "leads",
    "materials",
    "media",
    "summary",
    "team",
    "testimonials",
    "users",
]
