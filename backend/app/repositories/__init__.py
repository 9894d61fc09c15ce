# backend/app/repositories/__init__.py
"""
Repository layer for the counseling platform.

Every entity lives in its own namespace of the generic item store; entity
repositories declare an ``EntitySchema`` and inherit CRUD plus the shared
query/filter/sort/paginate pipeline from ``BaseRepository``.

Usage:
    from app.repositories import RepositoryFactory

    # In a service:
    repository = RepositoryFactory.create_lead_repository(db)
    page = repository.find_all({"contacted": False}, PaginationOptions(page=2))
"""

from .banner_repository import BannerRepository
from .base_repository import BaseRepository, IRepository
from .blog_repository import BlogRepository
from .booking_repository import BookingRepository
from .category_repository import CategoryRepository
from .counselor_repository import CounselorRepository
from .factory import RepositoryFactory
from .item_store import IItemStore, IndexSpec, SqlItemStore
from .lead_activity_repository import LeadActivityRepository
from .lead_repository import LeadRepository
from .material_repository import MaterialRepository
from .media_repository import ReelRepository, VideoRepository
from .query_pipeline import EntitySchema, PageResult, PaginationOptions
from .team_repository import TeamRepository
from .testimonial_repository import TestimonialRepository
from .user_repository import UserRepository

__all__ = [
    "BannerRepository",
    "BaseRepository",
    "BlogRepository",
    "BookingRepository",
    "CategoryRepository",
    "CounselorRepository",
    "EntitySchema",
    "IItemStore",
    "IRepository",
    "IndexSpec",
    "LeadActivityRepository",
    "LeadRepository",
    "MaterialRepository",
    "PageResult",
    "PaginationOptions",
    "ReelRepository",
    "RepositoryFactory",
    "SqlItemStore",
    "TeamRepository",
    "TestimonialRepository",
    "UserRepository",
    "VideoRepository",
]
