# backend/app/services/summary_service.py
"""Admin dashboard summary assembled from each collection's stats."""

from typing import Any, Callable, Dict

from sqlalchemy.orm import Session

from ..core.timezone_utils import utc_now_iso
from ..repositories.factory import RepositoryFactory
from .base import BaseService

SUMMARY_SECTIONS: Dict[str, Callable[[Session], Any]] = {
    "users": RepositoryFactory.create_user_repository,
    "blogs": RepositoryFactory.create_blog_repository,
    "testimonials": RepositoryFactory.create_testimonial_repository,
    "reels": RepositoryFactory.create_reel_repository,
    "videos": RepositoryFactory.create_video_repository,
    "leads": RepositoryFactory.create_lead_repository,
    "materials": RepositoryFactory.create_material_repository,
    "bookings": RepositoryFactory.create_booking_repository,
    "counselors": RepositoryFactory.create_counselor_repository,
    "categories": RepositoryFactory.create_category_repository,
    "banners": RepositoryFactory.create_banner_repository,
}


class SummaryService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)

    @BaseService.measure_operation("get_summary")
    def get_summary(self) -> Dict[str, Any]:
        summary: Dict[str, Any] = {
            section: factory(self.db).get_stats() for section, factory in SUMMARY_SECTIONS.items()
        }
        summary["timestamp"] = utc_now_iso()
        return summary
