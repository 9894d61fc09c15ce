# backend/app/repositories/factory.py
"""
Repository Factory for the counseling platform.

Provides centralized creation of repository instances,
ensuring consistent initialization and dependency injection.
"""

from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

# Avoid circular imports
if TYPE_CHECKING:
    from .banner_repository import BannerRepository
    from .blog_repository import BlogRepository
    from .booking_repository import BookingRepository
    from .category_repository import CategoryRepository
    from .counselor_repository import CounselorRepository
    from .lead_activity_repository import LeadActivityRepository
    from .lead_repository import LeadRepository
    from .material_repository import MaterialRepository
    from .media_repository import ReelRepository, VideoRepository
    from .team_repository import TeamRepository
    from .testimonial_repository import TestimonialRepository
    from .user_repository import UserRepository


class RepositoryFactory:
    """
    Factory class for creating repository instances.

    Centralizes repository creation so services never construct item
    stores themselves.
    """

    @staticmethod
    def create_user_repository(db: Session) -> "UserRepository":
        from .user_repository import UserRepository

        return UserRepository(db)

    @staticmethod
    def create_lead_repository(db: Session) -> "LeadRepository":
        from .lead_repository import LeadRepository

        return LeadRepository(db)

    @staticmethod
    def create_lead_activity_repository(db: Session) -> "LeadActivityRepository":
        from .lead_activity_repository import LeadActivityRepository

        return LeadActivityRepository(db)

    @staticmethod
    def create_blog_repository(db: Session) -> "BlogRepository":
        from .blog_repository import BlogRepository

        return BlogRepository(db)

    @staticmethod
    def create_category_repository(db: Session) -> "CategoryRepository":
        from .category_repository import CategoryRepository

        return CategoryRepository(db)

    @staticmethod
    def create_counselor_repository(db: Session) -> "CounselorRepository":
        from .counselor_repository import CounselorRepository

        return CounselorRepository(db)

    @staticmethod
    def create_booking_repository(db: Session) -> "BookingRepository":
        """Create repository for bookings and their slot locks."""
        from .booking_repository import BookingRepository

        return BookingRepository(db)

    @staticmethod
    def create_testimonial_repository(db: Session) -> "TestimonialRepository":
        from .testimonial_repository import TestimonialRepository

        return TestimonialRepository(db)

    @staticmethod
    def create_team_repository(db: Session) -> "TeamRepository":
        from .team_repository import TeamRepository

        return TeamRepository(db)

    @staticmethod
    def create_reel_repository(db: Session) -> "ReelRepository":
        from .media_repository import ReelRepository

        return ReelRepository(db)

    @staticmethod
    def create_video_repository(db: Session) -> "VideoRepository":
        from .media_repository import VideoRepository

        return VideoRepository(db)

    @staticmethod
    def create_banner_repository(db: Session) -> "BannerRepository":
        from .banner_repository import BannerRepository

        return BannerRepository(db)

    @staticmethod
    def create_material_repository(db: Session) -> "MaterialRepository":
        from .material_repository import MaterialRepository

        return MaterialRepository(db)
