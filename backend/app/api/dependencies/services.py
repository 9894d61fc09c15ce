# backend/app/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.

Each provider builds a request-scoped service over the request's session.
Stateless collaborators (template rendering, email, storage) are cached.
"""

from functools import lru_cache
import logging
from typing import Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from ...core.config import settings
from ...events.publisher import EventPublisher
from ...services.banner_service import BannerService
from ...services.blog_service import BlogService
from ...services.booking_service import BookingService
from ...services.category_service import CategoryService
from ...services.counselor_service import CounselorService
from ...services.email import EmailService
from ...services.lead_activity_service import LeadActivityService
from ...services.lead_service import LeadService
from ...services.material_service import MaterialService
from ...services.media_service import ReelService, VideoService
from ...services.notification_service import NotificationService
from ...services.storage_service import StorageService
from ...services.summary_service import SummaryService
from ...services.team_service import TeamService
from ...services.template_service import TemplateService
from ...services.testimonial_service import TestimonialService
from ...services.user_service import UserService
from .database import get_db

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_template_service() -> TemplateService:
    return TemplateService()


@lru_cache(maxsize=1)
def get_email_service() -> EmailService:
    return EmailService()


def get_notification_service(
    template_service: TemplateService = Depends(get_template_service),
    email_service: EmailService = Depends(get_email_service),
) -> NotificationService:
    return NotificationService(template_service=template_service, email_service=email_service)


def get_event_publisher() -> Optional[EventPublisher]:
    """Celery publisher when async notifications are enabled, otherwise inline delivery."""
    return EventPublisher() if settings.async_notifications else None


@lru_cache(maxsize=1)
def get_storage_service() -> StorageService:
    return StorageService()


def get_booking_service(
    db: Session = Depends(get_db),
    notification_service: NotificationService = Depends(get_notification_service),
    event_publisher: Optional[EventPublisher] = Depends(get_event_publisher),
) -> BookingService:
    """
    Get booking service instance.

    Args:
        db: Database session
        notification_service: Email notifications for inline delivery
        event_publisher: Celery publisher, if configured

    Returns:
        BookingService instance
    """
    return BookingService(db, notification_service, event_publisher)


def get_lead_service(db: Session = Depends(get_db)) -> LeadService:
    return LeadService(db)


def get_lead_activity_service(db: Session = Depends(get_db)) -> LeadActivityService:
    return LeadActivityService(db)


def get_blog_service(db: Session = Depends(get_db)) -> BlogService:
    return BlogService(db)


def get_category_service(db: Session = Depends(get_db)) -> CategoryService:
    return CategoryService(db)


def get_counselor_service(db: Session = Depends(get_db)) -> CounselorService:
    return CounselorService(db)


def get_testimonial_service(db: Session = Depends(get_db)) -> TestimonialService:
    return TestimonialService(db)


def get_team_service(db: Session = Depends(get_db)) -> TeamService:
    return TeamService(db)


def get_reel_service(
    db: Session = Depends(get_db), storage: StorageService = Depends(get_storage_service)
) -> ReelService:
    return ReelService(db, storage)


def get_video_service(
    db: Session = Depends(get_db), storage: StorageService = Depends(get_storage_service)
) -> VideoService:
    return VideoService(db, storage)


def get_banner_service(db: Session = Depends(get_db)) -> BannerService:
    return BannerService(db)


def get_material_service(
    db: Session = Depends(get_db), storage: StorageService = Depends(get_storage_service)
) -> MaterialService:
    return MaterialService(db, storage_service=storage)


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    return UserService(db)


def get_summary_service(db: Session = Depends(get_db)) -> SummaryService:
    return SummaryService(db)
