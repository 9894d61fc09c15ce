# backend/tests/unit/test_content_services.py
"""
Unit tests for blogs, testimonials and banners.

Covers ownership checks, draft visibility, duplicate handling and the
single-published-banner rule.
"""

import pytest

from app.core.exceptions import (
    ConflictException,
    DuplicateResourceException,
    ForbiddenException,
    NotFoundException,
    UnauthorizedException,
    ValidationException,
)
from app.services.banner_service import BannerService
from app.services.blog_service import BlogService
from app.services.testimonial_service import TestimonialService


@pytest.fixture
def blog_service(unit_db):
    return BlogService(unit_db)


@pytest.fixture
def testimonial_service(unit_db):
    return TestimonialService(unit_db)


@pytest.fixture
def banner_service(unit_db):
    return BannerService(unit_db)


class TestBlogService:
    def test_create_requires_caller(self, blog_service):
        with pytest.raises(UnauthorizedException):
            blog_service.create_blog({"title": "Hello", "content": "World"}, None)

    def test_create_defaults_to_draft_with_slug(self, blog_service, user_caller):
        blog = blog_service.create_blog({"title": "Why Design Matters?", "content": "Because."}, user_caller)

        assert blog["slug"] == "why-design-matters"
        assert blog["status"] == "draft"
        assert blog["excerpt"] == "Because."
        assert blog["author"]["id"] == user_caller.id

    def test_duplicate_slug_conflicts(self, blog_service, user_caller):
        blog_service.create_blog({"title": "Same Title", "content": "a"}, user_caller)

        with pytest.raises(DuplicateResourceException):
            blog_service.create_blog({"title": "same title!", "content": "b"}, user_caller)

    def test_invalid_status_is_rejected(self, blog_service, user_caller):
        with pytest.raises(ValidationException):
            blog_service.create_blog({"title": "T", "content": "c", "status": "live"}, user_caller)

    def test_draft_hidden_from_other_users(self, blog_service, user_caller, other_caller, admin_caller):
        blog = blog_service.create_blog({"title": "Draft", "content": "wip"}, user_caller)

        with pytest.raises(NotFoundException):
            blog_service.get_blog(blog["id"], other_caller)
        with pytest.raises(NotFoundException):
            blog_service.get_blog(blog["id"], None)
        assert blog_service.get_blog(blog["id"], user_caller)["id"] == blog["id"]
        assert blog_service.get_blog(blog["id"], admin_caller)["id"] == blog["id"]

    def test_reading_published_post_counts_a_view(self, blog_service, user_caller):
        blog = blog_service.create_blog(
            {"title": "Live", "content": "text", "status": "published"}, user_caller
        )

        blog_service.get_blog(blog["id"])
        seen = blog_service.get_blog_by_slug("live")

        assert seen["viewCount"] == 2
        assert seen["publishedAt"]

    def test_only_owner_or_admin_may_edit(self, blog_service, user_caller, other_caller, admin_caller):
        blog = blog_service.create_blog({"title": "Mine", "content": "text"}, user_caller)

        with pytest.raises(ForbiddenException):
            blog_service.update_blog(blog["id"], {"content": "hijacked"}, other_caller)

        updated = blog_service.update_blog(blog["id"], {"content": "edited by admin"}, admin_caller)
        assert updated["content"] == "edited by admin"

    def test_publish_twice_conflicts(self, blog_service, user_caller):
        blog = blog_service.create_blog({"title": "Post", "content": "text"}, user_caller)
        blog_service.publish_blog(blog["id"], user_caller)

        with pytest.raises(ConflictException):
            blog_service.publish_blog(blog["id"], user_caller)

    def test_deleted_blog_is_gone(self, blog_service, user_caller):
        blog = blog_service.create_blog({"title": "Bye", "content": "text"}, user_caller)
        blog_service.delete_blog(blog["id"], user_caller)

        with pytest.raises(NotFoundException):
            blog_service.get_blog(blog["id"], user_caller)


class TestTestimonialService:
    def test_new_testimonials_await_approval(self, testimonial_service, user_caller):
        testimonial = testimonial_service.create_testimonial(
            {"name": "Uma", "rating": 5, "message": "Great course"}, user_caller
        )

        assert testimonial["isApproved"] is False
        assert testimonial["userId"] == user_caller.id
        assert testimonial_service.list_approved().total == 0

        testimonial_service.approve(testimonial["id"])
        assert testimonial_service.list_approved().total == 1

    @pytest.mark.parametrize("rating", [0, 6, "five"])
    def test_rating_must_be_one_to_five(self, testimonial_service, rating):
        with pytest.raises(ValidationException):
            testimonial_service.create_testimonial({"name": "X", "rating": rating, "message": "m"})

    def test_same_message_twice_conflicts(self, testimonial_service, user_caller):
        testimonial_service.create_testimonial({"name": "Uma", "rating": 4, "message": "Loved it"}, user_caller)

        with pytest.raises(ConflictException):
            testimonial_service.create_testimonial(
                {"name": "Uma", "rating": 4, "message": " Loved it "}, user_caller
            )

    def test_other_user_cannot_modify(self, testimonial_service, user_caller, other_caller, admin_caller):
        testimonial = testimonial_service.create_testimonial(
            {"name": "Uma", "rating": 4, "message": "Mine"}, user_caller
        )

        with pytest.raises(ForbiddenException):
            testimonial_service.update_testimonial(testimonial["id"], {"rating": 1}, other_caller)
        with pytest.raises(ForbiddenException):
            testimonial_service.delete_testimonial(testimonial["id"], other_caller)

        deactivated = testimonial_service.deactivate_testimonial(testimonial["id"], admin_caller)
        assert deactivated["isActive"] is False

    def test_anonymous_testimonial_is_admin_only(self, testimonial_service, user_caller):
        testimonial = testimonial_service.create_testimonial({"name": "Anon", "rating": 3, "message": "ok"})

        with pytest.raises(ForbiddenException):
            testimonial_service.update_testimonial(testimonial["id"], {"rating": 4}, user_caller)

    def test_reject_clears_favorite(self, testimonial_service):
        testimonial = testimonial_service.create_testimonial({"name": "A", "rating": 5, "message": "wow"})
        testimonial_service.approve(testimonial["id"])
        testimonial_service.toggle_favorite(testimonial["id"])
        assert len(testimonial_service.get_favorites()) == 1

        rejected = testimonial_service.reject(testimonial["id"])

        assert rejected["isApproved"] is False
        assert rejected["isFavorite"] is False
        assert testimonial_service.get_favorites() == []


class TestBannerService:
    def test_publishing_is_exclusive(self, banner_service, admin_caller):
        first = banner_service.create_banner({"title": "Spring", "isPublished": True}, admin_caller)
        second = banner_service.create_banner({"title": "Summer", "isPublished": True}, admin_caller)

        published = banner_service.get_published()

        assert [b["id"] for b in published] == [second["id"]]
        assert banner_service.get_banner(first["id"])["isPublished"] is False

    def test_repair_keeps_most_recent(self, banner_service):
        old = banner_service.create_banner({"title": "Old"})
        new = banner_service.create_banner({"title": "New"})
        # Two publishes that raced past each other
        banner_service.repository.update(
            old["id"], {"isPublished": True, "publishedAt": "2030-01-01T00:00:00+00:00"}
        )
        banner_service.repository.update(
            new["id"], {"isPublished": True, "publishedAt": "2030-02-01T00:00:00+00:00"}
        )

        kept = banner_service.repair()

        assert kept["id"] == new["id"]
        assert [b["id"] for b in banner_service.get_published()] == [new["id"]]

    def test_repair_with_nothing_published(self, banner_service):
        banner_service.create_banner({"title": "Draft"})

        assert banner_service.repair() is None

    def test_deleted_banner_is_not_found(self, banner_service):
        banner = banner_service.create_banner({"title": "Gone", "isPublished": True})
        banner_service.delete_banner(banner["id"])

        with pytest.raises(NotFoundException):
            banner_service.get_banner(banner["id"])
        assert banner_service.get_published() == []
