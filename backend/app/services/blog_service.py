# backend/app/services/blog_service.py
"""
Blog Service.

Slugs derive from titles and must be unique. Drafts and archived posts
are visible only to their author or an admin; reading a published post
counts a view.
"""

from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.orm import Session

from ..core.enums import BlogStatus
from ..core.exceptions import (
    ConflictException,
    DuplicateResourceException,
    NotFoundException,
    ValidationException,
)
from ..core.timezone_utils import utc_now_iso
from ..principal import Caller
from ..repositories.blog_repository import BlogRepository
from ..repositories.factory import RepositoryFactory
from ..repositories.item_store import Item
from ..repositories.query_pipeline import PageResult, PaginationOptions
from ..repositories.user_repository import UserRepository
from ..utils.text import make_excerpt, slugify
from .base import BaseService
from .user_service import user_summary

BLOG_FIELDS = ("title", "content", "excerpt", "featuredImage", "tags", "category", "status")


class BlogService(BaseService):
    def __init__(
        self,
        db: Session,
        repository: Optional[BlogRepository] = None,
        user_repository: Optional[UserRepository] = None,
    ):
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_blog_repository(db)
        self.user_repository = user_repository or RepositoryFactory.create_user_repository(db)

    # Helpers

    def _populate(self, blogs: List[Item]) -> List[Item]:
        authors = self.user_repository.get_many(b.get("authorId") for b in blogs)
        return [
            {**b, "author": user_summary(authors.get(b.get("authorId")), b.get("authorId"))}
            for b in blogs
        ]

    def _populate_page(self, page: PageResult) -> PageResult:
        page.items = self._populate(page.items)
        return page

    def _get_or_404(self, blog_id: str) -> Item:
        blog = self.repository.get_by_id(blog_id)
        if blog is None or not blog.get("isActive"):
            raise NotFoundException("Blog not found", details={"blog_id": blog_id})
        return blog

    def _unique_slug(self, title: str, exclude_id: Optional[str] = None) -> str:
        slug = slugify(title)
        if not slug:
            raise ValidationException("Title must contain letters or digits")
        if self.repository.slug_exists(slug, exclude_id=exclude_id):
            raise DuplicateResourceException("Blog", "slug", slug)
        return slug

    @staticmethod
    def _clean(data: Mapping[str, Any]) -> Dict[str, Any]:
        cleaned = {k: data[k] for k in BLOG_FIELDS if k in data and data[k] is not None}
        if "status" in cleaned:
            try:
                cleaned["status"] = BlogStatus(cleaned["status"]).value
            except ValueError:
                raise ValidationException("Invalid blog status", details={"status": cleaned["status"]})
        return cleaned

    def _can_see_unpublished(self, blog: Item, caller: Optional[Caller]) -> bool:
        return caller is not None and (caller.is_admin or caller.id == blog.get("authorId"))

    def _visible(self, blog: Item, caller: Optional[Caller]) -> Item:
        if blog.get("status") == BlogStatus.PUBLISHED.value:
            return self.repository.increment_view(blog["id"]) or blog
        if not self._can_see_unpublished(blog, caller):
            raise NotFoundException("Blog not found", details={"blog_id": blog["id"]})
        return blog

    # Commands

    @BaseService.measure_operation("create_blog")
    def create_blog(self, data: Mapping[str, Any], caller: Optional[Caller]) -> Item:
        author = self.require_caller(caller)
        fields = self._clean(data)
        fields["slug"] = self._unique_slug(fields.get("title", ""))
        fields.setdefault("excerpt", make_excerpt(fields.get("content")))
        fields.setdefault("tags", [])
        fields.setdefault("status", BlogStatus.DRAFT.value)
        if fields["status"] == BlogStatus.PUBLISHED.value:
            fields["publishedAt"] = utc_now_iso()
        blog = self.repository.create({**fields, "authorId": author.id, "viewCount": 0})
        self.log_operation("blog_created", blog_id=blog["id"], author_id=author.id)
        return self._populate([blog])[0]

    @BaseService.measure_operation("update_blog")
    def update_blog(self, blog_id: str, data: Mapping[str, Any], caller: Optional[Caller]) -> Item:
        blog = self._get_or_404(blog_id)
        self.ensure_owner_or_admin(caller, blog.get("authorId"), "blog")
        changes = self._clean(data)
        if "title" in changes and changes["title"] != blog.get("title"):
            changes["slug"] = self._unique_slug(changes["title"], exclude_id=blog_id)
        if "content" in changes and "excerpt" not in changes and not data.get("excerpt"):
            changes["excerpt"] = make_excerpt(changes["content"])
        if changes.get("status") == BlogStatus.PUBLISHED.value and not blog.get("publishedAt"):
            changes["publishedAt"] = utc_now_iso()
        return self._populate([self.repository.update(blog_id, changes)])[0]

    @BaseService.measure_operation("delete_blog")
    def delete_blog(self, blog_id: str, caller: Optional[Caller]) -> None:
        blog = self._get_or_404(blog_id)
        self.ensure_owner_or_admin(caller, blog.get("authorId"), "blog")
        self.repository.soft_delete(blog_id)
        self.log_operation("blog_deleted", blog_id=blog_id)

    def _set_status(self, blog_id: str, caller: Optional[Caller], status: BlogStatus) -> Item:
        blog = self._get_or_404(blog_id)
        self.ensure_owner_or_admin(caller, blog.get("authorId"), "blog")
        changes: Dict[str, Any] = {"status": status.value}
        if status == BlogStatus.PUBLISHED:
            if blog.get("status") == BlogStatus.PUBLISHED.value:
                raise ConflictException("Blog is already published")
            changes["publishedAt"] = utc_now_iso()
        return self.repository.update(blog_id, changes)

    def publish_blog(self, blog_id: str, caller: Optional[Caller]) -> Item:
        return self._set_status(blog_id, caller, BlogStatus.PUBLISHED)

    def unpublish_blog(self, blog_id: str, caller: Optional[Caller]) -> Item:
        return self._set_status(blog_id, caller, BlogStatus.DRAFT)

    def archive_blog(self, blog_id: str, caller: Optional[Caller]) -> Item:
        return self._set_status(blog_id, caller, BlogStatus.ARCHIVED)

    # Queries

    def get_blog(self, blog_id: str, caller: Optional[Caller] = None) -> Item:
        return self._populate([self._visible(self._get_or_404(blog_id), caller)])[0]

    def get_blog_by_slug(self, slug: str, caller: Optional[Caller] = None) -> Item:
        blog = self.repository.find_by_slug(slug)
        if blog is None or not blog.get("isActive"):
            raise NotFoundException("Blog not found", details={"slug": slug})
        return self._populate([self._visible(blog, caller)])[0]

    @BaseService.measure_operation("list_blogs")
    def list_blogs(
        self,
        filters: Optional[Mapping[str, Any]] = None,
        options: Optional[PaginationOptions] = None,
        search: Optional[str] = None,
    ) -> PageResult:
        criteria = {"isActive": True, **dict(filters or {})}
        return self._populate_page(self.repository.find_all(criteria, options, search))

    def search_blogs(self, query: str, options: Optional[PaginationOptions] = None) -> PageResult:
        """Published, active posts only."""
        return self.list_blogs({"status": BlogStatus.PUBLISHED.value}, options, query)

    def get_most_viewed(self, limit: int = 10) -> List[Item]:
        return self._populate(self.repository.find_most_viewed(limit))

    def get_recent(self, limit: int = 10) -> List[Item]:
        return self._populate(self.repository.find_recent(limit))

    def get_all_tags(self) -> List[str]:
        return self.repository.all_tags()

    def get_stats(self) -> Dict[str, Any]:
        return self.repository.get_stats()

    def get_author_stats(self, caller: Optional[Caller]) -> Dict[str, Any]:
        return self.repository.get_author_stats(self.require_caller(caller).id)
