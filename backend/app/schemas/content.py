# backend/app/schemas/content.py
"""Request schemas for editorial content: blogs, categories, testimonials, team, banners."""

from typing import Any, Dict, List, Optional

from pydantic import Field

from ..core.enums import BlogStatus
from .base import CamelModel


class BlogCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=300)
    content: str = Field(..., min_length=1)
    excerpt: Optional[str] = None
    featured_image: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    category: Optional[str] = None
    status: BlogStatus = BlogStatus.DRAFT


class BlogUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=300)
    content: Optional[str] = None
    excerpt: Optional[str] = None
    featured_image: Optional[str] = None
    tags: Optional[List[str]] = None
    category: Optional[str] = None
    status: Optional[BlogStatus] = None


class CategoryCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=120)
    description: Optional[str] = None


class CategoryUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=120)
    description: Optional[str] = None


class TestimonialCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    rating: int = Field(..., description="1 to 5")
    message: str = Field(..., min_length=1, max_length=5000)
    designation: Optional[str] = None
    company: Optional[str] = None
    profile_image: Optional[str] = None
    social_media: Optional[Dict[str, Any]] = None
    display_order: Optional[int] = None


class TestimonialUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    email: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    rating: Optional[int] = None
    message: Optional[str] = Field(None, min_length=1, max_length=5000)
    designation: Optional[str] = None
    company: Optional[str] = None
    profile_image: Optional[str] = None
    social_media: Optional[Dict[str, Any]] = None
    display_order: Optional[int] = None


class TeamMemberCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=200)
    designation: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    display_order: Optional[int] = None
    is_published: bool = False


class TeamMemberUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    designation: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    display_order: Optional[int] = None


class BannerCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=300)
    description: Optional[str] = None
    image_url: str = Field(..., min_length=1)
    link: Optional[str] = None
    alt_text: Optional[str] = None
    is_published: bool = False


class BannerUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=300)
    description: Optional[str] = None
    image_url: Optional[str] = None
    link: Optional[str] = None
    alt_text: Optional[str] = None
