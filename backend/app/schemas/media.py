# backend/app/schemas/media.py
"""Request schemas for reels, videos and study materials."""

from typing import List, Optional

from pydantic import Field

from .base import CamelModel


class MediaCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=300)
    description: Optional[str] = None
    video_url: str = Field(..., min_length=1)
    thumbnail_url: Optional[str] = None
    duration: Optional[float] = Field(None, ge=0, description="Seconds")
    file_size: Optional[int] = Field(None, ge=0)
    tags: List[str] = Field(default_factory=list)
    category: Optional[str] = None
    display_order: Optional[int] = None
    is_published: bool = False


class MediaUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=300)
    description: Optional[str] = None
    video_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    duration: Optional[float] = Field(None, ge=0)
    file_size: Optional[int] = Field(None, ge=0)
    tags: Optional[List[str]] = None
    category: Optional[str] = None
    display_order: Optional[int] = None


class MaterialCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=300)
    description: Optional[str] = None
    file_url: str = Field(..., min_length=1)
    file_name: Optional[str] = None
    file_type: Optional[str] = None
    file_size: Optional[int] = Field(None, ge=0)
    category: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    is_published: bool = False


class MaterialUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=300)
    description: Optional[str] = None
    category: Optional[str] = None
    tags: Optional[List[str]] = None
    is_published: Optional[bool] = None
