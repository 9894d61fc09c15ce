# backend/app/schemas/people.py
"""Request schemas for users and counselors."""

from typing import List, Optional

from pydantic import Field

from ..core.enums import RoleName
from .base import CamelModel


class UserCreate(CamelModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, max_length=320)
    phone_number: Optional[str] = Field(None, max_length=40)
    role: RoleName = RoleName.USER
    profile_picture: Optional[str] = None


class UserUpdate(CamelModel):
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[str] = Field(None, min_length=3, max_length=320)
    phone_number: Optional[str] = Field(None, max_length=40)
    role: Optional[RoleName] = None
    profile_picture: Optional[str] = None


class ProfileUpdate(CamelModel):
    """Self-service profile edit; role and email stay admin-managed."""

    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone_number: Optional[str] = Field(None, max_length=40)
    profile_picture: Optional[str] = None


class CounselorCreate(CamelModel):
    full_name: str = Field(..., min_length=1, max_length=200)
    email: str = Field(..., min_length=3, max_length=320)
    title: Optional[str] = None
    years_of_experience: Optional[int] = Field(None, ge=0)
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    specialties: List[str] = Field(default_factory=list)
    rating: Optional[float] = None


class CounselorUpdate(CamelModel):
    full_name: Optional[str] = Field(None, min_length=1, max_length=200)
    email: Optional[str] = Field(None, min_length=3, max_length=320)
    title: Optional[str] = None
    years_of_experience: Optional[int] = Field(None, ge=0)
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    specialties: Optional[List[str]] = None


class RatingUpdate(CamelModel):
    rating: float
