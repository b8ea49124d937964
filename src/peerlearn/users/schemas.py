"""Pydantic schemas for user profiles."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, EmailStr, Field

# --- Request schemas ---


class ProfileCreateRequest(BaseModel):
    """First sign-up: create the caller's own profile."""

    email: EmailStr
    full_name: str = Field(..., min_length=1, max_length=128)
    department: str = Field(..., min_length=1, max_length=128)
    year_of_study: int = Field(1, ge=1, le=8)
    bio: str | None = Field(None, max_length=2000)
    profile_picture: str | None = Field(None, max_length=512)


class ProfileUpdateRequest(BaseModel):
    """Profile fields a user may change. XP, level, role and earnings are not here."""

    full_name: str | None = Field(None, min_length=1, max_length=128)
    department: str | None = Field(None, min_length=1, max_length=128)
    year_of_study: int | None = Field(None, ge=1, le=8)
    bio: str | None = Field(None, max_length=2000)
    profile_picture: str | None = Field(None, max_length=512)
    linkedin_url: str | None = Field(None, max_length=512)
    github_url: str | None = Field(None, max_length=512)
    portfolio_url: str | None = Field(None, max_length=512)
    experience_description: str | None = Field(None, max_length=4000)


# --- Response schemas ---


class UserResponse(BaseModel):
    id: str
    email: str
    full_name: str
    department: str
    year_of_study: int
    role: str
    bio: str | None = None
    profile_picture: str | None = None
    linkedin_url: str | None = None
    github_url: str | None = None
    portfolio_url: str | None = None
    experience_description: str | None = None
    xp_points: int
    level_number: int
    is_verified: bool
    total_earnings: Decimal
    created_at: datetime

    model_config = {"from_attributes": True}


class UserListResponse(BaseModel):
    users: list[UserResponse]
    total: int
