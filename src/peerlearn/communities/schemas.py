"""Pydantic schemas for learning communities."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

# --- Communities ---


class CommunityCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=128)
    category: str
    description: str | None = Field(None, max_length=4000)
    course_id: str | None = None


class CommunityUpdateRequest(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=128)
    category: str | None = None
    description: str | None = Field(None, max_length=4000)
    is_active: bool | None = None


class CommunityResponse(BaseModel):
    id: str
    name: str
    description: str | None = None
    category: str
    created_by: str
    course_id: str | None = None
    is_active: bool
    created_at: datetime
    member_count: int
    is_member: bool


class CommunityListResponse(BaseModel):
    communities: list[CommunityResponse]


# --- Members ---


class MemberResponse(BaseModel):
    id: str
    user_id: str
    full_name: str | None = None
    year_of_study: int | None = None
    role: str
    joined_at: datetime


class MemberListResponse(BaseModel):
    members: list[MemberResponse]


# --- Resources ---


class ResourceCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(None, max_length=4000)
    resource_type: Literal["video", "document", "link", "meet_link"]
    resource_url: str = Field(..., min_length=1, max_length=1024)
    is_featured: bool = False


class ResourceResponse(BaseModel):
    id: str
    community_id: str
    uploaded_by: str
    title: str
    description: str | None = None
    resource_type: str
    resource_url: str
    is_featured: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class ResourceListResponse(BaseModel):
    resources: list[ResourceResponse]


# --- Community sessions ---


class CommunitySessionCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(None, max_length=4000)
    session_date: datetime
    duration_minutes: int = Field(60, ge=1, le=600)
    meet_link: str | None = Field(None, max_length=1024)


class CommunitySessionResponse(BaseModel):
    id: str
    community_id: str
    host_id: str
    title: str
    description: str | None = None
    session_date: datetime
    duration_minutes: int
    meet_link: str | None = None
    is_completed: bool

    model_config = {"from_attributes": True}


class CommunitySessionListResponse(BaseModel):
    sessions: list[CommunitySessionResponse]
