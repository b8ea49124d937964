"""Pydantic schemas for courses and mentor sessions."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

# --- Courses ---


class CourseCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    domain: str
    price: Decimal = Field(Decimal("0"), ge=0, max_digits=10, decimal_places=2)
    duration_hours: int = Field(..., ge=1)
    max_students: int | None = Field(None, ge=1)
    session_link: str | None = Field(None, max_length=512)
    course_image: str | None = Field(None, max_length=512)


class CourseUpdateRequest(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, min_length=1)
    domain: str | None = None
    price: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    duration_hours: int | None = Field(None, ge=1)
    max_students: int | None = Field(None, ge=1)
    session_link: str | None = Field(None, max_length=512)
    course_image: str | None = Field(None, max_length=512)
    is_active: bool | None = None


class CourseResponse(BaseModel):
    id: str
    mentor_id: str
    title: str
    description: str
    domain: str
    price: Decimal
    duration_hours: int
    max_students: int | None = None
    session_link: str | None = None
    course_image: str | None = None
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class CourseListResponse(BaseModel):
    courses: list[CourseResponse]
    total: int


class DomainListResponse(BaseModel):
    domains: list[str]


# --- Mentor sessions ---


class SessionCreateRequest(BaseModel):
    session_date: datetime
    duration_minutes: int = Field(..., ge=1, le=600)
    session_link: str | None = Field(None, max_length=512)


class SessionResponse(BaseModel):
    id: str
    course_id: str
    mentor_id: str
    session_date: datetime
    duration_minutes: int
    session_link: str | None = None
    is_completed: bool
    completed_at: datetime | None = None

    model_config = {"from_attributes": True}


class SessionListResponse(BaseModel):
    sessions: list[SessionResponse]
