"""Dashboard response models."""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel

from peerlearn.enrollments.schemas import EnrollmentResponse
from peerlearn.progression.schemas import LevelResponse


class MentorStats(BaseModel):
    total_courses: int
    total_students: int
    average_rating: float | None = None
    total_earnings: Decimal
    total_badges: int


class StudentStats(BaseModel):
    enrolled_courses: int
    completed_courses: int
    total_badges: int
    recent_enrollments: list[EnrollmentResponse]


class DashboardResponse(BaseModel):
    """``mentor`` is set for mentors and admins, ``student`` for students."""

    user_id: str
    role: str
    level: LevelResponse
    mentor: MentorStats | None = None
    student: StudentStats | None = None
