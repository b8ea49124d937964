"""Pydantic schemas for enrollments."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from peerlearn.db.models import Enrollment


class EnrollRequest(BaseModel):
    course_id: str


class EnrollmentUpdateRequest(BaseModel):
    is_completed: bool


class EnrollmentResponse(BaseModel):
    id: str
    student_id: str
    course_id: str
    course_title: str | None = None
    enrolled_at: datetime
    is_completed: bool
    completed_at: datetime | None = None


class EnrollmentListResponse(BaseModel):
    enrollments: list[EnrollmentResponse]
    total: int


class CompletionResponse(BaseModel):
    """Result of PATCH /enrollments/{id}. ``awarded`` is False when nothing changed."""

    enrollment: EnrollmentResponse
    awarded: bool
    certificate_id: str | None = None
    xp_points: int | None = None
    level_number: int | None = None
    leveled_up: bool = False


def enrollment_response(enrollment: Enrollment) -> EnrollmentResponse:
    """Build an EnrollmentResponse; the course may already be gone."""
    return EnrollmentResponse(
        id=enrollment.id,
        student_id=enrollment.student_id,
        course_id=enrollment.course_id,
        course_title=enrollment.course.title if enrollment.course is not None else None,
        enrolled_at=enrollment.enrolled_at,
        is_completed=enrollment.is_completed,
        completed_at=enrollment.completed_at,
    )
