"""Enrollment business logic. Completion is delegated to the progression pipeline."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import or_, select

from peerlearn.access import Action, Principal, authorize, can_read, filter_readable
from peerlearn.courses.service import get_course
from peerlearn.db.factories import new_enrollment
from peerlearn.db.models import Course, Enrollment
from peerlearn.errors import AlreadyExistsError, NotFoundError
from peerlearn.progression.pipeline import CompletionResult, complete_enrollment

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


async def enroll(db: AsyncSession, principal: Principal, course_id: str) -> Enrollment:
    """
    Enroll the principal in a visible course. Does not commit.

    Raises:
        NotFoundError: If the course is missing or inactive.
        AlreadyExistsError: If the principal is already enrolled.
    """
    course = await get_course(db, principal, course_id)

    existing = await db.execute(
        select(Enrollment.id).where(
            Enrollment.student_id == principal.id,
            Enrollment.course_id == course.id,
        )
    )
    if existing.scalar_one_or_none() is not None:
        raise AlreadyExistsError("Already enrolled in this course")

    enrollment = new_enrollment(student_id=principal.id, course_id=course.id)
    authorize(principal, Action.CREATE, enrollment)
    enrollment.course = course
    db.add(enrollment)
    await db.flush()
    logger.info("User %s enrolled in course %s", principal.id, course.id)
    return enrollment


async def list_enrollments(
    db: AsyncSession,
    principal: Principal,
    course_id: str | None = None,
    completed: bool | None = None,
) -> list[Enrollment]:
    """Enrollments the principal holds as student or oversees as course mentor."""
    stmt = (
        select(Enrollment)
        .outerjoin(Course, Course.id == Enrollment.course_id)
        .where(or_(Enrollment.student_id == principal.id, Course.mentor_id == principal.id))
        .order_by(Enrollment.enrolled_at.desc())
    )
    if course_id is not None:
        stmt = stmt.where(Enrollment.course_id == course_id)
    if completed is not None:
        stmt = stmt.where(Enrollment.is_completed == completed)

    result = await db.execute(stmt)
    return filter_readable(principal, result.scalars().all())


async def get_enrollment(db: AsyncSession, principal: Principal, enrollment_id: str) -> Enrollment:
    enrollment = await db.get(Enrollment, enrollment_id)
    if enrollment is None or not can_read(principal, enrollment):
        raise NotFoundError("Enrollment", enrollment_id)
    return enrollment


async def set_completion(
    db: AsyncSession,
    principal: Principal,
    enrollment_id: str,
    is_completed: bool,
    redis: object = None,
) -> tuple[Enrollment, CompletionResult | None]:
    """
    Apply an ``is_completed`` update. Commits when the pipeline runs.

    Setting it to True runs the progression pipeline (a no-op if already
    completed). Setting it to False is only accepted for an enrollment that is
    still active, since completion is terminal.

    Raises:
        NotFoundError: If the enrollment is missing or invisible.
        PermissionDeniedError: If the principal is not the course's mentor.
        ValueError: On an attempt to reopen a completed enrollment.
    """
    if is_completed:
        result = await complete_enrollment(db, principal, enrollment_id, redis=redis)
        enrollment = await get_enrollment(db, principal, enrollment_id)
        await db.refresh(enrollment, attribute_names=["is_completed", "completed_at"])
        return enrollment, result

    enrollment = await get_enrollment(db, principal, enrollment_id)
    authorize(principal, Action.UPDATE, enrollment)
    if enrollment.is_completed:
        msg = "A completed enrollment cannot be reopened"
        raise ValueError(msg)
    return enrollment, None
