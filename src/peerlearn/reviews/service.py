"""Course reviews. Only students who completed the course may review it."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import func, select

from peerlearn.access import Action, Principal, authorize, filter_readable
from peerlearn.db.factories import new_review
from peerlearn.db.models import Course, Review
from peerlearn.errors import NotFoundError

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


async def list_reviews(db: AsyncSession, principal: Principal, course_id: str) -> list[Review]:
    result = await db.execute(
        select(Review).where(Review.course_id == course_id).order_by(Review.created_at.desc())
    )
    return filter_readable(principal, result.scalars().all())


async def create_review(
    db: AsyncSession,
    principal: Principal,
    course_id: str,
    rating: int,
    review_text: str | None = None,
) -> Review:
    """
    Review a course. The reviewed mentor is taken from the course row.

    A deactivated course can still be reviewed by its graduates; only the
    completion predicate decides.

    Raises:
        NotFoundError: If the course does not exist.
        PermissionDeniedError: If the principal has not completed the course.
    """
    course = await db.get(Course, course_id)
    if course is None:
        raise NotFoundError("Course", course_id)
    review = new_review(
        student_id=principal.id,
        course_id=course.id,
        mentor_id=course.mentor_id,
        rating=rating,
        review_text=review_text,
    )
    authorize(principal, Action.CREATE, review)
    db.add(review)
    await db.flush()
    return review


async def average_rating(db: AsyncSession, mentor_id: str) -> float | None:
    """Mean rating across all reviews of a mentor, or None without reviews."""
    result = await db.execute(select(func.avg(Review.rating)).where(Review.mentor_id == mentor_id))
    value = result.scalar_one_or_none()
    return round(float(value), 2) if value is not None else None
