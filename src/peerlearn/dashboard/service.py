"""Role-dependent dashboard statistics."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import func, select

from peerlearn.access import Principal
from peerlearn.access.policies import COURSE_AUTHOR_ROLES
from peerlearn.config import get_settings
from peerlearn.dashboard.schemas import DashboardResponse, MentorStats, StudentStats
from peerlearn.db.models import Course, Enrollment, User, UserBadge
from peerlearn.enrollments.schemas import enrollment_response
from peerlearn.enrollments.service import list_enrollments
from peerlearn.errors import NotFoundError
from peerlearn.progression.levels import compute_level
from peerlearn.progression.schemas import LevelResponse
from peerlearn.reviews.service import average_rating

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

RECENT_ENROLLMENTS = 3


async def _count(db: AsyncSession, stmt) -> int:  # noqa: ANN001
    return (await db.execute(stmt)).scalar_one()


async def _mentor_stats(db: AsyncSession, user: User, total_badges: int) -> MentorStats:
    total_courses = await _count(
        db, select(func.count()).select_from(Course).where(Course.mentor_id == user.id)
    )
    total_students = await _count(
        db,
        select(func.count())
        .select_from(Enrollment)
        .join(Course, Course.id == Enrollment.course_id)
        .where(Course.mentor_id == user.id),
    )
    return MentorStats(
        total_courses=total_courses,
        total_students=total_students,
        average_rating=await average_rating(db, user.id),
        total_earnings=user.total_earnings,
        total_badges=total_badges,
    )


async def _student_stats(db: AsyncSession, principal: Principal, total_badges: int) -> StudentStats:
    enrollments = [
        e for e in await list_enrollments(db, principal) if e.student_id == principal.id
    ]
    return StudentStats(
        enrolled_courses=len(enrollments),
        completed_courses=sum(1 for e in enrollments if e.is_completed),
        total_badges=total_badges,
        recent_enrollments=[enrollment_response(e) for e in enrollments[:RECENT_ENROLLMENTS]],
    )


async def get_dashboard(db: AsyncSession, principal: Principal) -> DashboardResponse:
    user = await db.get(User, principal.id)
    if user is None:
        raise NotFoundError("User", principal.id)

    total_badges = await _count(
        db, select(func.count()).select_from(UserBadge).where(UserBadge.user_id == user.id)
    )
    level = LevelResponse(**compute_level(user.xp_points, get_settings().xp_per_level))

    response = DashboardResponse(user_id=user.id, role=user.role, level=level)
    if user.role in COURSE_AUTHOR_ROLES:
        response.mentor = await _mentor_stats(db, user, total_badges)
    else:
        response.student = await _student_stats(db, principal, total_badges)
    return response
