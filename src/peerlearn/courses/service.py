"""Course and mentor-session business logic."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from sqlalchemy import or_, select, update

from peerlearn.access import Action, Principal, authorize, can_read, filter_readable, is_allowed
from peerlearn.courses.catalog import validate_domain
from peerlearn.db.factories import new_course, new_mentor_session
from peerlearn.db.models import Course, MentorSession
from peerlearn.errors import NotFoundError

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

PRICE_FILTERS = ("free", "paid")
_REQUIRED_FIELDS = frozenset({"title", "description", "domain", "price", "duration_hours", "is_active"})


# ---------------------------------------------------------------------------
# Courses
# ---------------------------------------------------------------------------


async def list_courses(
    db: AsyncSession,
    principal: Principal,
    search: str | None = None,
    domain: str | None = None,
    price: str | None = None,
    mentor_id: str | None = None,
) -> list[Course]:
    """
    Courses visible to the principal, newest first.

    ``search`` matches title, description or domain case-insensitively;
    ``price`` is ``free`` or ``paid``.
    """
    stmt = select(Course).order_by(Course.created_at.desc())
    if search:
        pattern = f"%{search}%"
        stmt = stmt.where(
            or_(
                Course.title.ilike(pattern),
                Course.description.ilike(pattern),
                Course.domain.ilike(pattern),
            )
        )
    if domain:
        stmt = stmt.where(Course.domain == domain)
    if price == "free":
        stmt = stmt.where(Course.price == 0)
    elif price == "paid":
        stmt = stmt.where(Course.price > 0)
    elif price is not None:
        msg = f"Unknown price filter: {price}"
        raise ValueError(msg)
    if mentor_id:
        stmt = stmt.where(Course.mentor_id == mentor_id)

    result = await db.execute(stmt)
    return filter_readable(principal, result.scalars().all())


async def get_course(db: AsyncSession, principal: Principal, course_id: str) -> Course:
    course = await db.get(Course, course_id)
    if course is None or not can_read(principal, course):
        raise NotFoundError("Course", course_id)
    return course


async def create_course(db: AsyncSession, principal: Principal, **fields: Any) -> Course:
    """
    Create a course owned by the principal. Does not commit.

    Raises:
        PermissionDeniedError: If the principal is not a mentor or admin.
        ValueError: If the domain is not in the catalog.
    """
    course = new_course(mentor_id=principal.id, **fields)
    authorize(principal, Action.CREATE, course)
    validate_domain(course.domain)
    db.add(course)
    await db.flush()
    logger.info("Course %s created by %s", course.id, principal.id)
    return course


async def update_course(
    db: AsyncSession,
    principal: Principal,
    course_id: str,
    changes: dict[str, Any],
) -> Course:
    """
    Apply changes to a course. The owner can see and reactivate inactive courses.

    Raises:
        NotFoundError: If the course is missing or invisible to the principal.
        PermissionDeniedError: If the principal does not own the course.
        ValueError: If a required field is cleared or the domain is unknown.
    """
    course = await db.get(Course, course_id)
    if course is None or not (
        can_read(principal, course) or is_allowed(principal, Action.UPDATE, course)
    ):
        raise NotFoundError("Course", course_id)
    authorize(principal, Action.UPDATE, course)

    cleared = sorted(f for f in _REQUIRED_FIELDS if f in changes and changes[f] is None)
    if cleared:
        msg = f"Fields cannot be cleared: {', '.join(cleared)}"
        raise ValueError(msg)
    if "domain" in changes:
        validate_domain(changes["domain"])

    for field, value in changes.items():
        setattr(course, field, value)
    course.updated_at = datetime.now(timezone.utc)

    await db.flush()
    return course


# ---------------------------------------------------------------------------
# Mentor sessions
# ---------------------------------------------------------------------------


async def list_sessions(db: AsyncSession, principal: Principal, course_id: str) -> list[MentorSession]:
    await get_course(db, principal, course_id)
    result = await db.execute(
        select(MentorSession)
        .where(MentorSession.course_id == course_id)
        .order_by(MentorSession.session_date)
    )
    return filter_readable(principal, result.scalars().all())


async def create_session(
    db: AsyncSession,
    principal: Principal,
    course_id: str,
    *,
    session_date: datetime,
    duration_minutes: int,
    session_link: str | None = None,
) -> MentorSession:
    """Schedule a session. Only the course's mentor passes the predicate."""
    course = await get_course(db, principal, course_id)
    session = new_mentor_session(
        course_id=course.id,
        mentor_id=course.mentor_id,
        session_date=session_date,
        duration_minutes=duration_minutes,
        session_link=session_link,
    )
    authorize(principal, Action.CREATE, session)
    db.add(session)
    await db.flush()
    return session


async def complete_session(db: AsyncSession, principal: Principal, session_id: str) -> MentorSession:
    """Mark a session completed; completed_at is stamped only on the first call."""
    session = await db.get(MentorSession, session_id)
    if session is None or not can_read(principal, session):
        raise NotFoundError("Session", session_id)
    authorize(principal, Action.UPDATE, session)

    await db.execute(
        update(MentorSession)
        .where(
            MentorSession.id == session_id,
            MentorSession.is_completed == False,  # noqa: E712
        )
        .values(is_completed=True, completed_at=datetime.now(timezone.utc))
    )
    await db.refresh(session)
    return session
