"""Row builders and auth helpers shared by the tests."""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from peerlearn.auth.jwt import create_access_token
from peerlearn.database import get_session_factory
from peerlearn.db.factories import (
    new_community,
    new_community_member,
    new_course,
    new_enrollment,
    new_user,
)
from peerlearn.db.models import Course, Enrollment, LearningCommunity, User


def auth_headers(user_id: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


def fresh_session() -> AsyncSession:
    """A new session, so assertions never read stale identity-map state."""
    return get_session_factory()()


async def make_user(
    db: AsyncSession,
    *,
    role: str = "student",
    year_of_study: int = 1,
    xp_points: int = 0,
    level_number: int = 1,
    full_name: str = "Test User",
) -> User:
    user_id = str(uuid.uuid4())
    user = new_user(
        id=user_id,
        email=f"{user_id[:8]}@campus.example",
        full_name=full_name,
        department="Computer Science",
        year_of_study=year_of_study,
        role=role,
    )
    user.xp_points = xp_points
    user.level_number = level_number
    db.add(user)
    await db.commit()
    return user


async def make_course(db: AsyncSession, mentor: User, **overrides: Any) -> Course:
    fields: dict[str, Any] = {
        "title": "Intro to Python",
        "description": "Variables, loops and functions",
        "domain": "Python",
        "duration_hours": 10,
    }
    fields.update(overrides)
    course = new_course(mentor_id=mentor.id, **fields)
    db.add(course)
    await db.commit()
    return course


async def make_enrollment(db: AsyncSession, student: User, course: Course) -> Enrollment:
    enrollment = new_enrollment(student_id=student.id, course_id=course.id)
    db.add(enrollment)
    await db.commit()
    return enrollment


async def make_community(
    db: AsyncSession,
    creator: User,
    members: tuple[User, ...] = (),
    **overrides: Any,
) -> LearningCommunity:
    fields: dict[str, Any] = {"name": "Pythonistas", "category": "Python"}
    fields.update(overrides)
    community = new_community(created_by=creator.id, **fields)
    db.add(community)
    await db.flush()
    db.add(new_community_member(community_id=community.id, user_id=creator.id, role="admin"))
    for member in members:
        role = "senior" if member.year_of_study >= 2 else "member"
        db.add(new_community_member(community_id=community.id, user_id=member.id, role=role))
    await db.commit()
    return community
