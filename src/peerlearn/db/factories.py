"""Entity factories: the single place where default values live.

Every insert in the application goes through one of these builders, so
``role='student'``, ``level_number=1`` and friends are explicit at
construction time rather than ambient schema defaults.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timezone
from decimal import Decimal

from peerlearn.db.models import (
    Badge,
    Certificate,
    CommunityMember,
    CommunityResource,
    CommunitySession,
    Course,
    Enrollment,
    LearningCommunity,
    MentorRequest,
    MentorSession,
    Review,
    User,
    UserBadge,
    UserProject,
)

DEFAULT_ROLE = "student"
DEFAULT_YEAR_OF_STUDY = 1
DEFAULT_LEVEL = 1
DEFAULT_COMMUNITY_SESSION_MINUTES = 60


def _now() -> datetime:
    return datetime.now(timezone.utc)


def new_user(
    *,
    id: str,  # noqa: A002
    email: str,
    full_name: str,
    department: str,
    year_of_study: int = DEFAULT_YEAR_OF_STUDY,
    role: str = DEFAULT_ROLE,
    **profile: str | None,
) -> User:
    """Build a fresh profile with zero XP at level 1."""
    now = _now()
    return User(
        id=id,
        email=email,
        full_name=full_name,
        department=department,
        year_of_study=year_of_study,
        role=role,
        xp_points=0,
        level_number=DEFAULT_LEVEL,
        is_verified=False,
        total_earnings=Decimal("0"),
        created_at=now,
        updated_at=now,
        **profile,
    )


def new_course(
    *,
    mentor_id: str,
    title: str,
    description: str,
    domain: str,
    duration_hours: int,
    price: Decimal | int | float = 0,
    max_students: int | None = None,
    session_link: str | None = None,
    course_image: str | None = None,
    is_active: bool = True,
) -> Course:
    now = _now()
    return Course(
        mentor_id=mentor_id,
        title=title,
        description=description,
        domain=domain,
        price=Decimal(str(price)),
        duration_hours=duration_hours,
        max_students=max_students,
        session_link=session_link,
        course_image=course_image,
        is_active=is_active,
        created_at=now,
        updated_at=now,
    )


def new_enrollment(*, student_id: str, course_id: str) -> Enrollment:
    """Enrollments always start Active (not completed)."""
    return Enrollment(
        student_id=student_id,
        course_id=course_id,
        enrolled_at=_now(),
        completed_at=None,
        is_completed=False,
    )


def new_review(
    *,
    student_id: str,
    course_id: str,
    mentor_id: str,
    rating: int,
    review_text: str | None = None,
) -> Review:
    return Review(
        student_id=student_id,
        course_id=course_id,
        mentor_id=mentor_id,
        rating=rating,
        review_text=review_text,
        is_helpful=False,
        created_at=_now(),
    )


def new_certificate(*, student_id: str, course_id: str, mentor_id: str, certificate_id: str) -> Certificate:
    return Certificate(
        student_id=student_id,
        course_id=course_id,
        mentor_id=mentor_id,
        certificate_id=certificate_id,
        issued_at=_now(),
    )


def new_badge(*, name: str, description: str, icon: str, badge_type: str, criteria: str) -> Badge:
    return Badge(
        name=name,
        description=description,
        icon=icon,
        badge_type=badge_type,
        criteria=criteria,
        created_at=_now(),
    )


def new_user_badge(*, user_id: str, badge_id: str) -> UserBadge:
    return UserBadge(user_id=user_id, badge_id=badge_id, earned_at=_now())


def new_mentor_request(*, student_id: str, request_message: str | None = None) -> MentorRequest:
    return MentorRequest(
        student_id=student_id,
        request_message=request_message,
        status="pending",
        reviewed_by=None,
        reviewed_at=None,
        created_at=_now(),
    )


def new_mentor_session(
    *,
    course_id: str,
    mentor_id: str,
    session_date: datetime,
    duration_minutes: int,
    session_link: str | None = None,
) -> MentorSession:
    return MentorSession(
        course_id=course_id,
        mentor_id=mentor_id,
        session_date=session_date,
        duration_minutes=duration_minutes,
        session_link=session_link,
        is_completed=False,
        completed_at=None,
        created_at=_now(),
    )


def new_community(
    *,
    created_by: str,
    name: str,
    category: str,
    description: str | None = None,
    course_id: str | None = None,
) -> LearningCommunity:
    now = _now()
    return LearningCommunity(
        created_by=created_by,
        name=name,
        category=category,
        description=description,
        course_id=course_id,
        is_active=True,
        created_at=now,
        updated_at=now,
    )


def new_community_member(*, community_id: str, user_id: str, role: str = "member") -> CommunityMember:
    return CommunityMember(
        community_id=community_id,
        user_id=user_id,
        role=role,
        joined_at=_now(),
    )


def new_community_resource(
    *,
    community_id: str,
    uploaded_by: str,
    title: str,
    resource_type: str,
    resource_url: str,
    description: str | None = None,
    is_featured: bool = False,
) -> CommunityResource:
    return CommunityResource(
        community_id=community_id,
        uploaded_by=uploaded_by,
        title=title,
        description=description,
        resource_type=resource_type,
        resource_url=resource_url,
        is_featured=is_featured,
        created_at=_now(),
    )


def new_community_session(
    *,
    community_id: str,
    host_id: str,
    title: str,
    session_date: datetime,
    description: str | None = None,
    duration_minutes: int = DEFAULT_COMMUNITY_SESSION_MINUTES,
    meet_link: str | None = None,
) -> CommunitySession:
    return CommunitySession(
        community_id=community_id,
        host_id=host_id,
        title=title,
        description=description,
        session_date=session_date,
        duration_minutes=duration_minutes,
        meet_link=meet_link,
        is_completed=False,
        created_at=_now(),
    )


def new_project(
    *,
    user_id: str,
    title: str,
    description: str | None = None,
    project_url: str | None = None,
    github_url: str | None = None,
    technologies: Iterable[str] = (),
    is_featured: bool = False,
) -> UserProject:
    return UserProject(
        user_id=user_id,
        title=title,
        description=description,
        project_url=project_url,
        github_url=github_url,
        technologies=list(technologies),
        is_featured=is_featured,
        created_at=_now(),
    )
