"""Row-level authorization predicates.

One entry per (table, action). Each predicate is a pure function of the
acting principal and the candidate row. A missing entry means deny; in
particular there is no generic delete grant.

Reads and writes fail differently: a denied read drops the row from the
result, a denied write raises ``PermissionDeniedError``.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from enum import Enum
from typing import Any, TypeVar

from peerlearn.access.principal import Principal
from peerlearn.errors import PermissionDeniedError

T = TypeVar("T")

Predicate = Callable[[Principal, Any], bool]

SENIOR_YEAR = 2
COURSE_AUTHOR_ROLES = frozenset({"mentor", "admin"})


class Action(str, Enum):
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"


def _always(_p: Principal, _row: Any) -> bool:
    return True


def _is_self(p: Principal, row: Any) -> bool:
    return p.id == row.id


def _owns(attr: str) -> Predicate:
    def predicate(p: Principal, row: Any) -> bool:
        return p.id == getattr(row, attr)

    predicate.__name__ = f"owns_{attr}"
    return predicate


def _is_active(_p: Principal, row: Any) -> bool:
    return bool(row.is_active)


def _is_course_mentor(p: Principal, enrollment: Any) -> bool:
    course = enrollment.course
    return course is not None and course.mentor_id == p.id


def _can_author_course(p: Principal, _row: Any) -> bool:
    return p.role in COURSE_AUTHOR_ROLES


def _is_senior(p: Principal, _row: Any) -> bool:
    return p.has_profile and p.year_of_study >= SENIOR_YEAR


def _is_admin(p: Principal, _row: Any) -> bool:
    return p.role == "admin"


def _student_or_course_mentor(p: Principal, enrollment: Any) -> bool:
    return p.id == enrollment.student_id or _is_course_mentor(p, enrollment)


def _student_or_mentor(p: Principal, row: Any) -> bool:
    return p.id in (row.student_id, row.mentor_id)


def _completed_reviewer(p: Principal, review: Any) -> bool:
    return p.id == review.student_id and review.course_id in p.completed_course_ids


def _member_of_community(p: Principal, row: Any) -> bool:
    return p.is_member_of(row.community_id)


def _self_or_fellow_member(p: Principal, member: Any) -> bool:
    return p.id == member.user_id or p.is_member_of(member.community_id)


def _senior_member(attr: str) -> Predicate:
    def predicate(p: Principal, row: Any) -> bool:
        return (
            p.id == getattr(row, attr)
            and p.is_member_of(row.community_id)
            and p.year_of_study >= SENIOR_YEAR
        )

    predicate.__name__ = f"senior_member_{attr}"
    return predicate


POLICIES: dict[tuple[str, Action], Predicate] = {
    # users
    ("users", Action.CREATE): _is_self,
    ("users", Action.READ): _always,
    ("users", Action.UPDATE): _is_self,
    # courses
    ("courses", Action.READ): _is_active,
    ("courses", Action.CREATE): _can_author_course,
    ("courses", Action.UPDATE): _owns("mentor_id"),
    # enrollments
    ("enrollments", Action.CREATE): _owns("student_id"),
    ("enrollments", Action.READ): _student_or_course_mentor,
    ("enrollments", Action.UPDATE): _is_course_mentor,
    # reviews
    ("reviews", Action.READ): _always,
    ("reviews", Action.CREATE): _completed_reviewer,
    # certificates
    ("certificates", Action.READ): _student_or_mentor,
    # badges
    ("badges", Action.READ): _always,
    ("user_badges", Action.READ): _always,
    # mentor requests
    ("mentor_requests", Action.CREATE): _owns("student_id"),
    ("mentor_requests", Action.READ): _owns("student_id"),
    ("mentor_requests", Action.UPDATE): _is_admin,
    # mentor sessions
    ("sessions", Action.READ): _always,
    ("sessions", Action.CREATE): _owns("mentor_id"),
    ("sessions", Action.UPDATE): _owns("mentor_id"),
    ("sessions", Action.DELETE): _owns("mentor_id"),
    # learning communities
    ("learning_communities", Action.READ): _is_active,
    ("learning_communities", Action.CREATE): _is_senior,
    ("learning_communities", Action.UPDATE): _owns("created_by"),
    ("community_members", Action.CREATE): _owns("user_id"),
    ("community_members", Action.READ): _self_or_fellow_member,
    ("community_resources", Action.READ): _member_of_community,
    ("community_resources", Action.CREATE): _senior_member("uploaded_by"),
    ("community_sessions", Action.READ): _member_of_community,
    ("community_sessions", Action.CREATE): _senior_member("host_id"),
    # portfolio projects
    ("user_projects", Action.READ): _always,
    ("user_projects", Action.CREATE): _owns("user_id"),
    ("user_projects", Action.UPDATE): _owns("user_id"),
    ("user_projects", Action.DELETE): _owns("user_id"),
}


def _table_of(row: Any) -> str:
    return row.__tablename__


def is_allowed(principal: Principal, action: Action, row: Any, table: str | None = None) -> bool:
    """Evaluate the predicate for ``action`` on ``row``; unknown pairs deny."""
    predicate = POLICIES.get((table or _table_of(row), action))
    if predicate is None:
        return False
    return predicate(principal, row)


def authorize(principal: Principal, action: Action, row: Any, table: str | None = None) -> None:
    """Raise ``PermissionDeniedError`` unless the write is allowed."""
    table = table or _table_of(row)
    if not is_allowed(principal, action, row, table):
        raise PermissionDeniedError(table, action.value)


def can_read(principal: Principal, row: Any) -> bool:
    return is_allowed(principal, Action.READ, row)


def filter_readable(principal: Principal, rows: Iterable[T]) -> list[T]:
    """Drop rows the principal may not see. Denied reads are silent."""
    return [row for row in rows if can_read(principal, row)]
