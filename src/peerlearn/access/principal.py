"""The acting principal and the facts predicates need about it."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from peerlearn.db.models import CommunityMember, Enrollment, User


@dataclass(frozen=True)
class Principal:
    """Identity on whose behalf an operation runs.

    ``role`` is ``None`` until the principal has created its profile.
    Membership and completion facts are snapshotted from the same session
    that executes the guarded operation.
    """

    id: str
    role: str | None = None
    year_of_study: int = 0
    community_ids: frozenset[str] = field(default_factory=frozenset)
    completed_course_ids: frozenset[str] = field(default_factory=frozenset)

    @property
    def has_profile(self) -> bool:
        return self.role is not None

    def is_member_of(self, community_id: str | None) -> bool:
        return community_id is not None and community_id in self.community_ids

    def with_membership(self, community_id: str) -> Principal:
        """Copy of this principal that also belongs to ``community_id``."""
        return replace(self, community_ids=self.community_ids | {community_id})


def principal_from_user(
    user: User,
    community_ids: frozenset[str] = frozenset(),
    completed_course_ids: frozenset[str] = frozenset(),
) -> Principal:
    return Principal(
        id=user.id,
        role=user.role,
        year_of_study=user.year_of_study,
        community_ids=community_ids,
        completed_course_ids=completed_course_ids,
    )


async def load_principal(db: AsyncSession, user_id: str) -> Principal:
    """Resolve a principal and its membership facts inside ``db``'s transaction."""
    user = await db.get(User, user_id)
    if user is None:
        return Principal(id=user_id)

    memberships = await db.execute(
        select(CommunityMember.community_id).where(CommunityMember.user_id == user_id)
    )
    completed = await db.execute(
        select(Enrollment.course_id).where(
            Enrollment.student_id == user_id,
            Enrollment.is_completed == True,  # noqa: E712
        )
    )
    return principal_from_user(
        user,
        community_ids=frozenset(memberships.scalars().all()),
        completed_course_ids=frozenset(completed.scalars().all()),
    )
