"""Learning community business logic.

Rules:
- Only students in year 2 or later can create a community
- The creator joins as admin; later joiners are seniors (year 2+) or members
- Resources and sessions are visible to members only
- Sharing resources and hosting sessions requires year 2+ membership
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from sqlalchemy import func, or_, select

from peerlearn.access import Action, Principal, authorize, can_read, filter_readable, is_allowed
from peerlearn.access.policies import SENIOR_YEAR
from peerlearn.courses.catalog import validate_domain
from peerlearn.courses.service import get_course
from peerlearn.db.factories import (
    new_community,
    new_community_member,
    new_community_resource,
    new_community_session,
)
from peerlearn.db.models import (
    CommunityMember,
    CommunityResource,
    CommunitySession,
    LearningCommunity,
    User,
)
from peerlearn.errors import AlreadyExistsError, NotFoundError

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

_REQUIRED_FIELDS = frozenset({"name", "category", "is_active"})


@dataclass
class CommunitySummary:
    community: LearningCommunity
    member_count: int
    is_member: bool


@dataclass
class MemberView:
    member: CommunityMember
    full_name: str | None
    year_of_study: int | None


def join_role(year_of_study: int) -> str:
    """Role a non-creator receives on joining."""
    return "senior" if year_of_study >= SENIOR_YEAR else "member"


# ---------------------------------------------------------------------------
# Communities
# ---------------------------------------------------------------------------


async def _member_counts(db: AsyncSession, community_ids: list[str]) -> dict[str, int]:
    if not community_ids:
        return {}
    result = await db.execute(
        select(CommunityMember.community_id, func.count())
        .where(CommunityMember.community_id.in_(community_ids))
        .group_by(CommunityMember.community_id)
    )
    return {community_id: count for community_id, count in result.all()}


async def list_communities(
    db: AsyncSession,
    principal: Principal,
    search: str | None = None,
    category: str | None = None,
) -> list[CommunitySummary]:
    """Active communities, newest first, with member counts."""
    stmt = select(LearningCommunity).order_by(LearningCommunity.created_at.desc())
    if search:
        pattern = f"%{search}%"
        stmt = stmt.where(
            or_(
                LearningCommunity.name.ilike(pattern),
                LearningCommunity.description.ilike(pattern),
                LearningCommunity.category.ilike(pattern),
            )
        )
    if category:
        stmt = stmt.where(LearningCommunity.category == category)

    result = await db.execute(stmt)
    communities = filter_readable(principal, result.scalars().all())
    counts = await _member_counts(db, [c.id for c in communities])
    return [
        CommunitySummary(
            community=c,
            member_count=counts.get(c.id, 0),
            is_member=principal.is_member_of(c.id),
        )
        for c in communities
    ]


async def get_community(db: AsyncSession, principal: Principal, community_id: str) -> LearningCommunity:
    community = await db.get(LearningCommunity, community_id)
    if community is None or not can_read(principal, community):
        raise NotFoundError("Community", community_id)
    return community


async def summarize(db: AsyncSession, principal: Principal, community: LearningCommunity) -> CommunitySummary:
    counts = await _member_counts(db, [community.id])
    return CommunitySummary(
        community=community,
        member_count=counts.get(community.id, 0),
        is_member=principal.is_member_of(community.id),
    )


async def create_community(
    db: AsyncSession,
    principal: Principal,
    *,
    name: str,
    category: str,
    description: str | None = None,
    course_id: str | None = None,
) -> tuple[LearningCommunity, Principal]:
    """
    Create a community and enroll the creator as its admin. Does not commit.

    Returns the community and the principal updated with the new membership.

    Raises:
        PermissionDeniedError: If the principal is below year 2.
        NotFoundError: If ``course_id`` names an unknown or inactive course.
        ValueError: If the category is not in the catalog.
    """
    community = new_community(
        created_by=principal.id,
        name=name,
        category=category,
        description=description,
        course_id=course_id,
    )
    authorize(principal, Action.CREATE, community)
    validate_domain(category)
    if course_id is not None:
        await get_course(db, principal, course_id)

    db.add(community)
    await db.flush()

    membership = new_community_member(community_id=community.id, user_id=principal.id, role="admin")
    authorize(principal, Action.CREATE, membership)
    db.add(membership)
    await db.flush()

    logger.info("Community %s created by %s", community.id, principal.id)
    return community, principal.with_membership(community.id)


async def update_community(
    db: AsyncSession,
    principal: Principal,
    community_id: str,
    changes: dict[str, Any],
) -> LearningCommunity:
    """Creator-only edit; the creator may also reactivate a deactivated community."""
    community = await db.get(LearningCommunity, community_id)
    if community is None or not (
        can_read(principal, community) or is_allowed(principal, Action.UPDATE, community)
    ):
        raise NotFoundError("Community", community_id)
    authorize(principal, Action.UPDATE, community)

    cleared = sorted(f for f in _REQUIRED_FIELDS if f in changes and changes[f] is None)
    if cleared:
        msg = f"Fields cannot be cleared: {', '.join(cleared)}"
        raise ValueError(msg)
    if "category" in changes:
        validate_domain(changes["category"])

    for field, value in changes.items():
        setattr(community, field, value)
    community.updated_at = datetime.now(timezone.utc)

    await db.flush()
    return community


# ---------------------------------------------------------------------------
# Membership
# ---------------------------------------------------------------------------


async def join_community(db: AsyncSession, principal: Principal, community_id: str) -> CommunityMember:
    """
    Join a community as senior (year 2+) or member.

    Raises:
        NotFoundError: If the community is missing or inactive.
        AlreadyExistsError: If the principal is already a member.
    """
    community = await get_community(db, principal, community_id)

    existing = await db.execute(
        select(CommunityMember.id).where(
            CommunityMember.community_id == community.id,
            CommunityMember.user_id == principal.id,
        )
    )
    if existing.scalar_one_or_none() is not None:
        raise AlreadyExistsError("Already a member of this community")

    member = new_community_member(
        community_id=community.id,
        user_id=principal.id,
        role=join_role(principal.year_of_study),
    )
    authorize(principal, Action.CREATE, member)
    db.add(member)
    await db.flush()
    return member


async def list_members(db: AsyncSession, principal: Principal, community_id: str) -> list[MemberView]:
    """Members visible to the principal: everyone for members, only itself otherwise."""
    await get_community(db, principal, community_id)
    result = await db.execute(
        select(CommunityMember, User.full_name, User.year_of_study)
        .outerjoin(User, User.id == CommunityMember.user_id)
        .where(CommunityMember.community_id == community_id)
        .order_by(CommunityMember.joined_at)
    )
    return [
        MemberView(member=member, full_name=full_name, year_of_study=year)
        for member, full_name, year in result.all()
        if can_read(principal, member)
    ]


# ---------------------------------------------------------------------------
# Resources and sessions
# ---------------------------------------------------------------------------


async def list_resources(db: AsyncSession, principal: Principal, community_id: str) -> list[CommunityResource]:
    """Featured resources first, then newest."""
    await get_community(db, principal, community_id)
    result = await db.execute(
        select(CommunityResource)
        .where(CommunityResource.community_id == community_id)
        .order_by(CommunityResource.is_featured.desc(), CommunityResource.created_at.desc())
    )
    return filter_readable(principal, result.scalars().all())


async def create_resource(
    db: AsyncSession,
    principal: Principal,
    community_id: str,
    **fields: Any,
) -> CommunityResource:
    """
    Share a resource in a community.

    Raises:
        PermissionDeniedError: Unless the principal is a year 2+ member.
    """
    community = await get_community(db, principal, community_id)
    resource = new_community_resource(community_id=community.id, uploaded_by=principal.id, **fields)
    authorize(principal, Action.CREATE, resource)
    db.add(resource)
    await db.flush()
    return resource


async def list_sessions(db: AsyncSession, principal: Principal, community_id: str) -> list[CommunitySession]:
    await get_community(db, principal, community_id)
    result = await db.execute(
        select(CommunitySession)
        .where(CommunitySession.community_id == community_id)
        .order_by(CommunitySession.session_date)
    )
    return filter_readable(principal, result.scalars().all())


async def create_session(
    db: AsyncSession,
    principal: Principal,
    community_id: str,
    **fields: Any,
) -> CommunitySession:
    """Host a session. Same year 2+ membership rule as resources."""
    community = await get_community(db, principal, community_id)
    session = new_community_session(community_id=community.id, host_id=principal.id, **fields)
    authorize(principal, Action.CREATE, session)
    db.add(session)
    await db.flush()
    return session
