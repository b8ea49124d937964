"""Profile business logic."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from sqlalchemy import select

from peerlearn.access import Action, Principal, authorize, can_read, filter_readable
from peerlearn.db.factories import new_user
from peerlearn.db.models import User
from peerlearn.errors import AlreadyExistsError, NotFoundError

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

PROFILE_FIELDS = frozenset({
    "full_name",
    "department",
    "year_of_study",
    "bio",
    "profile_picture",
    "linkedin_url",
    "github_url",
    "portfolio_url",
    "experience_description",
})
REQUIRED_FIELDS = frozenset({"full_name", "department", "year_of_study"})


async def create_profile(
    db: AsyncSession,
    principal: Principal,
    *,
    email: str,
    full_name: str,
    department: str,
    year_of_study: int,
    **profile: str | None,
) -> User:
    """
    Create the principal's own profile as a student. Does not commit.

    Raises:
        AlreadyExistsError: If the profile or the email is already registered.
    """
    if await db.get(User, principal.id) is not None:
        raise AlreadyExistsError("Profile already exists")

    taken = await db.execute(select(User.id).where(User.email == email))
    if taken.scalar_one_or_none() is not None:
        raise AlreadyExistsError("Email already registered")

    user = new_user(
        id=principal.id,
        email=email,
        full_name=full_name,
        department=department,
        year_of_study=year_of_study,
        **profile,
    )
    authorize(principal, Action.CREATE, user)
    db.add(user)
    await db.flush()
    logger.info("Profile created for %s", user.id)
    return user


async def get_user(db: AsyncSession, principal: Principal, user_id: str) -> User:
    user = await db.get(User, user_id)
    if user is None or not can_read(principal, user):
        raise NotFoundError("User", user_id)
    return user


async def list_users(
    db: AsyncSession,
    principal: Principal,
    role: str | None = None,
    limit: int = 50,
    offset: int = 0,
) -> list[User]:
    stmt = select(User).order_by(User.xp_points.desc(), User.full_name).limit(limit).offset(offset)
    if role is not None:
        stmt = stmt.where(User.role == role)
    result = await db.execute(stmt)
    return filter_readable(principal, result.scalars().all())


async def update_profile(db: AsyncSession, principal: Principal, changes: dict[str, Any]) -> User:
    """
    Apply profile field changes to the principal's own row. Does not commit.

    Raises:
        ValueError: If a non-profile field is supplied.
    """
    illegal = set(changes) - PROFILE_FIELDS
    if illegal:
        msg = f"Fields not editable: {', '.join(sorted(illegal))}"
        raise ValueError(msg)
    cleared = [f for f in REQUIRED_FIELDS if f in changes and changes[f] is None]
    if cleared:
        msg = f"Fields cannot be cleared: {', '.join(sorted(cleared))}"
        raise ValueError(msg)

    user = await db.get(User, principal.id)
    if user is None:
        raise NotFoundError("User", principal.id)
    authorize(principal, Action.UPDATE, user)

    for field, value in changes.items():
        setattr(user, field, value)
    user.updated_at = datetime.now(timezone.utc)

    await db.flush()
    return user
