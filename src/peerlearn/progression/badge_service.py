"""Badge awards and the badge-criteria extension point.

The catalog's criteria ("Earn 3 certificates", "Earn ₹500+ from mentoring",
...) are free text with no agreed matching rules, so no criteria evaluation
ships here. Product code plugs rules in with ``register_badge_hook``; every
hook runs inside the completion transaction and may call ``award_badge``.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from peerlearn.db.factories import new_user_badge
from peerlearn.db.models import Badge, UserBadge

if TYPE_CHECKING:
    from peerlearn.progression.pipeline import CompletionResult

logger = logging.getLogger(__name__)

BadgeHook = Callable[[AsyncSession, "CompletionResult"], Awaitable[None]]

_badge_hooks: list[BadgeHook] = []


def register_badge_hook(hook: BadgeHook) -> BadgeHook:
    """Register a criteria hook; usable as a decorator."""
    _badge_hooks.append(hook)
    return hook


def clear_badge_hooks() -> None:
    _badge_hooks.clear()


async def run_badge_hooks(db: AsyncSession, completion: CompletionResult) -> None:
    """Run every registered hook. Errors propagate and abort the completion."""
    for hook in list(_badge_hooks):
        await hook(db, completion)


async def get_badge_by_name(db: AsyncSession, name: str) -> Badge | None:
    result = await db.execute(select(Badge).where(Badge.name == name))
    return result.scalar_one_or_none()


async def has_badge(db: AsyncSession, user_id: str, badge_id: str) -> bool:
    """Check if user already has a specific badge."""
    result = await db.execute(
        select(UserBadge.id).where(
            UserBadge.user_id == user_id,
            UserBadge.badge_id == badge_id,
        )
    )
    return result.scalar_one_or_none() is not None


async def award_badge(db: AsyncSession, user_id: str, badge_name: str) -> bool:
    """Award a badge to a user. Does not commit.

    Returns True if awarded, False if already earned or badge not found.
    """
    badge = await get_badge_by_name(db, badge_name)
    if badge is None:
        logger.warning("Badge not found: %s", badge_name)
        return False

    if await has_badge(db, user_id, badge.id):
        return False

    try:
        async with db.begin_nested():
            db.add(new_user_badge(user_id=user_id, badge_id=badge.id))
    except IntegrityError:
        return False  # Race condition: badge already awarded

    logger.info("Badge %r awarded to %s", badge_name, user_id)
    return True


async def list_user_badges(db: AsyncSession, user_id: str) -> list[UserBadge]:
    result = await db.execute(
        select(UserBadge)
        .where(UserBadge.user_id == user_id)
        .order_by(UserBadge.earned_at.desc())
    )
    return list(result.scalars().all())


async def list_badges(db: AsyncSession, badge_type: str | None = None) -> list[Badge]:
    stmt = select(Badge).order_by(Badge.badge_type, Badge.name)
    if badge_type is not None:
        stmt = stmt.where(Badge.badge_type == badge_type)
    result = await db.execute(stmt)
    return list(result.scalars().all())
