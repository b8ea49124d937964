"""XP grants with level recomputation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from peerlearn.db.models import User
from peerlearn.errors import ReferentialIntegrityError
from peerlearn.progression.levels import XP_PER_LEVEL, level_for_xp

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class XPAward:
    user_id: str
    amount: int
    xp_points: int
    old_level: int
    new_level: int

    @property
    def leveled_up(self) -> bool:
        return self.new_level > self.old_level


async def grant_xp(
    db: AsyncSession,
    user_id: str,
    amount: int,
    xp_per_level: int = XP_PER_LEVEL,
) -> XPAward:
    """Add ``amount`` XP to a user and recompute their level.

    The increment runs in SQL so concurrent grants to the same user never
    lose an update. Does not commit.

    Raises:
        ReferentialIntegrityError: If the user row does not exist.
    """
    now = datetime.now(timezone.utc)
    bumped = await db.execute(
        update(User)
        .where(User.id == user_id)
        .values(xp_points=User.xp_points + amount, updated_at=now)
    )
    if bumped.rowcount != 1:
        msg = f"User {user_id} no longer exists"
        raise ReferentialIntegrityError(msg)

    current = (
        await db.execute(select(User.xp_points, User.level_number).where(User.id == user_id))
    ).one()
    new_level = level_for_xp(current.xp_points, xp_per_level)

    if new_level != current.level_number:
        await db.execute(
            update(User).where(User.id == user_id).values(level_number=new_level)
        )

    award = XPAward(
        user_id=user_id,
        amount=amount,
        xp_points=current.xp_points,
        old_level=current.level_number,
        new_level=new_level,
    )
    if award.leveled_up:
        logger.info("User %s reached level %d (%d XP)", user_id, new_level, current.xp_points)
    return award
