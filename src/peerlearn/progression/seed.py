"""Badge catalog seed data: 5 learner badges and 5 mentor badges."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from peerlearn.db.factories import new_badge
from peerlearn.db.models import Badge

logger = logging.getLogger(__name__)

BADGE_SEED_DATA: list[dict] = [
    # Learner badges
    {
        "name": "🎯 Skill Starter",
        "description": "Complete your first mentor session",
        "icon": "🎯",
        "badge_type": "learner",
        "criteria": "Complete 1 mentor session",
    },
    {
        "name": "🧠 Knowledge Seeker",
        "description": "Complete sessions in 5 different domains",
        "icon": "🧠",
        "badge_type": "learner",
        "criteria": "Complete 5 different domain sessions",
    },
    {
        "name": "📜 Certified Champ",
        "description": "Earn 3 certificates",
        "icon": "📜",
        "badge_type": "learner",
        "criteria": "Earn 3 certificates",
    },
    {
        "name": "💪 Self-Growth Hero",
        "description": "Complete a paid session",
        "icon": "💪",
        "badge_type": "learner",
        "criteria": "Finish a paid session",
    },
    {
        "name": "⭐ Reviewer Pro",
        "description": "Submit 5+ helpful mentor reviews",
        "icon": "⭐",
        "badge_type": "learner",
        "criteria": "Submit 5+ helpful mentor reviews",
    },
    # Mentor badges
    {
        "name": "🚀 First Flight",
        "description": "Conduct your first session",
        "icon": "🚀",
        "badge_type": "mentor",
        "criteria": "Conduct your first session",
    },
    {
        "name": "💼 Skill Provider",
        "description": "Complete 5 mentor sessions",
        "icon": "💼",
        "badge_type": "mentor",
        "criteria": "Complete 5 mentor sessions",
    },
    {
        "name": "🔥 Popular Mentor",
        "description": "Get 10+ bookings with 4.5+ rating",
        "icon": "🔥",
        "badge_type": "mentor",
        "criteria": "Get 10+ bookings + maintain 4.5+ rating",
    },
    {
        "name": "🧾 Verified Mentor",
        "description": "Submit ID and docs for verification",
        "icon": "🧾",
        "badge_type": "mentor",
        "criteria": "Submit ID and docs for verification",
    },
    {
        "name": "💰 Pro Mentor",
        "description": "Earn ₹500+ from mentoring",
        "icon": "💰",
        "badge_type": "mentor",
        "criteria": "Earn ₹500+ from mentoring",
    },
]


async def seed_badges(db: AsyncSession) -> int:
    """Insert missing badges and refresh existing ones by name. Returns badges seeded."""
    existing = {b.name: b for b in (await db.execute(select(Badge))).scalars()}

    seeded = 0
    for badge_data in BADGE_SEED_DATA:
        badge = existing.get(badge_data["name"])
        if badge is None:
            db.add(new_badge(**badge_data))
        else:
            badge.description = badge_data["description"]
            badge.icon = badge_data["icon"]
            badge.badge_type = badge_data["badge_type"]
            badge.criteria = badge_data["criteria"]
        seeded += 1

    await db.commit()
    logger.info("Seeded %d badges", seeded)
    return seeded
