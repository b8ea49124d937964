"""Enrollment completion: the progression pipeline.

Active (is_completed=false) -> Completed (is_completed=true) is the only
transition and it is terminal. On that edge, in one transaction:

1. flip the flag with a compare-and-swap UPDATE and stamp completed_at
2. grant the completion XP and recompute the level
3. issue exactly one certificate for the course's mentor
4. run badge hooks

Only the caller that wins the compare-and-swap performs steps 2-4, so
repeated or concurrent completions award at most once. Any failure rolls the
whole transition back, flag included.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from peerlearn.access import Action, Principal, authorize, can_read
from peerlearn.config import get_settings
from peerlearn.db.models import Certificate, Course, Enrollment
from peerlearn.errors import NotFoundError, ReferentialIntegrityError
from peerlearn.progression.badge_service import run_badge_hooks
from peerlearn.progression.certificates import issue_certificate
from peerlearn.progression.xp_service import XPAward, grant_xp

logger = logging.getLogger(__name__)

COMPLETION_CHANNEL = "pubsub:course_completed"


@dataclass
class CompletionResult:
    """Outcome of a completion request. ``awarded`` is False for no-ops."""

    enrollment_id: str
    awarded: bool
    student_id: str | None = None
    course_id: str | None = None
    xp: XPAward | None = None
    certificate: Certificate | None = None


async def run_completion(db: AsyncSession, enrollment_id: str) -> CompletionResult:
    """Perform the transition without authorization. Does not commit.

    Raises:
        ReferentialIntegrityError: If the course or student row is gone.
    """
    settings = get_settings()
    now = datetime.now(timezone.utc)

    flipped = await db.execute(
        update(Enrollment)
        .where(
            Enrollment.id == enrollment_id,
            Enrollment.is_completed == False,  # noqa: E712
        )
        .values(is_completed=True, completed_at=now)
    )
    if flipped.rowcount != 1:
        return CompletionResult(enrollment_id=enrollment_id, awarded=False)

    row = (
        await db.execute(
            select(Enrollment.student_id, Enrollment.course_id, Course.mentor_id)
            .outerjoin(Course, Course.id == Enrollment.course_id)
            .where(Enrollment.id == enrollment_id)
        )
    ).one()
    if row.mentor_id is None:
        msg = f"Course {row.course_id} no longer exists"
        raise ReferentialIntegrityError(msg)

    xp = await grant_xp(db, row.student_id, settings.completion_xp_award, settings.xp_per_level)
    certificate = await issue_certificate(db, row.student_id, row.course_id, row.mentor_id)

    result = CompletionResult(
        enrollment_id=enrollment_id,
        awarded=True,
        student_id=row.student_id,
        course_id=row.course_id,
        xp=xp,
        certificate=certificate,
    )
    await run_badge_hooks(db, result)
    return result


async def complete_enrollment(
    db: AsyncSession,
    principal: Principal,
    enrollment_id: str,
    redis: object = None,
) -> CompletionResult:
    """Authorize and run the completion as one committed transaction.

    Raises:
        NotFoundError: If the enrollment is missing or invisible to the principal.
        PermissionDeniedError: If the principal is not the course's mentor.
    """
    enrollment = await db.get(Enrollment, enrollment_id)
    if enrollment is None or not can_read(principal, enrollment):
        raise NotFoundError("Enrollment", enrollment_id)
    authorize(principal, Action.UPDATE, enrollment)

    try:
        result = await run_completion(db, enrollment_id)
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    if result.awarded:
        logger.info("Enrollment %s completed by mentor %s", enrollment_id, principal.id)
        await _publish_completion(redis, result)
    return result


async def _publish_completion(redis: object, result: CompletionResult) -> None:
    """Broadcast the committed completion for live dashboards."""
    if redis is None or result.xp is None or result.certificate is None:
        return
    try:
        await redis.publish(  # type: ignore[attr-defined]
            COMPLETION_CHANNEL,
            json.dumps({
                "student_id": result.student_id,
                "course_id": result.course_id,
                "certificate_id": result.certificate.certificate_id,
                "xp_points": result.xp.xp_points,
                "level_number": result.xp.new_level,
                "leveled_up": result.xp.leveled_up,
            }),
        )
    except Exception:
        logger.warning("Failed to publish course_completed event", exc_info=True)
