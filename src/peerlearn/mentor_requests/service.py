"""Requests from students to become mentors, and their admin review."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from sqlalchemy import select

from peerlearn.access import Action, Principal, authorize, can_read, filter_readable, is_allowed
from peerlearn.db.factories import new_mentor_request
from peerlearn.db.models import MentorRequest, User
from peerlearn.errors import AlreadyExistsError, NotFoundError

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


async def create_request(db: AsyncSession, principal: Principal, message: str | None) -> MentorRequest:
    """
    File a mentor request for the principal. Does not commit.

    Raises:
        ValueError: If the principal already mentors.
        AlreadyExistsError: If a pending request exists.
    """
    if principal.role != "student":
        msg = "Only students can request mentor status"
        raise ValueError(msg)

    pending = await db.execute(
        select(MentorRequest.id).where(
            MentorRequest.student_id == principal.id,
            MentorRequest.status == "pending",
        )
    )
    if pending.scalar_one_or_none() is not None:
        raise AlreadyExistsError("A mentor request is already pending")

    request = new_mentor_request(student_id=principal.id, request_message=message)
    authorize(principal, Action.CREATE, request)
    db.add(request)
    await db.flush()
    return request


async def list_requests(db: AsyncSession, principal: Principal) -> list[MentorRequest]:
    result = await db.execute(
        select(MentorRequest)
        .where(MentorRequest.student_id == principal.id)
        .order_by(MentorRequest.created_at.desc())
    )
    return filter_readable(principal, result.scalars().all())


async def review_request(
    db: AsyncSession,
    principal: Principal,
    request_id: str,
    approve: bool,
) -> MentorRequest:
    """
    Approve or reject a pending request. Approval promotes the student to mentor.

    Raises:
        NotFoundError: If the request does not exist.
        PermissionDeniedError: If the principal is not an admin.
        ValueError: If the request was already reviewed.
    """
    request = await db.get(MentorRequest, request_id)
    if request is None or not (
        can_read(principal, request) or is_allowed(principal, Action.UPDATE, request)
    ):
        raise NotFoundError("Mentor request", request_id)
    authorize(principal, Action.UPDATE, request)

    if request.status != "pending":
        msg = f"Mentor request already {request.status}"
        raise ValueError(msg)

    request.status = "approved" if approve else "rejected"
    request.reviewed_by = principal.id
    request.reviewed_at = datetime.now(timezone.utc)

    if approve:
        student = await db.get(User, request.student_id)
        if student is not None and student.role == "student":
            student.role = "mentor"
            student.updated_at = request.reviewed_at

    await db.flush()
    logger.info("Mentor request %s %s by %s", request_id, request.status, principal.id)
    return request
