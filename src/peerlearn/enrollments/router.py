"""Enrollment router: enroll, list, and complete through PATCH."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from peerlearn.access import Principal
from peerlearn.auth.dependencies import get_current_principal
from peerlearn.database import get_session
from peerlearn.enrollments.schemas import (
    CompletionResponse,
    EnrollmentListResponse,
    EnrollmentResponse,
    EnrollmentUpdateRequest,
    EnrollRequest,
    enrollment_response,
)
from peerlearn.enrollments.service import enroll, get_enrollment, list_enrollments, set_completion
from peerlearn.redis_client import get_optional_redis

logger = structlog.get_logger()

router = APIRouter(prefix="/api/v1/enrollments", tags=["Enrollments"])


@router.post("", response_model=EnrollmentResponse, status_code=201)
async def enroll_endpoint(
    body: EnrollRequest,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_session),
) -> EnrollmentResponse:
    """Enroll the caller in an active course."""
    enrollment = await enroll(db, principal, body.course_id)
    await db.commit()
    return enrollment_response(enrollment)


@router.get("", response_model=EnrollmentListResponse)
async def list_enrollments_endpoint(
    course_id: str | None = Query(None),
    completed: bool | None = Query(None),
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_session),
) -> EnrollmentListResponse:
    """The caller's own enrollments plus those in courses they mentor."""
    enrollments = await list_enrollments(db, principal, course_id=course_id, completed=completed)
    return EnrollmentListResponse(
        enrollments=[enrollment_response(e) for e in enrollments],
        total=len(enrollments),
    )


@router.get("/{enrollment_id}", response_model=EnrollmentResponse)
async def get_enrollment_endpoint(
    enrollment_id: str,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_session),
) -> EnrollmentResponse:
    return enrollment_response(await get_enrollment(db, principal, enrollment_id))


@router.patch("/{enrollment_id}", response_model=CompletionResponse)
async def update_enrollment_endpoint(
    enrollment_id: str,
    body: EnrollmentUpdateRequest,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_session),
    redis: object = Depends(get_optional_redis),
) -> CompletionResponse:
    """Mark an enrollment completed (course mentor only).

    Runs XP award, level update and certificate issue atomically. Repeating
    the request is a no-op reported as ``awarded: false``.
    """
    try:
        enrollment, result = await set_completion(
            db, principal, enrollment_id, body.is_completed, redis=redis
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    if result is None or not result.awarded:
        return CompletionResponse(enrollment=enrollment_response(enrollment), awarded=False)

    logger.info(
        "enrollment_completed",
        enrollment_id=enrollment_id,
        student_id=result.student_id,
        certificate_id=result.certificate.certificate_id if result.certificate else None,
    )
    return CompletionResponse(
        enrollment=enrollment_response(enrollment),
        awarded=True,
        certificate_id=result.certificate.certificate_id if result.certificate else None,
        xp_points=result.xp.xp_points if result.xp else None,
        level_number=result.xp.new_level if result.xp else None,
        leveled_up=result.xp.leveled_up if result.xp else False,
    )
