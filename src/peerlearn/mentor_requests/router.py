"""Mentor request endpoints."""

from __future__ import annotations

from datetime import datetime

import structlog
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from peerlearn.access import Principal
from peerlearn.auth.dependencies import get_current_principal
from peerlearn.database import get_session
from peerlearn.mentor_requests.service import create_request, list_requests, review_request

logger = structlog.get_logger()

router = APIRouter(prefix="/api/v1/mentor-requests", tags=["Mentor Requests"])


class MentorRequestCreate(BaseModel):
    request_message: str | None = Field(None, max_length=2000)


class MentorRequestReview(BaseModel):
    approve: bool


class MentorRequestResponse(BaseModel):
    id: str
    student_id: str
    request_message: str | None = None
    status: str
    reviewed_by: str | None = None
    reviewed_at: datetime | None = None
    created_at: datetime

    model_config = {"from_attributes": True}


class MentorRequestListResponse(BaseModel):
    requests: list[MentorRequestResponse]


@router.post("", response_model=MentorRequestResponse, status_code=201)
async def create_request_endpoint(
    body: MentorRequestCreate,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_session),
) -> MentorRequestResponse:
    try:
        request = await create_request(db, principal, body.request_message)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    await db.commit()
    return MentorRequestResponse.model_validate(request)


@router.get("", response_model=MentorRequestListResponse)
async def list_requests_endpoint(
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_session),
) -> MentorRequestListResponse:
    """The caller's own mentor requests."""
    requests = await list_requests(db, principal)
    return MentorRequestListResponse(
        requests=[MentorRequestResponse.model_validate(r) for r in requests]
    )


@router.post("/{request_id}/review", response_model=MentorRequestResponse)
async def review_request_endpoint(
    request_id: str,
    body: MentorRequestReview,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_session),
) -> MentorRequestResponse:
    """Admin approval or rejection."""
    try:
        request = await review_request(db, principal, request_id, body.approve)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    await db.commit()
    logger.info("mentor_request_reviewed", request_id=request_id, status=request.status)
    return MentorRequestResponse.model_validate(request)
