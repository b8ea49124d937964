"""Review endpoints, nested under courses."""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from peerlearn.access import Principal
from peerlearn.auth.dependencies import get_current_principal
from peerlearn.database import get_session
from peerlearn.reviews.service import create_review, list_reviews

router = APIRouter(prefix="/api/v1/courses", tags=["Reviews"])


class ReviewCreateRequest(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    review_text: str | None = Field(None, max_length=4000)


class ReviewResponse(BaseModel):
    id: str
    student_id: str
    course_id: str
    mentor_id: str
    rating: int
    review_text: str | None = None
    is_helpful: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class ReviewListResponse(BaseModel):
    reviews: list[ReviewResponse]


@router.get("/{course_id}/reviews", response_model=ReviewListResponse)
async def list_reviews_endpoint(
    course_id: str,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_session),
) -> ReviewListResponse:
    reviews = await list_reviews(db, principal, course_id)
    return ReviewListResponse(reviews=[ReviewResponse.model_validate(r) for r in reviews])


@router.post("/{course_id}/reviews", response_model=ReviewResponse, status_code=201)
async def create_review_endpoint(
    course_id: str,
    body: ReviewCreateRequest,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_session),
) -> ReviewResponse:
    """Review a completed course."""
    review = await create_review(db, principal, course_id, body.rating, body.review_text)
    await db.commit()
    return ReviewResponse.model_validate(review)
