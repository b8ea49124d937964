"""Progression endpoints: badges, XP/level, certificates."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from peerlearn.access import Principal, can_read, filter_readable
from peerlearn.auth.dependencies import get_current_principal
from peerlearn.config import get_settings
from peerlearn.database import get_session
from peerlearn.db.models import Badge, Certificate, User
from peerlearn.progression.badge_service import list_badges, list_user_badges
from peerlearn.progression.levels import compute_level
from peerlearn.progression.schemas import (
    AllBadgesResponse,
    BadgeResponse,
    CertificateListResponse,
    CertificateResponse,
    EarnedBadgeResponse,
    LevelResponse,
    UserBadgesResponse,
)

router = APIRouter(prefix="/api/v1", tags=["Progression"])


# ── Badges ──


@router.get("/badges", response_model=AllBadgesResponse)
async def list_badges_endpoint(
    badge_type: str | None = Query(None, pattern="^(learner|mentor)$"),
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_session),
):
    """Badge catalog."""
    badges = filter_readable(principal, await list_badges(db, badge_type))
    return AllBadgesResponse(badges=[BadgeResponse.model_validate(b) for b in badges])


@router.get("/users/{user_id}/badges", response_model=UserBadgesResponse)
async def get_user_badges(
    user_id: str,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_session),
):
    """Badges earned by any user (earned badges are public)."""
    earned = filter_readable(principal, await list_user_badges(db, user_id))
    total_available = await db.execute(select(func.count()).select_from(Badge))

    return UserBadgesResponse(
        user_id=user_id,
        earned=[EarnedBadgeResponse.model_validate(ub) for ub in earned],
        total_available=total_available.scalar_one(),
        total_earned=len(earned),
    )


# ── XP / level ──


@router.get("/users/me/level", response_model=LevelResponse)
async def get_my_level(
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_session),
):
    """Current principal's XP and level progress."""
    xp_points = (await db.execute(select(User.xp_points).where(User.id == principal.id))).scalar_one()
    return LevelResponse(**compute_level(xp_points, get_settings().xp_per_level))


# ── Certificates ──


@router.get("/certificates", response_model=CertificateListResponse)
async def list_certificates(
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_session),
):
    """Certificates the principal earned or issued as mentor."""
    result = await db.execute(
        select(Certificate)
        .where(or_(Certificate.student_id == principal.id, Certificate.mentor_id == principal.id))
        .order_by(Certificate.issued_at.desc())
    )
    certificates = filter_readable(principal, result.scalars().all())
    return CertificateListResponse(
        certificates=[CertificateResponse.model_validate(c) for c in certificates]
    )


@router.get("/certificates/{certificate_id}", response_model=CertificateResponse)
async def get_certificate(
    certificate_id: str,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_session),
):
    """Look up a certificate by its public identifier."""
    result = await db.execute(
        select(Certificate).where(Certificate.certificate_id == certificate_id)
    )
    certificate = result.scalar_one_or_none()
    if certificate is None or not can_read(principal, certificate):
        raise HTTPException(status_code=404, detail="Certificate not found")
    return CertificateResponse.model_validate(certificate)
