"""Pydantic response models for progression endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

# --- Badges ---


class BadgeResponse(BaseModel):
    id: str
    name: str
    description: str
    icon: str
    badge_type: str
    criteria: str

    model_config = {"from_attributes": True}


class AllBadgesResponse(BaseModel):
    badges: list[BadgeResponse]


class EarnedBadgeResponse(BaseModel):
    badge: BadgeResponse
    earned_at: datetime

    model_config = {"from_attributes": True}


class UserBadgesResponse(BaseModel):
    user_id: str
    earned: list[EarnedBadgeResponse]
    total_available: int
    total_earned: int


# --- XP / level ---


class LevelResponse(BaseModel):
    xp_points: int
    level: int
    xp_into_level: int
    xp_for_level: int
    xp_to_next_level: int
    next_level: int


# --- Certificates ---


class CertificateResponse(BaseModel):
    id: str
    certificate_id: str
    student_id: str
    course_id: str
    mentor_id: str
    issued_at: datetime

    model_config = {"from_attributes": True}


class CertificateListResponse(BaseModel):
    certificates: list[CertificateResponse]
