"""User profile router: all /api/v1/users/* endpoints."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from peerlearn.access import Principal
from peerlearn.auth.dependencies import get_current_principal, get_identity
from peerlearn.database import get_session
from peerlearn.db.models import USER_ROLES
from peerlearn.users.schemas import (
    ProfileCreateRequest,
    ProfileUpdateRequest,
    UserListResponse,
    UserResponse,
)
from peerlearn.users.service import create_profile, get_user, list_users, update_profile

logger = structlog.get_logger()

router = APIRouter(prefix="/api/v1/users", tags=["Users"])


@router.post("", response_model=UserResponse, status_code=201)
async def create_my_profile(
    body: ProfileCreateRequest,
    principal: Principal = Depends(get_identity),
    db: AsyncSession = Depends(get_session),
) -> UserResponse:
    """Create the caller's profile on first sign-up."""
    user = await create_profile(db, principal, **body.model_dump())
    await db.commit()
    logger.info("profile_created", user_id=user.id)
    return UserResponse.model_validate(user)


@router.get("", response_model=UserListResponse)
async def list_profiles(
    role: str | None = Query(None),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_session),
) -> UserListResponse:
    """List profiles, optionally filtered by role."""
    if role is not None and role not in USER_ROLES:
        raise HTTPException(status_code=400, detail=f"Unknown role: {role}")
    users = await list_users(db, principal, role=role, limit=limit, offset=offset)
    return UserListResponse(
        users=[UserResponse.model_validate(u) for u in users],
        total=len(users),
    )


@router.get("/me", response_model=UserResponse)
async def get_my_profile(
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_session),
) -> UserResponse:
    """Get own full profile."""
    return UserResponse.model_validate(await get_user(db, principal, principal.id))


@router.patch("/me", response_model=UserResponse)
async def update_my_profile(
    body: ProfileUpdateRequest,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_session),
) -> UserResponse:
    """Update profile fields."""
    try:
        user = await update_profile(db, principal, body.model_dump(exclude_unset=True))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    await db.commit()
    return UserResponse.model_validate(user)


@router.get("/{user_id}", response_model=UserResponse)
async def get_profile(
    user_id: str,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_session),
) -> UserResponse:
    """Get any user's profile."""
    return UserResponse.model_validate(await get_user(db, principal, user_id))
