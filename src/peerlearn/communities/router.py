"""Learning community router: all /api/v1/communities/* endpoints."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from peerlearn.access import Principal
from peerlearn.auth.dependencies import get_current_principal
from peerlearn.communities import service
from peerlearn.communities.schemas import (
    CommunityCreateRequest,
    CommunityListResponse,
    CommunityResponse,
    CommunitySessionCreateRequest,
    CommunitySessionListResponse,
    CommunitySessionResponse,
    CommunityUpdateRequest,
    MemberListResponse,
    MemberResponse,
    ResourceCreateRequest,
    ResourceListResponse,
    ResourceResponse,
)
from peerlearn.database import get_session

logger = structlog.get_logger()

router = APIRouter(prefix="/api/v1/communities", tags=["Communities"])


def _community_response(summary: service.CommunitySummary) -> CommunityResponse:
    c = summary.community
    return CommunityResponse(
        id=c.id,
        name=c.name,
        description=c.description,
        category=c.category,
        created_by=c.created_by,
        course_id=c.course_id,
        is_active=c.is_active,
        created_at=c.created_at,
        member_count=summary.member_count,
        is_member=summary.is_member,
    )


def _member_response(view: service.MemberView) -> MemberResponse:
    return MemberResponse(
        id=view.member.id,
        user_id=view.member.user_id,
        full_name=view.full_name,
        year_of_study=view.year_of_study,
        role=view.member.role,
        joined_at=view.member.joined_at,
    )


# ---------------------------------------------------------------------------
# Communities
# ---------------------------------------------------------------------------


@router.get("", response_model=CommunityListResponse)
async def list_communities(
    search: str | None = Query(None, max_length=100),
    category: str | None = Query(None),
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_session),
) -> CommunityListResponse:
    summaries = await service.list_communities(db, principal, search=search, category=category)
    return CommunityListResponse(communities=[_community_response(s) for s in summaries])


@router.post("", response_model=CommunityResponse, status_code=201)
async def create_community(
    body: CommunityCreateRequest,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_session),
) -> CommunityResponse:
    """Create a community (year 2+). The creator becomes its admin."""
    try:
        community, principal = await service.create_community(db, principal, **body.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    summary = await service.summarize(db, principal, community)
    await db.commit()
    logger.info("community_created", community_id=community.id)
    return _community_response(summary)


@router.get("/{community_id}", response_model=CommunityResponse)
async def get_community(
    community_id: str,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_session),
) -> CommunityResponse:
    community = await service.get_community(db, principal, community_id)
    return _community_response(await service.summarize(db, principal, community))


@router.patch("/{community_id}", response_model=CommunityResponse)
async def update_community(
    community_id: str,
    body: CommunityUpdateRequest,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_session),
) -> CommunityResponse:
    try:
        community = await service.update_community(
            db, principal, community_id, body.model_dump(exclude_unset=True)
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    summary = await service.summarize(db, principal, community)
    await db.commit()
    return _community_response(summary)


# ---------------------------------------------------------------------------
# Members
# ---------------------------------------------------------------------------


@router.post("/{community_id}/join", response_model=MemberResponse, status_code=201)
async def join_community(
    community_id: str,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_session),
) -> MemberResponse:
    member = await service.join_community(db, principal, community_id)
    await db.commit()
    return _member_response(service.MemberView(member=member, full_name=None, year_of_study=principal.year_of_study))


@router.get("/{community_id}/members", response_model=MemberListResponse)
async def list_members(
    community_id: str,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_session),
) -> MemberListResponse:
    views = await service.list_members(db, principal, community_id)
    return MemberListResponse(members=[_member_response(v) for v in views])


# ---------------------------------------------------------------------------
# Resources
# ---------------------------------------------------------------------------


@router.get("/{community_id}/resources", response_model=ResourceListResponse)
async def list_resources(
    community_id: str,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_session),
) -> ResourceListResponse:
    """Members-only; non-members get an empty list."""
    resources = await service.list_resources(db, principal, community_id)
    return ResourceListResponse(resources=[ResourceResponse.model_validate(r) for r in resources])


@router.post("/{community_id}/resources", response_model=ResourceResponse, status_code=201)
async def create_resource(
    community_id: str,
    body: ResourceCreateRequest,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_session),
) -> ResourceResponse:
    resource = await service.create_resource(db, principal, community_id, **body.model_dump())
    await db.commit()
    return ResourceResponse.model_validate(resource)


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------


@router.get("/{community_id}/sessions", response_model=CommunitySessionListResponse)
async def list_sessions(
    community_id: str,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_session),
) -> CommunitySessionListResponse:
    sessions = await service.list_sessions(db, principal, community_id)
    return CommunitySessionListResponse(
        sessions=[CommunitySessionResponse.model_validate(s) for s in sessions]
    )


@router.post("/{community_id}/sessions", response_model=CommunitySessionResponse, status_code=201)
async def create_session(
    community_id: str,
    body: CommunitySessionCreateRequest,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_session),
) -> CommunitySessionResponse:
    session = await service.create_session(db, principal, community_id, **body.model_dump())
    await db.commit()
    return CommunitySessionResponse.model_validate(session)
