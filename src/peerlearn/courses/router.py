"""Course router: courses, the domain catalog and mentor sessions."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from peerlearn.access import Principal
from peerlearn.auth.dependencies import get_current_principal
from peerlearn.courses.catalog import COURSE_DOMAINS
from peerlearn.courses.schemas import (
    CourseCreateRequest,
    CourseListResponse,
    CourseResponse,
    CourseUpdateRequest,
    DomainListResponse,
    SessionCreateRequest,
    SessionListResponse,
    SessionResponse,
)
from peerlearn.courses.service import (
    complete_session,
    create_course,
    create_session,
    get_course,
    list_courses,
    list_sessions,
    update_course,
)
from peerlearn.database import get_session

logger = structlog.get_logger()

router = APIRouter(prefix="/api/v1", tags=["Courses"])


# ---------------------------------------------------------------------------
# Courses
# ---------------------------------------------------------------------------


@router.get("/courses/domains", response_model=DomainListResponse)
async def list_domains() -> DomainListResponse:
    """Domains a course can be filed under."""
    return DomainListResponse(domains=list(COURSE_DOMAINS))


@router.get("/courses", response_model=CourseListResponse)
async def list_courses_endpoint(
    search: str | None = Query(None, max_length=100),
    domain: str | None = Query(None),
    price: str | None = Query(None, pattern="^(free|paid)$"),
    mentor_id: str | None = Query(None),
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_session),
) -> CourseListResponse:
    """Active courses, filterable by search text, domain and price."""
    courses = await list_courses(
        db, principal, search=search, domain=domain, price=price, mentor_id=mentor_id
    )
    return CourseListResponse(
        courses=[CourseResponse.model_validate(c) for c in courses],
        total=len(courses),
    )


@router.post("/courses", response_model=CourseResponse, status_code=201)
async def create_course_endpoint(
    body: CourseCreateRequest,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_session),
) -> CourseResponse:
    try:
        course = await create_course(db, principal, **body.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    await db.commit()
    logger.info("course_created", course_id=course.id, mentor_id=principal.id)
    return CourseResponse.model_validate(course)


@router.get("/courses/{course_id}", response_model=CourseResponse)
async def get_course_endpoint(
    course_id: str,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_session),
) -> CourseResponse:
    return CourseResponse.model_validate(await get_course(db, principal, course_id))


@router.patch("/courses/{course_id}", response_model=CourseResponse)
async def update_course_endpoint(
    course_id: str,
    body: CourseUpdateRequest,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_session),
) -> CourseResponse:
    """Owner-only course edit, including (de)activation."""
    try:
        course = await update_course(db, principal, course_id, body.model_dump(exclude_unset=True))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    await db.commit()
    return CourseResponse.model_validate(course)


# ---------------------------------------------------------------------------
# Mentor sessions
# ---------------------------------------------------------------------------


@router.get("/courses/{course_id}/sessions", response_model=SessionListResponse)
async def list_sessions_endpoint(
    course_id: str,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_session),
) -> SessionListResponse:
    sessions = await list_sessions(db, principal, course_id)
    return SessionListResponse(sessions=[SessionResponse.model_validate(s) for s in sessions])


@router.post("/courses/{course_id}/sessions", response_model=SessionResponse, status_code=201)
async def create_session_endpoint(
    course_id: str,
    body: SessionCreateRequest,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_session),
) -> SessionResponse:
    """Schedule a session for one of the principal's courses."""
    session = await create_session(db, principal, course_id, **body.model_dump())
    await db.commit()
    return SessionResponse.model_validate(session)


@router.post("/sessions/{session_id}/complete", response_model=SessionResponse)
async def complete_session_endpoint(
    session_id: str,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_session),
) -> SessionResponse:
    session = await complete_session(db, principal, session_id)
    await db.commit()
    return SessionResponse.model_validate(session)
