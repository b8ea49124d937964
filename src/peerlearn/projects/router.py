"""Portfolio project endpoints."""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from peerlearn.access import Principal
from peerlearn.auth.dependencies import get_current_principal
from peerlearn.database import get_session
from peerlearn.projects.service import create_project, delete_project, list_projects, update_project

router = APIRouter(prefix="/api/v1", tags=["Projects"])


class ProjectCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(None, max_length=4000)
    project_url: str | None = Field(None, max_length=512)
    github_url: str | None = Field(None, max_length=512)
    technologies: list[str] = Field(default_factory=list, max_length=30)
    is_featured: bool = False


class ProjectUpdateRequest(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, max_length=4000)
    project_url: str | None = Field(None, max_length=512)
    github_url: str | None = Field(None, max_length=512)
    technologies: list[str] | None = Field(None, max_length=30)
    is_featured: bool | None = None


class ProjectResponse(BaseModel):
    id: str
    user_id: str
    title: str
    description: str | None = None
    project_url: str | None = None
    github_url: str | None = None
    technologies: list[str]
    is_featured: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class ProjectListResponse(BaseModel):
    projects: list[ProjectResponse]


@router.get("/users/{user_id}/projects", response_model=ProjectListResponse)
async def list_user_projects(
    user_id: str,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_session),
) -> ProjectListResponse:
    projects = await list_projects(db, principal, user_id)
    return ProjectListResponse(projects=[ProjectResponse.model_validate(p) for p in projects])


@router.post("/projects", response_model=ProjectResponse, status_code=201)
async def create_project_endpoint(
    body: ProjectCreateRequest,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_session),
) -> ProjectResponse:
    project = await create_project(db, principal, **body.model_dump())
    await db.commit()
    return ProjectResponse.model_validate(project)


@router.patch("/projects/{project_id}", response_model=ProjectResponse)
async def update_project_endpoint(
    project_id: str,
    body: ProjectUpdateRequest,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_session),
) -> ProjectResponse:
    try:
        project = await update_project(db, principal, project_id, body.model_dump(exclude_unset=True))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    await db.commit()
    return ProjectResponse.model_validate(project)


@router.delete("/projects/{project_id}", status_code=204)
async def delete_project_endpoint(
    project_id: str,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_session),
) -> Response:
    await delete_project(db, principal, project_id)
    await db.commit()
    return Response(status_code=204)
