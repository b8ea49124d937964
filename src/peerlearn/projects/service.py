"""Portfolio projects shown on user profiles."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import select

from peerlearn.access import Action, Principal, authorize, can_read, filter_readable
from peerlearn.db.factories import new_project
from peerlearn.db.models import UserProject
from peerlearn.errors import NotFoundError

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


async def list_projects(db: AsyncSession, principal: Principal, user_id: str) -> list[UserProject]:
    """Featured projects first, then newest."""
    result = await db.execute(
        select(UserProject)
        .where(UserProject.user_id == user_id)
        .order_by(UserProject.is_featured.desc(), UserProject.created_at.desc())
    )
    return filter_readable(principal, result.scalars().all())


async def _get_project(db: AsyncSession, principal: Principal, project_id: str) -> UserProject:
    project = await db.get(UserProject, project_id)
    if project is None or not can_read(principal, project):
        raise NotFoundError("Project", project_id)
    return project


async def create_project(db: AsyncSession, principal: Principal, **fields: Any) -> UserProject:
    project = new_project(user_id=principal.id, **fields)
    authorize(principal, Action.CREATE, project)
    db.add(project)
    await db.flush()
    return project


async def update_project(
    db: AsyncSession,
    principal: Principal,
    project_id: str,
    changes: dict[str, Any],
) -> UserProject:
    """Owner-only edit. ``technologies`` keeps the given order."""
    project = await _get_project(db, principal, project_id)
    authorize(principal, Action.UPDATE, project)

    if changes.get("title", "") is None:
        msg = "Fields cannot be cleared: title"
        raise ValueError(msg)
    if "technologies" in changes:
        changes["technologies"] = list(changes["technologies"] or [])

    for field, value in changes.items():
        setattr(project, field, value)
    await db.flush()
    return project


async def delete_project(db: AsyncSession, principal: Principal, project_id: str) -> None:
    project = await _get_project(db, principal, project_id)
    authorize(principal, Action.DELETE, project)
    await db.delete(project)
    await db.flush()
