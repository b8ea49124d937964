"""Dashboard endpoint."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from peerlearn.access import Principal
from peerlearn.auth.dependencies import get_current_principal
from peerlearn.dashboard.schemas import DashboardResponse
from peerlearn.dashboard.service import get_dashboard
from peerlearn.database import get_session

router = APIRouter(prefix="/api/v1/dashboard", tags=["Dashboard"])


@router.get("", response_model=DashboardResponse)
async def dashboard(
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_session),
) -> DashboardResponse:
    """Stats for the caller: teaching stats for mentors, learning stats for students."""
    return await get_dashboard(db, principal)
