"""
Dashboard Router

Summary statistics and user search for the work registration form.
"""

from typing import Annotated, List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from prorights.core.database import get_db
from prorights.core.security import get_current_actor
from prorights.schemas.auth import UserResponse
from prorights.schemas.royalties import DashboardStatsResponse
from prorights.services import accounts
from prorights.services.access import Actor
from prorights.services.stats import dashboard_stats

router = APIRouter(tags=["dashboard"])


@router.get("/dashboard/stats", response_model=DashboardStatsResponse)
async def get_dashboard_stats(
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(get_current_actor)],
):
    return await dashboard_stats(db, actor)


@router.get("/users/search", response_model=List[UserResponse])
async def search_users(
    db: Annotated[AsyncSession, Depends(get_db)],
    _actor: Annotated[Actor, Depends(get_current_actor)],
    q: str = "",
):
    """Find artist accounts to list as contributors."""
    return await accounts.search_users(db, q)
