"""
Works Router

Work registration, review and contributor management.
"""

from typing import Annotated, List
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from prorights.core.database import get_db
from prorights.core.security import get_current_actor
from prorights.models.contributor import Contributor
from prorights.schemas.works import (
    ContributorCreate,
    ContributorResponse,
    ContributorRoleUpdate,
    ContributorsListResponse,
    RecentWorkResponse,
    WorkCreate,
    WorkResponse,
    WorkStatusUpdate,
)
from prorights.services.access import Actor
from prorights.services.contributors import registry
from prorights.services.works import ContributorEntry, work_service

router = APIRouter(prefix="/works", tags=["works"])
contributors_router = APIRouter(prefix="/contributors", tags=["works"])


def contributor_response(contributor: Contributor) -> ContributorResponse:
    """Build a response from a contributor with its user loaded."""
    return ContributorResponse(
        id=contributor.id,
        work_id=contributor.work_id,
        user_id=contributor.user_id,
        user_name=contributor.user.display_name,
        user_email=contributor.user.email,
        role=contributor.role,
        percentage=contributor.percentage,
        created_at=contributor.created_at,
    )


async def contributors_list(db: AsyncSession, work_id: UUID) -> ContributorsListResponse:
    contributors = await registry.list_contributors(db, work_id)
    return ContributorsListResponse(
        work_id=work_id,
        contributors=[contributor_response(c) for c in contributors],
        total_percentage=sum((c.percentage for c in contributors), start=0),
    )


@router.get("", response_model=List[WorkResponse])
async def list_works(
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(get_current_actor)],
):
    """Admins see every work, artists the works they registered."""
    return await work_service.list_works(db, actor)


@router.get("/recent", response_model=List[RecentWorkResponse])
async def recent_works(
    db: Annotated[AsyncSession, Depends(get_db)],
    _actor: Annotated[Actor, Depends(get_current_actor)],
    limit: int = Query(default=10, ge=1, le=100),
):
    works = await work_service.recent_works(db, limit)
    return [
        RecentWorkResponse(
            **WorkResponse.model_validate(work).model_dump(),
            registered_by_name=work.registrant.display_name,
        )
        for work in works
    ]


@router.get("/{work_id}", response_model=WorkResponse)
async def get_work(
    work_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    _actor: Annotated[Actor, Depends(get_current_actor)],
):
    return await work_service.get_work(db, work_id)


@router.post("", response_model=WorkResponse, status_code=status.HTTP_201_CREATED)
async def register_work(
    data: WorkCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(get_current_actor)],
):
    """
    Register a work with its contributors.

    The work and its contributors are committed together. Contributor
    percentages are derived from their roles.
    """
    return await work_service.register_work(
        db,
        actor,
        title=data.title,
        iswc=data.iswc,
        isrc=data.isrc,
        duration=data.duration,
        contributors=[ContributorEntry(user_id=c.user_id, role=c.role) for c in data.contributors],
    )


@router.patch("/{work_id}/status", response_model=WorkResponse)
async def review_work(
    work_id: UUID,
    data: WorkStatusUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(get_current_actor)],
):
    """Approve or reject a pending work (admin only)."""
    return await work_service.review_work(db, actor, work_id, data.status)


@router.get("/{work_id}/contributors", response_model=ContributorsListResponse)
async def list_contributors(
    work_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    _actor: Annotated[Actor, Depends(get_current_actor)],
):
    return await contributors_list(db, work_id)


@router.post(
    "/{work_id}/contributors",
    response_model=ContributorsListResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_contributor(
    work_id: UUID,
    data: ContributorCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(get_current_actor)],
):
    """Add a contributor; returns the recalculated split of the work."""
    await registry.add_contributor(db, actor, work_id, data.user_id, data.role)
    return await contributors_list(db, work_id)


@contributors_router.patch("/{contributor_id}", response_model=ContributorsListResponse)
async def change_contributor_role(
    contributor_id: UUID,
    data: ContributorRoleUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(get_current_actor)],
):
    contributor = await registry.change_role(db, actor, contributor_id, data.role)
    return await contributors_list(db, contributor.work_id)


@contributors_router.delete("/{contributor_id}", response_model=ContributorsListResponse)
async def remove_contributor(
    contributor_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(get_current_actor)],
):
    contributor = await registry.get_contributor(db, contributor_id)
    work_id = contributor.work_id
    await registry.remove_contributor(db, actor, contributor_id)
    return await contributors_list(db, work_id)
