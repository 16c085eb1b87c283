"""
Royalties Router

Handles usage reports, distribution computation and payment status.
"""

from typing import Annotated, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from prorights.core.database import get_db
from prorights.core.security import get_current_actor
from prorights.schemas.royalties import (
    DistributionComputeRequest,
    RoyaltyDistributionResponse,
    UsageReportCreate,
    UsageReportResponse,
    UsageReportSubmitResponse,
)
from prorights.services.access import Actor
from prorights.services.distribution import distribution_service
from prorights.services.usage import usage_service

usage_router = APIRouter(prefix="/usage-reports", tags=["royalties"])
router = APIRouter(prefix="/royalties", tags=["royalties"])


@usage_router.get("", response_model=List[UsageReportResponse])
async def list_usage_reports(
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(get_current_actor)],
    license_id: Optional[UUID] = None,
):
    return await usage_service.list_usage_reports(db, actor, license_id)


@usage_router.post("", response_model=UsageReportSubmitResponse, status_code=status.HTTP_201_CREATED)
async def submit_usage_report(
    data: UsageReportCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(get_current_actor)],
) -> UsageReportSubmitResponse:
    """
    Submit a usage report.

    Distributions for the work's contributors are computed in the same
    request when automatic distribution is enabled.
    """
    report = await usage_service.submit_usage_report(
        db,
        actor,
        license_id=data.license_id,
        work_id=data.work_id,
        play_count=data.play_count,
        period_start=data.period_start,
        period_end=data.period_end,
    )
    distributions = await distribution_service.list_for_report(db, report.id)

    return UsageReportSubmitResponse(
        **UsageReportResponse.model_validate(report).model_dump(),
        distributions=[RoyaltyDistributionResponse.model_validate(d) for d in distributions],
    )


@usage_router.post(
    "/{report_id}/distributions",
    response_model=List[RoyaltyDistributionResponse],
    status_code=status.HTTP_201_CREATED,
)
async def compute_distributions(
    report_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(get_current_actor)],
    data: Optional[DistributionComputeRequest] = None,
):
    """Compute distributions for a report that has none yet (admin only)."""
    rate = data.rate_per_play if data else None
    return await distribution_service.compute_for_report(db, actor, report_id, rate)


@router.get("", response_model=List[RoyaltyDistributionResponse])
async def list_distributions(
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(get_current_actor)],
):
    """Admins see every distribution, artists their own."""
    return await distribution_service.list_distributions(db, actor)


@router.post("/{distribution_id}/processing", response_model=RoyaltyDistributionResponse)
async def mark_processing(
    distribution_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(get_current_actor)],
):
    return await distribution_service.mark_processing(db, actor, distribution_id)


@router.post("/{distribution_id}/paid", response_model=RoyaltyDistributionResponse)
async def mark_paid(
    distribution_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(get_current_actor)],
):
    return await distribution_service.mark_paid(db, actor, distribution_id)


@router.post("/{distribution_id}/failed", response_model=RoyaltyDistributionResponse)
async def mark_failed(
    distribution_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(get_current_actor)],
):
    return await distribution_service.mark_failed(db, actor, distribution_id)
