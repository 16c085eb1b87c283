"""
Usage report ingestion.

A business reports plays of a work under one of its licenses. With
AUTO_DISTRIBUTE on, the report's royalty distributions are computed in the
same unit of work, so the report and its distributions are kept or
discarded together.
"""
from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from prorights.core.config import settings
from prorights.core.exceptions import NotFoundError, ValidationError
from prorights.models.business_license import BusinessLicense
from prorights.models.usage_report import UsageReport
from prorights.models.work import Work
from prorights.services.access import Action, Actor, require, require_owner_or_admin
from prorights.services.distribution import DistributionService, distribution_service as default_distributor

logger = logging.getLogger(__name__)


def validate_usage(play_count: int, period_start: date, period_end: date) -> None:
    """
    Check a usage declaration.

    Raises:
        ValidationError: Negative play count or period_end <= period_start
    """
    if play_count is None or play_count < 0:
        raise ValidationError(f"play_count must be a non-negative integer, got {play_count}")
    if period_end <= period_start:
        raise ValidationError(
            f"period_end ({period_end}) must be after period_start ({period_start})"
        )


class UsageService:
    """Service for submitting and listing usage reports."""

    def __init__(
        self,
        distributor: DistributionService | None = None,
        auto_distribute: bool | None = None,
    ):
        self.distributor = distributor or default_distributor
        self.auto_distribute = settings.AUTO_DISTRIBUTE if auto_distribute is None else auto_distribute

    async def submit_usage_report(
        self,
        db: AsyncSession,
        actor: Actor,
        license_id: UUID,
        work_id: UUID,
        play_count: int,
        period_start: date,
        period_end: date,
        rate: Optional[Decimal] = None,
    ) -> UsageReport:
        """
        Validate and record a usage report.

        Overlapping periods for the same work and license are accepted.

        Raises:
            ValidationError: Negative play count or inverted/empty period
            NotFoundError: License or work not found
            PermissionDeniedError: Actor is not a business holding the license
        """
        require(actor, Action.SUBMIT_USAGE)
        validate_usage(play_count, period_start, period_end)

        license_result = await db.execute(
            select(BusinessLicense).where(BusinessLicense.id == license_id)
        )
        business_license = license_result.scalar_one_or_none()
        if business_license is None:
            raise NotFoundError("License", license_id)
        require_owner_or_admin(actor, business_license.applied_by, "license")

        work_result = await db.execute(select(Work.id).where(Work.id == work_id))
        if work_result.first() is None:
            raise NotFoundError("Work", work_id)

        report = UsageReport(
            license_id=license_id,
            work_id=work_id,
            play_count=play_count,
            period_start=period_start,
            period_end=period_end,
            submitted_by=actor.id,
        )
        db.add(report)
        await db.flush()

        logger.info(
            f"Usage report {report.id}: work={work_id} license={license_id} "
            f"plays={play_count} period={period_start}..{period_end}"
        )

        if self.auto_distribute:
            await self.distributor.compute_distributions(db, report, rate)

        return report

    async def list_usage_reports(
        self,
        db: AsyncSession,
        actor: Actor,
        license_id: Optional[UUID] = None,
    ) -> List[UsageReport]:
        """Newest first. Businesses only see reports filed on their licenses."""
        require(actor, Action.VIEW_USAGE)

        query = select(UsageReport).order_by(UsageReport.created_at.desc())
        if license_id is not None:
            query = query.where(UsageReport.license_id == license_id)
        if not actor.is_admin:
            query = query.join(
                BusinessLicense, UsageReport.license_id == BusinessLicense.id
            ).where(BusinessLicense.applied_by == actor.id)

        result = await db.execute(query)
        return list(result.scalars().all())


# Default service instance
usage_service = UsageService()
