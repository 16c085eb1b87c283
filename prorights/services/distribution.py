"""
Royalty distribution service.

Business rules:
1. A usage report produces one distribution per contributor of its work:
   amount = rate_per_play * play_count * percentage / 100
   rounded half-up to the cent.

2. Distributions start pending and follow the payment lifecycle:
   pending -> processing -> paid
   pending/processing -> failed
   paid and failed are terminal; failed rows are not retried.

3. paid_at is set only on the transition to paid.
"""
from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, FrozenSet, List
from uuid import UUID

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from prorights.core.exceptions import InvalidTransitionError, NotFoundError, ValidationError
from prorights.models.contributor import Contributor
from prorights.models.royalty_distribution import PaymentStatus, RoyaltyDistribution
from prorights.models.usage_report import UsageReport
from prorights.services.access import Action, Actor, require
from prorights.services.rates import RateProvider, rate_provider as default_rate_provider

logger = logging.getLogger(__name__)


CENT = Decimal("0.01")

PAYMENT_TRANSITIONS: Dict[PaymentStatus, FrozenSet[PaymentStatus]] = {
    PaymentStatus.PENDING: frozenset({PaymentStatus.PROCESSING, PaymentStatus.PAID, PaymentStatus.FAILED}),
    PaymentStatus.PROCESSING: frozenset({PaymentStatus.PAID, PaymentStatus.FAILED}),
    PaymentStatus.PAID: frozenset(),
    PaymentStatus.FAILED: frozenset(),
}


def compute_amount(rate: Decimal, play_count: int, percentage: Decimal) -> Decimal:
    """
    Monetary share of one contributor.

    Args:
        rate: Royalty per play
        play_count: Plays in the usage report
        percentage: Contributor's ownership percentage (0-100)

    Returns:
        Amount rounded half-up to 2 decimals
    """
    gross = Decimal(rate) * Decimal(play_count)
    return (gross * Decimal(percentage) / Decimal("100")).quantize(CENT, rounding=ROUND_HALF_UP)


class DistributionService:
    """
    Service for computing distributions and tracking their payment.

    Stateless; all database operations go through the session parameter.
    """

    def __init__(self, rates: RateProvider | None = None):
        """
        Initialize the service.

        Args:
            rates: Per-play rate provider (defaults to the global flat rate)
        """
        self.rates = rates or default_rate_provider

    async def get_report(self, db: AsyncSession, report_id: UUID) -> UsageReport:
        result = await db.execute(select(UsageReport).where(UsageReport.id == report_id))
        report = result.scalar_one_or_none()
        if report is None:
            raise NotFoundError("Usage report", report_id)
        return report

    async def get_distribution(self, db: AsyncSession, distribution_id: UUID) -> RoyaltyDistribution:
        result = await db.execute(
            select(RoyaltyDistribution).where(RoyaltyDistribution.id == distribution_id)
        )
        distribution = result.scalar_one_or_none()
        if distribution is None:
            raise NotFoundError("Royalty distribution", distribution_id)
        return distribution

    async def compute_distributions(
        self,
        db: AsyncSession,
        report: UsageReport,
        rate: Decimal | None = None,
    ) -> List[RoyaltyDistribution]:
        """
        Create one pending distribution per contributor of the report's work.

        Args:
            db: Database session
            report: Usage report to distribute
            rate: Per-play rate; the rate provider decides when omitted

        Returns:
            Created distributions, in contributor insertion order

        Raises:
            ValidationError: Distributions already exist for the report
        """
        existing = await db.execute(
            select(func.count(RoyaltyDistribution.id)).where(
                RoyaltyDistribution.usage_report_id == report.id
            )
        )
        if existing.scalar() > 0:
            raise ValidationError(f"Distributions already computed for usage report {report.id}")

        if rate is None:
            rate = self.rates.rate_for(report)

        result = await db.execute(
            select(Contributor)
            .where(Contributor.work_id == report.work_id)
            .order_by(Contributor.sequence)
        )
        contributors = result.scalars().all()

        if not contributors:
            logger.warning(f"Work {report.work_id} has no contributors, nothing to distribute for report {report.id}")

        distributions = []
        for contributor in contributors:
            distribution = RoyaltyDistribution(
                usage_report_id=report.id,
                contributor_id=contributor.id,
                amount=compute_amount(rate, report.play_count, contributor.percentage),
                percentage=contributor.percentage,
                rate_per_play=rate,
                payment_status=PaymentStatus.PENDING,
            )
            db.add(distribution)
            distributions.append(distribution)

        await db.flush()

        total = sum((d.amount for d in distributions), Decimal("0.00"))
        logger.info(
            f"Created {len(distributions)} distributions for report {report.id}: "
            f"plays={report.play_count}, rate={rate}, total={total}"
        )
        return distributions

    async def compute_for_report(
        self,
        db: AsyncSession,
        actor: Actor,
        report_id: UUID,
        rate: Decimal | None = None,
    ) -> List[RoyaltyDistribution]:
        """Admin entry point for reports submitted without distribution."""
        require(actor, Action.COMPUTE_DISTRIBUTIONS)
        report = await self.get_report(db, report_id)
        return await self.compute_distributions(db, report, rate)

    async def transition(
        self,
        db: AsyncSession,
        actor: Actor,
        distribution_id: UUID,
        target: PaymentStatus,
    ) -> RoyaltyDistribution:
        """
        Move a distribution along the payment lifecycle.

        Raises:
            NotFoundError: Distribution not found
            InvalidTransitionError: Transition not allowed from current status
        """
        require(actor, Action.SETTLE_PAYMENT)
        distribution = await self.get_distribution(db, distribution_id)

        current = distribution.payment_status
        if target not in PAYMENT_TRANSITIONS[current]:
            raise InvalidTransitionError(
                f"Cannot move distribution {distribution_id} from {current.value} to {target.value}"
            )

        distribution.payment_status = target
        if target == PaymentStatus.PAID:
            distribution.paid_at = datetime.utcnow()

        await db.flush()

        logger.info(f"Distribution {distribution_id}: {current.value} -> {target.value}")
        return distribution

    async def mark_processing(self, db: AsyncSession, actor: Actor, distribution_id: UUID) -> RoyaltyDistribution:
        return await self.transition(db, actor, distribution_id, PaymentStatus.PROCESSING)

    async def mark_paid(self, db: AsyncSession, actor: Actor, distribution_id: UUID) -> RoyaltyDistribution:
        return await self.transition(db, actor, distribution_id, PaymentStatus.PAID)

    async def mark_failed(self, db: AsyncSession, actor: Actor, distribution_id: UUID) -> RoyaltyDistribution:
        return await self.transition(db, actor, distribution_id, PaymentStatus.FAILED)

    async def list_distributions(self, db: AsyncSession, actor: Actor) -> List[RoyaltyDistribution]:
        """Admins see every distribution, artists those of their own contributions."""
        require(actor, Action.VIEW_ROYALTIES)

        query = select(RoyaltyDistribution).order_by(RoyaltyDistribution.created_at.desc())
        if not actor.is_admin:
            query = query.join(
                Contributor, RoyaltyDistribution.contributor_id == Contributor.id
            ).where(Contributor.user_id == actor.id)

        result = await db.execute(query)
        return list(result.scalars().all())

    async def list_for_report(self, db: AsyncSession, report_id: UUID) -> List[RoyaltyDistribution]:
        result = await db.execute(
            select(RoyaltyDistribution)
            .join(Contributor, RoyaltyDistribution.contributor_id == Contributor.id)
            .where(RoyaltyDistribution.usage_report_id == report_id)
            .order_by(Contributor.sequence)
        )
        return list(result.scalars().all())


# Default service instance
distribution_service = DistributionService()
