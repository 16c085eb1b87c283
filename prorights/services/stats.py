"""Dashboard statistics."""
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from prorights.models.business_license import BusinessLicense, LicenseStatus
from prorights.models.contributor import Contributor
from prorights.models.royalty_distribution import PaymentStatus, RoyaltyDistribution
from prorights.models.work import Work, WorkStatus
from prorights.services.access import Actor


@dataclass
class DashboardStats:
    total_works: int
    total_royalties: Decimal
    active_licenses: int
    pending_approvals: int


async def dashboard_stats(db: AsyncSession, actor: Actor) -> DashboardStats:
    """Counts and sums shown on the actor's dashboard."""
    works_result = await db.execute(
        select(func.count(Work.id)).where(Work.registered_by == actor.id)
    )

    # Only paid distributions count as earned royalties
    royalties_result = await db.execute(
        select(func.coalesce(func.sum(RoyaltyDistribution.amount), 0))
        .join(Contributor, RoyaltyDistribution.contributor_id == Contributor.id)
        .where(
            Contributor.user_id == actor.id,
            RoyaltyDistribution.payment_status == PaymentStatus.PAID,
        )
    )

    licenses_result = await db.execute(
        select(func.count(BusinessLicense.id)).where(BusinessLicense.status == LicenseStatus.ACTIVE)
    )

    approvals_result = await db.execute(
        select(func.count(Work.id)).where(Work.status == WorkStatus.PENDING)
    )

    return DashboardStats(
        total_works=works_result.scalar() or 0,
        total_royalties=Decimal(str(royalties_result.scalar())).quantize(Decimal("0.01")),
        active_licenses=licenses_result.scalar() or 0,
        pending_approvals=approvals_result.scalar() or 0,
    )
