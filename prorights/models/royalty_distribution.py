"""Royalty distribution model: one contributor's share of a usage report."""
import uuid
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Numeric, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from prorights.core.database import Base

if TYPE_CHECKING:
    from prorights.models.usage_report import UsageReport
    from prorights.models.contributor import Contributor


class PaymentStatus(str, Enum):
    """Payment status of a distribution."""
    PENDING = "pending"         # Computed, not yet sent
    PROCESSING = "processing"   # Payment in flight
    PAID = "paid"               # Terminal
    FAILED = "failed"           # Terminal, no retry


class RoyaltyDistribution(Base):
    """
    Amount owed to one contributor for one usage report.

    Identified by the (usage report, contributor) pair. Only the payment
    status and paid_at change after creation.

    Audit trail:
    - percentage: contributor's share when the amount was computed
    - rate_per_play: rate the amount was computed with
    """

    __tablename__ = "royalty_distributions"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    usage_report_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("usage_reports.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    contributor_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("contributors.id"),
        nullable=False,
        index=True,
    )

    amount: Mapped[Decimal] = mapped_column(
        Numeric(precision=10, scale=2),
        nullable=False,
    )
    percentage: Mapped[Decimal] = mapped_column(
        Numeric(precision=5, scale=2),
        nullable=False,
    )
    rate_per_play: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=6),
        nullable=False,
    )

    payment_status: Mapped[PaymentStatus] = mapped_column(
        SAEnum(PaymentStatus, values_callable=lambda x: [e.value for e in x]),
        default=PaymentStatus.PENDING,
        nullable=False,
        index=True,
    )
    paid_at: Mapped[datetime] = mapped_column(DateTime, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
    )

    # Relationships
    usage_report: Mapped["UsageReport"] = relationship(
        "UsageReport",
        back_populates="distributions",
    )
    contributor: Mapped["Contributor"] = relationship(
        "Contributor",
        back_populates="distributions",
    )

    __table_args__ = (
        UniqueConstraint("usage_report_id", "contributor_id", name="uq_distribution_report_contributor"),
    )

    def __repr__(self) -> str:
        return f"<RoyaltyDistribution {self.id} amount={self.amount} status={self.payment_status}>"
