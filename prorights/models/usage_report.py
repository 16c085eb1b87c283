"""Usage report model: plays of a work under a license over a period."""
import uuid
from datetime import datetime, date
from typing import TYPE_CHECKING, List

from sqlalchemy import Date, DateTime, Integer, ForeignKey, CheckConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from prorights.core.database import Base

if TYPE_CHECKING:
    from prorights.models.business_license import BusinessLicense
    from prorights.models.work import Work
    from prorights.models.royalty_distribution import RoyaltyDistribution


class UsageReport(Base):
    """
    A business's declaration of how many times a work was played.

    The reporting period is half-open, [period_start, period_end).
    Reports are immutable once created.
    """

    __tablename__ = "usage_reports"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    license_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("business_licenses.id"),
        nullable=False,
        index=True,
    )
    work_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("works.id"),
        nullable=False,
        index=True,
    )

    play_count: Mapped[int] = mapped_column(Integer, nullable=False)

    period_start: Mapped[date] = mapped_column(Date, nullable=False)
    period_end: Mapped[date] = mapped_column(Date, nullable=False)

    submitted_by: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id"),
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
    )

    # Relationships
    license: Mapped["BusinessLicense"] = relationship(
        "BusinessLicense",
        back_populates="usage_reports",
    )
    work: Mapped["Work"] = relationship(
        "Work",
        back_populates="usage_reports",
    )
    distributions: Mapped[List["RoyaltyDistribution"]] = relationship(
        "RoyaltyDistribution",
        back_populates="usage_report",
        cascade="all, delete-orphan",
    )

    # Constraints
    __table_args__ = (
        CheckConstraint("play_count >= 0", name="check_play_count_non_negative"),
        CheckConstraint("period_start < period_end", name="check_period_order"),
    )

    def __repr__(self) -> str:
        return f"<UsageReport {self.id} work={self.work_id} plays={self.play_count}>"
