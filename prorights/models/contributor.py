"""Contributor model linking users to works with an ownership percentage."""
import uuid
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, List

from sqlalchemy import DateTime, Numeric, Integer, ForeignKey, CheckConstraint, UniqueConstraint, Uuid
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from prorights.core.database import Base

if TYPE_CHECKING:
    from prorights.models.work import Work
    from prorights.models.user import User
    from prorights.models.royalty_distribution import RoyaltyDistribution


class ContributorRole(str, Enum):
    """Role a user plays on a work. Each role owns a fixed quota bucket."""
    COMPOSER = "composer"
    AUTHOR = "author"
    VOCALIST = "vocalist"


class Contributor(Base):
    """
    A user's contribution to a work.

    The percentage is derived from role membership: every member of a role
    bucket gets an equal share of that role's quota. See
    ``prorights.services.allocation``.
    """

    __tablename__ = "contributors"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    work_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("works.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )

    role: Mapped[ContributorRole] = mapped_column(
        SAEnum(ContributorRole, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
    )

    # Ownership percentage (0.00 to 100.00)
    percentage: Mapped[Decimal] = mapped_column(
        Numeric(precision=5, scale=2),
        default=Decimal("0"),
        nullable=False,
    )

    # Insertion order within the work
    sequence: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
    )

    # Relationships
    work: Mapped["Work"] = relationship(
        "Work",
        back_populates="contributors",
    )
    user: Mapped["User"] = relationship(
        "User",
        back_populates="contributions",
    )
    distributions: Mapped[List["RoyaltyDistribution"]] = relationship(
        "RoyaltyDistribution",
        back_populates="contributor",
    )

    # Constraints
    __table_args__ = (
        UniqueConstraint("work_id", "user_id", "role", name="uq_contributor_work_user_role"),
        CheckConstraint(
            "percentage >= 0 AND percentage <= 100",
            name="check_contributor_percentage_range",
        ),
    )

    def __repr__(self) -> str:
        return f"<Contributor {self.id} work={self.work_id} role={self.role} pct={self.percentage}>"
