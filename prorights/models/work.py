"""Work model for registered musical works."""
import uuid
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, List

from sqlalchemy import String, DateTime, ForeignKey, Uuid
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from prorights.core.database import Base

if TYPE_CHECKING:
    from prorights.models.user import User
    from prorights.models.contributor import Contributor
    from prorights.models.usage_report import UsageReport


class WorkStatus(str, Enum):
    """Review status of a work."""
    PENDING = "pending"     # Registered, awaiting admin review
    APPROVED = "approved"
    REJECTED = "rejected"


class Work(Base):
    """
    A musical work registered by an artist.

    ISWC identifies the composition, ISRC the recording. Both are optional
    but unique when present, and cannot be changed once registered.
    """

    __tablename__ = "works"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    title: Mapped[str] = mapped_column(String(500), nullable=False)

    # External identifiers
    iswc: Mapped[str] = mapped_column(String(20), nullable=True, unique=True)
    isrc: Mapped[str] = mapped_column(String(20), nullable=True, unique=True)

    duration: Mapped[str] = mapped_column(String(20), nullable=True)  # "mm:ss"

    status: Mapped[WorkStatus] = mapped_column(
        SAEnum(WorkStatus, values_callable=lambda x: [e.value for e in x]),
        default=WorkStatus.PENDING,
        nullable=False,
        index=True,
    )

    registered_by: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )

    # Relationships
    registrant: Mapped["User"] = relationship(
        "User",
        back_populates="registered_works",
    )
    contributors: Mapped[List["Contributor"]] = relationship(
        "Contributor",
        back_populates="work",
        cascade="all, delete-orphan",
        order_by="Contributor.sequence",
    )
    usage_reports: Mapped[List["UsageReport"]] = relationship(
        "UsageReport",
        back_populates="work",
    )

    def __repr__(self) -> str:
        return f"<Work {self.id} title={self.title} status={self.status}>"
