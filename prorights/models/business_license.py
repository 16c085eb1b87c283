"""Business license model for venues that publicly perform music."""
import uuid
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, List

from sqlalchemy import String, DateTime, Numeric, ForeignKey, Text, Uuid
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from prorights.core.database import Base

if TYPE_CHECKING:
    from prorights.models.usage_report import UsageReport


class BusinessType(str, Enum):
    """Kind of business applying for a license. Decides the annual fee."""
    BAR = "bar"
    RESTAURANT = "restaurant"
    VENUE = "venue"
    RADIO = "radio"
    TV = "tv"
    GYM = "gym"
    MALL = "mall"


class LicenseStatus(str, Enum):
    """Status of a license."""
    PENDING = "pending"     # Applied, awaiting review
    ACTIVE = "active"       # Approved, inside its validity window
    EXPIRED = "expired"
    REVOKED = "revoked"


class BusinessLicense(Base):
    """A public-performance license held by a business."""

    __tablename__ = "business_licenses"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    # Applicant
    business_name: Mapped[str] = mapped_column(String(255), nullable=False)
    business_type: Mapped[BusinessType] = mapped_column(
        SAEnum(BusinessType, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
    )
    contact_email: Mapped[str] = mapped_column(String(255), nullable=False)
    contact_phone: Mapped[str] = mapped_column(String(50), nullable=True)
    address: Mapped[str] = mapped_column(Text, nullable=False)

    annual_fee: Mapped[Decimal] = mapped_column(
        Numeric(precision=10, scale=2),
        nullable=False,
    )

    status: Mapped[LicenseStatus] = mapped_column(
        SAEnum(LicenseStatus, values_callable=lambda x: [e.value for e in x]),
        default=LicenseStatus.PENDING,
        nullable=False,
        index=True,
    )

    applied_by: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    approved_by: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id"),
        nullable=True,
    )

    # Validity window, set on activation
    valid_from: Mapped[datetime] = mapped_column(DateTime, nullable=True)
    valid_to: Mapped[datetime] = mapped_column(DateTime, nullable=True)

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
    usage_reports: Mapped[List["UsageReport"]] = relationship(
        "UsageReport",
        back_populates="license",
    )

    def __repr__(self) -> str:
        return f"<BusinessLicense {self.id} business={self.business_name} status={self.status}>"
