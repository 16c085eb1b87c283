"""
Business licensing.

Annual fees come from a static policy table keyed on business type.
Activating a license opens its validity window.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from prorights.core.config import settings
from prorights.core.exceptions import NotFoundError, ValidationError
from prorights.models.business_license import BusinessLicense, BusinessType, LicenseStatus
from prorights.services.access import Action, Actor, require, require_owner_or_admin

logger = logging.getLogger(__name__)


LICENSE_FEES: Dict[BusinessType, Decimal] = {
    BusinessType.BAR: Decimal("1200.00"),
    BusinessType.RESTAURANT: Decimal("800.00"),
    BusinessType.VENUE: Decimal("2500.00"),
    BusinessType.RADIO: Decimal("5000.00"),
    BusinessType.TV: Decimal("10000.00"),
    BusinessType.GYM: Decimal("600.00"),
    BusinessType.MALL: Decimal("3000.00"),
}


def license_fee(business_type: BusinessType) -> Decimal:
    """Annual fee for a business type."""
    return LICENSE_FEES[business_type]


class LicensingService:
    """Service for license applications and their review."""

    def __init__(self, validity_days: int | None = None):
        self.validity_days = validity_days or settings.LICENSE_VALIDITY_DAYS

    async def get_license(self, db: AsyncSession, license_id: UUID) -> BusinessLicense:
        result = await db.execute(select(BusinessLicense).where(BusinessLicense.id == license_id))
        business_license = result.scalar_one_or_none()
        if business_license is None:
            raise NotFoundError("License", license_id)
        return business_license

    async def apply_for_license(
        self,
        db: AsyncSession,
        actor: Actor,
        business_name: str,
        business_type: BusinessType,
        contact_email: str,
        address: str,
        contact_phone: Optional[str] = None,
    ) -> BusinessLicense:
        """Create a pending license priced from the fee table."""
        require(actor, Action.APPLY_LICENSE)

        if not (business_name or "").strip():
            raise ValidationError("Business name is required")
        if not (address or "").strip():
            raise ValidationError("Address is required")
        if not (contact_email or "").strip():
            raise ValidationError("Contact email is required")

        business_license = BusinessLicense(
            business_name=business_name.strip(),
            business_type=business_type,
            contact_email=contact_email.strip(),
            contact_phone=contact_phone,
            address=address.strip(),
            annual_fee=license_fee(business_type),
            status=LicenseStatus.PENDING,
            applied_by=actor.id,
        )
        db.add(business_license)
        await db.flush()

        logger.info(
            f"License application {business_license.id} from '{business_license.business_name}' "
            f"({business_type.value}, fee={business_license.annual_fee})"
        )
        return business_license

    async def update_status(
        self,
        db: AsyncSession,
        actor: Actor,
        license_id: UUID,
        status: LicenseStatus,
    ) -> BusinessLicense:
        """
        Change a license's status.

        Activation records the approving admin and opens a validity window
        of LICENSE_VALIDITY_DAYS starting now.
        """
        require(actor, Action.REVIEW_LICENSE)
        business_license = await self.get_license(db, license_id)

        business_license.status = status
        if status == LicenseStatus.ACTIVE:
            now = datetime.utcnow()
            business_license.approved_by = actor.id
            business_license.valid_from = now
            business_license.valid_to = now + timedelta(days=self.validity_days)

        await db.flush()
        await db.refresh(business_license)

        logger.info(f"License {license_id} set to {status.value} by {actor.id}")
        return business_license

    async def list_licenses(self, db: AsyncSession, actor: Actor) -> List[BusinessLicense]:
        """Admins see every license, businesses their own applications."""
        require(actor, Action.VIEW_LICENSES)

        query = select(BusinessLicense).order_by(BusinessLicense.created_at.desc())
        if not actor.is_admin:
            query = query.where(BusinessLicense.applied_by == actor.id)

        result = await db.execute(query)
        return list(result.scalars().all())

    async def get_license_for(
        self,
        db: AsyncSession,
        actor: Actor,
        license_id: UUID,
    ) -> BusinessLicense:
        require(actor, Action.VIEW_LICENSES)
        business_license = await self.get_license(db, license_id)
        require_owner_or_admin(actor, business_license.applied_by, "license")
        return business_license


# Default service instance
licensing_service = LicensingService()
