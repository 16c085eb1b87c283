"""
Business Licenses Router

License applications, fee lookup and review.
"""

from typing import Annotated, List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from prorights.core.database import get_db
from prorights.core.security import get_current_actor
from prorights.models.business_license import BusinessType
from prorights.schemas.licenses import (
    LicenseCreate,
    LicenseFeeResponse,
    LicenseResponse,
    LicenseStatusUpdate,
)
from prorights.services.access import Actor
from prorights.services.licensing import license_fee, licensing_service

router = APIRouter(prefix="/business-licenses", tags=["licenses"])


@router.get("/fee/{business_type}", response_model=LicenseFeeResponse)
async def get_license_fee(business_type: BusinessType) -> LicenseFeeResponse:
    """Annual fee for a business type, from the static fee table."""
    return LicenseFeeResponse(business_type=business_type, fee=license_fee(business_type))


@router.get("", response_model=List[LicenseResponse])
async def list_licenses(
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(get_current_actor)],
):
    return await licensing_service.list_licenses(db, actor)


@router.get("/{license_id}", response_model=LicenseResponse)
async def get_license(
    license_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(get_current_actor)],
):
    return await licensing_service.get_license_for(db, actor, license_id)


@router.post("", response_model=LicenseResponse, status_code=status.HTTP_201_CREATED)
async def apply_for_license(
    data: LicenseCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(get_current_actor)],
):
    return await licensing_service.apply_for_license(
        db,
        actor,
        business_name=data.business_name,
        business_type=data.business_type,
        contact_email=data.contact_email,
        contact_phone=data.contact_phone,
        address=data.address,
    )


@router.patch("/{license_id}/status", response_model=LicenseResponse)
async def update_license_status(
    license_id: UUID,
    data: LicenseStatusUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(get_current_actor)],
):
    """Change a license's status (admin only). Activation starts the validity window."""
    return await licensing_service.update_status(db, actor, license_id, data.status)
