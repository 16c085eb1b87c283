"""Schemas for business licenses."""
from datetime import datetime
from decimal import Decimal
from uuid import UUID
from typing import Optional

from pydantic import BaseModel, Field

from prorights.models.business_license import BusinessType, LicenseStatus


class LicenseCreate(BaseModel):
    """Request schema for a license application. The fee is not client-set."""
    business_name: str = Field(..., max_length=255)
    business_type: BusinessType
    contact_email: str = Field(..., max_length=255)
    contact_phone: Optional[str] = Field(None, max_length=50)
    address: str


class LicenseStatusUpdate(BaseModel):
    status: LicenseStatus


class LicenseFeeResponse(BaseModel):
    business_type: BusinessType
    fee: Decimal


class LicenseResponse(BaseModel):
    id: UUID
    business_name: str
    business_type: BusinessType
    contact_email: str
    contact_phone: Optional[str] = None
    address: str
    annual_fee: Decimal
    status: LicenseStatus
    applied_by: UUID
    approved_by: Optional[UUID] = None
    valid_from: Optional[datetime] = None
    valid_to: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True
