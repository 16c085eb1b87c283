"""Schemas for usage reports, royalty distributions and dashboard stats."""
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID
from typing import List, Optional

from pydantic import BaseModel, Field

from prorights.models.royalty_distribution import PaymentStatus


# Request schemas

class UsageReportCreate(BaseModel):
    """Request schema for submitting a usage report."""
    license_id: UUID
    work_id: UUID
    play_count: int = Field(description="Number of plays in the period (>= 0)")
    period_start: date = Field(description="Start of the reporting period (inclusive)")
    period_end: date = Field(description="End of the reporting period (exclusive)")


class DistributionComputeRequest(BaseModel):
    rate_per_play: Optional[Decimal] = Field(
        default=None,
        ge=0,
        description="Override the configured per-play rate",
    )


# Response schemas

class RoyaltyDistributionResponse(BaseModel):
    id: UUID
    usage_report_id: UUID
    contributor_id: UUID
    amount: Decimal
    percentage: Decimal = Field(description="Contributor share when computed")
    rate_per_play: Decimal
    payment_status: PaymentStatus
    paid_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True


class UsageReportResponse(BaseModel):
    id: UUID
    license_id: UUID
    work_id: UUID
    play_count: int
    period_start: date
    period_end: date
    submitted_by: UUID
    created_at: datetime

    class Config:
        from_attributes = True


class UsageReportSubmitResponse(UsageReportResponse):
    """Created report with the distributions computed alongside it."""
    distributions: List[RoyaltyDistributionResponse] = Field(default_factory=list)


class DashboardStatsResponse(BaseModel):
    total_works: int
    total_royalties: Decimal = Field(description="Paid royalties received by the caller")
    active_licenses: int
    pending_approvals: int

    class Config:
        from_attributes = True
