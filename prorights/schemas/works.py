"""Schemas for works and their contributors."""
from datetime import datetime
from decimal import Decimal
from uuid import UUID
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from prorights.models.contributor import ContributorRole
from prorights.models.work import WorkStatus


# Request schemas

class ContributorCreate(BaseModel):
    """A contributor to attach to a work. Percentages are derived from roles."""
    user_id: UUID
    role: ContributorRole


class ContributorRoleUpdate(BaseModel):
    role: ContributorRole


class WorkCreate(BaseModel):
    """Request schema for registering a work."""
    title: str = Field(..., max_length=500)
    iswc: Optional[str] = Field(None, max_length=20, description="e.g. T-123456789-1")
    isrc: Optional[str] = Field(None, max_length=20, description="e.g. USRC17607839")
    duration: Optional[str] = Field(None, max_length=20, description="mm:ss")
    contributors: List[ContributorCreate] = Field(default_factory=list)

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        if not v.strip():
            raise ValueError("Work title is required")
        return v


class WorkStatusUpdate(BaseModel):
    status: WorkStatus


# Response schemas

class ContributorResponse(BaseModel):
    """A contributor with the contributing user's display data."""
    id: UUID
    work_id: UUID
    user_id: UUID
    user_name: str
    user_email: str
    role: ContributorRole
    percentage: Decimal = Field(description="Ownership percentage (0-100)")
    created_at: datetime


class ContributorsListResponse(BaseModel):
    work_id: UUID
    contributors: List[ContributorResponse] = Field(default_factory=list)
    total_percentage: Decimal = Field(description="Sum of allocated percentages, may be below 100")


class WorkResponse(BaseModel):
    id: UUID
    title: str
    iswc: Optional[str] = None
    isrc: Optional[str] = None
    duration: Optional[str] = None
    status: WorkStatus
    registered_by: UUID
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class RecentWorkResponse(WorkResponse):
    registered_by_name: str
