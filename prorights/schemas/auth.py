"""Schemas for signup, login and user lookups."""
from datetime import datetime
from uuid import UUID
from typing import Optional

from pydantic import BaseModel, Field

from prorights.models.user import UserRole


class SignupRequest(BaseModel):
    email: str = Field(..., max_length=255)
    password: str = Field(..., description="At least 6 characters")
    first_name: str = Field(..., max_length=100)
    last_name: str = Field(..., max_length=100)
    role: UserRole = Field(default=UserRole.ARTIST, description="'artist' or 'business'")


class LoginRequest(BaseModel):
    email: str
    password: str


class UserResponse(BaseModel):
    """Public view of an account, never includes the password hash."""
    id: UUID
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: UserRole
    created_at: datetime

    class Config:
        from_attributes = True


class TokenResponse(BaseModel):
    token: str
    user: UserResponse
