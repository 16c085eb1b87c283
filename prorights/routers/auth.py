"""
Auth Router

Signup, login and the current account.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from prorights.core.database import get_db
from prorights.core.security import get_current_user
from prorights.models.user import User
from prorights.schemas.auth import LoginRequest, SignupRequest, TokenResponse, UserResponse
from prorights.services import accounts

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    data: SignupRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenResponse:
    """Create an artist or business account."""
    user, token = await accounts.signup(
        db,
        email=data.email,
        password=data.password,
        first_name=data.first_name,
        last_name=data.last_name,
        role=data.role,
    )
    return TokenResponse(token=token, user=UserResponse.model_validate(user))


@router.post("/login", response_model=TokenResponse)
async def login(
    data: LoginRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenResponse:
    user, token = await accounts.authenticate(db, data.email, data.password)
    return TokenResponse(token=token, user=UserResponse.model_validate(user))


@router.post("/logout")
async def logout(_user: Annotated[User, Depends(get_current_user)]):
    """Tokens are stateless; the client discards its copy."""
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=UserResponse)
async def me(user: Annotated[User, Depends(get_current_user)]) -> UserResponse:
    return UserResponse.model_validate(user)
