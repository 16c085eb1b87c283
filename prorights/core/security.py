"""
Authentication helpers.

- Passwords are hashed with bcrypt
- Sessions are stateless HS256 JWTs carrying the user id in ``sub``
- ``get_current_actor`` turns the bearer token into an ``Actor``
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Annotated, Optional
from uuid import UUID

import bcrypt
import jwt
from fastapi import Depends, Header, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from prorights.core.config import settings
from prorights.core.database import get_db
from prorights.models.user import User
from prorights.services.access import Actor

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def create_access_token(user_id: UUID, expires_in: Optional[timedelta] = None) -> str:
    """Issue a signed token for a user."""
    now = datetime.now(timezone.utc)
    expires_at = now + (expires_in or timedelta(days=settings.JWT_EXPIRES_DAYS))
    payload = {
        "sub": str(user_id),
        "iat": now,
        "exp": expires_at,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Optional[UUID]:
    """Return the user id carried by a valid token, None otherwise."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
        return UUID(payload["sub"])
    except (jwt.PyJWTError, KeyError, ValueError) as e:
        logger.debug(f"Token rejected: {e}")
        return None


async def get_current_user(
    authorization: Annotated[Optional[str], Header()] = None,
    db: AsyncSession = Depends(get_db),
) -> User:
    """Resolve the bearer token in the Authorization header to a user."""
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access token required",
        )

    token = authorization.removeprefix("Bearer ").strip()
    user_id = decode_access_token(token)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid or expired token",
        )

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    return user


async def get_current_actor(user: Annotated[User, Depends(get_current_user)]) -> Actor:
    return Actor(id=user.id, role=user.role)
