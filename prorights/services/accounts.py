"""Account signup, login and user search."""
from __future__ import annotations

import logging
from typing import List, Tuple

from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession

from prorights.core.exceptions import AuthenticationError, DuplicateRecordError, ValidationError
from prorights.core.security import create_access_token, hash_password, verify_password
from prorights.models.user import User, UserRole

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6

# Roles open to self-registration; admins are provisioned out of band
SIGNUP_ROLES = (UserRole.ARTIST, UserRole.BUSINESS)


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == normalize_email(email)))
    return result.scalar_one_or_none()


async def signup(
    db: AsyncSession,
    email: str,
    password: str,
    first_name: str,
    last_name: str,
    role: UserRole = UserRole.ARTIST,
) -> Tuple[User, str]:
    """
    Create an account and issue its first token.

    Raises:
        ValidationError: Bad email, short password or non self-service role
        DuplicateRecordError: Email already registered
    """
    email = normalize_email(email)
    if "@" not in email:
        raise ValidationError("Invalid email address")
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if role not in SIGNUP_ROLES:
        raise ValidationError(f"Role '{role.value}' cannot be chosen at signup")
    if not (first_name or "").strip() or not (last_name or "").strip():
        raise ValidationError("First and last name are required")

    if await get_user_by_email(db, email) is not None:
        raise DuplicateRecordError("User already exists with this email")

    user = User(
        email=email,
        password_hash=hash_password(password),
        first_name=first_name.strip(),
        last_name=last_name.strip(),
        role=role,
    )
    db.add(user)
    await db.flush()

    logger.info(f"New {role.value} account: {email} (id={user.id})")
    return user, create_access_token(user.id)


async def authenticate(db: AsyncSession, email: str, password: str) -> Tuple[User, str]:
    """
    Check credentials and issue a token.

    Raises:
        AuthenticationError: Unknown email or wrong password
    """
    user = await get_user_by_email(db, email)
    if user is None or not verify_password(password, user.password_hash):
        logger.warning(f"Failed login for {normalize_email(email)}")
        raise AuthenticationError("Invalid email or password")
    return user, create_access_token(user.id)


async def search_users(db: AsyncSession, query: str, limit: int = 10) -> List[User]:
    """Artist accounts whose name or email contains ``query``."""
    query = (query or "").strip()
    if not query:
        return []

    pattern = f"%{query}%"
    result = await db.execute(
        select(User)
        .where(
            User.role == UserRole.ARTIST,
            or_(
                User.email.ilike(pattern),
                User.first_name.ilike(pattern),
                User.last_name.ilike(pattern),
            ),
        )
        .order_by(User.last_name, User.first_name)
        .limit(limit)
    )
    return list(result.scalars().all())
