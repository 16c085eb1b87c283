"""
Pytest configuration and shared fixtures.

- A fresh in-memory SQLite database per test
- ``db``: a session for service-level tests (flushes only, never committed)
- ``client``: an HTTP client bound to the app, with ``get_db`` pointed at
  the test database
- Factories for users, works, contributors and licenses
"""

import itertools
import os

# Set up test environment before any application imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["PER_PLAY_RATE"] = "0.01"
os.environ["AUTO_DISTRIBUTE"] = "true"

from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import prorights.models  # noqa: F401
from prorights.core.database import Base, get_db
from prorights.core.security import create_access_token
from prorights.main import app
from prorights.models import (
    BusinessLicense,
    BusinessType,
    Contributor,
    ContributorRole,
    LicenseStatus,
    User,
    UserRole,
    Work,
)
from prorights.services.access import Actor


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
async def client(session_maker):
    """HTTP client; each request gets its own committed-or-rolled-back session."""

    async def override_get_db():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def actor_for(user: User) -> Actor:
    return Actor(id=user.id, role=user.role)


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


_emails = itertools.count(1)


def _new_user(role: UserRole, first_name: str, last_name: str | None) -> User:
    n = next(_emails)
    return User(
        email=f"user{n}@example.com",
        password_hash="not-a-bcrypt-hash",
        first_name=first_name,
        last_name=last_name or f"User{n}",
        role=role,
    )


@pytest.fixture
def make_user(db):
    async def _make(role: UserRole = UserRole.ARTIST, first_name: str = "Test", last_name: str | None = None) -> User:
        user = _new_user(role, first_name, last_name)
        db.add(user)
        await db.flush()
        return user
    return _make


@pytest.fixture
def make_work(db):
    async def _make(owner: User, title: str = "Blue Harbour", **kwargs) -> Work:
        work = Work(title=title, registered_by=owner.id, **kwargs)
        db.add(work)
        await db.flush()
        return work
    return _make


@pytest.fixture
def make_contributor(db):
    """Insert a contributor row with an explicit percentage, bypassing allocation."""
    sequences = itertools.count()

    async def _make(work: Work, user: User, role: ContributorRole, percentage: str) -> Contributor:
        contributor = Contributor(
            work_id=work.id,
            user_id=user.id,
            role=role,
            percentage=Decimal(percentage),
            sequence=next(sequences),
        )
        db.add(contributor)
        await db.flush()
        return contributor
    return _make


@pytest.fixture
def make_license(db):
    async def _make(owner: User, status: LicenseStatus = LicenseStatus.ACTIVE) -> BusinessLicense:
        business_license = BusinessLicense(
            business_name="The Lantern",
            business_type=BusinessType.BAR,
            contact_email="owner@lantern.example",
            address="1 Quay Street",
            annual_fee=Decimal("1200.00"),
            status=status,
            applied_by=owner.id,
        )
        db.add(business_license)
        await db.flush()
        return business_license
    return _make


@pytest.fixture
def seed_user(session_maker):
    """Create and commit a user for API tests; returns (user, headers)."""

    async def _seed(role: UserRole = UserRole.ARTIST, first_name: str = "Test", last_name: str | None = None):
        async with session_maker() as session:
            user = _new_user(role, first_name, last_name)
            session.add(user)
            await session.commit()
        return user, auth_headers(user)
    return _seed
