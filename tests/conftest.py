"""
Pytest configuration and fixtures.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret")

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from yeild.models import Base, Profile, Referral, User, UserRole


# Test database URL (use SQLite for tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def db_engine():
    """Create test database engine."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine):
    """Create test database session."""
    async_session = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session


async def create_profile(db, username, **counters):
    """Insert a user with a reward profile and return the profile."""
    user = User(
        username=username,
        password_hash="x",
        role=UserRole.USER,
        display_name=username.title(),
    )
    db.add(user)
    await db.flush()

    profile = Profile(id=user.id, **counters)
    db.add(profile)
    await db.flush()
    return profile


async def create_referral(db, referrer, referred, is_active=False):
    referral = Referral(
        referrer_id=referrer.id,
        referred_id=referred.id,
        referral_code=referrer.referral_code,
        is_active=is_active,
    )
    db.add(referral)
    await db.flush()
    return referral


@pytest.fixture
def make_profile(db_session):
    async def _make(username, **counters):
        return await create_profile(db_session, username, **counters)

    return _make


@pytest.fixture
def make_referral(db_session):
    async def _make(referrer, referred, is_active=False):
        return await create_referral(db_session, referrer, referred, is_active=is_active)

    return _make
