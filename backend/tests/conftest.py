"""
Pytest fixtures for test database, client, authentication and reference data.

Each test gets its own throwaway SQLite database; every request runs in its
own session, committed or rolled back like the production dependency.
"Today" is pinned so date-dependent rules (weekends, no past dates) are
deterministic.
"""

import os

os.environ.setdefault("REDIS_ENABLED", "false")
os.environ.setdefault("ENVIRONMENT", "test")

from datetime import date
from typing import AsyncGenerator

import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from courtside.main import app
from courtside.db.base import Base
from courtside.db.session import get_db
from courtside.core.clock import get_today
from courtside.core.security import create_access_token, hash_password
from courtside.models import (
    Coach,
    CoachAvailability,
    Court,
    Equipment,
    PricingRule,
    User,
)

TODAY = date(2026, 3, 2)  # Monday


@pytest_asyncio.fixture(scope="function")
async def session_factory(tmp_path) -> AsyncGenerator[async_sessionmaker, None]:
    """Create a fresh database file with all tables, dispose it afterwards."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'courtside_test.db'}", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client with the DB dependency and the clock overridden."""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_today] = lambda: TODAY

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    """Create a test user in the database."""
    user = User(
        email="test@example.com",
        username="testuser",
        hashed_password=hash_password("testpassword123"),
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest_asyncio.fixture
async def other_user(db_session: AsyncSession) -> User:
    user = User(
        email="other@example.com",
        username="otheruser",
        hashed_password=hash_password("otherpassword123"),
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest_asyncio.fixture
async def auth_token(test_user: User) -> str:
    """Generate a JWT token for the test user."""
    return create_access_token(data={"sub": str(test_user.id)})


@pytest_asyncio.fixture
async def auth_headers(auth_token: str) -> dict:
    """Authorization headers with Bearer token."""
    return {"Authorization": f"Bearer {auth_token}"}


@pytest_asyncio.fixture
async def other_headers(other_user: User) -> dict:
    token = create_access_token(data={"sub": str(other_user.id)})
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def indoor_court(db_session: AsyncSession) -> Court:
    """A $60/hr indoor court."""
    court = Court(name="Court A", court_type="indoor", base_hourly_rate=60.0)
    db_session.add(court)
    await db_session.commit()
    await db_session.refresh(court)
    return court


@pytest_asyncio.fixture
async def outdoor_court(db_session: AsyncSession) -> Court:
    court = Court(name="Court B", court_type="outdoor", base_hourly_rate=40.0)
    db_session.add(court)
    await db_session.commit()
    await db_session.refresh(court)
    return court


@pytest_asyncio.fixture
async def closed_court(db_session: AsyncSession) -> Court:
    court = Court(name="Court Z", court_type="outdoor", base_hourly_rate=10.0, is_active=False)
    db_session.add(court)
    await db_session.commit()
    await db_session.refresh(court)
    return court


@pytest_asyncio.fixture
async def rackets(db_session: AsyncSession) -> Equipment:
    """Four rackets at $5/hr."""
    item = Equipment(name="Pro Racket", equipment_type="racket", total_quantity=4, hourly_rate=5.0)
    db_session.add(item)
    await db_session.commit()
    await db_session.refresh(item)
    return item


@pytest_asyncio.fixture
async def coach(db_session: AsyncSession) -> Coach:
    """$50/hr coach working Monday 09-12 and Saturday 08-20."""
    coach = Coach(name="Alex Kim", bio="Former national champion", hourly_rate=50.0)
    db_session.add(coach)
    await db_session.flush()
    db_session.add_all([
        CoachAvailability(coach_id=coach.id, day_of_week="monday", start_time="09:00", end_time="12:00"),
        CoachAvailability(coach_id=coach.id, day_of_week="saturday", start_time="08:00", end_time="20:00"),
    ])
    await db_session.commit()
    await db_session.refresh(coach)
    return coach


@pytest_asyncio.fixture
async def pricing_rules(db_session: AsyncSession) -> list[PricingRule]:
    """Base, weekend ×1.25 (priority 1) and peak 18-21 ×1.3 (priority 2)."""
    rules = [
        PricingRule(name="Standard rate", rule_type="base", multiplier=1.0, flat_fee=0.0, priority=0),
        PricingRule(name="Weekend surcharge", rule_type="weekend", multiplier=1.25, flat_fee=0.0, priority=1),
        PricingRule(
            name="Evening peak",
            rule_type="peak_hours",
            multiplier=1.3,
            flat_fee=0.0,
            start_hour=18,
            end_hour=21,
            priority=2,
        ),
    ]
    db_session.add_all(rules)
    await db_session.commit()
    return rules
