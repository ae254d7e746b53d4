"""Pytest fixtures for the social-insurance engine tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from datetime import date, datetime, timezone

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from shaho_engine.api.app import create_app
from shaho_engine.api.dependencies import get_alert_feed, get_db_session
from shaho_engine.models import Base
from shaho_engine.rules.types import EmployeeSnapshot
from shaho_engine.services.alert_feed import UnresolvedAlertFeed

# In-memory SQLite shared across connections of one engine
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

FIXED_NOW = datetime(2025, 2, 25, 9, 0, tzinfo=timezone.utc)


@pytest_asyncio.fixture
async def engine():
    """Create a fresh test database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def feed() -> UnresolvedAlertFeed:
    return UnresolvedAlertFeed()


@pytest.fixture
def clock():
    """Fixed clock for reproducible created_at values."""
    return lambda: FIXED_NOW


@pytest_asyncio.fixture
async def client(session_factory, feed) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the test database."""
    app = create_app()

    async def override_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_session
    app.dependency_overrides[get_alert_feed] = lambda: feed

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def base_employee() -> EmployeeSnapshot:
    """A 35-year-old full-time employee."""
    return EmployeeSnapshot(
        id="emp1",
        name="田中太郎",
        name_kana="タナカタロウ",
        gender="male",
        birth_date=date(1990, 1, 1),
        address="東京都千代田区1-1",
        join_date=date(2020, 1, 1),
        office_number="0001",
        prefecture="tokyo",
        weekly_work_hours_category="30hours-or-more",
        monthly_wage=300000,
        expected_employment_months=12,
        weekly_hours=40,
    )
