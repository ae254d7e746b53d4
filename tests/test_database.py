"""Tests for engine and session factory management."""

import pytest
from sqlalchemy import text

from shaho_engine import database
from shaho_engine.config import get_settings


@pytest.fixture
def sqlite_settings(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestInitDb:
    """Test the lazily created global engine."""

    async def test_engine_and_factory_are_reused(self, sqlite_settings):
        try:
            engine, factory = database.init_db()
            assert database.init_db() == (engine, factory)
        finally:
            await database.dispose_db()

    async def test_dispose_resets_globals(self, sqlite_settings):
        first, _ = database.init_db()
        await database.dispose_db()

        second, _ = database.init_db()
        try:
            assert second is not first
        finally:
            await database.dispose_db()

    async def test_get_session_commits(self, sqlite_settings):
        try:
            async with database.get_session() as session:
                result = await session.execute(text("SELECT 1"))
                assert result.scalar() == 1
        finally:
            await database.dispose_db()
