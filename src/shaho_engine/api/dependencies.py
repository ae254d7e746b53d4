"""FastAPI dependencies for dependency injection."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from shaho_engine.database import get_session
from shaho_engine.services.alert_feed import UnresolvedAlertFeed

_alert_feed = UnresolvedAlertFeed()


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency; commits when the request succeeds."""
    async with get_session() as session:
        yield session


def get_alert_feed() -> UnresolvedAlertFeed:
    """Process-wide feed shared by every request."""
    return _alert_feed


# Type aliases for cleaner dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db_session)]
AlertFeed = Annotated[UnresolvedAlertFeed, Depends(get_alert_feed)]
