"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from shaho_engine import __version__
from shaho_engine.api.routes import (
    change_history_router,
    employees_router,
    health_router,
    uncollected_premiums_router,
)
from shaho_engine.database import create_schema, dispose_db, init_db
from shaho_engine.rules.types import SnapshotValidationError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    engine, _ = init_db()
    await create_schema(engine)
    yield
    await dispose_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Social Insurance Compliance API",
        description="Eligibility, uncollected premium and change notification engine",
        version=__version__,
        lifespan=lifespan,
    )

    @app.exception_handler(SnapshotValidationError)
    async def snapshot_validation_handler(
        request: Request, exc: SnapshotValidationError
    ) -> JSONResponse:
        """Reject malformed employee records."""
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": str(exc), "code": "INVALID_SNAPSHOT"},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "An unexpected error occurred",
                "code": "INTERNAL_ERROR",
            },
        )

    app.include_router(health_router)
    app.include_router(employees_router, prefix="/api/v1")
    app.include_router(uncollected_premiums_router, prefix="/api/v1")
    app.include_router(change_history_router, prefix="/api/v1")

    return app


# Default app instance for uvicorn
app = create_app()
