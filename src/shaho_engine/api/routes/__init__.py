"""API routes."""

from shaho_engine.api.routes.change_history import router as change_history_router
from shaho_engine.api.routes.employees import router as employees_router
from shaho_engine.api.routes.health import router as health_router
from shaho_engine.api.routes.uncollected_premiums import router as uncollected_premiums_router

__all__ = [
    "change_history_router",
    "employees_router",
    "health_router",
    "uncollected_premiums_router",
]
