"""Store-backed compliance services."""

from shaho_engine.services.alert_feed import UnresolvedAlertFeed
from shaho_engine.services.change_history import ChangeHistoryService
from shaho_engine.services.employee_service import (
    EmployeeNotFoundError,
    EmployeeSaveResult,
    EmployeeService,
)
from shaho_engine.services.uncollected_premium import UncollectedPremiumService

__all__ = [
    "ChangeHistoryService",
    "EmployeeNotFoundError",
    "EmployeeSaveResult",
    "EmployeeService",
    "UncollectedPremiumService",
    "UnresolvedAlertFeed",
]
