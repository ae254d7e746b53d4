"""Eligibility and compliance rules."""

from shaho_engine.rules.change_history import detect_changes
from shaho_engine.rules.eligibility import calculate_age, check_eligibility, evaluate
from shaho_engine.rules.types import (
    ChangeEvent,
    ChangeType,
    EligibilityResult,
    EmployeeSnapshot,
    SnapshotValidationError,
    WorkCategory,
)
from shaho_engine.rules.work_category import classify

__all__ = [
    "ChangeEvent",
    "ChangeType",
    "EligibilityResult",
    "EmployeeSnapshot",
    "SnapshotValidationError",
    "WorkCategory",
    "calculate_age",
    "check_eligibility",
    "classify",
    "detect_changes",
    "evaluate",
]
