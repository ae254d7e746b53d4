"""ORM models."""

from shaho_engine.models.base import Base, TimestampMixin, UpdatedAtMixin
from shaho_engine.models.compliance import (
    EmployeeChangeHistory,
    UncollectedPremium,
    uncollected_premium_key,
)
from shaho_engine.models.employee import Employee

__all__ = [
    "Base",
    "TimestampMixin",
    "UpdatedAtMixin",
    "Employee",
    "EmployeeChangeHistory",
    "UncollectedPremium",
    "uncollected_premium_key",
]
