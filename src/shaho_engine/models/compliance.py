"""Compliance records: uncollected premiums and change history."""

from __future__ import annotations

from datetime import date
from uuid import uuid4

from sqlalchemy import JSON, Boolean, CheckConstraint, Date, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from shaho_engine.models.base import Base, TimestampMixin


def uncollected_premium_key(employee_id: str, year: int, month: int) -> str:
    """Record id for one employee-month."""
    return f"{employee_id}_{year}_{month}"


class UncollectedPremium(Base, TimestampMixin):
    """Premium shortfall for one employee-month.

    Rewritten by every payroll run for that month and soft-resolved when a
    later run finds no shortfall.
    """

    __tablename__ = "uncollected_premium"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    employee_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    amount: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    reason: Mapped[str] = mapped_column(String, nullable=False, default="")
    resolved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (
        UniqueConstraint("employee_id", "year", "month", name="uncollected_premium_key_unique"),
        CheckConstraint("amount >= 0", name="uncollected_premium_amount_check"),
        CheckConstraint("month BETWEEN 1 AND 12", name="uncollected_premium_month_check"),
    )


class EmployeeChangeHistory(Base, TimestampMixin):
    """Append-only log of regulated attribute changes."""

    __tablename__ = "employee_change_history"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid4()))
    employee_id: Mapped[str] = mapped_column(String, nullable=False)
    change_type: Mapped[str] = mapped_column(String, nullable=False)
    change_date: Mapped[date] = mapped_column(Date, nullable=False)
    old_value: Mapped[str] = mapped_column(String, nullable=False)
    new_value: Mapped[str] = mapped_column(String, nullable=False)
    notification_forms: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    __table_args__ = (
        Index("employee_change_history_employee_idx", "employee_id", "change_date"),
    )
