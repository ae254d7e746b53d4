"""Employee model."""

from __future__ import annotations

from datetime import date

from sqlalchemy import Boolean, CheckConstraint, Date, Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from shaho_engine.models.base import Base, TimestampMixin, UpdatedAtMixin
from shaho_engine.rules.types import EmployeeSnapshot

_SNAPSHOT_COLUMNS = (
    "name",
    "name_kana",
    "gender",
    "birth_date",
    "address",
    "join_date",
    "retire_date",
    "office_number",
    "prefecture",
    "weekly_work_hours_category",
    "monthly_wage",
    "is_student",
    "is_short_time",
    "weekly_hours",
    "leave_of_absence_start",
    "leave_of_absence_end",
    "maternity_leave_start",
    "maternity_leave_end",
    "childcare_leave_start",
    "childcare_leave_end",
    "return_from_leave_date",
)


class Employee(Base, TimestampMixin, UpdatedAtMixin):
    """Employee record holding the raw classification inputs.

    ``is_short_time`` is a denormalized projection of the work category and
    is rewritten on every save.
    """

    __tablename__ = "employee"

    employee_id: Mapped[str] = mapped_column(String, primary_key=True)

    # Personal
    name: Mapped[str] = mapped_column(String, nullable=False, default="")
    name_kana: Mapped[str] = mapped_column(String, nullable=False, default="")
    gender: Mapped[str] = mapped_column(String, nullable=False, default="")
    birth_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    address: Mapped[str] = mapped_column(String, nullable=False, default="")

    # Employment
    join_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    retire_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    office_number: Mapped[str] = mapped_column(String, nullable=False, default="")
    prefecture: Mapped[str] = mapped_column(String, nullable=False, default="")

    # Work classification inputs
    weekly_work_hours_category: Mapped[str | None] = mapped_column(String, nullable=True)
    monthly_wage: Mapped[int | None] = mapped_column(Integer, nullable=True)
    expected_employment_months: Mapped[str | None] = mapped_column(String, nullable=True)
    is_student: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Cached projection
    is_short_time: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    weekly_hours: Mapped[float | None] = mapped_column(Float, nullable=True)

    # Leave
    leave_of_absence_start: Mapped[date | None] = mapped_column(Date, nullable=True)
    leave_of_absence_end: Mapped[date | None] = mapped_column(Date, nullable=True)
    maternity_leave_start: Mapped[date | None] = mapped_column(Date, nullable=True)
    maternity_leave_end: Mapped[date | None] = mapped_column(Date, nullable=True)
    childcare_leave_start: Mapped[date | None] = mapped_column(Date, nullable=True)
    childcare_leave_end: Mapped[date | None] = mapped_column(Date, nullable=True)
    return_from_leave_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    __table_args__ = (
        CheckConstraint(
            "retire_date IS NULL OR join_date IS NULL OR retire_date >= join_date",
            name="employee_dates_check",
        ),
    )

    def to_snapshot(self) -> EmployeeSnapshot:
        """Build the immutable snapshot the rules operate on."""
        values = {column: getattr(self, column) for column in _SNAPSHOT_COLUMNS}
        return EmployeeSnapshot(
            id=self.employee_id,
            expected_employment_months=_load_months(self.expected_employment_months),
            **values,
        )

    def apply_snapshot(self, snapshot: EmployeeSnapshot) -> None:
        """Overwrite every stored attribute from a snapshot."""
        for column in _SNAPSHOT_COLUMNS:
            setattr(self, column, getattr(snapshot, column))
        self.expected_employment_months = _dump_months(snapshot.expected_employment_months)


# Months are stored as text so legacy selection values survive a round trip
def _dump_months(value: int | str | None) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def _load_months(value: str | None) -> int | str | None:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return value
