"""Type definitions for the eligibility and compliance rules."""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass, field, fields
from datetime import date
from enum import Enum
from typing import Any, Mapping

UNSET_LABEL = "(未設定)"


class SnapshotValidationError(ValueError):
    """Raised when a plain employee record cannot be turned into a snapshot."""

    def __init__(self, field_name: str, value: Any, reason: str | None = None):
        self.field_name = field_name
        self.value = value
        msg = f"Invalid value for '{field_name}': {value!r}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class WorkCategory(str, Enum):
    """Statutory work category."""

    FULL_TIME = "full-time"
    SHORT_TIME_WORKER = "short-time-worker"
    NON_INSURED = "non-insured"


class WeeklyWorkHoursCategory(str, Enum):
    """Weekly working-hours bands as entered on the employee record."""

    THIRTY_OR_MORE = "30hours-or-more"
    TWENTY_TO_THIRTY = "20-30hours"
    LESS_THAN_TWENTY = "less-than-20hours"


class ChangeType(str, Enum):
    """Regulated attribute changes that require a statutory notification."""

    NAME_CHANGE = "name-change"
    ADDRESS_CHANGE = "address-change"
    BIRTHDATE_CORRECTION = "birthdate-correction"
    GENDER_CHANGE = "gender-change"
    OFFICE_REASSIGNMENT = "office-reassignment"
    CATEGORY_CHANGE = "category-change"

    @property
    def label(self) -> str:
        """Display label used on notification screens."""
        return _CHANGE_TYPE_LABELS[self]


_CHANGE_TYPE_LABELS = {
    ChangeType.NAME_CHANGE: "氏名変更",
    ChangeType.ADDRESS_CHANGE: "住所変更",
    ChangeType.BIRTHDATE_CORRECTION: "生年月日訂正",
    ChangeType.GENDER_CHANGE: "性別変更",
    ChangeType.OFFICE_REASSIGNMENT: "所属事業所変更",
    ChangeType.CATEGORY_CHANGE: "適用区分変更",
}


@dataclass(frozen=True)
class EmployeeSnapshot:
    """Immutable view of the regulated attributes of one employee."""

    id: str
    name: str = ""
    name_kana: str = ""
    gender: str = ""
    birth_date: date | None = None
    address: str = ""

    # Employment
    join_date: date | None = None
    retire_date: date | None = None
    office_number: str = ""
    prefecture: str = ""

    # Work classification inputs
    weekly_work_hours_category: str | None = None
    monthly_wage: int | None = None
    expected_employment_months: int | str | None = None  # legacy selections accepted
    is_student: bool = False

    # Denormalized projection of the work category, kept in sync on save
    is_short_time: bool = False
    weekly_hours: float | None = None

    # Leave state
    leave_of_absence_start: date | None = None
    leave_of_absence_end: date | None = None
    maternity_leave_start: date | None = None
    maternity_leave_end: date | None = None
    childcare_leave_start: date | None = None
    childcare_leave_end: date | None = None
    return_from_leave_date: date | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> EmployeeSnapshot:
        """Build a snapshot from a plain record with camelCase or snake_case keys.

        Date fields accept ``date`` objects or ISO ``YYYY-MM-DD`` strings; empty
        strings and None mean "unset".

        Raises:
            SnapshotValidationError: If a date field cannot be parsed or the id
                is missing.
        """
        normalized = {_to_snake(key): value for key, value in data.items()}
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}

        for name, value in normalized.items():
            if name not in known:
                continue
            if name in _DATE_FIELDS:
                kwargs[name] = _parse_date(name, value)
            elif name in _TEXT_FIELDS:
                kwargs[name] = value or ""
            elif name in ("is_student", "is_short_time"):
                kwargs[name] = bool(value)
            else:
                kwargs[name] = value

        if not kwargs.get("id"):
            raise SnapshotValidationError("id", normalized.get("id"), "id is required")

        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        """Serialize the snapshot to JSON-compatible values."""
        return {
            key: value.isoformat() if isinstance(value, date) else value
            for key, value in asdict(self).items()
        }


@dataclass
class EligibilityResult:
    """Per-insurance enrollment decision with the reasons for it."""

    health_insurance_eligible: bool
    pension_eligible: bool
    care_insurance_eligible: bool
    reasons: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "health_insurance_eligible": self.health_insurance_eligible,
            "pension_eligible": self.pension_eligible,
            "care_insurance_eligible": self.care_insurance_eligible,
            "reasons": list(self.reasons),
        }


@dataclass(frozen=True)
class ChangeEvent:
    """A material change to a regulated attribute."""

    employee_id: str
    change_type: ChangeType
    change_date: date
    old_value: str
    new_value: str
    notification_forms: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "employee_id": self.employee_id,
            "change_type": self.change_type.value,
            "change_label": self.change_type.label,
            "change_date": self.change_date.isoformat(),
            "old_value": self.old_value,
            "new_value": self.new_value,
            "notification_forms": list(self.notification_forms),
        }


_DATE_FIELDS = {
    "birth_date",
    "join_date",
    "retire_date",
    "leave_of_absence_start",
    "leave_of_absence_end",
    "maternity_leave_start",
    "maternity_leave_end",
    "childcare_leave_start",
    "childcare_leave_end",
    "return_from_leave_date",
}

_TEXT_FIELDS = {"name", "name_kana", "gender", "address", "office_number", "prefecture"}

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def _to_snake(key: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", key).lower()


def _parse_date(field_name: str, value: Any) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value)
        except ValueError:
            raise SnapshotValidationError(field_name, value, "expected YYYY-MM-DD") from None
    raise SnapshotValidationError(field_name, value, "expected a date")
