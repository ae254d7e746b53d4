"""Pydantic schemas for API request/response models."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from shaho_engine.rules.types import EmployeeSnapshot


# ============================================================================
# Employee schemas
# ============================================================================


class EmployeeIn(BaseModel):
    """Employee attributes as submitted by the editor."""

    name: str = ""
    name_kana: str = ""
    gender: str = ""
    birth_date: date | None = None
    address: str = ""
    join_date: date | None = None
    retire_date: date | None = None
    office_number: str = ""
    prefecture: str = ""
    weekly_work_hours_category: str | None = None
    monthly_wage: int | None = None
    expected_employment_months: int | str | None = None
    is_student: bool = False
    weekly_hours: float | None = None
    leave_of_absence_start: date | None = None
    leave_of_absence_end: date | None = None
    maternity_leave_start: date | None = None
    maternity_leave_end: date | None = None
    childcare_leave_start: date | None = None
    childcare_leave_end: date | None = None
    return_from_leave_date: date | None = None

    def to_snapshot(self, employee_id: str) -> EmployeeSnapshot:
        return EmployeeSnapshot.from_dict({"id": employee_id, **self.model_dump()})


class EligibilityCheckRequest(BaseModel):
    """Schema for a stateless eligibility check."""

    employee_id: str = "adhoc"
    employee: EmployeeIn
    reference_date: date


class EligibilityResponse(BaseModel):
    """Schema for eligibility results."""

    employee_id: str
    reference_date: date
    work_category: str
    health_insurance_eligible: bool
    pension_eligible: bool
    care_insurance_eligible: bool
    reasons: list[str]


class EmployeeSaveRequest(BaseModel):
    """Schema for saving an employee."""

    employee: EmployeeIn
    effective_date: date


class ChangeEventResponse(BaseModel):
    """Schema for a detected change event."""

    employee_id: str
    change_type: str
    change_label: str
    change_date: date
    old_value: str
    new_value: str
    notification_forms: list[str]


class EmployeeSaveResponse(BaseModel):
    """Schema for employee save response."""

    employee_id: str
    created: bool
    work_category: str
    is_short_time: bool
    changes: list[ChangeEventResponse]


# ============================================================================
# Uncollected premium schemas
# ============================================================================


class ReconcileRequest(BaseModel):
    """Schema for reconciling one employee-month."""

    employee_id: str
    year: int
    month: int = Field(ge=1, le=12)
    total_salary: int
    employee_borne_premium: int


class UncollectedPremiumResponse(BaseModel):
    """Schema for an uncollected premium record."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    employee_id: str
    year: int
    month: int
    amount: int
    reason: str
    resolved: bool
    created_at: datetime


class ReconcileResponse(BaseModel):
    """Schema for reconcile response; record is None when nothing is stored."""

    record: UncollectedPremiumResponse | None


class UncollectedPremiumListResponse(BaseModel):
    """Schema for listing uncollected premiums."""

    items: list[UncollectedPremiumResponse]
    total: int


class ResolveRequest(BaseModel):
    """Schema for manual acknowledgement."""

    ids: list[str]


class ResolveResponse(BaseModel):
    """Schema for manual acknowledgement response."""

    updated: int


# ============================================================================
# Change history schemas
# ============================================================================


class QualificationChangeAlertResponse(BaseModel):
    """Schema for a pending change notification."""

    id: str
    employee_id: str
    change_type: str
    change_date: date
    notification_forms: list[str]
    submit_deadline: date
    days_until_deadline: int
    details: str


class QualificationChangeAlertListResponse(BaseModel):
    """Schema for listing pending change notifications."""

    items: list[QualificationChangeAlertResponse]
    total: int


# ============================================================================
# Error schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Schema for error responses."""

    detail: str
    code: str | None = None
