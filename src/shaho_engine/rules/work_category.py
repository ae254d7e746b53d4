"""Work category classification.

The category is decided by the weekly-hours band first; only the 20-30 hour
band consults wage, expected employment length and student status.

Precedence:
1) 30 hours or more -> full-time
2) less than 20 hours -> non-insured
3) 20-30 hours -> short-time worker when every special-application
   condition holds, full-time otherwise
4) anything else (unset or unknown) -> non-insured
"""

from __future__ import annotations

import math

from shaho_engine.rules.types import EmployeeSnapshot, WeeklyWorkHoursCategory, WorkCategory

SHORT_TIME_MIN_MONTHLY_WAGE = 88000
SHORT_TIME_MIN_EMPLOYMENT_MONTHS = 2

# Selection values stored by older employee forms
_OVER_TWO_MONTHS = "over-2months"


def normalize_monthly_wage(value: int | float | None) -> int | float:
    """Missing or NaN wages count as 0."""
    if value is None:
        return 0
    if isinstance(value, float) and math.isnan(value):
        return 0
    return value


def normalize_employment_months(value: int | str | None) -> int | str | None:
    """Digit-only text becomes an int; selection values are kept as-is."""
    if isinstance(value, str) and value.strip().isdigit():
        return int(value)
    return value


def meets_employment_months(value: int | str | None) -> bool:
    """Check the expected-employment-length condition.

    Numeric values are compared against the threshold after normalizing a
    missing value to 0. The legacy selection ``"over-2months"`` meets the
    condition; ``"within-2months"`` and any other non-numeric string do not.
    """
    value = normalize_employment_months(value)
    if isinstance(value, str):
        return value == _OVER_TWO_MONTHS
    months = 0 if value is None else value
    return months >= SHORT_TIME_MIN_EMPLOYMENT_MONTHS


def meets_short_time_conditions(employee: EmployeeSnapshot) -> bool:
    """Wage, employment length and non-student conditions, all required."""
    return (
        normalize_monthly_wage(employee.monthly_wage) >= SHORT_TIME_MIN_MONTHLY_WAGE
        and meets_employment_months(employee.expected_employment_months)
        and not employee.is_student
    )


def classify(employee: EmployeeSnapshot | None) -> WorkCategory:
    """Classify an employee into exactly one work category."""
    if employee is None:
        return WorkCategory.NON_INSURED

    band = employee.weekly_work_hours_category

    if band == WeeklyWorkHoursCategory.THIRTY_OR_MORE:
        return WorkCategory.FULL_TIME

    if band == WeeklyWorkHoursCategory.LESS_THAN_TWENTY:
        return WorkCategory.NON_INSURED

    if band == WeeklyWorkHoursCategory.TWENTY_TO_THIRTY:
        if meets_short_time_conditions(employee):
            return WorkCategory.SHORT_TIME_WORKER
        # Not a special-application enrollee, still enrolled as full-time
        return WorkCategory.FULL_TIME

    return WorkCategory.NON_INSURED


def is_full_time(employee: EmployeeSnapshot | None) -> bool:
    return classify(employee) is WorkCategory.FULL_TIME


def is_short_time_worker(employee: EmployeeSnapshot | None) -> bool:
    return classify(employee) is WorkCategory.SHORT_TIME_WORKER


def is_non_insured(employee: EmployeeSnapshot | None) -> bool:
    return classify(employee) is WorkCategory.NON_INSURED


def is_insurance_required(employee: EmployeeSnapshot | None) -> bool:
    """Full-time and short-time workers must be enrolled."""
    return classify(employee) in (WorkCategory.FULL_TIME, WorkCategory.SHORT_TIME_WORKER)


def can_take_maternity_leave(employee: EmployeeSnapshot | None) -> bool:
    """Maternity leave processing applies to full-time employees only."""
    return is_full_time(employee)


def is_exempt_from_premiums_during_maternity_leave(employee: EmployeeSnapshot | None) -> bool:
    """Anyone insured is exempt; non-insured employees never paid premiums."""
    return is_insurance_required(employee)


def is_short_time_flag(employee: EmployeeSnapshot) -> bool:
    """Value of the cached ``is_short_time`` column for this employee."""
    return is_short_time_worker(employee)
