"""Social-insurance eligibility as of a reference date.

Rules are accumulated rather than short-circuited so every reason that
applies ends up in the result. The retirement gate is the only terminal rule.

Evaluation order:
1) Retirement (strictly before the reference date ends all coverage)
2) Age cutoffs: 75+ ends health/care, 70+ ends pension, care starts at 40
3) Work category: non-insured ends all coverage

The reference date is always supplied by the caller.
"""

from __future__ import annotations

from datetime import date

from shaho_engine.rules.types import EligibilityResult, EmployeeSnapshot, WorkCategory
from shaho_engine.rules.work_category import classify

CARE_INSURANCE_START_AGE = 40
PENSION_END_AGE = 70
HEALTH_INSURANCE_END_AGE = 75

REASON_RETIRED = "退職済みのため加入不可"
REASON_AGE_75 = "75歳以上のため健康保険・介護保険は加入不可"
REASON_AGE_70 = "70歳以上のため厚生年金は停止"
REASON_NON_INSURED = "勤務区分が社会保険非加入のため加入不可"
REASON_FULL_TIME = "勤務区分がフルタイムのため加入対象"
REASON_SHORT_TIME = "勤務区分が短時間労働者（特定適用）に該当するため加入対象"


def calculate_age(birth_date: date, reference_date: date) -> int:
    """Age in whole years; the birthday itself counts as reached."""
    age = reference_date.year - birth_date.year
    if (reference_date.month, reference_date.day) < (birth_date.month, birth_date.day):
        age -= 1
    return age


def is_retired(employee: EmployeeSnapshot, reference_date: date) -> bool:
    """A retire date equal to the reference date is not yet retired."""
    return employee.retire_date is not None and employee.retire_date < reference_date


def check_eligibility(
    employee: EmployeeSnapshot,
    work_category: WorkCategory,
    reference_date: date,
) -> EligibilityResult:
    """Determine health, pension and care insurance eligibility.

    Args:
        employee: The employee snapshot to evaluate
        work_category: Category from ``classify``
        reference_date: As-of date for age and retirement comparisons

    Returns:
        EligibilityResult with every applicable reason in rule order
    """
    reasons: list[str] = []

    if is_retired(employee, reference_date):
        reasons.append(REASON_RETIRED)
        return EligibilityResult(
            health_insurance_eligible=False,
            pension_eligible=False,
            care_insurance_eligible=False,
            reasons=reasons,
        )

    health_by_age = True
    pension_by_age = True
    care_by_age = False

    if employee.birth_date is not None:
        age = calculate_age(employee.birth_date, reference_date)

        if age >= HEALTH_INSURANCE_END_AGE:
            health_by_age = False
            reasons.append(REASON_AGE_75)
        elif age >= PENSION_END_AGE:
            reasons.append(REASON_AGE_70)

        if age >= PENSION_END_AGE:
            pension_by_age = False

        care_by_age = age >= CARE_INSURANCE_START_AGE
        # The 75 cutoff wins over the 40 threshold
        if not health_by_age:
            care_by_age = False

    if work_category == WorkCategory.NON_INSURED:
        reasons.append(REASON_NON_INSURED)
        return EligibilityResult(
            health_insurance_eligible=False,
            pension_eligible=False,
            care_insurance_eligible=False,
            reasons=reasons,
        )

    if work_category == WorkCategory.FULL_TIME:
        reasons.append(REASON_FULL_TIME)
    else:
        reasons.append(REASON_SHORT_TIME)

    return EligibilityResult(
        health_insurance_eligible=health_by_age,
        pension_eligible=pension_by_age,
        care_insurance_eligible=care_by_age,
        reasons=reasons,
    )


def evaluate(
    employee: EmployeeSnapshot, reference_date: date
) -> tuple[WorkCategory, EligibilityResult]:
    """Classify the employee and check eligibility in one step."""
    category = classify(employee)
    return category, check_eligibility(employee, category, reference_date)
