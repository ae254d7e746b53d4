"""Employee and eligibility API endpoints."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, HTTPException, Path, Query, status

from shaho_engine.api.dependencies import AlertFeed, DbSession
from shaho_engine.api.schemas import (
    ChangeEventResponse,
    EligibilityCheckRequest,
    EligibilityResponse,
    EmployeeSaveRequest,
    EmployeeSaveResponse,
    ErrorResponse,
)
from shaho_engine.rules.eligibility import evaluate
from shaho_engine.rules.types import EligibilityResult, WorkCategory
from shaho_engine.services.employee_service import EmployeeNotFoundError, EmployeeService
from shaho_engine.services.uncollected_premium import UncollectedPremiumService

router = APIRouter(tags=["employees"])


def _eligibility_response(
    employee_id: str,
    reference_date: date,
    category: WorkCategory,
    result: EligibilityResult,
) -> EligibilityResponse:
    return EligibilityResponse(
        employee_id=employee_id,
        reference_date=reference_date,
        work_category=category.value,
        **result.to_dict(),
    )


@router.post(
    "/eligibility/check",
    response_model=EligibilityResponse,
)
async def check_eligibility(payload: EligibilityCheckRequest) -> EligibilityResponse:
    """Classify and check an unsaved employee. No data is stored."""
    snapshot = payload.employee.to_snapshot(payload.employee_id)
    category, result = evaluate(snapshot, payload.reference_date)
    return _eligibility_response(payload.employee_id, payload.reference_date, category, result)


@router.put(
    "/employees/{employee_id}",
    response_model=EmployeeSaveResponse,
)
async def save_employee(
    db: DbSession,
    employee_id: Annotated[str, Path(min_length=1)],
    payload: EmployeeSaveRequest,
) -> EmployeeSaveResponse:
    """Create or update an employee and record regulated changes."""
    service = EmployeeService(db)
    result = await service.save(payload.employee.to_snapshot(employee_id), payload.effective_date)
    await db.commit()

    return EmployeeSaveResponse(
        employee_id=employee_id,
        created=result.created,
        work_category=result.work_category.value,
        is_short_time=result.snapshot.is_short_time,
        changes=[ChangeEventResponse(**event.to_dict()) for event in result.events],
    )


@router.get(
    "/employees/{employee_id}/eligibility",
    response_model=EligibilityResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_employee_eligibility(
    db: DbSession,
    employee_id: Annotated[str, Path(min_length=1)],
    reference_date: Annotated[date, Query()],
) -> EligibilityResponse:
    """Recompute category and eligibility of a stored employee."""
    service = EmployeeService(db)
    try:
        category, result = await service.evaluate(employee_id, reference_date)
    except EmployeeNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return _eligibility_response(employee_id, reference_date, category, result)


@router.delete(
    "/employees/{employee_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def purge_employee(
    db: DbSession,
    feed: AlertFeed,
    employee_id: Annotated[str, Path(min_length=1)],
) -> None:
    """Purge an employee with its alerts and change history."""
    service = EmployeeService(db, premiums=UncollectedPremiumService(db, feed=feed))
    try:
        await service.purge(employee_id)
    except EmployeeNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    await service.premiums.commit()
