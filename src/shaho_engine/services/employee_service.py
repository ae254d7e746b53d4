"""Employee persistence and rule orchestration."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from shaho_engine.models import Employee
from shaho_engine.rules.change_history import detect_changes
from shaho_engine.rules.eligibility import evaluate
from shaho_engine.rules.types import ChangeEvent, EligibilityResult, EmployeeSnapshot, WorkCategory
from shaho_engine.rules.work_category import (
    classify,
    is_short_time_flag,
    normalize_employment_months,
)
from shaho_engine.services.change_history import ChangeHistoryService
from shaho_engine.services.uncollected_premium import UncollectedPremiumService

logger = logging.getLogger(__name__)


class EmployeeNotFoundError(Exception):
    """Raised when no employee exists for an id."""

    def __init__(self, employee_id: str):
        self.employee_id = employee_id
        super().__init__(f"Employee {employee_id} not found")


@dataclass
class EmployeeSaveResult:
    """Result of saving one employee."""

    snapshot: EmployeeSnapshot
    work_category: WorkCategory
    created: bool
    events: list[ChangeEvent] = field(default_factory=list)


class EmployeeService:
    """Saves employee snapshots and evaluates them.

    Save pipeline:
    1) Normalize numeric month text and recompute the cached
       ``is_short_time`` projection
    2) Diff against the stored snapshot (new employees produce no events)
    3) Persist the snapshot
    4) Append the detected change events to the history
    """

    def __init__(
        self,
        session: AsyncSession,
        history: ChangeHistoryService | None = None,
        premiums: UncollectedPremiumService | None = None,
    ):
        self.session = session
        self.history = history or ChangeHistoryService(session)
        self.premiums = premiums or UncollectedPremiumService(session)

    async def get_snapshot(self, employee_id: str) -> EmployeeSnapshot:
        """Load the stored snapshot.

        Raises:
            EmployeeNotFoundError: If the employee does not exist
        """
        employee = await self.session.get(Employee, employee_id)
        if employee is None:
            raise EmployeeNotFoundError(employee_id)
        return employee.to_snapshot()

    async def save(self, snapshot: EmployeeSnapshot, effective_date: date) -> EmployeeSaveResult:
        """Persist a snapshot and record what changed."""
        normalized = replace(
            snapshot,
            expected_employment_months=normalize_employment_months(
                snapshot.expected_employment_months
            ),
        )
        projected = replace(normalized, is_short_time=is_short_time_flag(normalized))
        employee = await self.session.get(Employee, snapshot.id)

        created = employee is None
        events: list[ChangeEvent] = []
        if employee is None:
            employee = Employee(employee_id=snapshot.id)
            self.session.add(employee)
        else:
            events = detect_changes(employee.to_snapshot(), projected, effective_date)

        employee.apply_snapshot(projected)
        await self.session.flush()

        if events:
            await self.history.record(events)

        logger.info(
            "Saved employee %s (created=%s, changes=%s)",
            snapshot.id,
            created,
            len(events),
        )
        return EmployeeSaveResult(
            snapshot=projected,
            work_category=classify(projected),
            created=created,
            events=events,
        )

    async def evaluate(
        self, employee_id: str, reference_date: date
    ) -> tuple[WorkCategory, EligibilityResult]:
        """Classify and check eligibility of a stored employee."""
        return evaluate(await self.get_snapshot(employee_id), reference_date)

    async def purge(self, employee_id: str) -> None:
        """Remove an employee together with its alerts and history.

        Raises:
            EmployeeNotFoundError: If the employee does not exist
        """
        employee = await self.session.get(Employee, employee_id)
        if employee is None:
            raise EmployeeNotFoundError(employee_id)

        await self.premiums.delete_all_for_employee(employee_id)
        await self.history.delete_by_employee(employee_id)
        await self.session.delete(employee)
        await self.session.flush()
        logger.info("Purged employee %s", employee_id)
