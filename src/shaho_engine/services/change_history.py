"""Persistence of detected change events."""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Iterable

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from shaho_engine.models import EmployeeChangeHistory
from shaho_engine.rules.types import ChangeEvent

logger = logging.getLogger(__name__)


class ChangeHistoryService:
    """Append-only store for change events.

    An event is skipped when the same employee already has an entry of the
    same change type, on the same change date, with identical old and new
    values, so re-saving a form does not duplicate notifications while a
    change repeated on a later date is still recorded.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def record(self, events: Iterable[ChangeEvent]) -> list[EmployeeChangeHistory]:
        """Append events, returning the entries actually written."""
        written: list[EmployeeChangeHistory] = []

        for event in events:
            if await self._is_duplicate(event):
                logger.debug(
                    "Skipping duplicate %s for employee %s",
                    event.change_type.value,
                    event.employee_id,
                )
                continue

            entry = EmployeeChangeHistory(
                employee_id=event.employee_id,
                change_type=event.change_type.value,
                change_date=event.change_date,
                old_value=event.old_value,
                new_value=event.new_value,
                notification_forms=list(event.notification_forms),
            )
            self.session.add(entry)
            # Flush per event so a duplicate later in the batch is caught
            await self.session.flush()
            written.append(entry)

        if written:
            logger.info("Recorded %s change event(s)", len(written))
        return written

    async def list_recent(
        self,
        today: date,
        employee_id: str | None = None,
        days: int = 5,
    ) -> list[EmployeeChangeHistory]:
        """Entries whose change date falls within ``days`` before ``today``.

        Newest first.
        """
        cutoff = today - timedelta(days=days)
        query = select(EmployeeChangeHistory).where(
            EmployeeChangeHistory.change_date >= cutoff,
            EmployeeChangeHistory.change_date <= today,
        )
        if employee_id is not None:
            query = query.where(EmployeeChangeHistory.employee_id == employee_id)
        query = query.order_by(
            EmployeeChangeHistory.change_date.desc(),
            EmployeeChangeHistory.created_at.desc(),
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def delete_by_employee(self, employee_id: str) -> int:
        """Administrative purge of an employee's history.

        Returns count of deleted entries.
        """
        if not employee_id:
            raise ValueError("employee_id is required")
        result = await self.session.execute(
            delete(EmployeeChangeHistory)
            .where(EmployeeChangeHistory.employee_id == employee_id)
            .returning(EmployeeChangeHistory.id)
            .execution_options(synchronize_session="fetch")
        )
        deleted = len(result.scalars().all())
        await self.session.flush()
        return deleted

    async def _is_duplicate(self, event: ChangeEvent) -> bool:
        result = await self.session.execute(
            select(EmployeeChangeHistory.id)
            .where(
                EmployeeChangeHistory.employee_id == event.employee_id,
                EmployeeChangeHistory.change_type == event.change_type.value,
                EmployeeChangeHistory.change_date == event.change_date,
                EmployeeChangeHistory.old_value == event.old_value,
                EmployeeChangeHistory.new_value == event.new_value,
            )
            .limit(1)
        )
        return result.scalar() is not None
