"""Uncollected premium (premium shortfall) reconciliation."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from shaho_engine.models import UncollectedPremium, uncollected_premium_key
from shaho_engine.models.base import utcnow
from shaho_engine.services.alert_feed import AlertHandler, Subscription, UnresolvedAlertFeed

logger = logging.getLogger(__name__)

REASON_SHORTFALL = "給与 < 本人負担保険料 による徴収不能"
REASON_RESOLVED = "給与 >= 本人負担保険料 により解消"


def shortfall_amount(total_salary: int, employee_borne_premium: int) -> int:
    """Amount the salary fails to cover, 0 when it covers the premium."""
    if total_salary < employee_borne_premium:
        return employee_borne_premium - total_salary
    return 0


class UncollectedPremiumService:
    """Service for per-employee-month premium shortfall alerts.

    A payroll run calls ``reconcile`` once per employee-month:
    1. Shortfall -> upsert the record as unresolved with the shortfall amount
    2. No shortfall, record exists -> overwrite as resolved with amount 0
    3. No shortfall, no record -> nothing is written

    Callers guarantee a single writer per key. Store errors propagate.
    Writes only flush; ``commit`` makes them durable and then notifies feed
    subscribers, so a rolled-back write is never reported.
    """

    def __init__(
        self,
        session: AsyncSession,
        feed: UnresolvedAlertFeed | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.session = session
        self.feed = feed
        self.clock = clock
        self._pending_publish = False

    async def reconcile(
        self,
        employee_id: str,
        year: int,
        month: int,
        total_salary: int,
        employee_borne_premium: int,
    ) -> UncollectedPremium | None:
        """Create, refresh or resolve the alert for one employee-month.

        Returns the stored record, or None when nothing exists for the key.
        """
        key = uncollected_premium_key(employee_id, year, month)
        amount = shortfall_amount(total_salary, employee_borne_premium)
        record = await self.session.get(UncollectedPremium, key)

        logger.debug(
            "Reconciling %s: total_salary=%s employee_borne_premium=%s shortfall=%s",
            key,
            total_salary,
            employee_borne_premium,
            amount,
        )

        if amount > 0:
            if record is None:
                record = UncollectedPremium(
                    id=key,
                    employee_id=employee_id,
                    year=year,
                    month=month,
                )
                self.session.add(record)
            record.amount = amount
            record.resolved = False
            record.reason = REASON_SHORTFALL
            record.created_at = self.clock()
            logger.info("Uncollected premium recorded for %s: amount=%s", key, amount)
        elif record is not None:
            record.amount = 0
            record.resolved = True
            record.reason = REASON_RESOLVED
            record.created_at = self.clock()
            logger.info("Uncollected premium resolved for %s", key)
        else:
            return None

        await self.session.flush()
        self._pending_publish = True
        return record

    async def list_by_filter(
        self,
        employee_id: str | None = None,
        year: int | None = None,
        resolved: bool | None = None,
    ) -> list[UncollectedPremium]:
        """List records; omitted filters match everything."""
        records = await self._load_all()
        return [
            r
            for r in records
            if (employee_id is None or r.employee_id == employee_id)
            and (year is None or r.year == year)
            and (resolved is None or r.resolved == resolved)
        ]

    async def observe_unresolved(
        self, handler: AlertHandler, year: int | None = None
    ) -> Subscription:
        """Subscribe to open alerts, optionally for one year.

        The handler receives the current list right away and again after
        every commit of a write made through a service sharing this feed.
        """
        if self.feed is None:
            self.feed = UnresolvedAlertFeed()
        subscription = self.feed.subscribe(handler, year=year)
        self.feed.deliver(subscription, await self._load_all())
        return subscription

    async def set_resolved(self, record_id: str, resolved: bool) -> None:
        """Set the resolved flag of one record without touching the amount."""
        await self.session.execute(
            update(UncollectedPremium)
            .where(UncollectedPremium.id == record_id)
            .values(resolved=resolved)
            .execution_options(synchronize_session="fetch")
        )
        await self.session.flush()
        self._pending_publish = True

    async def mark_resolved(self, ids: list[str]) -> int:
        """Manually acknowledge several alerts.

        Returns count of updated records.
        """
        if not ids:
            return 0
        result = await self.session.execute(
            update(UncollectedPremium)
            .where(UncollectedPremium.id.in_(ids))
            .values(resolved=True)
            .returning(UncollectedPremium.id)
            .execution_options(synchronize_session="fetch")
        )
        updated = len(result.scalars().all())
        await self.session.flush()
        self._pending_publish = True
        return updated

    async def delete_all_for_employee(self, employee_id: str) -> int:
        """Hard delete every record of an employee being purged.

        Returns count of deleted records.
        """
        result = await self.session.execute(
            delete(UncollectedPremium)
            .where(UncollectedPremium.employee_id == employee_id)
            .returning(UncollectedPremium.id)
            .execution_options(synchronize_session="fetch")
        )
        deleted = len(result.scalars().all())
        await self.session.flush()
        logger.info(
            "Deleted %s uncollected premium record(s) for employee %s",
            deleted,
            employee_id,
        )
        self._pending_publish = True
        return deleted

    async def commit(self) -> None:
        """Commit the session, then publish the committed state to the feed."""
        await self.session.commit()
        if self._pending_publish:
            self._pending_publish = False
            await self._publish()

    async def _load_all(self) -> list[UncollectedPremium]:
        result = await self.session.execute(
            select(UncollectedPremium).order_by(
                UncollectedPremium.year,
                UncollectedPremium.month,
                UncollectedPremium.employee_id,
            )
        )
        return list(result.scalars().all())

    async def _publish(self) -> None:
        if self.feed is None or self.feed.subscriber_count == 0:
            return
        self.feed.publish(await self._load_all())
