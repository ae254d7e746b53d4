"""Live feed of unresolved uncollected-premium alerts.

The feed provides:
- Subscription with an optional year filter
- Re-publication after every committed write made through a sharing service
- Error isolation (a failing subscriber doesn't break the others or the write)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Iterable, Protocol, runtime_checkable

if TYPE_CHECKING:
    from shaho_engine.models import UncollectedPremium

logger = logging.getLogger(__name__)


@runtime_checkable
class AlertHandler(Protocol):
    """Protocol for feed subscribers."""

    def __call__(self, alerts: list[UncollectedPremium]) -> None:
        """Receive the current unresolved alerts."""
        ...


def is_open_alert(record: UncollectedPremium, year: int | None = None) -> bool:
    """Unresolved, non-zero and (optionally) in the given year."""
    if record.resolved:
        return False
    if record.amount <= 0:
        return False
    if year is not None and record.year != year:
        return False
    return True


@dataclass
class Subscription:
    """Handle returned by ``UnresolvedAlertFeed.subscribe``."""

    handler: AlertHandler
    year: int | None
    _unsubscribe: Callable[[Subscription], None]

    def close(self) -> None:
        self._unsubscribe(self)


class UnresolvedAlertFeed:
    """In-process broadcaster of unresolved alerts.

    Usage:
        feed = UnresolvedAlertFeed()
        service = UncollectedPremiumService(session, feed=feed)

        subscription = await service.observe_unresolved(render, year=2025)
        await service.reconcile(...)
        await service.commit()         # render() is called again
        subscription.close()
    """

    def __init__(self) -> None:
        self._subscriptions: list[Subscription] = []

    def subscribe(self, handler: AlertHandler, year: int | None = None) -> Subscription:
        subscription = Subscription(handler=handler, year=year, _unsubscribe=self._remove)
        self._subscriptions.append(subscription)
        return subscription

    def _remove(self, subscription: Subscription) -> None:
        self._subscriptions = [s for s in self._subscriptions if s is not subscription]

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def deliver(self, subscription: Subscription, records: Iterable[UncollectedPremium]) -> Exception | None:
        """Send the filtered view of ``records`` to one subscriber."""
        alerts = [r for r in records if is_open_alert(r, subscription.year)]
        try:
            subscription.handler(alerts)
        except Exception as e:
            logger.exception("Alert feed handler %s failed", subscription.handler)
            return e
        return None

    def publish(self, records: Iterable[UncollectedPremium]) -> list[Exception]:
        """Send the current state to every subscriber.

        Returns list of any exceptions raised by handlers.
        """
        snapshot = list(records)
        errors: list[Exception] = []
        for subscription in list(self._subscriptions):
            error = self.deliver(subscription, snapshot)
            if error is not None:
                errors.append(error)
        return errors
