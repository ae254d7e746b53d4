"""Submission deadlines for qualification-change notifications."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Protocol

DEFAULT_DEADLINE_DAYS = 5


class ChangeRecord(Protocol):
    """Anything shaped like a stored change entry."""

    id: str
    employee_id: str
    change_type: str
    change_date: date
    old_value: str
    new_value: str
    notification_forms: list[str]


@dataclass(frozen=True)
class QualificationChangeAlert:
    """A pending notification derived from one change entry."""

    id: str
    employee_id: str
    change_type: str
    change_date: date
    notification_forms: tuple[str, ...]
    submit_deadline: date
    days_until_deadline: int
    details: str


def calculate_submit_deadline(change_date: date, days: int = DEFAULT_DEADLINE_DAYS) -> date:
    return change_date + timedelta(days=days)


def days_until(deadline: date, today: date) -> int:
    """Negative once the deadline has passed."""
    return (deadline - today).days


def build_qualification_change_alerts(
    records: Iterable[ChangeRecord],
    today: date,
    deadline_days: int = DEFAULT_DEADLINE_DAYS,
    dismissed_ids: set[str] | None = None,
) -> list[QualificationChangeAlert]:
    """Turn stored change entries into alerts, newest change first."""
    dismissed = dismissed_ids or set()
    alerts: list[QualificationChangeAlert] = []

    for record in records:
        if record.id in dismissed:
            continue
        deadline = calculate_submit_deadline(record.change_date, deadline_days)
        alerts.append(
            QualificationChangeAlert(
                id=record.id,
                employee_id=record.employee_id,
                change_type=record.change_type,
                change_date=record.change_date,
                notification_forms=tuple(record.notification_forms),
                submit_deadline=deadline,
                days_until_deadline=days_until(deadline, today),
                details=f"{record.old_value} → {record.new_value}",
            )
        )

    alerts.sort(key=lambda alert: alert.change_date, reverse=True)
    return alerts
