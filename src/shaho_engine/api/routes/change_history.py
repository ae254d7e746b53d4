"""Change history API endpoints."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Query

from shaho_engine.api.dependencies import DbSession
from shaho_engine.api.schemas import (
    QualificationChangeAlertListResponse,
    QualificationChangeAlertResponse,
)
from shaho_engine.config import get_settings
from shaho_engine.rules.notifications import build_qualification_change_alerts
from shaho_engine.services.change_history import ChangeHistoryService

router = APIRouter(prefix="/change-history", tags=["change-history"])


@router.get("", response_model=QualificationChangeAlertListResponse)
async def list_recent_changes(
    db: DbSession,
    today: Annotated[date, Query()],
    employee_id: str | None = None,
    days: Annotated[int | None, Query(ge=0)] = None,
) -> QualificationChangeAlertListResponse:
    """Recent changes with their notification deadlines."""
    settings = get_settings()
    window = settings.change_history_window_days if days is None else days

    service = ChangeHistoryService(db)
    entries = await service.list_recent(today, employee_id=employee_id, days=window)
    alerts = build_qualification_change_alerts(
        entries, today, deadline_days=settings.notification_deadline_days
    )

    return QualificationChangeAlertListResponse(
        items=[
            QualificationChangeAlertResponse(
                id=alert.id,
                employee_id=alert.employee_id,
                change_type=alert.change_type,
                change_date=alert.change_date,
                notification_forms=list(alert.notification_forms),
                submit_deadline=alert.submit_deadline,
                days_until_deadline=alert.days_until_deadline,
                details=alert.details,
            )
            for alert in alerts
        ],
        total=len(alerts),
    )
