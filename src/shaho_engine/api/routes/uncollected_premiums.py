"""Uncollected premium API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Query

from shaho_engine.api.dependencies import AlertFeed, DbSession
from shaho_engine.api.schemas import (
    ReconcileRequest,
    ReconcileResponse,
    ResolveRequest,
    ResolveResponse,
    UncollectedPremiumListResponse,
    UncollectedPremiumResponse,
)
from shaho_engine.services.uncollected_premium import UncollectedPremiumService

router = APIRouter(prefix="/uncollected-premiums", tags=["uncollected-premiums"])


@router.post("/reconcile", response_model=ReconcileResponse)
async def reconcile(
    db: DbSession,
    feed: AlertFeed,
    payload: ReconcileRequest,
) -> ReconcileResponse:
    """Create, refresh or resolve the alert for one employee-month."""
    service = UncollectedPremiumService(db, feed=feed)
    record = await service.reconcile(
        payload.employee_id,
        payload.year,
        payload.month,
        payload.total_salary,
        payload.employee_borne_premium,
    )
    await service.commit()
    return ReconcileResponse(
        record=UncollectedPremiumResponse.model_validate(record) if record else None
    )


@router.get("", response_model=UncollectedPremiumListResponse)
async def list_uncollected_premiums(
    db: DbSession,
    employee_id: str | None = None,
    year: int | None = None,
    resolved: Annotated[bool | None, Query()] = None,
) -> UncollectedPremiumListResponse:
    """List alerts with optional filters."""
    service = UncollectedPremiumService(db)
    records = await service.list_by_filter(employee_id=employee_id, year=year, resolved=resolved)
    return UncollectedPremiumListResponse(
        items=[UncollectedPremiumResponse.model_validate(r) for r in records],
        total=len(records),
    )


@router.post("/resolve", response_model=ResolveResponse)
async def resolve(
    db: DbSession,
    feed: AlertFeed,
    payload: ResolveRequest,
) -> ResolveResponse:
    """Manually acknowledge alerts; amounts are kept."""
    service = UncollectedPremiumService(db, feed=feed)
    updated = await service.mark_resolved(payload.ids)
    await service.commit()
    return ResolveResponse(updated=updated)
