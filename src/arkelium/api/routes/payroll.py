"""Payroll period API endpoints."""

from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Body, Path, Query, status

from arkelium.api.dependencies import ActorId, Gateway
from arkelium.api.schemas import (
    ErrorResponse,
    MarkPaidRequest,
    PayrollEntryResponse,
    PayrollGenerateRequest,
    PayrollPeriodResponse,
    PeriodReminderResponse,
)
from arkelium.services.payroll_service import PayrollService

router = APIRouter(prefix="/payroll", tags=["payroll"])


# ============================================================================
# Periods
# ============================================================================


@router.get("/periods", response_model=list[PayrollPeriodResponse])
async def list_periods(gateway: Gateway) -> list[PayrollPeriodResponse]:
    """List payroll periods, newest first."""
    periods = await PayrollService(gateway).list_periods()
    return [PayrollPeriodResponse.model_validate(p) for p in periods]


@router.post(
    "/periods",
    response_model=PayrollPeriodResponse,
    status_code=status.HTTP_201_CREATED,
    responses={422: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def generate_period(
    gateway: Gateway,
    actor_id: ActorId,
    payload: PayrollGenerateRequest,
) -> PayrollPeriodResponse:
    """Generate a pending period from completed jobs. Commits on success."""
    period = await PayrollService(gateway).generate_payroll_period(
        payload.start_date,
        payload.end_date,
        actor_id=actor_id,
    )
    return PayrollPeriodResponse.model_validate(period)


@router.get("/periods/current", response_model=PayrollPeriodResponse | None)
async def current_period(gateway: Gateway) -> PayrollPeriodResponse | None:
    """The most recent pending period, or null."""
    period = await PayrollService(gateway).get_current_period()
    return PayrollPeriodResponse.model_validate(period) if period else None


@router.get(
    "/periods/{period_id}/entries",
    response_model=list[PayrollEntryResponse],
    responses={404: {"model": ErrorResponse}},
)
async def list_entries(
    gateway: Gateway,
    period_id: Annotated[UUID, Path()],
) -> list[PayrollEntryResponse]:
    entries = await PayrollService(gateway).get_entries(period_id)
    return [PayrollEntryResponse.model_validate(e) for e in entries]


# ============================================================================
# Period State Transitions
# ============================================================================


@router.post(
    "/periods/{period_id}/approve",
    response_model=PayrollPeriodResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def approve_period(
    gateway: Gateway,
    actor_id: ActorId,
    period_id: Annotated[UUID, Path()],
) -> PayrollPeriodResponse:
    """Approve a pending period."""
    period = await PayrollService(gateway).approve_period(period_id, actor_id)
    await gateway.session.commit()
    return PayrollPeriodResponse.model_validate(period)


@router.post(
    "/periods/{period_id}/pay",
    response_model=PayrollPeriodResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def mark_period_paid(
    gateway: Gateway,
    actor_id: ActorId,
    period_id: Annotated[UUID, Path()],
    payload: Annotated[MarkPaidRequest | None, Body()] = None,
) -> PayrollPeriodResponse:
    """Mark an approved period as paid."""
    period = await PayrollService(gateway).mark_as_paid(
        period_id,
        pay_date=payload.pay_date if payload else None,
        actor_id=actor_id,
    )
    await gateway.session.commit()
    return PayrollPeriodResponse.model_validate(period)


@router.get("/reminder", response_model=PeriodReminderResponse | None)
async def period_reminder(
    gateway: Gateway,
    today: Annotated[date | None, Query()] = None,
) -> PeriodReminderResponse | None:
    """Whether the current pending period has ended and needs approval."""
    reminder = await PayrollService(gateway).check_period_notifications(today)
    if reminder is None:
        return None
    return PeriodReminderResponse(
        period=PayrollPeriodResponse.model_validate(reminder.period),
        period_ended=reminder.period_ended,
        needs_action=reminder.needs_action,
        days_overdue=reminder.days_overdue,
    )
