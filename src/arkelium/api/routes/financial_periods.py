"""Financial period API endpoints."""

from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Query, status

from arkelium.api.dependencies import ActorId, Gateway
from arkelium.api.schemas import (
    ErrorResponse,
    FinancialPeriodCreate,
    FinancialPeriodResponse,
    PeriodOpenResponse,
    ReasonRequest,
)
from arkelium.services.financial_period_service import FinancialPeriodService

router = APIRouter(prefix="/financial-periods", tags=["financial-periods"])


@router.get("", response_model=list[FinancialPeriodResponse])
async def list_periods(gateway: Gateway) -> list[FinancialPeriodResponse]:
    periods = await FinancialPeriodService(gateway).list_periods()
    return [FinancialPeriodResponse.model_validate(p) for p in periods]


@router.post(
    "",
    response_model=FinancialPeriodResponse,
    status_code=status.HTTP_201_CREATED,
    responses={422: {"model": ErrorResponse}},
)
async def create_period(
    gateway: Gateway,
    payload: FinancialPeriodCreate,
) -> FinancialPeriodResponse:
    period = await FinancialPeriodService(gateway).create_period(
        payload.period_name, payload.start_date, payload.end_date
    )
    await gateway.session.commit()
    return FinancialPeriodResponse.model_validate(period)


@router.get("/open-check", response_model=PeriodOpenResponse)
async def check_open(
    gateway: Gateway,
    on: Annotated[date, Query()],
) -> PeriodOpenResponse:
    """Whether postings dated ``on`` fall in an open period."""
    service = FinancialPeriodService(gateway)
    period = await service.get_period_for_date(on)
    return PeriodOpenResponse(
        on=on,
        is_open=await service.is_period_open(on),
        period=FinancialPeriodResponse.model_validate(period) if period else None,
    )


@router.post(
    "/{period_id}/close",
    response_model=FinancialPeriodResponse,
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
async def close_period(
    gateway: Gateway,
    actor_id: ActorId,
    period_id: Annotated[UUID, Path()],
    payload: ReasonRequest,
) -> FinancialPeriodResponse:
    period = await FinancialPeriodService(gateway).close_period(
        period_id, payload.reason, actor_id
    )
    await gateway.session.commit()
    return FinancialPeriodResponse.model_validate(period)


@router.post(
    "/{period_id}/reopen",
    response_model=FinancialPeriodResponse,
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
async def reopen_period(
    gateway: Gateway,
    actor_id: ActorId,
    period_id: Annotated[UUID, Path()],
    payload: ReasonRequest,
) -> FinancialPeriodResponse:
    period = await FinancialPeriodService(gateway).reopen_period(
        period_id, payload.reason, actor_id
    )
    await gateway.session.commit()
    return FinancialPeriodResponse.model_validate(period)
