"""Cash collection API endpoints."""

from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Query, status

from arkelium.api.dependencies import ActorId, Gateway
from arkelium.api.schemas import (
    CashCollectionResponse,
    CashRecordRequest,
    CashSummaryResponse,
    DisputeRequest,
    ErrorResponse,
    SettleRequest,
)
from arkelium.services.cash_service import CashService

router = APIRouter(prefix="/cash-collections", tags=["cash-collections"])


@router.post(
    "",
    response_model=CashCollectionResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def record_cash(
    gateway: Gateway,
    actor_id: ActorId,
    payload: CashRecordRequest,
) -> CashCollectionResponse:
    """Record cash received for a job."""
    collection = await CashService(gateway).record_cash_handling(
        payload.job_id,
        payload.amount,
        payload.cash_handling,
        notes=payload.notes,
        actor_id=actor_id,
    )
    await gateway.session.commit()
    return CashCollectionResponse.model_validate(collection)


@router.get("/summary", response_model=CashSummaryResponse)
async def cash_summary(
    gateway: Gateway,
    start_date: Annotated[date, Query()],
    end_date: Annotated[date, Query()],
) -> CashSummaryResponse:
    summary = await CashService(gateway).summarize(start_date, end_date)
    return CashSummaryResponse.model_validate(summary)


@router.get("/unsettled", response_model=list[CashCollectionResponse])
async def unsettled_cash(
    gateway: Gateway,
    cleaner_id: UUID | None = None,
) -> list[CashCollectionResponse]:
    """Approved cash kept by cleaners and not yet settled through payroll."""
    rows = await CashService(gateway).list_unsettled_approved(cleaner_id)
    return [CashCollectionResponse.model_validate(r) for r in rows]


# ============================================================================
# Compensation State Transitions
# ============================================================================


@router.post(
    "/{collection_id}/approve",
    response_model=CashCollectionResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def approve_cash(
    gateway: Gateway,
    actor_id: ActorId,
    collection_id: Annotated[UUID, Path()],
) -> CashCollectionResponse:
    collection = await CashService(gateway).approve_cash_collection(collection_id, actor_id)
    await gateway.session.commit()
    return CashCollectionResponse.model_validate(collection)


@router.post(
    "/{collection_id}/dispute",
    response_model=CashCollectionResponse,
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
async def dispute_cash(
    gateway: Gateway,
    actor_id: ActorId,
    collection_id: Annotated[UUID, Path()],
    payload: DisputeRequest,
) -> CashCollectionResponse:
    """Dispute pending cash. The reason is mandatory."""
    collection = await CashService(gateway).dispute_cash_collection(
        collection_id, payload.reason, actor_id
    )
    await gateway.session.commit()
    return CashCollectionResponse.model_validate(collection)


@router.post(
    "/{collection_id}/settle",
    response_model=CashCollectionResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def settle_cash(
    gateway: Gateway,
    actor_id: ActorId,
    collection_id: Annotated[UUID, Path()],
    payload: SettleRequest,
) -> CashCollectionResponse:
    """Mark approved cash as deducted through a payroll period."""
    collection = await CashService(gateway).settle_cash_collection(
        collection_id, payload.payroll_period_id, actor_id
    )
    await gateway.session.commit()
    return CashCollectionResponse.model_validate(collection)
