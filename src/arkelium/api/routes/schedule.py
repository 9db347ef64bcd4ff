"""Schedule conflict endpoints."""

from fastapi import APIRouter

from arkelium.api.dependencies import Gateway
from arkelium.api.schemas import (
    ScheduleValidationRequest,
    UnavailableWorkersRequest,
    UnavailableWorkersResponse,
    ValidationResponse,
)
from arkelium.services.schedule_validator import ScheduleValidator

router = APIRouter(prefix="/schedule", tags=["schedule"])


@router.post("/validate", response_model=ValidationResponse)
async def validate_schedule(
    gateway: Gateway,
    payload: ScheduleValidationRequest,
) -> ValidationResponse:
    """Check a proposed job. Conflicts are reported in the body, never as errors."""
    result = await ScheduleValidator(gateway).validate_schedule(
        client_id=payload.client_id,
        employee_id=payload.employee_id,
        scheduled_date=payload.scheduled_date,
        start_time=payload.start_time,
        duration_minutes=payload.duration_minutes,
        exclude_job_id=payload.exclude_job_id,
    )
    return ValidationResponse(is_valid=result.is_valid, message=result.message)


@router.post("/unavailable-workers", response_model=UnavailableWorkersResponse)
async def unavailable_workers(
    gateway: Gateway,
    payload: UnavailableWorkersRequest,
) -> UnavailableWorkersResponse:
    """Workers who cannot take a job at the proposed time."""
    workers = await ScheduleValidator(gateway).get_unavailable_workers(
        scheduled_date=payload.scheduled_date,
        start_time=payload.start_time,
        duration_minutes=payload.duration_minutes,
        exclude_job_id=payload.exclude_job_id,
    )
    return UnavailableWorkersResponse(employee_ids=sorted(workers, key=str))
