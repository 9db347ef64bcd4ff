"""Schedule conflict validation.

Checks a proposed job against approved absences and the worker's other
jobs that day. Read failures are logged and the proposal is allowed, so a
database hiccup never blocks scheduling.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, time
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from arkelium.gateway import TenantGateway
from arkelium.models import AbsenceRequest, Employee, Job

logger = logging.getLogger(__name__)

ABSENCE_MESSAGE = "This employee has an approved absence for this date. Cannot schedule."
DUPLICATE_MESSAGE = "A job already exists for this client with this cleaner at this time."
COMPLETED_MESSAGE = "This job has already been completed. Cannot modify."
FALLBACK_WORKER_NAME = "This cleaner"

# Driver connection failures surface as OSError without a SQLAlchemy wrapper.
READ_ERRORS = (SQLAlchemyError, OSError)


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a validation; a failure carries a user-facing message."""

    is_valid: bool
    message: str | None = None

    @classmethod
    def ok(cls) -> ValidationResult:
        return cls(is_valid=True)

    @classmethod
    def fail(cls, message: str) -> ValidationResult:
        return cls(is_valid=False, message=message)


def time_to_minutes(value: time | str) -> int:
    """Minutes since midnight for a time or an ``HH:MM[:SS]`` string."""
    if isinstance(value, str):
        hours, minutes = value.split(":")[:2]
        return int(hours) * 60 + int(minutes)
    return value.hour * 60 + value.minute


def ranges_overlap(start1: int, end1: int, start2: int, end2: int) -> bool:
    """Half-open interval overlap: touching ranges do not overlap."""
    return start1 < end2 and end1 > start2


def job_interval(job: Job) -> tuple[int, int]:
    """``[start, end)`` in minutes, applying the 09:00 / 120 minute defaults."""
    start = time_to_minutes(job.effective_start_time)
    return start, start + job.effective_duration_minutes


class ScheduleValidator:
    """Validate proposed jobs for one tenant."""

    def __init__(self, gateway: TenantGateway):
        self.gateway = gateway

    async def validate_schedule(
        self,
        client_id: UUID,
        employee_id: UUID | None,
        scheduled_date: date,
        start_time: time | str,
        duration_minutes: int,
        exclude_job_id: UUID | None = None,
    ) -> ValidationResult:
        """Check a proposed job for absences, duplicates and double-booking."""
        start = time_to_minutes(start_time)
        end = start + duration_minutes

        try:
            if employee_id is not None and await self._has_approved_absence(
                employee_id, scheduled_date
            ):
                return ValidationResult.fail(ABSENCE_MESSAGE)

            for job in await self._jobs_on(scheduled_date, exclude_job_id):
                job_start, job_end = job_interval(job)
                if not ranges_overlap(start, end, job_start, job_end):
                    continue

                if employee_id is None or job.cleaner_id != employee_id:
                    continue

                if job.client_id == client_id:
                    return ValidationResult.fail(DUPLICATE_MESSAGE)

                name = await self._worker_name(employee_id)
                return ValidationResult.fail(f"{name} is already scheduled at this time.")

        except READ_ERRORS:
            logger.exception("Error validating schedule, allowing job")
            return ValidationResult.ok()

        return ValidationResult.ok()

    async def get_unavailable_workers(
        self,
        scheduled_date: date,
        start_time: time | str,
        duration_minutes: int,
        exclude_job_id: UUID | None = None,
    ) -> set[UUID]:
        """Workers on approved absence or with an overlapping job."""
        start = time_to_minutes(start_time)
        end = start + duration_minutes

        try:
            absent = await self.gateway.project(
                AbsenceRequest.cleaner_id,
                where=_approved_absence_on(scheduled_date),
            )
            unavailable = {cleaner_id for (cleaner_id,) in absent}

            for job in await self._jobs_on(scheduled_date, exclude_job_id):
                if job.cleaner_id is None:
                    continue
                if ranges_overlap(start, end, *job_interval(job)):
                    unavailable.add(job.cleaner_id)
        except READ_ERRORS:
            logger.exception("Error getting unavailable workers")
            return set()

        return unavailable

    @staticmethod
    def can_complete_job(job: Job) -> ValidationResult:
        """A completed job cannot be completed or edited again."""
        if job.status == "completed":
            return ValidationResult.fail(COMPLETED_MESSAGE)
        return ValidationResult.ok()

    async def _has_approved_absence(self, employee_id: UUID, on: date) -> bool:
        return await self.gateway.exists(
            AbsenceRequest,
            AbsenceRequest.cleaner_id == employee_id,
            *_approved_absence_on(on),
        )

    async def _jobs_on(self, scheduled_date: date, exclude_job_id: UUID | None) -> list[Job]:
        criteria = [Job.scheduled_date == scheduled_date, Job.status != "cancelled"]
        if exclude_job_id is not None:
            criteria.append(Job.job_id != exclude_job_id)
        jobs, _ = await self.gateway.select(Job, *criteria)
        return jobs

    async def _worker_name(self, employee_id: UUID) -> str:
        employee = await self.gateway.get(Employee, employee_id)
        if employee is None or not employee.full_name:
            return FALLBACK_WORKER_NAME
        return employee.full_name


def _approved_absence_on(on: date) -> list:
    return [
        AbsenceRequest.status == "approved",
        AbsenceRequest.start_date <= on,
        AbsenceRequest.end_date >= on,
    ]
