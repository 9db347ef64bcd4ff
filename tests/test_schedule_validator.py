"""Tests for schedule conflict validation."""

from datetime import date, time

from hypothesis import given
from hypothesis import strategies as st
from sqlalchemy.exc import OperationalError

from arkelium.gateway import TenantGateway
from arkelium.models import AbsenceRequest, Job
from arkelium.services.schedule_validator import (
    ABSENCE_MESSAGE,
    COMPLETED_MESSAGE,
    DUPLICATE_MESSAGE,
    ScheduleValidator,
    ValidationResult,
    job_interval,
    ranges_overlap,
    time_to_minutes,
)

from .conftest import SERVICE_DATE


class TestIntervals:
    def test_time_to_minutes(self):
        assert time_to_minutes(time(9, 30)) == 570
        assert time_to_minutes("14:05") == 845
        assert time_to_minutes("08:15:00") == 495

    def test_touching_ranges_do_not_overlap(self):
        assert ranges_overlap(540, 660, 660, 720) is False
        assert ranges_overlap(660, 720, 540, 660) is False

    def test_partial_overlap(self):
        assert ranges_overlap(540, 660, 600, 720) is True

    def test_job_interval_defaults(self):
        """Missing start and duration mean 09:00 for two hours."""
        job = Job(scheduled_date=SERVICE_DATE, start_time=None, duration_minutes=None)
        assert job_interval(job) == (540, 660)

    def test_zero_duration_books_default_slot(self):
        job = Job(scheduled_date=SERVICE_DATE, start_time=time(10, 0), duration_minutes=0)
        assert job_interval(job) == (600, 720)

    @given(
        a=st.integers(min_value=0, max_value=1440),
        b=st.integers(min_value=0, max_value=1440),
        c=st.integers(min_value=0, max_value=1440),
        d=st.integers(min_value=0, max_value=1440),
    )
    def test_overlap_is_symmetric(self, a, b, c, d):
        assert ranges_overlap(a, b, c, d) == ranges_overlap(c, d, a, b)

    @given(
        start=st.integers(min_value=0, max_value=1000),
        length=st.integers(min_value=1, max_value=400),
        gap=st.integers(min_value=0, max_value=400),
    )
    def test_back_to_back_never_overlap(self, start, length, gap):
        end = start + length
        assert ranges_overlap(start, end, end + gap, end + gap + length) is False


class TestValidateSchedule:
    """Test conflict detection against persisted jobs and absences."""

    async def test_empty_day_is_valid(self, gateway, client, cleaner):
        result = await ScheduleValidator(gateway).validate_schedule(
            client.client_id, cleaner.employee_id, SERVICE_DATE, "09:00", 120
        )
        assert result == ValidationResult.ok()

    async def test_approved_absence_blocks(self, session, gateway, tenant, client, cleaner):
        session.add(
            AbsenceRequest(
                tenant_id=tenant.tenant_id,
                cleaner_id=cleaner.employee_id,
                start_date=date(2026, 10, 13),
                end_date=date(2026, 10, 15),
                status="approved",
            )
        )
        await session.commit()

        result = await ScheduleValidator(gateway).validate_schedule(
            client.client_id, cleaner.employee_id, SERVICE_DATE, "13:00", 60
        )

        assert result.is_valid is False
        assert result.message == ABSENCE_MESSAGE

    async def test_pending_absence_does_not_block(
        self, session, gateway, tenant, client, cleaner
    ):
        session.add(
            AbsenceRequest(
                tenant_id=tenant.tenant_id,
                cleaner_id=cleaner.employee_id,
                start_date=SERVICE_DATE,
                end_date=SERVICE_DATE,
                status="pending",
            )
        )
        await session.commit()

        result = await ScheduleValidator(gateway).validate_schedule(
            client.client_id, cleaner.employee_id, SERVICE_DATE, "13:00", 60
        )
        assert result.is_valid is True

    async def test_duplicate_for_same_client_and_cleaner(self, gateway, client, cleaner, make_job):
        await make_job(client, cleaner, start_time=time(9, 0), duration_minutes=120)

        result = await ScheduleValidator(gateway).validate_schedule(
            client.client_id, cleaner.employee_id, SERVICE_DATE, "10:00", 60
        )

        assert result.is_valid is False
        assert result.message == DUPLICATE_MESSAGE

    async def test_unassigned_jobs_for_same_client_may_overlap(self, gateway, client, make_job):
        await make_job(client, None, start_time=time(9, 0), duration_minutes=120)

        result = await ScheduleValidator(gateway).validate_schedule(
            client.client_id, None, SERVICE_DATE, "10:00", 60
        )

        assert result == ValidationResult.ok()

    async def test_double_booking_names_the_cleaner(
        self, gateway, client, other_client, cleaner, make_job
    ):
        await make_job(other_client, cleaner, start_time=time(9, 0), duration_minutes=120)

        result = await ScheduleValidator(gateway).validate_schedule(
            client.client_id, cleaner.employee_id, SERVICE_DATE, "10:30", 60
        )

        assert result.is_valid is False
        assert result.message == "Maria Silva is already scheduled at this time."

    async def test_back_to_back_jobs_are_allowed(
        self, gateway, client, other_client, cleaner, make_job
    ):
        await make_job(other_client, cleaner, start_time=time(9, 0), duration_minutes=120)

        result = await ScheduleValidator(gateway).validate_schedule(
            client.client_id, cleaner.employee_id, SERVICE_DATE, "11:00", 60
        )
        assert result.is_valid is True

    async def test_default_interval_applies_to_existing_jobs(
        self, gateway, client, other_client, cleaner, make_job
    ):
        await make_job(other_client, cleaner, start_time=None, duration_minutes=None)

        result = await ScheduleValidator(gateway).validate_schedule(
            client.client_id, cleaner.employee_id, SERVICE_DATE, "10:59", 30
        )
        assert result.is_valid is False

    async def test_cancelled_jobs_are_ignored(
        self, gateway, client, other_client, cleaner, make_job
    ):
        await make_job(other_client, cleaner, status="cancelled")

        result = await ScheduleValidator(gateway).validate_schedule(
            client.client_id, cleaner.employee_id, SERVICE_DATE, "09:00", 120
        )
        assert result.is_valid is True

    async def test_excluded_job_is_ignored(self, gateway, client, cleaner, make_job):
        """Editing a job does not conflict with itself."""
        job = await make_job(client, cleaner)

        result = await ScheduleValidator(gateway).validate_schedule(
            client.client_id,
            cleaner.employee_id,
            SERVICE_DATE,
            "09:30",
            120,
            exclude_job_id=job.job_id,
        )
        assert result.is_valid is True

    async def test_other_cleaner_same_slot_is_allowed(
        self, gateway, client, cleaner, second_cleaner, make_job
    ):
        await make_job(client, cleaner)

        result = await ScheduleValidator(gateway).validate_schedule(
            client.client_id, second_cleaner.employee_id, SERVICE_DATE, "09:00", 120
        )
        assert result.is_valid is True

    async def test_other_tenant_jobs_are_invisible(
        self, session, other_tenant, client, cleaner
    ):
        other_gateway = TenantGateway(session, other_tenant.tenant_id)
        session.add(
            Job(
                tenant_id=client.tenant_id,
                client_id=client.client_id,
                cleaner_id=cleaner.employee_id,
                scheduled_date=SERVICE_DATE,
                start_time=time(9, 0),
                duration_minutes=120,
            )
        )
        await session.commit()

        result = await ScheduleValidator(other_gateway).validate_schedule(
            client.client_id, cleaner.employee_id, SERVICE_DATE, "09:00", 120
        )
        assert result.is_valid is True

    async def test_read_failure_allows_job(self, gateway, client, cleaner, monkeypatch):
        async def broken(*args, **kwargs):
            raise OperationalError("SELECT", {}, Exception("connection lost"))

        monkeypatch.setattr(gateway, "exists", broken)
        monkeypatch.setattr(gateway, "first", broken)
        monkeypatch.setattr(gateway, "select", broken)

        result = await ScheduleValidator(gateway).validate_schedule(
            client.client_id, cleaner.employee_id, SERVICE_DATE, "09:00", 120
        )
        assert result.is_valid is True

    async def test_unreachable_database_allows_job(self, gateway, client, cleaner, monkeypatch):
        async def refuse(*args, **kwargs):
            raise ConnectionRefusedError(111, "Connect call failed ('127.0.0.1', 5432)")

        monkeypatch.setattr(gateway, "exists", refuse)
        monkeypatch.setattr(gateway, "select", refuse)

        result = await ScheduleValidator(gateway).validate_schedule(
            client.client_id, cleaner.employee_id, SERVICE_DATE, "09:00", 120
        )
        assert result == ValidationResult.ok()


class TestUnavailableWorkers:
    async def test_collects_absent_and_busy_workers(
        self, session, gateway, tenant, client, admin, cleaner, second_cleaner, make_job
    ):
        session.add(
            AbsenceRequest(
                tenant_id=tenant.tenant_id,
                cleaner_id=second_cleaner.employee_id,
                start_date=SERVICE_DATE,
                end_date=SERVICE_DATE,
                status="approved",
            )
        )
        await session.commit()
        await make_job(client, cleaner, start_time=time(9, 0), duration_minutes=120)
        await make_job(client, None, start_time=time(9, 0), duration_minutes=120)

        unavailable = await ScheduleValidator(gateway).get_unavailable_workers(
            SERVICE_DATE, "10:00", 60
        )

        assert unavailable == {cleaner.employee_id, second_cleaner.employee_id}

    async def test_non_overlapping_job_leaves_worker_free(
        self, gateway, client, cleaner, make_job
    ):
        await make_job(client, cleaner, start_time=time(9, 0), duration_minutes=120)

        unavailable = await ScheduleValidator(gateway).get_unavailable_workers(
            SERVICE_DATE, "11:00", 60
        )
        assert unavailable == set()

    async def test_read_failure_returns_empty(self, gateway, monkeypatch):
        async def broken(*args, **kwargs):
            raise OperationalError("SELECT", {}, Exception("connection lost"))

        monkeypatch.setattr(gateway, "project", broken)

        assert await ScheduleValidator(gateway).get_unavailable_workers(
            SERVICE_DATE, "09:00", 60
        ) == set()

    async def test_unreachable_database_returns_empty(self, gateway, monkeypatch):
        async def refuse(*args, **kwargs):
            raise ConnectionRefusedError(111, "Connect call failed ('127.0.0.1', 5432)")

        monkeypatch.setattr(gateway, "project", refuse)

        assert await ScheduleValidator(gateway).get_unavailable_workers(
            SERVICE_DATE, "09:00", 60
        ) == set()


class TestCanCompleteJob:
    def test_completed_job_cannot_be_completed_again(self):
        job = Job(scheduled_date=SERVICE_DATE, status="completed")
        result = ScheduleValidator.can_complete_job(job)

        assert result.is_valid is False
        assert result.message == COMPLETED_MESSAGE

    def test_scheduled_job_can_be_completed(self):
        job = Job(scheduled_date=SERVICE_DATE, status="scheduled")
        assert ScheduleValidator.can_complete_job(job).is_valid is True
