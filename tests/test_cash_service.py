"""Tests for the cash handling and compensation workflow."""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from arkelium.gateway import RecordNotFoundError
from arkelium.models import Notification, PayrollPeriod
from arkelium.services.cash_service import CashRecordError, CashService
from arkelium.services.state_machine import InvalidTransitionError, ReasonRequiredError

from .conftest import SERVICE_DATE


@pytest.fixture
def cash(gateway) -> CashService:
    return CashService(gateway)


@pytest.fixture
async def job(client, cleaner, make_job):
    return await make_job(client, cleaner, status="completed")


@pytest.fixture
async def payroll_period(session, tenant) -> PayrollPeriod:
    period = PayrollPeriod(
        tenant_id=tenant.tenant_id,
        period_name="2026-10-05 - 2026-10-18",
        start_date=date(2026, 10, 5),
        end_date=date(2026, 10, 18),
    )
    session.add(period)
    await session.commit()
    return period


class TestRecordCashHandling:
    async def test_kept_by_cleaner_starts_pending(self, cash, job, cleaner):
        collection = await cash.record_cash_handling(
            job.job_id, Decimal("85.00"), "kept_by_cleaner", notes="Paid at the door"
        )

        assert collection.compensation_status == "pending"
        assert collection.cash_handling == "kept_by_cleaner"
        assert collection.cleaner_id == cleaner.employee_id
        assert collection.client_id == job.client_id
        assert collection.service_date == SERVICE_DATE
        assert collection.handled_by == cleaner.employee_id
        assert collection.notes == "Paid at the door"

    async def test_delivered_to_office_needs_no_compensation(self, cash, job):
        collection = await cash.record_cash_handling(
            job.job_id, Decimal("85.00"), "delivered_to_office"
        )
        assert collection.compensation_status == "not_applicable"

    @pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-10.00")])
    async def test_amount_must_be_positive(self, cash, job, amount):
        with pytest.raises(CashRecordError):
            await cash.record_cash_handling(job.job_id, amount, "kept_by_cleaner")

    async def test_unknown_handling_choice(self, cash, job):
        with pytest.raises(ValueError):
            await cash.record_cash_handling(job.job_id, Decimal("10.00"), "left_on_table")

    async def test_job_without_cleaner(self, cash, client, make_job):
        unassigned = await make_job(client, None)

        with pytest.raises(CashRecordError):
            await cash.record_cash_handling(unassigned.job_id, Decimal("10.00"), "kept_by_cleaner")

    async def test_unknown_job(self, cash):
        with pytest.raises(RecordNotFoundError):
            await cash.record_cash_handling(uuid4(), Decimal("10.00"), "kept_by_cleaner")


class TestCompensationWorkflow:
    """Test approve, dispute and settle transitions."""

    async def test_approve_notifies_cleaner(self, cash, gateway, job, admin, cleaner):
        collection = await cash.record_cash_handling(job.job_id, Decimal("85.00"), "kept_by_cleaner")

        approved = await cash.approve_cash_collection(
            collection.cash_collection_id, actor_id=admin.employee_id
        )

        assert approved.compensation_status == "approved"
        assert approved.approved_by == admin.employee_id
        assert approved.approved_at is not None

        notifications, _ = await gateway.select(
            Notification, Notification.recipient_employee_id == cleaner.employee_id
        )
        assert [n.title for n in notifications] == ["Cash Payment Approved"]
        assert "$85.00" in notifications[0].message

    async def test_dispute_requires_reason(self, cash, job):
        collection = await cash.record_cash_handling(job.job_id, Decimal("85.00"), "kept_by_cleaner")

        with pytest.raises(ReasonRequiredError):
            await cash.dispute_cash_collection(collection.cash_collection_id, "   ")

        assert collection.compensation_status == "pending"

    async def test_blank_reason_checked_before_lookup(self, cash):
        with pytest.raises(ReasonRequiredError):
            await cash.dispute_cash_collection(uuid4(), None)

    async def test_dispute_records_reason(self, cash, job, admin):
        collection = await cash.record_cash_handling(job.job_id, Decimal("85.00"), "kept_by_cleaner")

        disputed = await cash.dispute_cash_collection(
            collection.cash_collection_id, "  Client paid $80  ", actor_id=admin.employee_id
        )

        assert disputed.compensation_status == "disputed"
        assert disputed.dispute_reason == "Client paid $80"
        assert disputed.disputed_by == admin.employee_id

        events = await cash.audit.list_for_entity(
            "cash_collection", collection.cash_collection_id
        )
        assert events[-1].action == "status_change:pending:disputed"
        assert events[-1].details_json == {"reason": "Client paid $80"}

    async def test_disputed_is_terminal(self, cash, job):
        collection = await cash.record_cash_handling(job.job_id, Decimal("85.00"), "kept_by_cleaner")
        await cash.dispute_cash_collection(collection.cash_collection_id, "Missing receipt")

        with pytest.raises(InvalidTransitionError):
            await cash.approve_cash_collection(collection.cash_collection_id)

    async def test_delivered_cash_cannot_be_approved(self, cash, job):
        collection = await cash.record_cash_handling(
            job.job_id, Decimal("85.00"), "delivered_to_office"
        )

        with pytest.raises(InvalidTransitionError):
            await cash.approve_cash_collection(collection.cash_collection_id)

    async def test_settle_links_payroll_period(self, cash, job, admin, payroll_period):
        collection = await cash.record_cash_handling(job.job_id, Decimal("85.00"), "kept_by_cleaner")
        await cash.approve_cash_collection(collection.cash_collection_id, admin.employee_id)

        assert [c.cash_collection_id for c in await cash.list_unsettled_approved()] == [
            collection.cash_collection_id
        ]

        settled = await cash.settle_cash_collection(
            collection.cash_collection_id, payroll_period.payroll_period_id, admin.employee_id
        )

        assert settled.compensation_status == "settled"
        assert settled.payroll_period_id == payroll_period.payroll_period_id
        assert await cash.list_unsettled_approved() == []

    async def test_pending_cannot_be_settled(self, cash, job, payroll_period):
        collection = await cash.record_cash_handling(job.job_id, Decimal("85.00"), "kept_by_cleaner")

        with pytest.raises(InvalidTransitionError):
            await cash.settle_cash_collection(
                collection.cash_collection_id, payroll_period.payroll_period_id
            )

    async def test_settle_with_unknown_period(self, cash, job, admin):
        collection = await cash.record_cash_handling(job.job_id, Decimal("85.00"), "kept_by_cleaner")
        await cash.approve_cash_collection(collection.cash_collection_id, admin.employee_id)

        with pytest.raises(RecordNotFoundError):
            await cash.settle_cash_collection(collection.cash_collection_id, uuid4())


class TestCashSummary:
    async def test_summary_buckets(
        self, cash, client, cleaner, second_cleaner, admin, make_job
    ):
        jobs = [await make_job(client, cleaner, status="completed") for _ in range(3)]
        other = await make_job(client, second_cleaner, status="completed")

        pending = await cash.record_cash_handling(jobs[0].job_id, Decimal("40.00"), "kept_by_cleaner")
        approved = await cash.record_cash_handling(
            jobs[1].job_id, Decimal("60.00"), "kept_by_cleaner"
        )
        await cash.approve_cash_collection(approved.cash_collection_id, admin.employee_id)
        await cash.record_cash_handling(jobs[2].job_id, Decimal("25.00"), "delivered_to_office")
        disputed = await cash.record_cash_handling(
            other.job_id, Decimal("30.00"), "kept_by_cleaner"
        )
        await cash.dispute_cash_collection(disputed.cash_collection_id, "Not received")

        summary = await cash.summarize(date(2026, 10, 1), date(2026, 10, 31))

        assert summary.pending_total == Decimal("40.00")
        assert summary.pending_count == 1
        assert summary.approved_total == Decimal("60.00")
        assert summary.approved_count == 1
        assert summary.disputed_total == Decimal("30.00")
        assert summary.disputed_count == 1
        assert summary.delivered_total == Decimal("25.00")
        assert summary.delivered_count == 1
        assert summary.by_cleaner == {
            cleaner.employee_id: Decimal("100.00"),
            second_cleaner.employee_id: Decimal("30.00"),
        }
        assert pending.compensation_status == "pending"

    async def test_summary_window_excludes_other_dates(self, cash, job):
        await cash.record_cash_handling(job.job_id, Decimal("40.00"), "kept_by_cleaner")

        summary = await cash.summarize(date(2026, 11, 1), date(2026, 11, 30))

        assert summary.pending_count == 0
        assert summary.by_cleaner == {}
