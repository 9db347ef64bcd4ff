"""Tests for the scheduled payroll period check."""

from datetime import date

import pytest

from arkelium.gateway import TenantGateway
from arkelium.models import Notification, PayrollPeriod, Tenant
from arkelium.services.period_check_service import PayrollPeriodChecker

TODAY = date(2026, 10, 21)


@pytest.fixture
def checker(session, test_settings) -> PayrollPeriodChecker:
    return PayrollPeriodChecker(session, settings=test_settings)


@pytest.fixture
def add_period(session):
    async def _add(tenant, start, end, status="pending"):
        period = PayrollPeriod(
            tenant_id=tenant.tenant_id,
            period_name=f"{start.isoformat()} - {end.isoformat()}",
            start_date=start,
            end_date=end,
            status=status,
        )
        session.add(period)
        await session.commit()
        return period

    return _add


class TestPeriodCheck:
    async def test_ended_period_is_flagged_once(self, checker, session, tenant, add_period):
        period = await add_period(tenant, date(2026, 10, 5), date(2026, 10, 18))

        [first] = await checker.check_all(TODAY)

        assert first.period_id == period.payroll_period_id
        assert first.status == "pending"
        assert first.needs_notification is True
        assert first.needs_generation is False
        assert period.notification_sent is True
        assert period.notification_sent_at is not None

        [second] = await checker.check_all(TODAY)
        assert second.needs_notification is False

        reminders, _ = await TenantGateway(session, tenant.tenant_id).select(
            Notification, Notification.title == "Payroll Period Ended"
        )
        assert len(reminders) == 1
        assert reminders[0].severity == "warning"
        assert reminders[0].metadata_json["days_overdue"] == 3

    async def test_running_period_is_not_flagged(self, checker, tenant, add_period):
        period = await add_period(tenant, date(2026, 10, 19), date(2026, 11, 1))

        [result] = await checker.check_all(TODAY)

        assert result.needs_notification is False
        assert period.notification_sent is False

    async def test_proposes_period_after_last_paid(self, checker, tenant, add_period):
        await add_period(tenant, date(2026, 9, 21), date(2026, 10, 4), status="paid")

        [result] = await checker.check_all(TODAY)

        assert result.period_id is None
        assert result.status == "not_created"
        assert result.needs_generation is True
        assert result.start_date == date(2026, 10, 5)
        assert result.end_date == date(2026, 10, 18)
        assert result.period_name == "2026-10-05 - 2026-10-18"

    async def test_proposes_current_fortnight_without_history(self, checker, tenant):
        [result] = await checker.check_all(TODAY)

        assert result.start_date == date(2026, 10, 19)
        assert result.end_date == date(2026, 11, 1)

    async def test_each_tenant_checked_independently(
        self, checker, tenant, other_tenant, add_period
    ):
        await add_period(tenant, date(2026, 10, 5), date(2026, 10, 18))

        results = await checker.check_all(TODAY)

        by_tenant = {r.tenant_id: r for r in results}
        assert by_tenant[tenant.tenant_id].needs_notification is True
        assert by_tenant[other_tenant.tenant_id].needs_generation is True

    async def test_inactive_tenants_are_skipped(self, checker, session):
        session.add(Tenant(name="Closed Shop", status="closed"))
        await session.commit()

        assert await checker.check_all(TODAY) == []

    async def test_failure_for_one_tenant_does_not_stop_others(
        self, checker, tenant, other_tenant, monkeypatch
    ):
        tenant_id = tenant.tenant_id
        other_id = other_tenant.tenant_id
        original = PayrollPeriodChecker.check_tenant

        async def flaky(self, checked_id, name, today):
            if checked_id == tenant_id:
                raise RuntimeError("lookup failed")
            return await original(self, checked_id, name, today)

        monkeypatch.setattr(PayrollPeriodChecker, "check_tenant", flaky)

        results = await checker.check_all(TODAY)

        assert [r.tenant_id for r in results] == [other_id]
