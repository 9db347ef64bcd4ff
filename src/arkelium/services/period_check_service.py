"""Scheduled payroll period check across all tenants."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from arkelium.calculators import check_period_notifications, propose_next_period
from arkelium.config import Settings, get_settings
from arkelium.dates import local_today
from arkelium.gateway import TenantGateway
from arkelium.models import Tenant
from arkelium.models.base import utc_now
from arkelium.services.payroll_service import PayrollService

logger = logging.getLogger(__name__)


@dataclass
class PeriodCheckResult:
    """What the check found for one tenant."""

    tenant_id: UUID
    tenant_name: str
    period_id: UUID | None
    period_name: str
    start_date: date
    end_date: date
    status: str
    needs_generation: bool
    needs_notification: bool


class PayrollPeriodChecker:
    """Flag ended periods for notification and propose missing ones.

    Each tenant is committed on its own; a failure for one tenant is logged
    and the remaining tenants are still checked.
    """

    def __init__(self, session: AsyncSession, settings: Settings | None = None):
        self.session = session
        self.settings = settings or get_settings()

    async def check_all(self, today: date | None = None) -> list[PeriodCheckResult]:
        result = await self.session.execute(
            select(Tenant.tenant_id, Tenant.name, Tenant.timezone)
            .where(Tenant.status == "active")
            .order_by(Tenant.name)
        )
        tenants = [tuple(row) for row in result.all()]
        logger.info("Checking payroll periods for %d tenants", len(tenants))

        results: list[PeriodCheckResult] = []
        for tenant_id, name, timezone_name in tenants:
            try:
                check = await self.check_tenant(
                    tenant_id, name, today or local_today(timezone_name)
                )
                await self.session.commit()
            except Exception:
                await self.session.rollback()
                logger.exception("Payroll period check failed for tenant %s", tenant_id)
                continue
            results.append(check)

        logger.info("Processed %d tenants", len(results))
        return results

    async def check_tenant(self, tenant_id: UUID, tenant_name: str, today: date) -> PeriodCheckResult:
        service = PayrollService(TenantGateway(self.session, tenant_id), settings=self.settings)

        period = await service.get_current_period()
        if period is not None:
            reminder = check_period_notifications(period, today)
            needs_notification = reminder.period_ended and not period.notification_sent
            if needs_notification:
                await service.gateway.update(
                    period, notification_sent=True, notification_sent_at=utc_now()
                )
                await service.notifications.notify_period_reminder(period, today)
                logger.info("Notification marked for period %s", period.payroll_period_id)

            return PeriodCheckResult(
                tenant_id=tenant_id,
                tenant_name=tenant_name,
                period_id=period.payroll_period_id,
                period_name=period.period_name,
                start_date=period.start_date,
                end_date=period.end_date,
                status=period.status,
                needs_generation=False,
                needs_notification=needs_notification,
            )

        last_paid = await service.last_paid_period()
        proposal = propose_next_period(
            last_paid.end_date if last_paid else None,
            today,
            length_days=self.settings.payroll_period_days,
        )
        return PeriodCheckResult(
            tenant_id=tenant_id,
            tenant_name=tenant_name,
            period_id=None,
            period_name=proposal.period_name,
            start_date=proposal.start_date,
            end_date=proposal.end_date,
            status="not_created",
            needs_generation=True,
            needs_notification=False,
        )
