"""Financial period close and reopen workflow."""

from __future__ import annotations

import logging
from datetime import date
from uuid import UUID

from arkelium.gateway import TenantGateway
from arkelium.models import FinancialPeriod
from arkelium.models.base import utc_now
from arkelium.services.audit_service import AuditService
from arkelium.services.payroll_service import InvalidPeriodError
from arkelium.services.state_machine import (
    FinancialPeriodStateMachine,
    FinancialPeriodStatus,
    require_reason,
)

logger = logging.getLogger(__name__)


class FinancialPeriodService:
    def __init__(self, gateway: TenantGateway):
        self.gateway = gateway
        self.audit = AuditService(gateway)

    async def list_periods(self) -> list[FinancialPeriod]:
        periods, _ = await self.gateway.select(
            FinancialPeriod,
            order_by=[FinancialPeriod.start_date.desc()],
        )
        return periods

    async def create_period(self, name: str, start_date: date, end_date: date) -> FinancialPeriod:
        if end_date < start_date:
            raise InvalidPeriodError("End date must be on or after the start date")
        period = await self.gateway.insert(
            FinancialPeriod(
                period_name=name,
                start_date=start_date,
                end_date=end_date,
                status=FinancialPeriodStatus.OPEN.value,
            )
        )
        logger.info("Created financial period %s", name)
        return period

    async def close_period(
        self, period_id: UUID, reason: str | None, actor_id: UUID | None = None
    ) -> FinancialPeriod:
        """Close an open or reopened period. A reason is mandatory."""
        reason = require_reason(reason, "close a period")
        period = await self._transition(period_id, FinancialPeriodStatus.CLOSED.value, actor_id)
        await self.gateway.update(
            period, closed_by=actor_id, closed_at=utc_now(), closed_reason=reason
        )
        return period

    async def reopen_period(
        self, period_id: UUID, reason: str | None, actor_id: UUID | None = None
    ) -> FinancialPeriod:
        """Reopen a closed period. A reason is mandatory."""
        reason = require_reason(reason, "reopen a period")
        period = await self._transition(period_id, FinancialPeriodStatus.REOPENED.value, actor_id)
        await self.gateway.update(
            period, reopened_by=actor_id, reopened_at=utc_now(), reopen_reason=reason
        )
        return period

    async def get_period_for_date(self, on: date) -> FinancialPeriod | None:
        return await self.gateway.first(
            FinancialPeriod,
            FinancialPeriod.start_date <= on,
            FinancialPeriod.end_date >= on,
            order_by=[FinancialPeriod.start_date.desc()],
        )

    async def is_period_open(self, on: date) -> bool:
        """Dates outside every period count as open."""
        period = await self.get_period_for_date(on)
        if period is None:
            return True
        return period.status in FinancialPeriodStateMachine.OPEN_STATUSES

    async def _transition(
        self, period_id: UUID, to_status: str, actor_id: UUID | None
    ) -> FinancialPeriod:
        period = await self.gateway.get_or_raise(FinancialPeriod, period_id)
        from_status = period.status
        FinancialPeriodStateMachine.validate_transition(from_status, to_status)
        await self.gateway.update(period, status=to_status)
        await self.audit.record_transition(
            "financial_period",
            period.financial_period_id,
            from_status,
            to_status,
            actor_employee_id=actor_id,
        )
        return period
