"""Payroll service - period generation and lifecycle."""

from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING
from uuid import UUID

from arkelium.calculators import (
    OvertimePolicy,
    PayrollCalculator,
    PeriodReminder,
    TaxRates,
    aggregate_minutes,
    check_period_notifications,
)
from arkelium.config import Settings, get_settings
from arkelium.database import acquire_advisory_lock
from arkelium.dates import tenant_today
from arkelium.gateway import TenantGateway
from arkelium.models import Employee, Job, PayrollEntry, PayrollPeriod, TaxConfiguration
from arkelium.models.base import utc_now
from arkelium.services.audit_service import AuditService
from arkelium.services.notification_service import NotificationService
from arkelium.services.state_machine import PayrollPeriodStateMachine, PayrollPeriodStatus

if TYPE_CHECKING:
    from decimal import Decimal

    from arkelium.calculators import EntryAmounts

logger = logging.getLogger(__name__)


class PayrollGenerationError(Exception):
    """Raised when payroll generation fails; nothing was saved."""

    DEFAULT_MESSAGE = "Payroll could not be generated. No changes were saved."

    def __init__(self, message: str | None = None):
        self.user_message = message or self.DEFAULT_MESSAGE
        super().__init__(self.user_message)


class InvalidPeriodError(ValueError):
    """Raised when a period's end date precedes its start date."""


class ApproverRequiredError(ValueError):
    """Raised when approving without an approver."""


class PayrollService:
    """Service for payroll periods of one tenant.

    Operations:
    - generate_payroll_period: aggregate completed jobs into a pending period
    - approve_period: pending → approved, records the approver
    - mark_as_paid: approved → paid, records the pay date
    - check_period_notifications: reminder for an ended pending period
    """

    def __init__(
        self,
        gateway: TenantGateway,
        settings: Settings | None = None,
        overtime_policy: OvertimePolicy | None = None,
    ):
        self.gateway = gateway
        self.settings = settings or get_settings()
        self.overtime_policy = overtime_policy or OvertimePolicy()
        self.notifications = NotificationService(gateway)
        self.audit = AuditService(gateway)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def list_periods(self) -> list[PayrollPeriod]:
        """All periods, newest end date first."""
        periods, _ = await self.gateway.select(
            PayrollPeriod,
            order_by=[PayrollPeriod.end_date.desc()],
        )
        return periods

    async def get_period(self, period_id: UUID) -> PayrollPeriod:
        return await self.gateway.get_or_raise(PayrollPeriod, period_id)

    async def get_current_period(self) -> PayrollPeriod | None:
        """The most recent pending period, if any."""
        return await self.gateway.first(
            PayrollPeriod,
            PayrollPeriod.status == PayrollPeriodStatus.PENDING.value,
            order_by=[PayrollPeriod.end_date.desc()],
        )

    async def get_entries(self, period_id: UUID) -> list[PayrollEntry]:
        await self.get_period(period_id)
        entries, _ = await self.gateway.select(
            PayrollEntry,
            PayrollEntry.payroll_period_id == period_id,
            order_by=[PayrollEntry.created_at],
        )
        return entries

    async def get_tax_configuration(self, year: int) -> TaxConfiguration | None:
        return await self.gateway.first(TaxConfiguration, TaxConfiguration.year == year)

    async def check_period_notifications(self, today: date | None = None) -> PeriodReminder | None:
        """Reminder state for the current pending period, or None without one."""
        period = await self.get_current_period()
        if period is None:
            return None
        return check_period_notifications(period, today or await tenant_today(self.gateway))

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    async def generate_payroll_period(
        self,
        start_date: date,
        end_date: date,
        actor_id: UUID | None = None,
        today: date | None = None,
    ) -> PayrollPeriod:
        """Generate a pending period with one entry per worker.

        Runs as its own transaction: on success it is committed, on any
        failure it is rolled back and PayrollGenerationError is raised.
        """
        if end_date < start_date:
            raise InvalidPeriodError("End date must be on or after the start date")

        session = self.gateway.session
        lock_key = f"payroll:{self.gateway.tenant_id}"
        try:
            if not await acquire_advisory_lock(session, lock_key):
                raise PayrollGenerationError(
                    "Payroll generation is already running for this company. Try again shortly."
                )
            period = await self._generate(start_date, end_date, actor_id, today)
            await session.commit()
        except PayrollGenerationError:
            await session.rollback()
            raise
        except Exception as exc:
            await session.rollback()
            logger.exception(
                "Payroll generation failed for tenant %s (%s - %s)",
                self.gateway.tenant_id,
                start_date,
                end_date,
            )
            raise PayrollGenerationError() from exc

        logger.info(
            "Generated payroll period %s for tenant %s: net %s",
            period.period_name,
            self.gateway.tenant_id,
            period.total_net,
        )
        return period

    async def _generate(
        self,
        start_date: date,
        end_date: date,
        actor_id: UUID | None,
        today: date | None,
    ) -> PayrollPeriod:
        period = await self.gateway.insert(
            PayrollPeriod(
                period_name=f"{start_date.isoformat()} - {end_date.isoformat()}",
                start_date=start_date,
                end_date=end_date,
                status=PayrollPeriodStatus.PENDING.value,
            )
        )

        job_rows = await self.gateway.project(
            Job.cleaner_id,
            Job.duration_minutes,
            where=[
                Job.status == "completed",
                Job.scheduled_date >= start_date,
                Job.scheduled_date <= end_date,
            ],
        )
        minutes_by_worker = aggregate_minutes(job_rows)

        today = today or await tenant_today(self.gateway)
        config = await self.get_tax_configuration(today.year)
        calculator = PayrollCalculator(
            rates=TaxRates.from_configuration(config),
            default_hourly_rate=self.settings.default_hourly_rate,
            overtime_policy=self.overtime_policy,
        )
        amounts, totals = calculator.calculate(
            minutes_by_worker,
            await self._hourly_rates(list(minutes_by_worker)),
        )

        await self.gateway.insert_many(
            self._build_entry(period.payroll_period_id, amount) for amount in amounts
        )
        await self.gateway.update(
            period,
            total_hours=totals.total_hours,
            total_gross=totals.total_gross,
            total_deductions=totals.total_deductions,
            total_net=totals.total_net,
        )

        await self.notifications.notify_payroll_generated(period)
        await self.audit.record(
            "payroll_period",
            period.payroll_period_id,
            action="generated",
            actor_employee_id=actor_id,
            details={
                "entries": totals.entry_count,
                "total_gross": str(totals.total_gross),
                "total_net": str(totals.total_net),
            },
        )
        return period

    async def _hourly_rates(self, employee_ids: list[UUID]) -> dict[UUID, Decimal | None]:
        if not employee_ids:
            return {}
        rows = await self.gateway.project(
            Employee.employee_id,
            Employee.hourly_rate,
            where=[Employee.employee_id.in_(employee_ids)],
        )
        return dict(rows)

    @staticmethod
    def _build_entry(period_id: UUID, amount: EntryAmounts) -> PayrollEntry:
        return PayrollEntry(
            payroll_period_id=period_id,
            employee_id=amount.employee_id,
            regular_hours=amount.hours.regular,
            overtime_hours=amount.hours.overtime,
            hourly_rate=amount.hourly_rate,
            gross_pay=amount.gross_pay,
            pension_deduction=amount.pension_deduction,
            insurance_deduction=amount.insurance_deduction,
            tax_deduction=amount.tax_deduction,
            other_deductions=amount.other_deductions,
            net_pay=amount.net_pay,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def approve_period(self, period_id: UUID, actor_id: UUID | None) -> PayrollPeriod:
        """Approve a pending period. Amounts are not recomputed."""
        if actor_id is None:
            raise ApproverRequiredError("An approver is required to approve a payroll period")

        period = await self.get_period(period_id)
        from_status = period.status
        PayrollPeriodStateMachine.validate_transition(
            from_status, PayrollPeriodStatus.APPROVED.value
        )

        await self.gateway.update(
            period,
            status=PayrollPeriodStatus.APPROVED.value,
            approved_by=actor_id,
            approved_at=utc_now(),
        )
        await self.audit.record_transition(
            "payroll_period",
            period.payroll_period_id,
            from_status,
            period.status,
            actor_employee_id=actor_id,
        )
        return period

    async def mark_as_paid(
        self,
        period_id: UUID,
        pay_date: date | None = None,
        actor_id: UUID | None = None,
    ) -> PayrollPeriod:
        """Mark an approved period paid; the pay date defaults to tenant-local today."""
        period = await self.get_period(period_id)
        from_status = period.status
        PayrollPeriodStateMachine.validate_transition(from_status, PayrollPeriodStatus.PAID.value)

        pay_date = pay_date or await tenant_today(self.gateway)
        await self.gateway.update(period, status=PayrollPeriodStatus.PAID.value, pay_date=pay_date)

        for entry in await self.get_entries(period_id):
            await self.notifications.notify(
                recipient_employee_id=entry.employee_id,
                title="Paystub Available",
                message=(
                    f'Your paystub for "{period.period_name}" - '
                    f"${entry.net_pay:.2f} is now available"
                ),
                type="payroll",
                metadata={
                    "payroll_period_id": str(period.payroll_period_id),
                    "net_pay": str(entry.net_pay),
                },
            )

        await self.audit.record_transition(
            "payroll_period",
            period.payroll_period_id,
            from_status,
            period.status,
            actor_employee_id=actor_id,
            details={"pay_date": pay_date.isoformat()},
        )
        return period

    async def last_paid_period(self) -> PayrollPeriod | None:
        return await self.gateway.first(
            PayrollPeriod,
            PayrollPeriod.status == PayrollPeriodStatus.PAID.value,
            order_by=[PayrollPeriod.end_date.desc()],
        )
