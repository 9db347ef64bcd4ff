"""Cash handling and compensation approval workflow."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from uuid import UUID

from arkelium.gateway import RecordNotFoundError, TenantGateway
from arkelium.models import CashCollection, Job, PayrollPeriod
from arkelium.models.base import utc_now
from arkelium.services.audit_service import AuditService
from arkelium.services.notification_service import NotificationService
from arkelium.services.state_machine import (
    CashCollectionStateMachine,
    CashHandling,
    CompensationStatus,
    require_reason,
)

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")


class CashRecordError(ValueError):
    """Raised when cash cannot be recorded for a job."""


@dataclass
class CashSummary:
    """Cash totals over a service-date window."""

    pending_total: Decimal = ZERO
    pending_count: int = 0
    approved_total: Decimal = ZERO
    approved_count: int = 0
    disputed_total: Decimal = ZERO
    disputed_count: int = 0
    settled_total: Decimal = ZERO
    delivered_total: Decimal = ZERO
    delivered_count: int = 0
    by_cleaner: dict[UUID, Decimal] = field(default_factory=dict)


class CashService:
    """Record cash received on site and move it through approval."""

    def __init__(self, gateway: TenantGateway):
        self.gateway = gateway
        self.notifications = NotificationService(gateway)
        self.audit = AuditService(gateway)

    async def get_collection(self, collection_id: UUID) -> CashCollection:
        return await self.gateway.get_or_raise(CashCollection, collection_id)

    async def record_cash_handling(
        self,
        job_id: UUID,
        amount: Decimal,
        choice: CashHandling | str,
        notes: str | None = None,
        actor_id: UUID | None = None,
    ) -> CashCollection:
        """Record what the cleaner did with cash received for a job.

        Cash kept by the cleaner starts ``pending``; cash delivered to the
        office needs no compensation and starts ``not_applicable``.
        """
        handling = CashHandling(choice).value
        amount = Decimal(amount)
        if amount <= 0:
            raise CashRecordError("Cash amount must be greater than zero")

        job = await self.gateway.get(Job, job_id)
        if job is None:
            raise RecordNotFoundError("job", job_id)
        if job.cleaner_id is None:
            raise CashRecordError("Cash can only be recorded for a job with an assigned cleaner")

        collection = await self.gateway.insert(
            CashCollection(
                job_id=job.job_id,
                client_id=job.client_id,
                cleaner_id=job.cleaner_id,
                amount=amount,
                service_date=job.scheduled_date,
                cash_handling=handling,
                compensation_status=CashCollectionStateMachine.initial_status(handling),
                notes=notes,
                handled_by=actor_id or job.cleaner_id,
                handled_at=utc_now(),
            )
        )
        await self.audit.record(
            "cash_collection",
            collection.cash_collection_id,
            action=f"recorded:{handling}",
            actor_employee_id=actor_id,
            details={"amount": str(amount), "job_id": str(job_id)},
        )
        logger.info(
            "Recorded %s cash for job %s (%s)", amount, job_id, collection.compensation_status
        )
        return collection

    async def approve_cash_collection(
        self, collection_id: UUID, actor_id: UUID | None = None
    ) -> CashCollection:
        collection = await self.get_collection(collection_id)
        from_status = self._validate(collection, CompensationStatus.APPROVED.value)

        await self.gateway.update(
            collection,
            compensation_status=CompensationStatus.APPROVED.value,
            approved_by=actor_id,
            approved_at=utc_now(),
        )
        await self.notifications.notify_cash_approved(collection)
        await self.audit.record_transition(
            "cash_collection",
            collection.cash_collection_id,
            from_status,
            collection.compensation_status,
            actor_employee_id=actor_id,
        )
        return collection

    async def dispute_cash_collection(
        self,
        collection_id: UUID,
        reason: str | None,
        actor_id: UUID | None = None,
    ) -> CashCollection:
        """Dispute pending cash. A blank reason is refused before any lookup."""
        reason = require_reason(reason, "dispute a cash collection")

        collection = await self.get_collection(collection_id)
        from_status = self._validate(collection, CompensationStatus.DISPUTED.value)

        await self.gateway.update(
            collection,
            compensation_status=CompensationStatus.DISPUTED.value,
            disputed_by=actor_id,
            disputed_at=utc_now(),
            dispute_reason=reason,
        )
        await self.notifications.notify_cash_disputed(collection)
        await self.audit.record_transition(
            "cash_collection",
            collection.cash_collection_id,
            from_status,
            collection.compensation_status,
            actor_employee_id=actor_id,
            details={"reason": reason},
        )
        return collection

    async def settle_cash_collection(
        self,
        collection_id: UUID,
        payroll_period_id: UUID,
        actor_id: UUID | None = None,
    ) -> CashCollection:
        """Mark approved cash as deducted through a payroll period."""
        collection = await self.get_collection(collection_id)
        from_status = self._validate(collection, CompensationStatus.SETTLED.value)
        await self.gateway.get_or_raise(PayrollPeriod, payroll_period_id)

        await self.gateway.update(
            collection,
            compensation_status=CompensationStatus.SETTLED.value,
            payroll_period_id=payroll_period_id,
        )
        await self.notifications.notify_cash_settled(collection)
        await self.audit.record_transition(
            "cash_collection",
            collection.cash_collection_id,
            from_status,
            collection.compensation_status,
            actor_employee_id=actor_id,
            details={"payroll_period_id": str(payroll_period_id)},
        )
        return collection

    async def list_unsettled_approved(self, cleaner_id: UUID | None = None) -> list[CashCollection]:
        """Approved cash kept by cleaners that no payroll has absorbed yet."""
        criteria = [
            CashCollection.cash_handling == CashHandling.KEPT_BY_CLEANER.value,
            CashCollection.compensation_status == CompensationStatus.APPROVED.value,
            CashCollection.payroll_period_id.is_(None),
        ]
        if cleaner_id is not None:
            criteria.append(CashCollection.cleaner_id == cleaner_id)
        rows, _ = await self.gateway.select(
            CashCollection,
            *criteria,
            order_by=[CashCollection.service_date, CashCollection.created_at],
        )
        return rows

    async def summarize(self, start_date: date, end_date: date) -> CashSummary:
        rows, _ = await self.gateway.select(
            CashCollection,
            CashCollection.service_date >= start_date,
            CashCollection.service_date <= end_date,
        )

        summary = CashSummary()
        for row in rows:
            amount = Decimal(row.amount)
            if row.cash_handling == CashHandling.DELIVERED_TO_OFFICE.value:
                summary.delivered_total += amount
                summary.delivered_count += 1
                continue

            status = row.compensation_status
            if status == CompensationStatus.PENDING.value:
                summary.pending_total += amount
                summary.pending_count += 1
            elif status == CompensationStatus.APPROVED.value:
                summary.approved_total += amount
                summary.approved_count += 1
            elif status == CompensationStatus.DISPUTED.value:
                summary.disputed_total += amount
                summary.disputed_count += 1
            elif status == CompensationStatus.SETTLED.value:
                summary.settled_total += amount
            summary.by_cleaner[row.cleaner_id] = (
                summary.by_cleaner.get(row.cleaner_id, ZERO) + amount
            )
        return summary

    @staticmethod
    def _validate(collection: CashCollection, to_status: str) -> str:
        from_status = collection.compensation_status
        CashCollectionStateMachine.validate_transition(from_status, to_status)
        return from_status
