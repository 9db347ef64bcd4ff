"""Tenant notification feed."""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import or_

from arkelium.gateway import RecordNotFoundError, TenantGateway
from arkelium.models import CashCollection, Notification, PayrollPeriod
from arkelium.models.base import utc_now

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"


class NotificationService:
    """Write and read notification rows for one tenant."""

    def __init__(self, gateway: TenantGateway):
        self.gateway = gateway

    async def notify(
        self,
        *,
        title: str,
        message: str,
        type: str,
        severity: str = "info",
        recipient_employee_id: UUID | None = None,
        role_target: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> Notification:
        """Add a notification for an employee or for everyone with a role."""
        notification = Notification(
            recipient_employee_id=recipient_employee_id,
            role_target=role_target,
            title=title,
            message=message,
            type=type,
            severity=severity,
            metadata_json=metadata or {},
        )
        await self.gateway.insert(notification)
        logger.debug("Notification %r queued for %s", title, recipient_employee_id or role_target)
        return notification

    async def notify_payroll_generated(self, period: PayrollPeriod) -> Notification:
        return await self.notify(
            role_target=ADMIN_ROLE,
            title="Payroll Period Generated",
            message=(
                f'Payroll period "{period.period_name}" has been generated '
                "and is ready for review"
            ),
            type="payroll",
            metadata={
                "payroll_period_id": str(period.payroll_period_id),
                "total_net": str(period.total_net),
            },
        )

    async def notify_period_reminder(self, period: PayrollPeriod, today: date) -> Notification:
        days_overdue = max((today - period.end_date).days, 0)
        return await self.notify(
            role_target=ADMIN_ROLE,
            title="Payroll Period Ended",
            message=(
                f'Payroll period "{period.period_name}" ended on '
                f"{period.end_date.isoformat()} and is awaiting approval"
            ),
            type="payroll",
            severity="warning",
            metadata={
                "payroll_period_id": str(period.payroll_period_id),
                "days_overdue": days_overdue,
            },
        )

    async def notify_cash_approved(self, collection: CashCollection) -> Notification:
        return await self.notify(
            recipient_employee_id=collection.cleaner_id,
            title="Cash Payment Approved",
            message=(
                f"Your cash payment of ${_money(collection.amount)} has been approved "
                "and will be deducted from your next payroll"
            ),
            type="payroll",
            metadata=_cash_metadata(collection),
        )

    async def notify_cash_disputed(self, collection: CashCollection) -> Notification:
        return await self.notify(
            recipient_employee_id=collection.cleaner_id,
            title="Cash Payment Disputed",
            message=(
                f"Your cash payment of ${_money(collection.amount)} was disputed: "
                f"{collection.dispute_reason}"
            ),
            type="payroll",
            severity="warning",
            metadata=_cash_metadata(collection),
        )

    async def notify_cash_settled(self, collection: CashCollection) -> Notification:
        return await self.notify(
            recipient_employee_id=collection.cleaner_id,
            title="Cash Payment Settled",
            message=(
                f"Your cash payment of ${_money(collection.amount)} "
                "has been deducted from your payroll"
            ),
            type="payroll",
            metadata=_cash_metadata(collection),
        )

    async def list_for_employee(
        self,
        employee_id: UUID,
        role: str | None = None,
        unread_only: bool = False,
        limit: int = 50,
    ) -> list[Notification]:
        """Notifications addressed to the employee directly or to their role."""
        audience = [Notification.recipient_employee_id == employee_id]
        if role:
            audience.append(Notification.role_target == role)
        criteria = [or_(*audience)]
        if unread_only:
            criteria.append(Notification.is_read.is_(False))

        rows, _ = await self.gateway.select(
            Notification,
            *criteria,
            order_by=[Notification.created_at.desc()],
            limit=limit,
        )
        return rows

    async def mark_as_read(self, notification_id: UUID) -> Notification:
        notification = await self.gateway.get(Notification, notification_id)
        if notification is None:
            raise RecordNotFoundError("notification", notification_id)
        if not notification.is_read:
            await self.gateway.update(notification, is_read=True, read_at=utc_now())
        return notification


def _money(amount: Decimal) -> str:
    return f"{Decimal(amount):.2f}"


def _cash_metadata(collection: CashCollection) -> dict[str, Any]:
    return {
        "cash_collection_id": str(collection.cash_collection_id),
        "amount": str(collection.amount),
    }
