"""Cash collected on site and its compensation lifecycle."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import CheckConstraint, Date, DateTime, ForeignKey, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from arkelium.models.base import Base, TimestampMixin, tenant_fk, utc_now, uuid_pk


class CashCollection(Base, TimestampMixin):
    """Cash received by a cleaner during a job."""

    __tablename__ = "cash_collection"

    cash_collection_id: Mapped[UUID] = uuid_pk()
    tenant_id: Mapped[UUID] = tenant_fk()
    job_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("job.job_id"),
        nullable=False,
    )
    client_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("client.client_id"),
        nullable=False,
    )
    cleaner_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("employee.employee_id"),
        nullable=False,
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    service_date: Mapped[date] = mapped_column(Date, nullable=False)
    cash_handling: Mapped[str] = mapped_column(String, nullable=False)
    compensation_status: Mapped[str] = mapped_column(String, nullable=False, default="pending")
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    handled_by: Mapped[UUID | None] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("employee.employee_id"), nullable=True
    )
    handled_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )
    approved_by: Mapped[UUID | None] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("employee.employee_id"), nullable=True
    )
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    disputed_by: Mapped[UUID | None] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("employee.employee_id"), nullable=True
    )
    disputed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    dispute_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    payroll_period_id: Mapped[UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("payroll_period.payroll_period_id", ondelete="SET NULL"),
        nullable=True,
    )

    __table_args__ = (
        CheckConstraint(
            "cash_handling IN ('kept_by_cleaner', 'delivered_to_office')",
            name="cash_collection_handling_check",
        ),
        CheckConstraint(
            "compensation_status IN "
            "('pending', 'approved', 'disputed', 'settled', 'not_applicable')",
            name="cash_collection_compensation_status_check",
        ),
        CheckConstraint("amount > 0", name="cash_collection_amount_positive"),
    )
