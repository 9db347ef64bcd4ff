"""Payroll period, entry and tax configuration models."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from arkelium.models.base import Base, TimestampMixin, tenant_fk, uuid_pk

ZERO = Decimal("0")


class PayrollPeriod(Base, TimestampMixin):
    """Aggregate payroll over a date range.

    Totals always equal the sums of the period's entries once generation
    has finished.
    """

    __tablename__ = "payroll_period"

    payroll_period_id: Mapped[UUID] = uuid_pk()
    tenant_id: Mapped[UUID] = tenant_fk()
    period_name: Mapped[str] = mapped_column(String, nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False, default="pending")
    pay_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    total_hours: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=ZERO)
    total_gross: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=ZERO)
    total_deductions: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=ZERO)
    total_net: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=ZERO)

    approved_by: Mapped[UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("employee.employee_id"),
        nullable=True,
    )
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    notification_sent: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    notification_sent_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'approved', 'paid')",
            name="payroll_period_status_check",
        ),
        CheckConstraint("end_date >= start_date", name="payroll_period_dates_check"),
    )

    entries: Mapped[list[PayrollEntry]] = relationship(
        back_populates="period",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class PayrollEntry(Base, TimestampMixin):
    """One worker's pay for one period."""

    __tablename__ = "payroll_entry"

    payroll_entry_id: Mapped[UUID] = uuid_pk()
    payroll_period_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("payroll_period.payroll_period_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    tenant_id: Mapped[UUID] = tenant_fk()
    employee_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("employee.employee_id"),
        nullable=False,
    )
    regular_hours: Mapped[Decimal] = mapped_column(Numeric(8, 2), nullable=False, default=ZERO)
    overtime_hours: Mapped[Decimal] = mapped_column(Numeric(8, 2), nullable=False, default=ZERO)
    hourly_rate: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    gross_pay: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    pension_deduction: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=ZERO)
    insurance_deduction: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=ZERO
    )
    tax_deduction: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=ZERO)
    other_deductions: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=ZERO)
    net_pay: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint("payroll_period_id", "employee_id", name="payroll_entry_period_employee"),
    )

    period: Mapped[PayrollPeriod] = relationship(back_populates="entries")

    @property
    def total_hours(self) -> Decimal:
        return self.regular_hours + self.overtime_hours

    @property
    def total_deductions(self) -> Decimal:
        return (
            self.pension_deduction
            + self.insurance_deduction
            + self.tax_deduction
            + self.other_deductions
        )


class TaxConfiguration(Base, TimestampMixin):
    """Per-tenant, per-year statutory contribution constants.

    Rates are percentages (5.95 means 5.95%); maxima cap a single
    deduction amount.
    """

    __tablename__ = "tax_configuration"

    tax_configuration_id: Mapped[UUID] = uuid_pk()
    tenant_id: Mapped[UUID] = tenant_fk()
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    pension_employee_rate: Mapped[Decimal] = mapped_column(Numeric(6, 3), nullable=False)
    pension_employer_rate: Mapped[Decimal] = mapped_column(Numeric(6, 3), nullable=False)
    pension_max_contribution: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    insurance_employee_rate: Mapped[Decimal] = mapped_column(Numeric(6, 3), nullable=False)
    insurance_employer_rate: Mapped[Decimal] = mapped_column(Numeric(6, 3), nullable=False)
    insurance_max_contribution: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    __table_args__ = (
        UniqueConstraint("tenant_id", "year", name="tax_configuration_tenant_year"),
    )
