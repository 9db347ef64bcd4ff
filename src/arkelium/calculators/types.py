"""Type definitions for the payroll calculation pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING
from uuid import UUID

if TYPE_CHECKING:
    from arkelium.models import PayrollPeriod, TaxConfiguration

ZERO = Decimal("0")


@dataclass(frozen=True)
class TaxRates:
    """Simplified statutory contribution constants.

    Rates are percentages. Income tax is a flat placeholder rate applied to
    gross pay.
    """

    pension_rate: Decimal = Decimal("5.95")
    pension_max: Decimal = Decimal("3867.50")
    insurance_rate: Decimal = Decimal("1.58")
    insurance_max: Decimal = Decimal("1049.12")
    income_tax_rate: Decimal = Decimal("15")

    @classmethod
    def from_configuration(cls, config: TaxConfiguration | None) -> TaxRates:
        """Build rates from a stored configuration, or defaults when absent."""
        if config is None:
            return cls()
        return cls(
            pension_rate=Decimal(config.pension_employee_rate),
            pension_max=Decimal(config.pension_max_contribution),
            insurance_rate=Decimal(config.insurance_employee_rate),
            insurance_max=Decimal(config.insurance_max_contribution),
        )


@dataclass(frozen=True)
class HoursBreakdown:
    """Hours split into regular and overtime."""

    regular: Decimal
    overtime: Decimal = ZERO

    @property
    def total(self) -> Decimal:
        return self.regular + self.overtime


@dataclass
class EntryAmounts:
    """Computed pay for one worker in one period."""

    employee_id: UUID
    hours: HoursBreakdown
    hourly_rate: Decimal
    gross_pay: Decimal
    pension_deduction: Decimal
    insurance_deduction: Decimal
    tax_deduction: Decimal
    other_deductions: Decimal = ZERO

    @property
    def total_deductions(self) -> Decimal:
        return (
            self.pension_deduction
            + self.insurance_deduction
            + self.tax_deduction
            + self.other_deductions
        )

    @property
    def net_pay(self) -> Decimal:
        return self.gross_pay - self.total_deductions


@dataclass
class PayrollTotals:
    """Aggregate amounts for a period, summed from its entries."""

    total_hours: Decimal = ZERO
    total_gross: Decimal = ZERO
    total_deductions: Decimal = ZERO
    total_net: Decimal = ZERO
    entry_count: int = 0

    def add(self, entry: EntryAmounts) -> None:
        self.total_hours += entry.hours.total
        self.total_gross += entry.gross_pay
        self.total_deductions += entry.total_deductions
        self.total_net += entry.net_pay
        self.entry_count += 1


@dataclass
class PeriodReminder:
    """Whether a payroll period needs an administrator's attention."""

    period: PayrollPeriod
    period_ended: bool
    needs_action: bool
    days_overdue: int


@dataclass
class ProposedPeriod:
    """Date window suggested for the next payroll period."""

    start_date: date
    end_date: date
    period_name: str = field(default="")

    def __post_init__(self) -> None:
        if not self.period_name:
            self.period_name = f"{self.start_date.isoformat()} - {self.end_date.isoformat()}"
