"""Hours aggregation and simplified deduction math for payroll generation.

All money is :class:`~decimal.Decimal`. Minutes are summed as integers per
worker; gross pay is computed from the exact minutes and the stored hours are
rounded once for display. Every stored amount is rounded half-up to cents.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal
from uuid import UUID

from arkelium.calculators.types import EntryAmounts, HoursBreakdown, PayrollTotals, TaxRates

CENTS = Decimal("0.01")
HUNDRED = Decimal("100")
MINUTES_PER_HOUR = Decimal("60")


def round_money(value: Decimal) -> Decimal:
    """Round half-up to two decimal places."""
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def minutes_to_hours(minutes: int) -> Decimal:
    """Convert whole minutes to hours rounded to two decimals."""
    return round_money(Decimal(minutes) / MINUTES_PER_HOUR)


def aggregate_minutes(rows: Iterable[tuple[UUID | None, int | None]]) -> dict[UUID, int]:
    """Sum job minutes per worker.

    Rows without a worker are skipped; a missing duration counts as zero.
    Workers keep the order in which they first appear.
    """
    totals: dict[UUID, int] = {}
    for cleaner_id, duration_minutes in rows:
        if cleaner_id is None:
            continue
        totals[cleaner_id] = totals.get(cleaner_id, 0) + (duration_minutes or 0)
    return totals


class OvertimePolicy:
    """Split worked hours into regular and overtime.

    The default policy treats every hour as regular. Subclasses can apply
    weekly or daily thresholds.
    """

    def split(self, hours: Decimal) -> HoursBreakdown:
        return HoursBreakdown(regular=hours)


class PayrollCalculator:
    """Compute per-worker pay entries for a payroll period."""

    def __init__(
        self,
        rates: TaxRates | None = None,
        default_hourly_rate: Decimal = Decimal("15.00"),
        overtime_policy: OvertimePolicy | None = None,
    ):
        self.rates = rates or TaxRates()
        self.default_hourly_rate = default_hourly_rate
        self.overtime_policy = overtime_policy or OvertimePolicy()

    def resolve_rate(self, hourly_rate: Decimal | None) -> Decimal:
        """Worker rate, or the configured fallback when unset."""
        if hourly_rate is None:
            return self.default_hourly_rate
        return Decimal(hourly_rate)

    def capped_deduction(self, gross: Decimal, rate: Decimal, cap: Decimal) -> Decimal:
        """``min(gross * rate / 100, cap)`` rounded to cents."""
        return min(round_money(gross * rate / HUNDRED), Decimal(cap))

    def calculate_entry(
        self,
        employee_id: UUID,
        minutes: int,
        hourly_rate: Decimal | None = None,
    ) -> EntryAmounts:
        """Calculate one worker's entry from their total minutes."""
        hours = self.overtime_policy.split(minutes_to_hours(minutes))
        rate = self.resolve_rate(hourly_rate)
        # Overtime stays paid at the base rate until a policy defines a premium.
        # Pay comes from exact minutes; only the stored hours are rounded.
        gross = round_money(Decimal(minutes) * rate / MINUTES_PER_HOUR)

        return EntryAmounts(
            employee_id=employee_id,
            hours=hours,
            hourly_rate=rate,
            gross_pay=gross,
            pension_deduction=self.capped_deduction(
                gross, self.rates.pension_rate, self.rates.pension_max
            ),
            insurance_deduction=self.capped_deduction(
                gross, self.rates.insurance_rate, self.rates.insurance_max
            ),
            tax_deduction=round_money(gross * self.rates.income_tax_rate / HUNDRED),
        )

    def calculate(
        self,
        minutes_by_worker: dict[UUID, int],
        rates_by_worker: dict[UUID, Decimal | None],
    ) -> tuple[list[EntryAmounts], PayrollTotals]:
        """Calculate entries for every worker and the period totals."""
        entries: list[EntryAmounts] = []
        totals = PayrollTotals()
        for employee_id, minutes in minutes_by_worker.items():
            entry = self.calculate_entry(employee_id, minutes, rates_by_worker.get(employee_id))
            entries.append(entry)
            totals.add(entry)
        return entries, totals
