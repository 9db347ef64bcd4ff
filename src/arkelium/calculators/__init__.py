"""Payroll calculation pipeline."""

from arkelium.calculators.payroll_calculator import (
    OvertimePolicy,
    PayrollCalculator,
    aggregate_minutes,
    minutes_to_hours,
    round_money,
)
from arkelium.calculators.periods import (
    check_period_notifications,
    propose_next_period,
    week_start,
)
from arkelium.calculators.types import (
    EntryAmounts,
    HoursBreakdown,
    PayrollTotals,
    PeriodReminder,
    ProposedPeriod,
    TaxRates,
)

__all__ = [
    "EntryAmounts",
    "HoursBreakdown",
    "OvertimePolicy",
    "PayrollCalculator",
    "PayrollTotals",
    "PeriodReminder",
    "ProposedPeriod",
    "TaxRates",
    "aggregate_minutes",
    "check_period_notifications",
    "minutes_to_hours",
    "propose_next_period",
    "round_money",
    "week_start",
]
