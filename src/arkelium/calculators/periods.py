"""Pure date rules for payroll period reminders and proposals."""

from __future__ import annotations

from datetime import date, timedelta

from arkelium.calculators.types import PeriodReminder, ProposedPeriod
from arkelium.models import PayrollPeriod

PERIOD_LENGTH_DAYS = 14


def check_period_notifications(period: PayrollPeriod, today: date) -> PeriodReminder:
    """Report whether ``period`` has ended and still awaits approval."""
    period_ended = today > period.end_date
    return PeriodReminder(
        period=period,
        period_ended=period_ended,
        needs_action=period_ended and period.status == "pending",
        days_overdue=(today - period.end_date).days if period_ended else 0,
    )


def week_start(reference: date) -> date:
    """Monday of ``reference``'s week; a Sunday rolls forward to the next Monday."""
    return reference + timedelta(days=1 - reference.isoweekday() % 7)


def propose_next_period(
    last_paid_end: date | None,
    today: date,
    length_days: int = PERIOD_LENGTH_DAYS,
) -> ProposedPeriod:
    """Suggest the next period window.

    The window starts on the Monday of the day after the last paid period,
    or of today when nothing has been paid yet.
    """
    reference = last_paid_end + timedelta(days=1) if last_paid_end else today
    start = week_start(reference)
    return ProposedPeriod(start_date=start, end_date=start + timedelta(days=length_days - 1))
