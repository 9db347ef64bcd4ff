"""Status state machines with transition validation."""

from __future__ import annotations

from enum import Enum
from typing import ClassVar


class PayrollPeriodStatus(str, Enum):
    """Payroll period status values."""

    PENDING = "pending"
    APPROVED = "approved"
    PAID = "paid"


class CompensationStatus(str, Enum):
    """Cash collection compensation status values."""

    PENDING = "pending"
    APPROVED = "approved"
    DISPUTED = "disputed"
    SETTLED = "settled"
    NOT_APPLICABLE = "not_applicable"


class CashHandling(str, Enum):
    """What the cleaner did with cash received on site."""

    KEPT_BY_CLEANER = "kept_by_cleaner"
    DELIVERED_TO_OFFICE = "delivered_to_office"


class FinancialPeriodStatus(str, Enum):
    """Financial period status values."""

    OPEN = "open"
    CLOSED = "closed"
    REOPENED = "reopened"


class InvalidTransitionError(Exception):
    """Raised when an invalid state transition is attempted."""

    def __init__(self, from_status: str, to_status: str, reason: str | None = None):
        self.from_status = from_status
        self.to_status = to_status
        self.reason = reason
        msg = f"Invalid transition from '{from_status}' to '{to_status}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class ReasonRequiredError(ValueError):
    """Raised when a transition that needs a reason receives a blank one."""

    def __init__(self, action: str):
        self.action = action
        super().__init__(f"A reason is required to {action}")


def require_reason(reason: str | None, action: str) -> str:
    """Return the stripped reason or raise ReasonRequiredError."""
    if reason is None or not reason.strip():
        raise ReasonRequiredError(action)
    return reason.strip()


class StateMachine:
    """Base class for status machines.

    Subclasses declare ``VALID_TRANSITIONS`` as ``{from: [allowed to]}``.
    """

    VALID_TRANSITIONS: ClassVar[dict[str, list[str]]] = {}

    @classmethod
    def can_transition(cls, from_status: str, to_status: str) -> bool:
        """Check if a transition is valid."""
        allowed = cls.VALID_TRANSITIONS.get(from_status, [])
        return to_status in allowed

    @classmethod
    def validate_transition(cls, from_status: str, to_status: str) -> None:
        """Validate a transition, raising InvalidTransitionError if invalid."""
        if not cls.can_transition(from_status, to_status):
            raise InvalidTransitionError(from_status, to_status)

    @classmethod
    def get_next_statuses(cls, current_status: str) -> list[str]:
        """Get list of valid next statuses from current status."""
        return cls.VALID_TRANSITIONS.get(current_status, [])

    @classmethod
    def is_terminal(cls, status: str) -> bool:
        return not cls.get_next_statuses(status)


class PayrollPeriodStateMachine(StateMachine):
    """Payroll periods only move forward: pending → approved → paid."""

    VALID_TRANSITIONS: ClassVar[dict[str, list[str]]] = {
        PayrollPeriodStatus.PENDING.value: [PayrollPeriodStatus.APPROVED.value],
        PayrollPeriodStatus.APPROVED.value: [PayrollPeriodStatus.PAID.value],
        PayrollPeriodStatus.PAID.value: [],
    }


class CashCollectionStateMachine(StateMachine):
    """Compensation lifecycle of cash kept by a cleaner.

    Allowed transitions:
    - pending → approved
    - pending → disputed
    - approved → settled

    ``disputed``, ``settled`` and ``not_applicable`` are terminal.
    """

    VALID_TRANSITIONS: ClassVar[dict[str, list[str]]] = {
        CompensationStatus.PENDING.value: [
            CompensationStatus.APPROVED.value,
            CompensationStatus.DISPUTED.value,
        ],
        CompensationStatus.APPROVED.value: [CompensationStatus.SETTLED.value],
        CompensationStatus.DISPUTED.value: [],
        CompensationStatus.SETTLED.value: [],
        CompensationStatus.NOT_APPLICABLE.value: [],
    }

    @staticmethod
    def initial_status(cash_handling: str) -> str:
        """Starting status for a handling choice."""
        if cash_handling == CashHandling.KEPT_BY_CLEANER:
            return CompensationStatus.PENDING.value
        return CompensationStatus.NOT_APPLICABLE.value


class FinancialPeriodStateMachine(StateMachine):
    """open → closed, closed → reopened, reopened → closed."""

    VALID_TRANSITIONS: ClassVar[dict[str, list[str]]] = {
        FinancialPeriodStatus.OPEN.value: [FinancialPeriodStatus.CLOSED.value],
        FinancialPeriodStatus.CLOSED.value: [FinancialPeriodStatus.REOPENED.value],
        FinancialPeriodStatus.REOPENED.value: [FinancialPeriodStatus.CLOSED.value],
    }

    OPEN_STATUSES = {FinancialPeriodStatus.OPEN.value, FinancialPeriodStatus.REOPENED.value}
