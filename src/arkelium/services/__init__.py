"""Business services."""

from arkelium.services.audit_service import AuditService
from arkelium.services.cash_service import CashRecordError, CashService, CashSummary
from arkelium.services.financial_period_service import FinancialPeriodService
from arkelium.services.notification_service import NotificationService
from arkelium.services.payroll_service import (
    ApproverRequiredError,
    InvalidPeriodError,
    PayrollGenerationError,
    PayrollService,
)
from arkelium.services.period_check_service import PayrollPeriodChecker, PeriodCheckResult
from arkelium.services.record_validator import RecordValidator
from arkelium.services.schedule_validator import (
    ScheduleValidator,
    ValidationResult,
    ranges_overlap,
    time_to_minutes,
)
from arkelium.services.state_machine import (
    CashCollectionStateMachine,
    CashHandling,
    CompensationStatus,
    FinancialPeriodStateMachine,
    FinancialPeriodStatus,
    InvalidTransitionError,
    PayrollPeriodStateMachine,
    PayrollPeriodStatus,
    ReasonRequiredError,
)

__all__ = [
    "ApproverRequiredError",
    "AuditService",
    "CashCollectionStateMachine",
    "CashHandling",
    "CashRecordError",
    "CashService",
    "CashSummary",
    "CompensationStatus",
    "FinancialPeriodService",
    "FinancialPeriodStateMachine",
    "FinancialPeriodStatus",
    "InvalidPeriodError",
    "InvalidTransitionError",
    "NotificationService",
    "PayrollGenerationError",
    "PayrollPeriodChecker",
    "PayrollPeriodStateMachine",
    "PayrollPeriodStatus",
    "PayrollService",
    "PeriodCheckResult",
    "ReasonRequiredError",
    "RecordValidator",
    "ScheduleValidator",
    "ValidationResult",
    "ranges_overlap",
    "time_to_minutes",
]
