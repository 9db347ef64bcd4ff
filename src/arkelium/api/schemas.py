"""Pydantic schemas for API request/response models."""

from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from arkelium.services.state_machine import CashHandling


class ErrorResponse(BaseModel):
    """Error body returned by exception handlers."""

    detail: str
    code: str


class HealthResponse(BaseModel):
    status: str
    version: str
    timestamp: datetime
    database: str


# ============================================================================
# Schedule schemas
# ============================================================================


class ScheduleValidationRequest(BaseModel):
    """Proposed job to check for conflicts."""

    client_id: UUID
    employee_id: UUID | None = None
    scheduled_date: date
    start_time: time
    duration_minutes: int = Field(ge=0)
    exclude_job_id: UUID | None = None


class UnavailableWorkersRequest(BaseModel):
    scheduled_date: date
    start_time: time
    duration_minutes: int = Field(ge=0)
    exclude_job_id: UUID | None = None


class ValidationResponse(BaseModel):
    is_valid: bool
    message: str | None = None


class UnavailableWorkersResponse(BaseModel):
    employee_ids: list[UUID]


# ============================================================================
# Payroll schemas
# ============================================================================


class PayrollGenerateRequest(BaseModel):
    """Date range to generate a payroll period for."""

    start_date: date
    end_date: date


class MarkPaidRequest(BaseModel):
    pay_date: date | None = None


class PayrollPeriodResponse(BaseModel):
    """Schema for payroll period response."""

    model_config = ConfigDict(from_attributes=True)

    payroll_period_id: UUID
    tenant_id: UUID
    period_name: str
    start_date: date
    end_date: date
    status: str
    pay_date: date | None = None
    total_hours: Decimal
    total_gross: Decimal
    total_deductions: Decimal
    total_net: Decimal
    approved_by: UUID | None = None
    approved_at: datetime | None = None
    notification_sent: bool
    created_at: datetime


class PayrollEntryResponse(BaseModel):
    """Schema for one worker's payroll entry."""

    model_config = ConfigDict(from_attributes=True)

    payroll_entry_id: UUID
    payroll_period_id: UUID
    employee_id: UUID
    regular_hours: Decimal
    overtime_hours: Decimal
    hourly_rate: Decimal
    gross_pay: Decimal
    pension_deduction: Decimal
    insurance_deduction: Decimal
    tax_deduction: Decimal
    other_deductions: Decimal
    net_pay: Decimal


class PeriodReminderResponse(BaseModel):
    period: PayrollPeriodResponse
    period_ended: bool
    needs_action: bool
    days_overdue: int


# ============================================================================
# Cash collection schemas
# ============================================================================


class CashRecordRequest(BaseModel):
    """Cash received by the cleaner for a job."""

    job_id: UUID
    amount: Decimal
    cash_handling: CashHandling
    notes: str | None = None


class DisputeRequest(BaseModel):
    reason: str = ""


class SettleRequest(BaseModel):
    payroll_period_id: UUID


class CashCollectionResponse(BaseModel):
    """Schema for cash collection response."""

    model_config = ConfigDict(from_attributes=True)

    cash_collection_id: UUID
    job_id: UUID
    client_id: UUID
    cleaner_id: UUID
    amount: Decimal
    service_date: date
    cash_handling: str
    compensation_status: str
    notes: str | None = None
    approved_by: UUID | None = None
    approved_at: datetime | None = None
    disputed_by: UUID | None = None
    disputed_at: datetime | None = None
    dispute_reason: str | None = None
    payroll_period_id: UUID | None = None


class CashSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    pending_total: Decimal
    pending_count: int
    approved_total: Decimal
    approved_count: int
    disputed_total: Decimal
    disputed_count: int
    settled_total: Decimal
    delivered_total: Decimal
    delivered_count: int
    by_cleaner: dict[UUID, Decimal]


# ============================================================================
# Financial period schemas
# ============================================================================


class FinancialPeriodCreate(BaseModel):
    period_name: str = Field(min_length=1)
    start_date: date
    end_date: date


class ReasonRequest(BaseModel):
    reason: str = ""


class FinancialPeriodResponse(BaseModel):
    """Schema for financial period response."""

    model_config = ConfigDict(from_attributes=True)

    financial_period_id: UUID
    period_name: str
    start_date: date
    end_date: date
    status: str
    closed_by: UUID | None = None
    closed_at: datetime | None = None
    closed_reason: str | None = None
    reopened_by: UUID | None = None
    reopened_at: datetime | None = None
    reopen_reason: str | None = None


class PeriodOpenResponse(BaseModel):
    on: date
    is_open: bool
    period: FinancialPeriodResponse | None = None


# ============================================================================
# Notification schemas
# ============================================================================


class NotificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    notification_id: UUID
    title: str
    message: str
    type: str
    severity: str
    metadata: dict[str, Any] = Field(validation_alias=AliasChoices("metadata_json", "metadata"))
    is_read: bool
    created_at: datetime
