"""ORM models."""

from arkelium.models.activity import AuditEvent, FinancialPeriod, Notification
from arkelium.models.base import Base
from arkelium.models.cash import CashCollection
from arkelium.models.company import Client, Contract, Employee, Invoice, Tenant
from arkelium.models.payroll import PayrollEntry, PayrollPeriod, TaxConfiguration
from arkelium.models.scheduling import AbsenceRequest, Job

__all__ = [
    "AbsenceRequest",
    "AuditEvent",
    "Base",
    "CashCollection",
    "Client",
    "Contract",
    "Employee",
    "FinancialPeriod",
    "Invoice",
    "Job",
    "Notification",
    "PayrollEntry",
    "PayrollPeriod",
    "TaxConfiguration",
    "Tenant",
]
