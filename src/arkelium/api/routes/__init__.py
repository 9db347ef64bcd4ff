"""API routes."""

from arkelium.api.routes.cash import router as cash_router
from arkelium.api.routes.financial_periods import router as financial_periods_router
from arkelium.api.routes.health import router as health_router
from arkelium.api.routes.notifications import router as notifications_router
from arkelium.api.routes.payroll import router as payroll_router
from arkelium.api.routes.schedule import router as schedule_router

__all__ = [
    "cash_router",
    "financial_periods_router",
    "health_router",
    "notifications_router",
    "payroll_router",
    "schedule_router",
]
