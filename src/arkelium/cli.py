"""Arkelium Command Line Interface.

Provides operational tools for:
- Creating the database schema
- The scheduled payroll period check (run from cron)
- Generating a payroll period for one tenant

Usage:
    python -m arkelium.cli init-db
    python -m arkelium.cli check-periods [--date 2026-10-19]
    python -m arkelium.cli generate-payroll --tenant-id X --start 2026-10-05 --end 2026-10-18
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import Callable
from datetime import date
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from arkelium.config import configure_logging
from arkelium.database import create_schema, dispose_db, init_db
from arkelium.gateway import TenantGateway
from arkelium.services.payroll_service import PayrollGenerationError, PayrollService
from arkelium.services.period_check_service import PayrollPeriodChecker, PeriodCheckResult

logger = logging.getLogger(__name__)


def parse_date(s: str) -> date:
    """Parse ISO date string."""
    return date.fromisoformat(s)


def parse_uuid(s: str) -> UUID:
    """Parse UUID string."""
    return UUID(s)


class ArkeliumCli:
    """Arkelium Command Line Interface."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession] | None = None) -> None:
        self.parser = self._build_parser()
        self._session_factory = session_factory
        self._owns_engine = False

    def _build_parser(self) -> argparse.ArgumentParser:
        """Build argument parser."""
        parser = argparse.ArgumentParser(
            prog="python -m arkelium.cli",
            description="Arkelium operational tools",
        )
        parser.add_argument(
            "--log-level",
            type=str,
            default=None,
            help="Override LOG_LEVEL for this run",
        )
        subparsers = parser.add_subparsers(dest="command", help="Commands")

        # init-db command
        subparsers.add_parser("init-db", help="Create any missing database tables")

        # check-periods command
        check = subparsers.add_parser(
            "check-periods",
            help="Flag ended payroll periods and propose missing ones",
        )
        check.add_argument(
            "--date",
            type=parse_date,
            default=None,
            help="Evaluate as of this date (default: each tenant's local today)",
        )

        # generate-payroll command
        generate = subparsers.add_parser(
            "generate-payroll",
            help="Generate a payroll period for a tenant",
        )
        generate.add_argument(
            "--tenant-id",
            type=parse_uuid,
            required=True,
            help="Tenant to generate payroll for",
        )
        generate.add_argument("--start", type=parse_date, required=True, help="Period start date")
        generate.add_argument("--end", type=parse_date, required=True, help="Period end date")
        generate.add_argument(
            "--actor-id",
            type=parse_uuid,
            default=None,
            help="Employee recorded as the generator",
        )

        return parser

    def run(self, args: list[str] | None = None) -> int:
        """Run the CLI with given arguments."""
        parsed = self.parser.parse_args(args)

        if not parsed.command:
            self.parser.print_help()
            return 1

        configure_logging(parsed.log_level)

        # Dispatch to command handler
        handlers: dict[str, Callable[[argparse.Namespace], int]] = {
            "init-db": self._cmd_init_db,
            "check-periods": self._cmd_check_periods,
            "generate-payroll": self._cmd_generate_payroll,
        }

        handler = handlers.get(parsed.command)
        if handler:
            return handler(parsed)

        print(f"Unknown command: {parsed.command}", file=sys.stderr)
        return 1

    def _cmd_init_db(self, args: argparse.Namespace) -> int:
        """Create the schema."""
        tables = asyncio.run(self._with_engine(self.init_db()))
        print(f"Schema ready: {len(tables)} tables")
        return 0

    def _cmd_check_periods(self, args: argparse.Namespace) -> int:
        """Run the payroll period check for every tenant."""
        results = asyncio.run(self._with_engine(self.check_periods(args.date)))
        print(f"Processed {len(results)} tenants")
        for result in results:
            print(format_check_result(result))
        return 0

    def _cmd_generate_payroll(self, args: argparse.Namespace) -> int:
        """Generate a payroll period."""
        print(f"Generating payroll for tenant: {args.tenant_id}")
        print(f"  Period: {args.start.isoformat()} - {args.end.isoformat()}")
        try:
            summary = asyncio.run(
                self._with_engine(
                    self.generate_payroll(args.tenant_id, args.start, args.end, args.actor_id)
                )
            )
        except (PayrollGenerationError, ValueError) as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1
        print(summary)
        return 0

    async def init_db(self) -> list[str]:
        return await create_schema(self._factory().kw["bind"])

    async def check_periods(self, today: date | None = None) -> list[PeriodCheckResult]:
        async with self._factory()() as session:
            return await PayrollPeriodChecker(session).check_all(today)

    async def generate_payroll(
        self,
        tenant_id: UUID,
        start: date,
        end: date,
        actor_id: UUID | None = None,
    ) -> str:
        async with self._factory()() as session:
            service = PayrollService(TenantGateway(session, tenant_id))
            period = await service.generate_payroll_period(start, end, actor_id=actor_id)
            return (
                f"Created period {period.period_name} ({period.payroll_period_id})\n"
                f"  Hours: {period.total_hours}  Gross: {period.total_gross}  "
                f"Deductions: {period.total_deductions}  Net: {period.total_net}"
            )

    def _factory(self) -> async_sessionmaker[AsyncSession]:
        if self._session_factory is None:
            _, self._session_factory = init_db()
            self._owns_engine = True
        return self._session_factory

    async def _with_engine(self, coro):
        """Await ``coro`` and dispose the global engine inside the same loop."""
        try:
            return await coro
        finally:
            if self._owns_engine:
                await dispose_db()
                self._session_factory = None
                self._owns_engine = False


def format_check_result(result: PeriodCheckResult) -> str:
    flags = []
    if result.needs_generation:
        flags.append("needs generation")
    if result.needs_notification:
        flags.append("notification sent")
    suffix = f" [{', '.join(flags)}]" if flags else ""
    return f"  {result.tenant_name}: {result.period_name} ({result.status}){suffix}"


def main() -> int:
    """CLI entry point."""
    cli = ArkeliumCli()
    return cli.run()


if __name__ == "__main__":
    sys.exit(main())
