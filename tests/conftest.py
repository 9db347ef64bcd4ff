"""Pytest fixtures for operations core tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from datetime import date, time
from decimal import Decimal

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from arkelium.config import Settings
from arkelium.gateway import TenantGateway
from arkelium.models import Base, Client, Employee, Job, Tenant

# In-memory SQLite shared through a single connection for each test
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

SERVICE_DATE = date(2026, 10, 14)


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        database_url=TEST_DATABASE_URL,
        host="127.0.0.1",
        port=8000,
        debug=False,
        log_level="DEBUG",
        default_timezone="America/Toronto",
        default_hourly_rate=Decimal("15.00"),
        payroll_period_days=14,
    )


@pytest.fixture
async def engine():
    """Create a fresh database for each test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
async def tenant(session: AsyncSession) -> Tenant:
    tenant = Tenant(name="Sparkle Cleaning Co", timezone="America/Toronto")
    session.add(tenant)
    await session.commit()
    return tenant


@pytest.fixture
async def other_tenant(session: AsyncSession) -> Tenant:
    tenant = Tenant(name="Rival Cleaners", timezone="America/Vancouver")
    session.add(tenant)
    await session.commit()
    return tenant


@pytest.fixture
def gateway(session: AsyncSession, tenant: Tenant) -> TenantGateway:
    return TenantGateway(session, tenant.tenant_id)


@pytest.fixture
async def admin(session: AsyncSession, tenant: Tenant) -> Employee:
    employee = Employee(
        tenant_id=tenant.tenant_id,
        first_name="Ana",
        last_name="Admin",
        email="ana@sparkle.test",
        role="admin",
    )
    session.add(employee)
    await session.commit()
    return employee


@pytest.fixture
async def cleaner(session: AsyncSession, tenant: Tenant) -> Employee:
    employee = Employee(
        tenant_id=tenant.tenant_id,
        first_name="Maria",
        last_name="Silva",
        email="maria@sparkle.test",
        role="cleaner",
        hourly_rate=Decimal("20.00"),
    )
    session.add(employee)
    await session.commit()
    return employee


@pytest.fixture
async def second_cleaner(session: AsyncSession, tenant: Tenant) -> Employee:
    employee = Employee(
        tenant_id=tenant.tenant_id,
        first_name="Joao",
        last_name="Costa",
        email="joao@sparkle.test",
        role="cleaner",
        hourly_rate=None,
    )
    session.add(employee)
    await session.commit()
    return employee


@pytest.fixture
async def client(session: AsyncSession, tenant: Tenant) -> Client:
    client = Client(
        tenant_id=tenant.tenant_id,
        name="Harbour Offices",
        email="facilities@harbour.test",
        phone="555-0100",
    )
    session.add(client)
    await session.commit()
    return client


@pytest.fixture
async def other_client(session: AsyncSession, tenant: Tenant) -> Client:
    client = Client(tenant_id=tenant.tenant_id, name="Maple Residence", phone="555-0199")
    session.add(client)
    await session.commit()
    return client


@pytest.fixture
def make_job(session: AsyncSession, tenant: Tenant):
    """Factory for jobs on the tenant."""

    async def _make_job(
        client: Client,
        cleaner: Employee | None,
        scheduled_date: date = SERVICE_DATE,
        start_time: time | None = time(9, 0),
        duration_minutes: int | None = 120,
        status: str = "scheduled",
    ) -> Job:
        job = Job(
            tenant_id=tenant.tenant_id,
            client_id=client.client_id,
            cleaner_id=cleaner.employee_id if cleaner else None,
            scheduled_date=scheduled_date,
            start_time=start_time,
            duration_minutes=duration_minutes,
            status=status,
        )
        session.add(job)
        await session.commit()
        return job

    return _make_job
