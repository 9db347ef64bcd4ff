"""Tests for tenant scoping and named procedures."""

from datetime import date
from uuid import uuid4

import pytest

from arkelium.dates import local_today, tenant_today
from arkelium.gateway import (
    PROCEDURES,
    RecordNotFoundError,
    TenantGateway,
    UnknownProcedureError,
    call_procedure,
    register_procedure,
)
from arkelium.models import Client, Employee


class TestTenantScoping:
    async def test_select_only_sees_own_tenant(self, session, gateway, other_tenant, client):
        session.add(Client(tenant_id=other_tenant.tenant_id, name="Rival Client"))
        await session.commit()

        rows, total = await gateway.select(Client, with_total=True)

        assert [c.name for c in rows] == ["Harbour Offices"]
        assert total == 1

    async def test_get_hides_foreign_rows(self, session, other_tenant, client):
        foreign = TenantGateway(session, other_tenant.tenant_id)

        assert await foreign.get(Client, client.client_id) is None
        with pytest.raises(RecordNotFoundError) as exc_info:
            await foreign.get_or_raise(Client, client.client_id)
        assert exc_info.value.entity == "client"

    async def test_insert_stamps_tenant(self, gateway, tenant, other_tenant):
        employee = await gateway.insert(
            Employee(tenant_id=other_tenant.tenant_id, first_name="Lia", last_name="Park")
        )
        assert employee.tenant_id == tenant.tenant_id

    async def test_update_refuses_foreign_rows(self, session, other_tenant, client):
        foreign = TenantGateway(session, other_tenant.tenant_id)

        with pytest.raises(RecordNotFoundError):
            await foreign.update(client, name="Hijacked")
        assert client.name == "Harbour Offices"

    async def test_pagination_with_total(self, gateway, client, other_client):
        rows, total = await gateway.select(
            Client, order_by=[Client.name], limit=1, with_total=True
        )

        assert [c.name for c in rows] == ["Harbour Offices"]
        assert total == 2

    async def test_project_and_exists(self, gateway, cleaner, second_cleaner):
        rows = await gateway.project(
            Employee.first_name, where=[Employee.hourly_rate.is_not(None)]
        )

        assert rows == [("Maria",)]
        assert await gateway.exists(Employee, Employee.first_name == "Joao") is True
        assert await gateway.exists(Employee, Employee.first_name == "Nobody") is False


class TestProcedures:
    async def test_resolve_tenant_id(self, session, tenant, cleaner):
        assert (
            await call_procedure(session, "resolve_tenant_id", user_id=cleaner.employee_id)
            == tenant.tenant_id
        )
        assert await call_procedure(session, "resolve_tenant_id", user_id=uuid4()) is None

    async def test_tenant_timezone_is_scoped(self, gateway):
        assert await gateway.call("tenant_timezone") == "America/Toronto"

    async def test_unknown_procedure(self, gateway):
        with pytest.raises(UnknownProcedureError):
            await gateway.call("does_not_exist")

    async def test_register_procedure(self, gateway, tenant, monkeypatch):
        monkeypatch.setitem(PROCEDURES, "echo_tenant", None)

        @register_procedure("echo_tenant")
        async def echo_tenant(session, *, tenant_id, suffix):
            return f"{tenant_id}:{suffix}"

        assert await gateway.call("echo_tenant", suffix="x") == f"{tenant.tenant_id}:x"


class TestDates:
    def test_unknown_timezone_falls_back(self):
        assert isinstance(local_today("Not/AZone"), date)

    async def test_tenant_today(self, gateway):
        assert await tenant_today(gateway) == local_today("America/Toronto")
