"""Tenant-scoped persistence gateway.

Every read and write issued through :class:`TenantGateway` is filtered by
the gateway's ``tenant_id``. Business services receive a gateway and never
resolve the tenant themselves.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable, Sequence
from typing import Any, TypeVar
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from arkelium.models import Base, Employee, Tenant

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)

Procedure = Callable[..., Awaitable[Any]]

PROCEDURES: dict[str, Procedure] = {}


class RecordNotFoundError(LookupError):
    """Raised when a record does not exist within the tenant."""

    def __init__(self, entity: str, entity_id: UUID | str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class UnknownProcedureError(KeyError):
    """Raised when calling a procedure that was never registered."""


def register_procedure(name: str) -> Callable[[Procedure], Procedure]:
    """Register an async callable as a named remote procedure."""

    def decorator(fn: Procedure) -> Procedure:
        PROCEDURES[name] = fn
        return fn

    return decorator


async def call_procedure(session: AsyncSession, name: str, **args: Any) -> Any:
    """Invoke a registered procedure with a session and keyword arguments."""
    try:
        procedure = PROCEDURES[name]
    except KeyError:
        raise UnknownProcedureError(name) from None
    return await procedure(session, **args)


@register_procedure("resolve_tenant_id")
async def resolve_tenant_id(session: AsyncSession, *, user_id: UUID) -> UUID | None:
    """Find the tenant an employee belongs to."""
    return await session.scalar(
        select(Employee.tenant_id).where(Employee.employee_id == user_id)
    )


@register_procedure("tenant_timezone")
async def tenant_timezone(session: AsyncSession, *, tenant_id: UUID) -> str | None:
    """IANA timezone name configured for a tenant."""
    return await session.scalar(select(Tenant.timezone).where(Tenant.tenant_id == tenant_id))


class TenantGateway:
    """Data access for one tenant over an async session."""

    def __init__(self, session: AsyncSession, tenant_id: UUID):
        self.session = session
        self.tenant_id = tenant_id

    async def select(
        self,
        model: type[ModelT],
        *criteria: Any,
        order_by: Sequence[Any] = (),
        offset: int | None = None,
        limit: int | None = None,
        with_total: bool = False,
    ) -> tuple[list[ModelT], int]:
        """Select tenant rows matching ``criteria``.

        Returns ``(rows, total)``. ``total`` is the unpaginated count when
        ``with_total`` is set, otherwise the number of rows returned.
        """
        query = select(model).where(model.tenant_id == self.tenant_id, *criteria)

        total = 0
        if with_total:
            count_query = select(func.count()).select_from(query.subquery())
            total = await self.session.scalar(count_query) or 0

        if order_by:
            query = query.order_by(*order_by)
        if offset is not None:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)

        result = await self.session.execute(query)
        rows = list(result.scalars().all())
        return rows, total if with_total else len(rows)

    async def first(
        self,
        model: type[ModelT],
        *criteria: Any,
        order_by: Sequence[Any] = (),
    ) -> ModelT | None:
        """Return the first matching row or None."""
        rows, _ = await self.select(model, *criteria, order_by=order_by, limit=1)
        return rows[0] if rows else None

    async def project(self, *columns: Any, where: Iterable[Any] = ()) -> list[tuple[Any, ...]]:
        """Select only ``columns`` from a single tenant-scoped model."""
        model = columns[0].class_
        query = select(*columns).where(model.tenant_id == self.tenant_id, *where)
        result = await self.session.execute(query)
        return [tuple(row) for row in result.all()]

    async def exists(self, model: type[ModelT], *criteria: Any) -> bool:
        """Check whether any tenant row matches ``criteria``."""
        return await self.first(model, *criteria) is not None

    async def get(self, model: type[ModelT], pk: UUID) -> ModelT | None:
        """Load a row by primary key, hiding rows of other tenants."""
        instance = await self.session.get(model, pk)
        if instance is None or instance.tenant_id != self.tenant_id:
            return None
        return instance

    async def get_or_raise(self, model: type[ModelT], pk: UUID) -> ModelT:
        """Load a row by primary key or raise RecordNotFoundError."""
        instance = await self.get(model, pk)
        if instance is None:
            raise RecordNotFoundError(model.__tablename__, pk)
        return instance

    async def insert(self, instance: ModelT) -> ModelT:
        """Add a row stamped with this tenant and flush it."""
        instance.tenant_id = self.tenant_id
        self.session.add(instance)
        await self.session.flush()
        return instance

    async def insert_many(self, instances: Iterable[ModelT]) -> list[ModelT]:
        """Add several rows in one flush."""
        added = []
        for instance in instances:
            instance.tenant_id = self.tenant_id
            self.session.add(instance)
            added.append(instance)
        await self.session.flush()
        return added

    async def update(self, instance: ModelT, **values: Any) -> ModelT:
        """Apply ``values`` to a loaded row and flush."""
        if instance.tenant_id != self.tenant_id:
            raise RecordNotFoundError(instance.__tablename__, "<foreign tenant>")
        for key, value in values.items():
            setattr(instance, key, value)
        await self.session.flush()
        return instance

    async def delete(self, instance: ModelT) -> None:
        """Delete a loaded row and flush."""
        if instance.tenant_id != self.tenant_id:
            raise RecordNotFoundError(instance.__tablename__, "<foreign tenant>")
        await self.session.delete(instance)
        await self.session.flush()

    async def flush(self) -> None:
        await self.session.flush()

    async def call(self, name: str, **args: Any) -> Any:
        """Invoke a named procedure scoped to this tenant."""
        logger.debug("Calling procedure %s for tenant %s", name, self.tenant_id)
        return await call_procedure(self.session, name, tenant_id=self.tenant_id, **args)
