"""FastAPI dependencies for dependency injection."""

from collections.abc import AsyncGenerator
from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from arkelium.database import init_db
from arkelium.gateway import TenantGateway, call_procedure


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency."""
    _, session_factory = init_db()
    async with session_factory() as session:
        yield session


def _parse_uuid(value: str, header: str) -> UUID:
    try:
        return UUID(value)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {header} format",
        )


async def get_actor_id(
    x_user_id: Annotated[str | None, Header()] = None,
) -> UUID | None:
    """Acting user from the X-User-ID header, if present."""
    if not x_user_id:
        return None
    return _parse_uuid(x_user_id, "X-User-ID")


async def get_tenant_id(
    db: Annotated[AsyncSession, Depends(get_db_session)],
    actor_id: Annotated[UUID | None, Depends(get_actor_id)],
    x_tenant_id: Annotated[str | None, Header()] = None,
) -> UUID:
    """Tenant from X-Tenant-ID, or resolved once from the acting user."""
    if x_tenant_id:
        return _parse_uuid(x_tenant_id, "X-Tenant-ID")
    if actor_id is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="X-Tenant-ID header is required",
        )

    tenant_id = await call_procedure(db, "resolve_tenant_id", user_id=actor_id)
    if tenant_id is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User does not belong to a company",
        )
    return tenant_id


async def get_gateway(
    db: Annotated[AsyncSession, Depends(get_db_session)],
    tenant_id: Annotated[UUID, Depends(get_tenant_id)],
) -> TenantGateway:
    return TenantGateway(db, tenant_id)


# Type aliases for cleaner dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db_session)]
TenantId = Annotated[UUID, Depends(get_tenant_id)]
ActorId = Annotated[UUID | None, Depends(get_actor_id)]
Gateway = Annotated[TenantGateway, Depends(get_gateway)]
