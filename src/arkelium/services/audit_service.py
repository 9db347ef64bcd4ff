"""Audit trail of state changes."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from arkelium.gateway import TenantGateway
from arkelium.models import AuditEvent


class AuditService:
    def __init__(self, gateway: TenantGateway):
        self.gateway = gateway

    async def record(
        self,
        entity_type: str,
        entity_id: UUID,
        action: str,
        actor_employee_id: UUID | None = None,
        details: dict[str, Any] | None = None,
    ) -> AuditEvent:
        """Record an audit event for an entity action."""
        event = AuditEvent(
            actor_employee_id=actor_employee_id,
            entity_type=entity_type,
            entity_id=entity_id,
            action=action,
            details_json=details,
        )
        return await self.gateway.insert(event)

    async def record_transition(
        self,
        entity_type: str,
        entity_id: UUID,
        from_status: str,
        to_status: str,
        actor_employee_id: UUID | None = None,
        details: dict[str, Any] | None = None,
    ) -> AuditEvent:
        return await self.record(
            entity_type,
            entity_id,
            action=f"status_change:{from_status}:{to_status}",
            actor_employee_id=actor_employee_id,
            details=details,
        )

    async def list_for_entity(self, entity_type: str, entity_id: UUID) -> list[AuditEvent]:
        rows, _ = await self.gateway.select(
            AuditEvent,
            AuditEvent.entity_type == entity_type,
            AuditEvent.entity_id == entity_id,
            order_by=[AuditEvent.created_at],
        )
        return rows
