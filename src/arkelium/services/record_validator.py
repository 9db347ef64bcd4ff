"""Record-level validations for clients, users and contracts.

Every check returns a :class:`ValidationResult` and fails open on read
errors, the same contract as schedule validation.
"""

from __future__ import annotations

import logging
from datetime import date
from uuid import UUID

from arkelium.gateway import TenantGateway
from arkelium.models import Client, Contract, Employee, Invoice, Job
from arkelium.services.schedule_validator import READ_ERRORS, ValidationResult

logger = logging.getLogger(__name__)


def _contract_valid_on(contract: Contract, today: date) -> bool:
    return contract.end_date is None or contract.end_date >= today


class RecordValidator:
    """Duplicate and dependency checks for one tenant."""

    def __init__(self, gateway: TenantGateway):
        self.gateway = gateway

    async def validate_client_duplicate(
        self,
        name: str,
        email: str | None = None,
        phone: str | None = None,
        exclude_client_id: UUID | None = None,
    ) -> ValidationResult:
        exclude = [Client.client_id != exclude_client_id] if exclude_client_id else []
        try:
            if email:
                match = await self.gateway.first(Client, Client.email == email, *exclude)
                if match is not None:
                    return ValidationResult.fail(
                        f"A client with this email already exists: {match.name}"
                    )

            if name and phone:
                if await self.gateway.exists(
                    Client, Client.name == name, Client.phone == phone, *exclude
                ):
                    return ValidationResult.fail(
                        "A client with this name and phone already exists."
                    )
        except READ_ERRORS:
            logger.exception("Error validating client")
        return ValidationResult.ok()

    async def can_delete_client(self, client_id: UUID) -> ValidationResult:
        """Clients with any history can only be deactivated."""
        try:
            for model in (Job, Invoice, Contract):
                if await self.gateway.exists(model, model.client_id == client_id):
                    return ValidationResult.fail(
                        "This client has jobs, invoices, or contracts history. "
                        "Only deactivation is allowed."
                    )
        except READ_ERRORS:
            logger.exception("Error checking client dependencies")
        return ValidationResult.ok()

    async def validate_user_email_duplicate(
        self,
        email: str,
        exclude_employee_id: UUID | None = None,
    ) -> ValidationResult:
        criteria = [Employee.email == email]
        if exclude_employee_id:
            criteria.append(Employee.employee_id != exclude_employee_id)
        try:
            match = await self.gateway.first(Employee, *criteria)
            if match is not None:
                return ValidationResult.fail(
                    f"A user with this email already exists: {match.full_name or 'Existing user'}"
                )
        except READ_ERRORS:
            logger.exception("Error validating user email")
        return ValidationResult.ok()

    async def get_active_contract_for_client(
        self,
        client_id: UUID,
        today: date,
    ) -> tuple[bool, UUID | None]:
        """Return ``(has_active_contract, contract_id)`` for a client.

        A contract counts when it is active and not past its end date.
        """
        try:
            for contract in await self._active_contracts(client_id):
                if _contract_valid_on(contract, today):
                    return True, contract.contract_id
        except READ_ERRORS:
            logger.exception("Error checking active contract")
        return False, None

    async def validate_contract_active(
        self,
        client_id: UUID,
        exclude_contract_id: UUID | None = None,
    ) -> ValidationResult:
        """Only one active contract per client."""
        try:
            for contract in await self._active_contracts(client_id):
                if contract.contract_id == exclude_contract_id:
                    continue
                return ValidationResult.fail(
                    f"This client already has an active contract ({contract.contract_number}). "
                    "Only 1 active contract per client is allowed."
                )
        except READ_ERRORS:
            logger.exception("Error validating contract")
        return ValidationResult.ok()

    async def can_schedule_for_client(self, client_id: UUID, today: date) -> ValidationResult:
        """Refuse scheduling when every active contract has expired."""
        try:
            contracts = await self._active_contracts(client_id)
            if contracts and not any(_contract_valid_on(c, today) for c in contracts):
                return ValidationResult.fail(
                    "This client's contract has expired. "
                    "Renew the contract before scheduling new jobs."
                )
        except READ_ERRORS:
            logger.exception("Error checking contract status")
        return ValidationResult.ok()

    async def _active_contracts(self, client_id: UUID) -> list[Contract]:
        contracts, _ = await self.gateway.select(
            Contract,
            Contract.client_id == client_id,
            Contract.status == "active",
            order_by=[Contract.created_at],
        )
        return contracts
