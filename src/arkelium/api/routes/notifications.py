"""Notification feed endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, HTTPException, Path, Query, status

from arkelium.api.dependencies import ActorId, Gateway
from arkelium.api.schemas import ErrorResponse, NotificationResponse
from arkelium.models import Employee
from arkelium.services.notification_service import NotificationService

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get(
    "",
    response_model=list[NotificationResponse],
    responses={400: {"model": ErrorResponse}},
)
async def list_notifications(
    gateway: Gateway,
    actor_id: ActorId,
    unread_only: Annotated[bool, Query()] = False,
    limit: Annotated[int, Query(ge=1, le=200)] = 50,
) -> list[NotificationResponse]:
    """Notifications for the acting user and their role."""
    if actor_id is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="X-User-ID header is required",
        )
    employee = await gateway.get(Employee, actor_id)
    rows = await NotificationService(gateway).list_for_employee(
        actor_id,
        role=employee.role if employee else None,
        unread_only=unread_only,
        limit=limit,
    )
    return [NotificationResponse.model_validate(n) for n in rows]


@router.post(
    "/{notification_id}/read",
    response_model=NotificationResponse,
    responses={404: {"model": ErrorResponse}},
)
async def mark_read(
    gateway: Gateway,
    notification_id: Annotated[UUID, Path()],
) -> NotificationResponse:
    notification = await NotificationService(gateway).mark_as_read(notification_id)
    await gateway.session.commit()
    return NotificationResponse.model_validate(notification)
