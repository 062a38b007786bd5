from fastapi import APIRouter

from modelshop.api.deps import NotificationServiceDep
from modelshop.application.dtos.staff_dtos import (
    NotificationRead,
    NotificationsReadResponse,
)

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


@router.get(
    "/{employee_id}",
    summary="Notifications of an employee",
    description="Newest first, read and unread alike.",
    response_model=list[NotificationRead],
)
def list_notifications(
    employee_id: int, service: NotificationServiceDep
) -> list[NotificationRead]:
    return [
        NotificationRead.model_validate(n)
        for n in service.list_for_employee(employee_id)
    ]


@router.post(
    "/read/{employee_id}",
    summary="Mark notifications read",
    response_model=NotificationsReadResponse,
)
def mark_notifications_read(
    employee_id: int, service: NotificationServiceDep
) -> NotificationsReadResponse:
    updated = service.mark_all_read(employee_id)
    return NotificationsReadResponse(
        message="Notifications marked as read", updated=updated
    )
