"""Employee notifications: listing and read receipts."""

from sqlmodel import Session

from modelshop.core.observability import get_logger
from modelshop.infrastructure.database.repositories import NotificationRepository
from modelshop.infrastructure.database.unit_of_work import transaction
from modelshop.models import Notification

logger = get_logger(__name__)


class NotificationService:
    def __init__(self, session: Session):
        self.session = session
        self.notifications = NotificationRepository(session)

    def list_for_employee(self, employee_id: int) -> list[Notification]:
        return self.notifications.list_for_employee(employee_id)

    def mark_all_read(self, employee_id: int) -> int:
        """Flag every unread notification of the employee as read."""
        with transaction(self.session):
            updated = self.notifications.mark_all_read(employee_id)
        logger.info(
            "Notifications marked read", employee_id=employee_id, updated=updated
        )
        return updated
