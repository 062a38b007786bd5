from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import col, select

from modelshop.models import Notification

from .base import BaseRepository, DatabaseError


class NotificationRepository(BaseRepository[Notification]):
    entity_class = Notification
    entity_name = "Notification"

    def list_for_employee(self, employee_id: int) -> list[Notification]:
        """Newest first."""
        statement = (
            select(Notification)
            .where(Notification.employee_id == employee_id)
            .order_by(col(Notification.created_at).desc(), col(Notification.id).desc())
        )
        try:
            return list(self.session.exec(statement).all())
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Database error during list_for_employee: {str(e)}"
            ) from e

    def mark_all_read(self, employee_id: int) -> int:
        statement = (
            update(Notification)
            .where(col(Notification.employee_id) == employee_id)
            .where(col(Notification.is_read).is_(False))
            .values(is_read=True)
            .execution_options(synchronize_session=False)
        )
        try:
            return self.session.execute(statement).rowcount
        except SQLAlchemyError as e:
            raise DatabaseError(f"Database error during mark_all_read: {str(e)}") from e
