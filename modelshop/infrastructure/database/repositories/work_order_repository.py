"""Work order and part repositories."""

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import col, or_, select

from modelshop.domain.enums import PartStatus
from modelshop.models import Part, WorkOrder

from .base import BaseRepository, DatabaseError


class WorkOrderRepository(BaseRepository[WorkOrder]):
    entity_class = WorkOrder
    entity_name = "Control number"
    id_field = "control_number"

    def list_control_numbers(self) -> list[int]:
        statement = select(WorkOrder.control_number).order_by(
            col(WorkOrder.control_number)
        )
        try:
            return list(self.session.exec(statement).all())
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Database error during list_control_numbers: {str(e)}"
            ) from e


class PartRepository(BaseRepository[Part]):
    entity_class = Part
    entity_name = "Part"

    def list_by_control_number(self, control_number: int | None = None) -> list[Part]:
        """Parts of one control number, or every part when None."""
        statement = select(Part)
        if control_number is not None:
            statement = statement.where(Part.control_number == control_number)
        statement = statement.order_by(col(Part.control_number), col(Part.id))
        try:
            return list(self.session.exec(statement).all())
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Database error during list_by_control_number: {str(e)}"
            ) from e

    def list_by_status(self, status: PartStatus) -> list[Part]:
        statement = select(Part).where(Part.status == status.value)
        try:
            return list(self.session.exec(statement).all())
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Database error during list_by_status: {str(e)}"
            ) from e

    def list_part_numbers(self, control_number: int) -> list[str]:
        return [p.part_number for p in self.list_by_control_number(control_number)]

    def list_active_control_numbers(self) -> list[int]:
        """Control numbers with at least one part that is not finished."""
        status_column = col(Part.status)
        statement = (
            select(Part.control_number)
            .where(
                or_(
                    status_column.is_(None),
                    status_column != PartStatus.FINISHED.value,
                )
            )
            .distinct()
            .order_by(col(Part.control_number))
        )
        try:
            return list(self.session.exec(statement).all())
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Database error during list_active_control_numbers: {str(e)}"
            ) from e

    def mark_finished(self, control_number: int) -> int:
        """Force every part of ``control_number`` to FINISHED; returns rows matched."""
        statement = (
            update(Part)
            .where(col(Part.control_number) == control_number)
            .values(status=PartStatus.FINISHED.value)
            .execution_options(synchronize_session=False)
        )
        try:
            return self.session.execute(statement).rowcount
        except SQLAlchemyError as e:
            raise DatabaseError(f"Database error during mark_finished: {str(e)}") from e
