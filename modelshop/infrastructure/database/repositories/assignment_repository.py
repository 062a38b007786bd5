"""Task assignment repository."""

from collections.abc import Iterable
from typing import Any

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import col, select

from modelshop.domain.enums import AssignmentStatus
from modelshop.models import Employee, TaskAssignment, WorkOrder

from .base import BaseRepository, DatabaseError


class AssignmentRepository(BaseRepository[TaskAssignment]):
    entity_class = TaskAssignment
    entity_name = "Task"

    def get_scoped(
        self,
        assignment_id: int,
        *,
        employee_id: int | None = None,
        assigned_by: int | None = None,
    ) -> TaskAssignment | None:
        """Fetch an assignment, optionally requiring its assignee or assigner."""
        statement = select(TaskAssignment).where(TaskAssignment.id == assignment_id)
        if employee_id is not None:
            statement = statement.where(TaskAssignment.employee_id == employee_id)
        if assigned_by is not None:
            statement = statement.where(TaskAssignment.assigned_by == assigned_by)
        try:
            return self.session.exec(statement).first()
        except SQLAlchemyError as e:
            raise DatabaseError(f"Database error during get_scoped: {str(e)}") from e

    def apply_conditional_update(
        self, assignment_id: int, expected_status: str | None, values: dict[str, Any]
    ) -> int:
        """
        UPDATE the row only if its status still equals ``expected_status``.

        Returns the number of rows changed: 0 means another writer changed the
        status after it was read.
        """
        status_column = col(TaskAssignment.status)
        condition = (
            status_column.is_(None)
            if expected_status is None
            else status_column == expected_status
        )
        statement = (
            update(TaskAssignment)
            .where(col(TaskAssignment.id) == assignment_id)
            .where(condition)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        try:
            result = self.session.execute(statement)
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Database error during conditional update: {str(e)}"
            ) from e
        return result.rowcount

    def list_by_control_numbers(
        self, control_numbers: Iterable[int]
    ) -> list[TaskAssignment]:
        control_numbers = list(control_numbers)
        if not control_numbers:
            return []
        statement = select(TaskAssignment).where(
            col(TaskAssignment.control_number).in_(control_numbers)
        )
        try:
            return list(self.session.exec(statement).all())
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Database error during list_by_control_numbers: {str(e)}"
            ) from e

    def list_by_employee(self, employee_id: int) -> list[TaskAssignment]:
        statement = (
            select(TaskAssignment)
            .where(TaskAssignment.employee_id == employee_id)
            .order_by(col(TaskAssignment.id))
        )
        try:
            return list(self.session.exec(statement).all())
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Database error during list_by_employee: {str(e)}"
            ) from e

    def list_with_priority(
        self,
        status: AssignmentStatus | None = None,
        control_numbers: Iterable[int] | None = None,
    ) -> list[tuple[TaskAssignment, int]]:
        """
        Assignments joined with their work order's priority, most urgent first.

        ``status`` None means every status; PENDING matches NULL rows.
        """
        statement = select(TaskAssignment, WorkOrder.priority).join(
            WorkOrder,
            col(TaskAssignment.control_number) == col(WorkOrder.control_number),
        )
        if status is not None:
            status_column = col(TaskAssignment.status)
            if status is AssignmentStatus.PENDING:
                statement = statement.where(status_column.is_(None))
            else:
                statement = statement.where(status_column == status.stored_value)
        if control_numbers is not None:
            statement = statement.where(
                col(TaskAssignment.control_number).in_(list(control_numbers))
            )
        statement = statement.order_by(
            col(WorkOrder.priority).desc(), col(TaskAssignment.id)
        )
        try:
            return [(row[0], row[1]) for row in self.session.exec(statement).all()]
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Database error during list_with_priority: {str(e)}"
            ) from e

    def get_with_context(
        self, control_number: int, assignment_id: int
    ) -> tuple[TaskAssignment, WorkOrder, Employee | None] | None:
        """One assignment with its work order and assignee."""
        statement = (
            select(TaskAssignment, WorkOrder, Employee)
            .join(
                WorkOrder,
                col(TaskAssignment.control_number) == col(WorkOrder.control_number),
            )
            .join(
                Employee,
                col(Employee.employee_id) == col(TaskAssignment.employee_id),
                isouter=True,
            )
            .where(TaskAssignment.control_number == control_number)
            .where(TaskAssignment.id == assignment_id)
        )
        try:
            row = self.session.exec(statement).first()
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Database error during get_with_context: {str(e)}"
            ) from e
        if row is None:
            return None
        return row[0], row[1], row[2]
