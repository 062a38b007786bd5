"""Read-side queries over task assignments."""

from sqlmodel import Session

from modelshop.application.dtos.task_dtos import (
    JobDetails,
    PartDetail,
    TaskAssignmentRead,
    TaskWithPriority,
)
from modelshop.domain.enums import PartStatus, TaskListFilter
from modelshop.domain.exceptions import EntityNotFoundError, ValidationError
from modelshop.infrastructure.database.repositories import (
    AssignmentRepository,
    PartRepository,
)


class TaskQueries:
    def __init__(self, session: Session):
        self.assignments = AssignmentRepository(session)
        self.parts = PartRepository(session)

    def list_by_status(self, status: str) -> list[TaskWithPriority]:
        """
        Assignments for a status selector, most urgent work order first.

        ``All`` lists everything, ``pending`` lists unstarted rows, and
        ``finished`` lists assignments touching a part whose control number
        was archived as finished (reported with status ``finished``).
        """
        try:
            selector = TaskListFilter.parse(status)
        except ValueError:
            raise ValidationError(
                "status", status, f"Invalid status: {status}"
            ) from None

        if selector is TaskListFilter.FINISHED:
            return self._list_finished()

        rows = self.assignments.list_with_priority(selector.assignment_status)
        return [
            self._with_priority(assignment, priority) for assignment, priority in rows
        ]

    def _list_finished(self) -> list[TaskWithPriority]:
        finished = {
            (part.control_number, part.part_number)
            for part in self.parts.list_by_status(PartStatus.FINISHED)
        }
        if not finished:
            return []

        control_numbers = {control_number for control_number, _ in finished}
        rows = self.assignments.list_with_priority(control_numbers=control_numbers)
        result = []
        for assignment, priority in rows:
            if any(
                (assignment.control_number, part_number) in finished
                for part_number in assignment.part_numbers
            ):
                item = self._with_priority(assignment, priority)
                item.status = PartStatus.FINISHED.value
                result.append(item)
        return result

    @staticmethod
    def _with_priority(assignment, priority: int | None) -> TaskWithPriority:
        data = TaskAssignmentRead.model_validate(assignment).model_dump()
        return TaskWithPriority(**data, priority=priority)

    def list_for_employee(self, employee_id: int) -> list[TaskAssignmentRead]:
        return [
            TaskAssignmentRead.model_validate(assignment)
            for assignment in self.assignments.list_by_employee(employee_id)
        ]

    def job_details(self, control_number: int, assignment_id: int) -> JobDetails:
        """
        Raises:
            EntityNotFoundError: no such assignment under ``control_number``
        """
        row = self.assignments.get_with_context(control_number, assignment_id)
        if row is None:
            raise EntityNotFoundError("Job", f"{control_number}/{assignment_id}")
        assignment, work_order, employee = row

        wanted = set(assignment.part_numbers)
        part_details = [
            PartDetail(
                part_number=part.part_number,
                quantity=part.quantity,
                description=part.description,
            )
            for part in self.parts.list_by_control_number(control_number)
            if part.part_number in wanted
        ]

        return JobDetails(
            id=assignment.id,
            control_number=assignment.control_number,
            status=assignment.status,
            part_numbers=assignment.part_numbers,
            start_date=assignment.start_date,
            end_date=assignment.end_date,
            employee_names=employee.employee_name.strip() if employee else "Unknown",
            part_details=part_details,
            group_section=work_order.group_section,
            priority=work_order.priority,
        )
