"""
Assignment service: bulk creation of task assignments.

Each task of a batch (one control number, a set of parts, a set of
employees) is written in its own transaction: one assignment row per
employee, all selected parts stored together on the row, plus one
notification per employee. Tasks are processed in order; when one is
rejected the tasks before it stay committed and are reported back.
"""

from dataclasses import dataclass, field

from sqlmodel import Session

from modelshop.application.dtos.task_dtos import AssignTaskItem
from modelshop.core.observability import ASSIGNMENTS_CREATED, get_logger
from modelshop.domain.exceptions import (
    AssignmentBatchError,
    ErrorType,
    ValidationError,
)
from modelshop.infrastructure.database.repositories import (
    AssignmentRepository,
    DatabaseError,
    EmployeeRepository,
    NotificationRepository,
    PartRepository,
    WorkOrderRepository,
)
from modelshop.infrastructure.database.unit_of_work import transaction
from modelshop.models import Notification, TaskAssignment

from .audit import log_event
from .part_status_service import PartStatusService

logger = get_logger(__name__)


def assignment_message(control_number: int) -> str:
    return f"You have been assigned a new task: {control_number}"


@dataclass
class AssignmentBatchResult:
    assigned: list[int] = field(default_factory=list)
    assignments_created: int = 0


class AssignmentService:
    def __init__(self, session: Session):
        self.session = session
        self.assignments = AssignmentRepository(session)
        self.employees = EmployeeRepository(session)
        self.notifications = NotificationRepository(session)
        self.parts = PartRepository(session)
        self.work_orders = WorkOrderRepository(session)
        self.part_status = PartStatusService(session)

    def assign(
        self,
        tasks: list[AssignTaskItem],
        *,
        assigned_by: int,
        document_path: str,
    ) -> AssignmentBatchResult:
        """
        Create assignments for every task in ``tasks``.

        Raises:
            AssignmentBatchError: a task was rejected or could not be
                written; carries the control numbers committed before it
        """
        result = AssignmentBatchResult()

        for task in tasks:
            try:
                employee_ids = self._validate(task)
                created = self._create(task, employee_ids, assigned_by, document_path)
            except ValidationError as e:
                logger.warning(
                    "Task assignment rejected",
                    control_number=task.control_number,
                    reason=e.message,
                    committed=result.assigned,
                )
                log_event(
                    self.session,
                    "ASSIGN_TASK_ERROR",
                    f"Control number {task.control_number}: {e.message}",
                )
                raise AssignmentBatchError(
                    e.message, task.control_number, list(result.assigned)
                ) from e
            except DatabaseError as e:
                logger.error(
                    "Task assignment failed",
                    control_number=task.control_number,
                    error=e.message,
                    committed=result.assigned,
                )
                log_event(
                    self.session,
                    "ASSIGN_TASK_ERROR",
                    f"Control number {task.control_number}: database error",
                )
                raise AssignmentBatchError(
                    f"Failed to assign task for control number {task.control_number}",
                    task.control_number,
                    list(result.assigned),
                    error_type=ErrorType.REPOSITORY,
                ) from e

            result.assigned.append(task.control_number)
            result.assignments_created += created
            self.part_status.recompute_after_change(task.control_number)

        log_event(
            self.session,
            "ASSIGN_TASK",
            f"{result.assignments_created} assignments created for control numbers "
            f"{', '.join(str(cn) for cn in result.assigned)} "
            f"(document {document_path})",
        )
        return result

    def _validate(self, task: AssignTaskItem) -> list[int]:
        """Resolve employee names and check the parts; nothing is written."""
        control_number = task.control_number
        if not self.work_orders.exists(control_number):
            raise ValidationError(
                "controlNumber",
                control_number,
                f"Invalid control number {control_number}",
            )

        known_parts = set(self.parts.list_part_numbers(control_number))
        unknown_parts = [p for p in task.parts if p not in known_parts]
        if unknown_parts:
            raise ValidationError(
                "parts",
                control_number,
                f"Unknown parts for control number {control_number}: "
                f"{', '.join(unknown_parts)}",
            )

        names = [employee.employee_name.strip() for employee in task.employees]
        resolved = self.employees.resolve_names(names)
        missing = [name for name in names if name not in resolved]
        if missing:
            raise ValidationError(
                "employees",
                control_number,
                f"No valid employees found for control number {control_number}: "
                f"{', '.join(missing)}",
            )

        employee_ids: list[int] = []
        for name in names:
            for employee_id in resolved[name]:
                if employee_id not in employee_ids:
                    employee_ids.append(employee_id)
        return employee_ids

    def _create(
        self,
        task: AssignTaskItem,
        employee_ids: list[int],
        assigned_by: int,
        document_path: str,
    ) -> int:
        part_numbers = list(dict.fromkeys(task.parts))
        with transaction(self.session):
            for employee_id in employee_ids:
                self.assignments.add(
                    TaskAssignment(
                        control_number=task.control_number,
                        part_numbers=part_numbers,
                        employee_id=employee_id,
                        assigned_by=assigned_by,
                        start_date=task.start_date,
                        end_date=task.end_date,
                        doc_upload_path=document_path,
                    )
                )
                self.notifications.add(
                    Notification(
                        employee_id=employee_id,
                        message=assignment_message(task.control_number),
                    )
                )

        ASSIGNMENTS_CREATED.inc(len(employee_ids))
        logger.info(
            "Task assigned",
            control_number=task.control_number,
            employee_ids=employee_ids,
            parts=part_numbers,
        )
        return len(employee_ids)
