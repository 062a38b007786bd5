"""
Task status service.

Applies lifecycle transitions to task assignments. Each write is a
conditional UPDATE on the status that was read, so of two conflicting
requests racing on one row exactly one wins. After a successful transition
the derived part statuses of the work order are recomputed.
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from sqlmodel import Session

from modelshop.core.config import settings
from modelshop.core.observability import TASK_TRANSITIONS, get_logger
from modelshop.domain.enums import AssignmentStatus
from modelshop.domain.exceptions import (
    ConcurrentTransitionError,
    DomainError,
    EntityNotFoundError,
    ValidationError,
)
from modelshop.domain.lifecycle import TransitionPlan, plan_accept, plan_transition
from modelshop.infrastructure.database.repositories import AssignmentRepository
from modelshop.infrastructure.database.unit_of_work import transaction
from modelshop.models import TaskAssignment
from modelshop.models.base import utcnow

from .audit import log_event
from .part_status_service import PartStatusService

logger = get_logger(__name__)


@dataclass
class TransitionResult:
    assignment: TaskAssignment
    plan: TransitionPlan


def parse_requested_status(value: str) -> AssignmentStatus:
    try:
        return AssignmentStatus.parse(value)
    except ValueError:
        raise ValidationError("status", value, "Invalid status") from None


class TaskStatusService:
    def __init__(
        self,
        session: Session,
        part_status_service: PartStatusService | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.session = session
        self.assignments = AssignmentRepository(session)
        self.part_status = part_status_service or PartStatusService(session)
        self.clock = clock

    def accept(
        self,
        assignment_id: int,
        requested_status: str,
        *,
        employee_id: int | None = None,
        assigned_by: int | None = None,
    ) -> TransitionResult:
        """
        An employee accepts a task, moving it to ONGOING.

        The lookup can be scoped to the assignee and/or the assigner.

        Raises:
            ValidationError: requested status is not 'ongoing'
            EntityNotFoundError: no matching assignment
            InvalidTransitionError: the task is already ongoing
            ConcurrentTransitionError: the row changed while being updated
        """
        target = parse_requested_status(requested_status)
        if target is not AssignmentStatus.ONGOING:
            raise ValidationError(
                "status", requested_status, "Invalid status update request"
            )

        assignment = self.assignments.get_scoped(
            assignment_id, employee_id=employee_id, assigned_by=assigned_by
        )
        if assignment is None:
            raise EntityNotFoundError("Task", assignment_id)

        current = AssignmentStatus.from_stored(assignment.status)
        plan = self._plan(
            target,
            lambda: plan_accept(
                current,
                actual_start_date=assignment.actual_start_date,
                now=self.clock(),
            ),
        )
        return self._apply(assignment, plan)

    def change_status(
        self, assignment_id: int, requested_status: str, reason: str | None = None
    ) -> TransitionResult:
        """
        Move a task to ON HOLD, COMPLETED or back to ONGOING.

        Raises:
            ValidationError: unknown status or missing hold reason
            EntityNotFoundError: no such assignment
            InvalidTransitionError: the current status does not allow it
            ConcurrentTransitionError: the row changed while being updated
        """
        target = parse_requested_status(requested_status)

        assignment = self.assignments.get_by_id_required(assignment_id)
        current = AssignmentStatus.from_stored(assignment.status)
        plan = self._plan(
            target,
            lambda: plan_transition(
                current,
                target,
                reason=reason,
                actual_start_date=assignment.actual_start_date,
                now=self.clock(),
                default_completion_reason=settings.DEFAULT_COMPLETION_REASON,
            ),
        )
        return self._apply(assignment, plan)

    def _plan(
        self, target: AssignmentStatus, planner: Callable[[], TransitionPlan]
    ) -> TransitionPlan:
        try:
            return planner()
        except DomainError as e:
            TASK_TRANSITIONS.labels(
                target_status=target.value, outcome="rejected"
            ).inc()
            logger.info(
                "Task transition rejected",
                target_status=target.value,
                reason=e.message,
            )
            raise

    def _apply(
        self, assignment: TaskAssignment, plan: TransitionPlan
    ) -> TransitionResult:
        assignment_id = assignment.id
        expected_raw = assignment.status

        with transaction(self.session):
            updated = self.assignments.apply_conditional_update(
                assignment_id, expected_raw, plan.values
            )
            if updated == 0:
                TASK_TRANSITIONS.labels(
                    target_status=plan.target.value, outcome="conflict"
                ).inc()
                logger.warning(
                    "Task transition lost a concurrent update",
                    assignment_id=assignment_id,
                    expected_status=plan.expected.value,
                    target_status=plan.target.value,
                )
                raise ConcurrentTransitionError(assignment_id, plan.expected.value)

        TASK_TRANSITIONS.labels(
            target_status=plan.target.value, outcome="applied"
        ).inc()
        self.session.refresh(assignment)
        logger.info(
            "Task transition applied",
            assignment_id=assignment_id,
            control_number=assignment.control_number,
            from_status=plan.expected.value,
            to_status=plan.target.value,
        )
        log_event(
            self.session,
            "TASK_STATUS_UPDATED",
            f"Task {assignment_id} moved from {plan.expected.label} "
            f"to {plan.target.label}",
        )

        self.part_status.recompute_after_change(assignment.control_number)
        return TransitionResult(assignment=assignment, plan=plan)
