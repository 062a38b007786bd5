"""
Task status API routes.

The two endpoints that move a task assignment through its lifecycle:
employees accept a task, supervisors put it on hold, complete it or
reassign it back to ongoing. Domain errors raised by the service are
rendered by the application's exception handlers.
"""

from fastapi import APIRouter

from modelshop.api.deps import TaskStatusServiceDep
from modelshop.application.dtos.task_dtos import (
    TransitionResponse,
    UpdateJobStatusRequest,
    UpdateTaskStatusRequest,
)
from modelshop.application.services.task_status_service import TransitionResult

router = APIRouter(tags=["task-status"])


def _to_response(result: TransitionResult) -> TransitionResponse:
    assignment = result.assignment
    return TransitionResponse(
        message=result.plan.message,
        id=assignment.id,
        status=result.plan.target.value,
        actual_start_date=assignment.actual_start_date,
        actual_end_date=assignment.actual_end_date,
        on_hold_date=assignment.on_hold_date,
        hold_reason=assignment.hold_reason,
        reason=assignment.reason,
    )


@router.post(
    "/update-task-status",
    summary="Accept a task",
    description="Move a pending or on-hold task assignment to ONGOING.",
    response_model=TransitionResponse,
    response_model_exclude_none=True,
    responses={
        400: {"description": "Invalid status, already ongoing or lost a race"},
        404: {"description": "Task not found"},
    },
)
def update_task_status(
    request: UpdateTaskStatusRequest, service: TaskStatusServiceDep
) -> TransitionResponse:
    result = service.accept(
        request.id,
        request.status,
        employee_id=request.employee_id,
        assigned_by=request.assigned_by,
    )
    return _to_response(result)


@router.post(
    "/update-job-status",
    summary="Change a task's status",
    description=(
        "Put a task ON HOLD (reason required), mark it COMPLETED or "
        "reassign it to ONGOING."
    ),
    response_model=TransitionResponse,
    response_model_exclude_none=True,
    responses={
        400: {"description": "Transition not allowed or missing hold reason"},
        404: {"description": "Task not found"},
    },
)
def update_job_status(
    request: UpdateJobStatusRequest, service: TaskStatusServiceDep
) -> TransitionResponse:
    """
    ``update_hold_date`` is accepted for older clients but has no effect: the
    hold date is always stamped when a task goes on hold.
    """
    result = service.change_status(request.id, request.status, request.reason)
    return _to_response(result)
