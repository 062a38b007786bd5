"""
Task assignment API routes.

Listing assignments by status, bulk assignment of employees to parts, and
the per-employee and per-job views used by the shop floor.
"""

from typing import Annotated

from fastapi import APIRouter, File, Form, UploadFile
from pydantic import ValidationError as PydanticValidationError

from modelshop.api.deps import AssignmentServiceDep, FileStorageDep, TaskQueriesDep
from modelshop.application.dtos.task_dtos import (
    AssignedJobsResponse,
    AssignTaskItem,
    AssignTasksResponse,
    JobDetailsResponse,
    TaskWithPriority,
    parse_task_items,
)
from modelshop.domain.exceptions import AssignmentBatchError, ValidationError

router = APIRouter(tags=["tasks"])


def _parse_tasks(raw: str) -> list[AssignTaskItem]:
    try:
        return parse_task_items(raw)
    except PydanticValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        raise ValidationError(
            "tasks", None, f"Invalid tasks format: {location}: {first['msg']}"
        ) from e
    except ValueError as e:
        raise ValidationError("tasks", None, str(e)) from e


@router.get(
    "/api/tasks/status/{status}",
    summary="List tasks by status",
    description=(
        "Task assignments filtered by 'All', 'pending', 'ongoing', 'on hold', "
        "'completed' or 'finished', highest work-order priority first."
    ),
    response_model=list[TaskWithPriority],
    responses={400: {"description": "Unknown status"}},
)
def list_tasks_by_status(
    status: str, queries: TaskQueriesDep
) -> list[TaskWithPriority]:
    return queries.list_by_status(status)


@router.post(
    "/api/assign_tasks",
    summary="Assign tasks",
    description=(
        "Create one assignment per employee for each task of the batch and "
        "notify the employees. Each task is committed on its own; when a task "
        "is rejected the tasks before it stay assigned."
    ),
    response_model=AssignTasksResponse,
    responses={
        400: {"description": "Missing document, malformed tasks or rejected task"},
    },
)
def assign_tasks(
    document: Annotated[UploadFile, File(description="Work instruction document")],
    tasks: Annotated[str, Form(description="JSON array of tasks")],
    assigned_by: Annotated[int, Form()],
    service: AssignmentServiceDep,
    storage: FileStorageDep,
) -> AssignTasksResponse:
    items = _parse_tasks(tasks)
    document_path = storage.save(document.file, document.filename)

    try:
        result = service.assign(
            items, assigned_by=assigned_by, document_path=document_path
        )
    except AssignmentBatchError as e:
        # no row refers to the document unless an earlier task was committed
        if not e.assigned:
            storage.delete(document_path)
        raise
    return AssignTasksResponse(
        message="Tasks assigned successfully",
        assigned=result.assigned,
        assignments_created=result.assignments_created,
        document_path=document_path,
    )


@router.get(
    "/api/assigned-jobs/{employee_id}",
    summary="Jobs assigned to an employee",
    response_model=AssignedJobsResponse,
)
def assigned_jobs(employee_id: int, queries: TaskQueriesDep) -> AssignedJobsResponse:
    return AssignedJobsResponse(
        success=True, job=queries.list_for_employee(employee_id)
    )


@router.get(
    "/api/job-details/{control_number}/{id}",
    summary="Details of one assignment",
    description=(
        "An assignment within a control number, with the employee's name, the "
        "assigned parts and the work order's priority and group section."
    ),
    response_model=JobDetailsResponse,
    responses={404: {"description": "Job not found"}},
)
def job_details(
    control_number: int, id: int, queries: TaskQueriesDep
) -> JobDetailsResponse:
    return JobDetailsResponse(
        message="Job details retrieved",
        job_details=queries.job_details(control_number, id),
    )
