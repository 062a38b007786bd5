"""
Task assignment Data Transfer Objects.

Request bodies for the status endpoints, the assignment batch and the task
listings. Status strings are left raw here and normalized once by the
AssignmentStatus enum.
"""

import json
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common import MessageResponse


class UpdateTaskStatusRequest(BaseModel):
    """Employee accepts a task (`POST /update-task-status`)."""

    id: int = Field(..., gt=0, description="Task assignment id")
    status: str = Field(..., min_length=1, description="Must be 'ongoing'")
    employee_id: int | None = Field(
        None, description="Restrict the lookup to this assignee"
    )
    assigned_by: int | None = Field(
        None, description="Restrict the lookup to this assigner"
    )


class UpdateJobStatusRequest(BaseModel):
    """Supervisor changes a task's status (`POST /update-job-status`)."""

    id: int = Field(..., gt=0, description="Task assignment id")
    status: str = Field(
        ..., min_length=1, description="One of 'ongoing', 'on hold', 'completed'"
    )
    reason: str | None = Field(
        None,
        max_length=1000,
        description="Hold reason (required for 'on hold') or completion note",
    )
    update_hold_date: bool | None = Field(
        None, description="Sent by older clients; the hold date is always stamped"
    )


class TransitionResponse(MessageResponse):
    id: int
    status: str
    actual_start_date: datetime | None = None
    actual_end_date: datetime | None = None
    on_hold_date: datetime | None = None
    hold_reason: str | None = None
    reason: str | None = None


class TaskAssignmentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    control_number: int
    part_numbers: list[str]
    employee_id: int
    assigned_by: int | None = None
    start_date: date | None = None
    end_date: date | None = None
    actual_start_date: datetime | None = None
    actual_end_date: datetime | None = None
    status: str | None = None
    hold_reason: str | None = None
    reason: str | None = None
    on_hold_date: datetime | None = None
    doc_upload_path: str | None = None


class TaskWithPriority(TaskAssignmentRead):
    priority: int | None = None


class PartDetail(BaseModel):
    part_number: str
    quantity: int
    description: str


class JobDetails(BaseModel):
    id: int
    control_number: int
    status: str | None = None
    part_numbers: list[str]
    start_date: date | None = None
    end_date: date | None = None
    employee_names: str
    part_details: list[PartDetail]
    group_section: str | None = None
    priority: int | None = None


class JobDetailsResponse(MessageResponse):
    job_details: JobDetails


class AssignedJobsResponse(BaseModel):
    success: bool
    job: list[TaskAssignmentRead]


class EmployeeRef(BaseModel):
    employee_name: str = Field(..., min_length=1)


class AssignTaskItem(BaseModel):
    """One element of the ``tasks`` form field."""

    model_config = ConfigDict(populate_by_name=True)

    control_number: int = Field(..., alias="controlNumber", gt=0)
    parts: list[str] = Field(..., min_length=1)
    employees: list[EmployeeRef] = Field(..., min_length=1)
    start_date: date | None = Field(None, alias="startDate")
    end_date: date | None = Field(None, alias="endDate")

    @field_validator("parts")
    @classmethod
    def strip_parts(cls, v: list[str]) -> list[str]:
        parts = [p.strip() for p in v if p and p.strip()]
        if not parts:
            raise ValueError("At least one part number is required")
        return parts


def parse_task_items(raw: str) -> list[AssignTaskItem]:
    """Decode the JSON-encoded ``tasks`` form field.

    Raises:
        ValueError: malformed JSON, not a non-empty array, or an invalid item
    """
    try:
        payload = json.loads(raw or "[]")
    except json.JSONDecodeError as e:
        raise ValueError("Invalid tasks format") from e
    if not isinstance(payload, list) or not payload:
        raise ValueError("No tasks provided")
    return [AssignTaskItem.model_validate(item) for item in payload]


class AssignTasksResponse(MessageResponse):
    assigned: list[int] = Field(
        default_factory=list, description="Control numbers committed"
    )
    assignments_created: int = 0
    failed: int | None = Field(None, description="Control number that was rejected")
    document_path: str | None = None
