"""Task assignment SQLModel."""

from datetime import date, datetime

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel

from .base import UTCDateTime, utcnow


class TaskAssignment(SQLModel, table=True):
    """
    One employee's responsibility for a set of parts of one work order.

    ``status`` holds an AssignmentStatus stored value; NULL means pending.
    Rows are created by the assignment service and mutated only through the
    task-status service.
    """

    __tablename__ = "assign_task"

    id: int | None = Field(default=None, primary_key=True)
    control_number: int = Field(
        foreign_key="work_order_master.control_number", index=True
    )
    part_numbers: list[str] = Field(
        default_factory=list, sa_column=Column(JSON, nullable=False)
    )
    employee_id: int = Field(foreign_key="employee_master.employee_id", index=True)
    assigned_by: int | None = Field(default=None, index=True)

    start_date: date | None = Field(default=None)
    end_date: date | None = Field(default=None)
    actual_start_date: datetime | None = Field(default=None, sa_type=UTCDateTime)
    actual_end_date: datetime | None = Field(default=None, sa_type=UTCDateTime)

    status: str | None = Field(default=None, max_length=20, index=True)
    hold_reason: str | None = Field(default=None)
    reason: str | None = Field(default=None)
    on_hold_date: datetime | None = Field(default=None, sa_type=UTCDateTime)

    doc_upload_path: str | None = Field(default=None, max_length=255)
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
