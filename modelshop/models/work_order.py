"""Work order and part SQLModels."""

from datetime import date, datetime

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, Relationship, SQLModel

from modelshop.domain.enums import PartStatus

from .base import UTCDateTime, utcnow


class WorkOrderBase(SQLModel):
    """Base work order fields."""

    work_order_number: str = Field(max_length=50, index=True)
    project_code: str = Field(max_length=50)
    priority: int = Field(default=0, description="Higher values are more urgent")
    group_section: str | None = Field(default=None, max_length=100)
    work_order_date: date | None = Field(default=None)
    received_date: date | None = Field(default=None)
    desired_completion_date: date | None = Field(default=None)
    product_description: str | None = Field(default=None)


class WorkOrder(WorkOrderBase, table=True):
    """
    Work order table model.

    The control number is the primary key and is generated by the database;
    clients never choose it.
    """

    __tablename__ = "work_order_master"

    control_number: int | None = Field(default=None, primary_key=True)
    doc_upload_path: str | None = Field(default=None, max_length=255)
    created_date: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)

    parts: list["Part"] = Relationship(back_populates="work_order")


class PartBase(SQLModel):
    part_number: str = Field(max_length=50, index=True)
    description: str = Field(max_length=255)
    quantity: int = Field(gt=0)


class Part(PartBase, table=True):
    """
    Part table model.

    ``status`` is derived from the part's task assignments and is written
    only by the part-status service.
    """

    __tablename__ = "part_master"
    __table_args__ = (
        UniqueConstraint("control_number", "part_number", name="uq_part_control"),
    )

    id: int | None = Field(default=None, primary_key=True)
    control_number: int = Field(
        foreign_key="work_order_master.control_number", index=True
    )
    status: str = Field(default=PartStatus.NOT_STARTED.value, max_length=30)
    created_date: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)

    work_order: WorkOrder | None = Relationship(back_populates="parts")
