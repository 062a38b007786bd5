"""Work order, part and control number DTOs."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common import MessageResponse


class WorkOrderCreate(BaseModel):
    """Form fields of `POST /api/work-order`."""

    work_order_number: str = Field(..., min_length=1, max_length=50)
    project_code: str = Field(..., min_length=1, max_length=50)
    priority: int = Field(..., ge=0)
    group_section: str = Field(..., min_length=1, max_length=100)
    work_order_date: date
    received_date: date
    desired_completion_date: date
    product_description: str = Field(..., min_length=1)


class WorkOrderCreatedResponse(MessageResponse):
    control_number: int
    document_path: str | None = None


class PartIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    part_number: str = Field(..., alias="partNumber", min_length=1, max_length=50)
    description: str = Field(..., min_length=1, max_length=255)
    quantity: int = Field(..., gt=0)

    @field_validator("part_number")
    @classmethod
    def strip_part_number(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Part number must not be blank")
        return v


class AddPartsRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    control_number: int = Field(..., alias="controlNumber", gt=0)
    parts: list[PartIn] = Field(..., min_length=1)


class AddPartsResponse(MessageResponse):
    control_number: int
    part_numbers: list[str]


class ControlNumberRequest(BaseModel):
    control_number: int = Field(..., gt=0)
