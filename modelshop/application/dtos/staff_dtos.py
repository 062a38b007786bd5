"""Employee, trade and notification DTOs."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from .common import MessageResponse


class EmployeeRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    employee_id: int
    employee_name: str
    email_id: str | None = None
    designation: str | None = None


class TradeRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    trade_id: int
    trade_name: str


class NotificationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    employee_id: int
    message: str
    is_read: bool
    created_at: datetime


class NotificationsReadResponse(MessageResponse):
    updated: int
