from datetime import datetime

from sqlmodel import Field, SQLModel

from .base import UTCDateTime, utcnow


class Notification(SQLModel, table=True):
    """One message for one employee. Only the read flag ever changes."""

    __tablename__ = "notifications"

    id: int | None = Field(default=None, primary_key=True)
    employee_id: int = Field(foreign_key="employee_master.employee_id", index=True)
    message: str
    is_read: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
