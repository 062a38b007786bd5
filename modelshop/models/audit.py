from datetime import datetime

from sqlmodel import Field, SQLModel

from .base import UTCDateTime, utcnow


class AuditLog(SQLModel, table=True):
    """Business event trail (work orders, assignments, status changes)."""

    __tablename__ = "logs"

    id: int | None = Field(default=None, primary_key=True)
    event: str = Field(max_length=100, index=True)
    description: str
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
