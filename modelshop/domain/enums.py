"""Domain enums for the task-status lifecycle."""

from enum import Enum

_STATUS_ALIASES = {
    "on_hold": "on hold",
    "on-hold": "on hold",
    "onhold": "on hold",
    "hold": "on hold",
    "null": "pending",
    "none": "pending",
}


def normalize_status_text(value: str) -> str:
    """Trim, lower-case and collapse whitespace of an inbound status string."""
    text = " ".join(value.strip().lower().split())
    return _STATUS_ALIASES.get(text, text)


class AssignmentStatus(str, Enum):
    """
    Status of one task assignment.

    PENDING is the implicit initial state and is stored as NULL.
    """

    PENDING = "pending"
    ONGOING = "ongoing"
    ON_HOLD = "on hold"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, value: str) -> "AssignmentStatus":
        """Parse a client-supplied status; raises ValueError if unknown."""
        return cls(normalize_status_text(value))

    @classmethod
    def from_stored(cls, value: str | None) -> "AssignmentStatus":
        """Map a persisted column value (possibly NULL) to a status."""
        if value is None or not value.strip():
            return cls.PENDING
        return cls.parse(value)

    @property
    def stored_value(self) -> str | None:
        """Value written to the status column."""
        return None if self is AssignmentStatus.PENDING else self.value

    @property
    def label(self) -> str:
        return self.value.upper()


class PartStatus(str, Enum):
    """Derived aggregate status of a part."""

    NOT_STARTED = "not started"
    ONGOING = "ongoing"
    PARTIALLY_COMPLETED = "partially completed"
    COMPLETED = "completed"
    FINISHED = "finished"

    @property
    def is_terminal(self) -> bool:
        """FINISHED is set by archival only and is never recomputed."""
        return self is PartStatus.FINISHED


class TaskListFilter(str, Enum):
    """Selector accepted by the task listing endpoint."""

    ALL = "all"
    PENDING = "pending"
    ONGOING = "ongoing"
    ON_HOLD = "on hold"
    COMPLETED = "completed"
    FINISHED = "finished"

    @classmethod
    def parse(cls, value: str) -> "TaskListFilter":
        return cls(normalize_status_text(value))

    @property
    def assignment_status(self) -> AssignmentStatus | None:
        if self in (TaskListFilter.ALL, TaskListFilter.FINISHED):
            return None
        return AssignmentStatus(self.value)
