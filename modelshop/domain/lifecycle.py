"""
Task assignment lifecycle rules.

Pure functions deciding whether a requested status change is allowed and
which columns it writes. Persistence (including the conditional update that
guards against concurrent writers) lives in the application layer.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .enums import AssignmentStatus
from .exceptions import InvalidTransitionError, ValidationError

HOLDABLE_STATES = frozenset({AssignmentStatus.ONGOING, AssignmentStatus.PENDING})


@dataclass(frozen=True)
class TransitionPlan:
    """A validated transition: the status it expects and the columns it sets."""

    expected: AssignmentStatus
    target: AssignmentStatus
    values: dict[str, Any] = field(default_factory=dict)
    message: str = ""


def _already_ongoing(current: AssignmentStatus) -> None:
    if current is AssignmentStatus.ONGOING:
        raise InvalidTransitionError(
            current.value, AssignmentStatus.ONGOING.value, "Task is already ongoing"
        )


def plan_accept(
    current: AssignmentStatus,
    *,
    actual_start_date: datetime | None,
    now: datetime,
) -> TransitionPlan:
    """An employee accepts (starts or resumes) a task."""
    _already_ongoing(current)

    values: dict[str, Any] = {
        "status": AssignmentStatus.ONGOING.stored_value,
        "on_hold_date": None,
        "actual_end_date": None,
    }
    if actual_start_date is None:
        values["actual_start_date"] = now

    return TransitionPlan(
        expected=current,
        target=AssignmentStatus.ONGOING,
        values=values,
        message="Task accepted and status changed to ONGOING",
    )


def plan_transition(
    current: AssignmentStatus,
    target: AssignmentStatus,
    *,
    reason: str | None,
    actual_start_date: datetime | None,
    now: datetime,
    default_completion_reason: str,
) -> TransitionPlan:
    """Plan a supervisor-driven change to ``target``.

    Raises:
        ValidationError: hold requested without a reason
        InvalidTransitionError: the current status does not allow ``target``
    """
    reason = reason.strip() if reason else None

    if target is AssignmentStatus.ON_HOLD:
        if current not in HOLDABLE_STATES:
            raise InvalidTransitionError(
                current.value,
                target.value,
                "Only ONGOING or PENDING tasks can be put on hold. "
                f"Current status: {current.label}",
            )
        if not reason:
            raise ValidationError("reason", reason, "Hold reason is required")
        return TransitionPlan(
            expected=current,
            target=target,
            values={
                "status": target.stored_value,
                "hold_reason": reason,
                "on_hold_date": now,
                "actual_end_date": None,
            },
            message="Task put ON HOLD",
        )

    if target is AssignmentStatus.COMPLETED:
        if current is not AssignmentStatus.ONGOING:
            raise InvalidTransitionError(
                current.value,
                target.value,
                "Cannot complete task. Only ONGOING tasks can be completed. "
                f"Current status: {current.label}",
            )
        return TransitionPlan(
            expected=current,
            target=target,
            values={
                "status": target.stored_value,
                "reason": reason or default_completion_reason,
                "actual_end_date": now,
                "on_hold_date": None,
            },
            message="Task marked as COMPLETED",
        )

    if target is AssignmentStatus.ONGOING:
        _already_ongoing(current)
        values: dict[str, Any] = {
            "status": target.stored_value,
            "reason": None,
            "on_hold_date": None,
            "actual_end_date": None,
        }
        if actual_start_date is None:
            values["actual_start_date"] = now
        return TransitionPlan(
            expected=current,
            target=target,
            values=values,
            message="Task accepted and status changed to ONGOING",
        )

    raise InvalidTransitionError(
        current.value, target.value, f"Invalid status: {target.value}"
    )
