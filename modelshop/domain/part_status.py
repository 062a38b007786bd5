"""Derived part status."""

from collections.abc import Iterable

from .enums import AssignmentStatus, PartStatus


def derive_part_status(statuses: Iterable[AssignmentStatus]) -> PartStatus:
    """
    Compute a part's status from the statuses of every assignment that
    references it.

    completed: all referencing assignments completed (and there is at least one)
    ongoing: otherwise, at least one is ongoing
    partially completed: otherwise, at least one is completed
    not started: anything else, including no assignments at all
    """
    statuses = list(statuses)
    if not statuses:
        return PartStatus.NOT_STARTED

    if all(s is AssignmentStatus.COMPLETED for s in statuses):
        return PartStatus.COMPLETED
    if any(s is AssignmentStatus.ONGOING for s in statuses):
        return PartStatus.ONGOING
    if any(s is AssignmentStatus.COMPLETED for s in statuses):
        return PartStatus.PARTIALLY_COMPLETED
    return PartStatus.NOT_STARTED
