"""
Part status service.

Keeps each part's derived status in line with its task assignments and
handles archiving a whole control number as finished.
"""

from collections import defaultdict

from sqlmodel import Session

from modelshop.core.observability import PART_STATUS_UPDATES, get_logger
from modelshop.domain.enums import AssignmentStatus, PartStatus
from modelshop.domain.exceptions import EntityNotFoundError
from modelshop.domain.part_status import derive_part_status
from modelshop.infrastructure.database.repositories import (
    AssignmentRepository,
    DatabaseError,
    PartRepository,
)
from modelshop.infrastructure.database.unit_of_work import transaction

from .audit import log_event

logger = get_logger(__name__)


class PartStatusService:
    def __init__(self, session: Session):
        self.session = session
        self.parts = PartRepository(session)
        self.assignments = AssignmentRepository(session)

    def recompute(
        self, control_number: int | None = None
    ) -> dict[tuple[int, str], PartStatus]:
        """
        Recompute derived statuses, for one control number or for all parts.

        Only parts whose status changes are written and FINISHED parts are left
        alone, so running this twice in a row changes nothing the second time.

        Returns:
            Mapping of (control_number, part_number) to the new status for
            every row that changed
        """
        changed: dict[tuple[int, str], PartStatus] = {}

        with transaction(self.session):
            parts = self.parts.list_by_control_number(control_number)
            if not parts:
                return changed

            control_numbers = {part.control_number for part in parts}
            statuses: dict[tuple[int, str], list[AssignmentStatus]] = defaultdict(list)
            for assignment in self.assignments.list_by_control_numbers(control_numbers):
                status = AssignmentStatus.from_stored(assignment.status)
                for part_number in set(assignment.part_numbers):
                    statuses[(assignment.control_number, part_number)].append(status)

            for part in parts:
                if PartStatus(part.status).is_terminal:
                    continue
                key = (part.control_number, part.part_number)
                new_status = derive_part_status(statuses.get(key, []))
                if part.status != new_status.value:
                    part.status = new_status.value
                    self.session.add(part)
                    changed[key] = new_status
                    PART_STATUS_UPDATES.labels(new_status=new_status.value).inc()

        if changed:
            logger.info(
                "Part statuses updated",
                control_number=control_number,
                changed={f"{cn}/{pn}": s.value for (cn, pn), s in changed.items()},
            )
        return changed

    def recompute_after_change(self, control_number: int) -> None:
        """
        Recompute following a committed status change or new assignment.

        Failure is logged and does not propagate: the change has already
        been committed and stays.
        """
        try:
            self.recompute(control_number)
        except (DatabaseError, ValueError) as e:
            logger.error(
                "Part status recomputation failed",
                control_number=control_number,
                error=str(e),
                exc_info=True,
            )

    def finish_control_number(self, control_number: int) -> int:
        """Force every part of ``control_number`` to FINISHED.

        Raises:
            EntityNotFoundError: the control number has no parts
        """
        with transaction(self.session):
            updated = self.parts.mark_finished(control_number)
            if updated == 0:
                raise EntityNotFoundError("Control number", control_number)

        log_event(
            self.session,
            "CONTROL_NUMBER_UPDATED",
            f"Control number {control_number} marked as finished",
        )
        return updated

    def active_control_numbers(self) -> list[int]:
        return self.parts.list_active_control_numbers()
