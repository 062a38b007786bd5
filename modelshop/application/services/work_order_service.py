"""Work order and part registration."""

from sqlmodel import Session

from modelshop.application.dtos.work_order_dtos import PartIn, WorkOrderCreate
from modelshop.core.observability import get_logger
from modelshop.domain.exceptions import EntityNotFoundError, ValidationError
from modelshop.infrastructure.database.repositories import (
    PartRepository,
    WorkOrderRepository,
)
from modelshop.infrastructure.database.unit_of_work import transaction
from modelshop.models import Part, WorkOrder

from .audit import log_event

logger = get_logger(__name__)


class WorkOrderService:
    def __init__(self, session: Session):
        self.session = session
        self.work_orders = WorkOrderRepository(session)
        self.parts = PartRepository(session)

    def create_work_order(
        self, data: WorkOrderCreate, document_path: str | None = None
    ) -> WorkOrder:
        """Insert a work order; the database assigns its control number."""
        with transaction(self.session):
            work_order = self.work_orders.add(
                WorkOrder(**data.model_dump(), doc_upload_path=document_path)
            )
        self.session.refresh(work_order)
        logger.info(
            "Work order created",
            control_number=work_order.control_number,
            work_order_number=work_order.work_order_number,
        )

        log_event(
            self.session,
            "Work Order Created",
            f"Work order {work_order.work_order_number} "
            f"(Control #{work_order.control_number}) created successfully.",
        )
        return work_order

    def add_parts(self, control_number: int, parts: list[PartIn]) -> list[Part]:
        """
        Add parts to a work order, all or nothing.

        Raises:
            ValidationError: unknown control number or duplicate part number
        """
        if not self.work_orders.exists(control_number):
            raise ValidationError(
                "controlNumber", control_number, "Invalid Control Number"
            )

        existing = set(self.parts.list_part_numbers(control_number))
        seen: set[str] = set()
        for part in parts:
            if part.part_number in existing or part.part_number in seen:
                raise ValidationError(
                    "partNumber",
                    part.part_number,
                    f"Part {part.part_number} already exists "
                    f"for control number {control_number}",
                )
            seen.add(part.part_number)

        with transaction(self.session):
            created = self.parts.add_all(
                Part(control_number=control_number, **part.model_dump())
                for part in parts
            )
        logger.info(
            "Parts added",
            control_number=control_number,
            part_numbers=[part.part_number for part in parts],
        )

        log_event(
            self.session, "Parts Added", f"Parts added for Control #{control_number}"
        )
        return created

    def part_numbers(self, control_number: int) -> list[str]:
        """
        Raises:
            EntityNotFoundError: the control number has no parts
        """
        part_numbers = self.parts.list_part_numbers(control_number)
        if not part_numbers:
            raise EntityNotFoundError("Parts for control number", control_number)
        return part_numbers

    def control_numbers(self) -> list[int]:
        return self.work_orders.list_control_numbers()
