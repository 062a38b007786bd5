"""Factory helpers for building test data directly in the database."""

import random
from datetime import date, datetime, timezone

from sqlmodel import Session, select

from modelshop.domain.enums import AssignmentStatus
from modelshop.models import (
    Employee,
    Part,
    TaskAssignment,
    Trade,
    TradeEmployee,
    WorkOrder,
)


def create_work_order(
    session: Session, *, priority: int = 1, group_section: str = "Assembly", **kwargs
) -> WorkOrder:
    work_order = WorkOrder(
        work_order_number=kwargs.pop(
            "work_order_number", f"WO-{random.randint(1000, 9999)}"
        ),
        project_code=kwargs.pop("project_code", "PRJ-01"),
        priority=priority,
        group_section=group_section,
        work_order_date=date(2024, 1, 10),
        received_date=date(2024, 1, 11),
        desired_completion_date=date(2024, 2, 1),
        product_description="Scale model",
        **kwargs,
    )
    session.add(work_order)
    session.commit()
    session.refresh(work_order)
    return work_order


def create_parts(
    session: Session, control_number: int, part_numbers: list[str]
) -> list[Part]:
    parts = [
        Part(
            control_number=control_number,
            part_number=part_number,
            description=f"Part {part_number}",
            quantity=2,
        )
        for part_number in part_numbers
    ]
    session.add_all(parts)
    session.commit()
    for part in parts:
        session.refresh(part)
    return parts


def create_employee(session: Session, name: str = "Alice") -> Employee:
    employee = Employee(employee_name=name, email_id=f"{name.strip().lower()}@shop")
    session.add(employee)
    session.commit()
    session.refresh(employee)
    return employee


def create_trade(session: Session, name: str, employees: list[Employee]) -> Trade:
    trade = Trade(trade_name=name)
    session.add(trade)
    session.commit()
    session.refresh(trade)
    for employee in employees:
        session.add(
            TradeEmployee(trade_id=trade.trade_id, employee_id=employee.employee_id)
        )
    session.commit()
    return trade


def create_assignment(
    session: Session,
    control_number: int,
    part_numbers: list[str],
    employee_id: int,
    *,
    status: AssignmentStatus = AssignmentStatus.PENDING,
    assigned_by: int | None = 99,
    **kwargs,
) -> TaskAssignment:
    if status is AssignmentStatus.ONGOING:
        kwargs.setdefault(
            "actual_start_date", datetime(2024, 1, 15, 8, 0, tzinfo=timezone.utc)
        )
    assignment = TaskAssignment(
        control_number=control_number,
        part_numbers=part_numbers,
        employee_id=employee_id,
        assigned_by=assigned_by,
        status=status.stored_value,
        **kwargs,
    )
    session.add(assignment)
    session.commit()
    session.refresh(assignment)
    return assignment


def part_statuses(session: Session, control_number: int) -> dict[str, str]:
    session.expire_all()
    statement = select(Part).where(Part.control_number == control_number)
    parts = session.exec(statement).all()
    return {part.part_number: part.status for part in parts}
