"""
API Dependencies

Request-scoped session and the services built on top of it. Every endpoint
is permission-agnostic: authorization is handled in front of this service.
"""

from typing import Annotated

from fastapi import Depends
from sqlmodel import Session

from modelshop.application.queries.task_queries import TaskQueries
from modelshop.application.services.assignment_service import AssignmentService
from modelshop.application.services.notification_service import NotificationService
from modelshop.application.services.part_status_service import PartStatusService
from modelshop.application.services.task_status_service import TaskStatusService
from modelshop.application.services.work_order_service import WorkOrderService
from modelshop.core.db import get_db
from modelshop.core.storage import FileStorage, file_storage
from modelshop.infrastructure.database.repositories import (
    EmployeeRepository,
    TradeRepository,
)

SessionDep = Annotated[Session, Depends(get_db)]


def get_file_storage() -> FileStorage:
    return file_storage


FileStorageDep = Annotated[FileStorage, Depends(get_file_storage)]


def get_part_status_service(session: SessionDep) -> PartStatusService:
    return PartStatusService(session)


PartStatusServiceDep = Annotated[PartStatusService, Depends(get_part_status_service)]


def get_task_status_service(
    session: SessionDep, part_status: PartStatusServiceDep
) -> TaskStatusService:
    return TaskStatusService(session, part_status_service=part_status)


TaskStatusServiceDep = Annotated[TaskStatusService, Depends(get_task_status_service)]


def get_assignment_service(session: SessionDep) -> AssignmentService:
    return AssignmentService(session)


AssignmentServiceDep = Annotated[AssignmentService, Depends(get_assignment_service)]


def get_work_order_service(session: SessionDep) -> WorkOrderService:
    return WorkOrderService(session)


WorkOrderServiceDep = Annotated[WorkOrderService, Depends(get_work_order_service)]


def get_task_queries(session: SessionDep) -> TaskQueries:
    return TaskQueries(session)


TaskQueriesDep = Annotated[TaskQueries, Depends(get_task_queries)]


def get_notification_service(session: SessionDep) -> NotificationService:
    return NotificationService(session)


NotificationServiceDep = Annotated[
    NotificationService, Depends(get_notification_service)
]


def get_employee_repository(session: SessionDep) -> EmployeeRepository:
    return EmployeeRepository(session)


EmployeeRepositoryDep = Annotated[EmployeeRepository, Depends(get_employee_repository)]


def get_trade_repository(session: SessionDep) -> TradeRepository:
    return TradeRepository(session)


TradeRepositoryDep = Annotated[TradeRepository, Depends(get_trade_repository)]
