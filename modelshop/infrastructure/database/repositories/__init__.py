from .assignment_repository import AssignmentRepository
from .base import BaseRepository, DatabaseError
from .notification_repository import NotificationRepository
from .staff_repository import EmployeeRepository, TradeRepository
from .work_order_repository import PartRepository, WorkOrderRepository

__all__ = [
    "AssignmentRepository",
    "BaseRepository",
    "DatabaseError",
    "EmployeeRepository",
    "NotificationRepository",
    "PartRepository",
    "TradeRepository",
    "WorkOrderRepository",
]
