from .assignment import TaskAssignment
from .audit import AuditLog
from .notification import Notification
from .staff import Employee, Trade, TradeEmployee
from .work_order import Part, PartBase, WorkOrder, WorkOrderBase

__all__ = [
    "AuditLog",
    "Employee",
    "Notification",
    "Part",
    "PartBase",
    "TaskAssignment",
    "Trade",
    "TradeEmployee",
    "WorkOrder",
    "WorkOrderBase",
]
