from fastapi import APIRouter

from modelshop.api.routes import (
    control_numbers,
    health,
    notifications,
    staff,
    task_status,
    tasks,
    uploads,
    work_orders,
)

api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(task_status.router)
api_router.include_router(tasks.router)
api_router.include_router(control_numbers.router)
api_router.include_router(work_orders.router)
api_router.include_router(staff.router)
api_router.include_router(notifications.router)
api_router.include_router(uploads.router)
