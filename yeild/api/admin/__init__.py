"""Admin API router aggregation."""

from fastapi import APIRouter

from yeild.api.admin.events import router as events_router
from yeild.api.admin.tasks import router as tasks_router

admin_router = APIRouter(prefix="/admin", tags=["Admin"])

admin_router.include_router(events_router)
admin_router.include_router(tasks_router)

__all__ = ["admin_router"]
