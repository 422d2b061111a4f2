"""API router aggregation."""

from fastapi import APIRouter

from yeild.api.admin import admin_router
from yeild.api.auth import router as auth_router
from yeild.api.health import router as health_router
from yeild.api.progress import router as progress_router
from yeild.api.referrals import router as referrals_router

# Main API router (for /api/* endpoints)
api_router = APIRouter(prefix="/api")

api_router.include_router(health_router)
api_router.include_router(auth_router)
api_router.include_router(progress_router)
api_router.include_router(referrals_router)
api_router.include_router(admin_router)

__all__ = ["api_router"]
