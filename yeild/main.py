"""
YEILD - Rewards and Referral Service

Main FastAPI application with:
- Bird level progress and level-up detection
- Referral signup, activation and commission
- Task approval with bird level point bonus
- Commission reconciliation scheduler
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqlalchemy import select

from yeild.api import api_router
from yeild.config import settings
from yeild.db import get_db_context
from yeild.models import User, UserRole
from yeild.scheduler import scheduler, setup_scheduler
from yeild.services.tiers import get_tiers, validate_tiers
from yeild.utils.password import hash_password

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup:
    - Validates the tier table (refuses to start on a bad table)
    - Creates admin account if not exists
    - Starts the scheduler

    Shutdown:
    - Stops the scheduler
    """
    logger.info("Starting YEILD...")

    validate_tiers(get_tiers())
    logger.info(f"Tier table OK: {len(get_tiers())} levels")

    async with get_db_context() as db:
        admin = await db.scalar(
            select(User).where(User.role == UserRole.ADMIN)
        )

        if not admin:
            logger.info("Creating admin account...")
            db.add(
                User(
                    username=settings.admin_username,
                    password_hash=hash_password(settings.admin_password),
                    role=UserRole.ADMIN,
                    display_name="Admin",
                    is_active=True,
                )
            )
            logger.info(f"Admin account created: {settings.admin_username}")

    setup_scheduler()
    scheduler.start()

    logger.info("YEILD started successfully!")

    yield

    logger.info("Shutting down YEILD...")
    scheduler.shutdown(wait=False)


app = FastAPI(
    title="YEILD",
    description="Rewards, bird levels and referral commissions",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if not settings.is_production else None,
    redoc_url="/redoc" if not settings.is_production else None,
)

app.include_router(api_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "yeild.main:app",
        host="0.0.0.0",
        port=8000,
        reload=not settings.is_production,
    )
