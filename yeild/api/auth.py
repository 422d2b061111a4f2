"""
Authentication API endpoints.
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from yeild.auth.jwt import COOKIE_NAME, create_access_token
from yeild.config import settings
from yeild.db import get_db
from yeild.models import Profile, User, UserRole
from yeild.schemas.auth import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
)
from yeild.services.errors import ReferralError
from yeild.services.referrals import process_referral_signup
from yeild.utils.password import hash_password, verify_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/login", response_model=LoginResponse)
async def login(
    response: Response,
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    """Authenticate user and set JWT cookie."""
    user = await db.scalar(
        select(User).where(User.username == credentials.username)
    )

    if not user or not verify_password(credentials.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is disabled",
        )

    token = create_access_token(user.id, user.role.value)

    response.set_cookie(
        key=COOKIE_NAME,
        value=token,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        max_age=settings.jwt_expire_hours * 3600,
    )

    user.last_active_at = datetime.now(timezone.utc)
    logger.info(f"User {user.id} logged in")

    return LoginResponse(
        success=True,
        message="Login successful",
        user_id=user.id,
        role=user.role.value,
    )


@router.post("/logout")
async def logout(response: Response):
    """Clear JWT cookie."""
    response.delete_cookie(
        key=COOKIE_NAME,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )

    return {"success": True, "message": "Logged out"}


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    payload: RegisterRequest,
    db: AsyncSession = Depends(get_db),
):
    """Create a user with a profile, optionally linked to a referrer."""
    existing = await db.scalar(select(User).where(User.username == payload.username))
    if existing is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Username already taken",
        )

    user = User(
        username=payload.username,
        password_hash=hash_password(payload.password),
        role=UserRole.USER,
        display_name=payload.display_name,
        is_active=True,
    )
    db.add(user)
    await db.flush()

    profile = Profile(id=user.id)
    db.add(profile)
    await db.flush()

    referred_by = None
    if payload.referral_code:
        try:
            referral = await process_referral_signup(db, payload.referral_code, user.id)
        except ReferralError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
        referred_by = referral.referrer_id

    logger.info(f"User {user.id} registered")

    return RegisterResponse(
        user_id=user.id,
        referral_code=profile.referral_code,
        referred_by=referred_by,
    )
