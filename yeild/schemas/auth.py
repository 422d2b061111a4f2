"""Authentication schemas."""

from typing import Optional

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Login request body."""

    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    """Login response."""

    success: bool
    message: str
    user_id: int
    role: str = Field(default="")


class RegisterRequest(BaseModel):
    """Sign-up request body. referral_code links the new user to a referrer."""

    username: str = Field(..., min_length=3, max_length=100)
    password: str = Field(..., min_length=6, max_length=100)
    display_name: str = Field(..., min_length=1, max_length=100)
    referral_code: Optional[str] = Field(None, min_length=4, max_length=16)


class RegisterResponse(BaseModel):
    user_id: int
    referral_code: str
    referred_by: Optional[int] = None
