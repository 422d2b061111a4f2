"""
JWT token management.

Tokens are stored in httpOnly cookies for security.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from yeild.config import settings

# JWT configuration
ALGORITHM = "HS256"
TOKEN_TYPE = "access"
COOKIE_NAME = "access_token"


def create_access_token(
    user_id: int,
    role: str,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Create a JWT access token.

    Args:
        user_id: User's database ID
        role: User's role (user/brand/admin)
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(hours=settings.jwt_expire_hours))

    payload = {
        "sub": str(user_id),
        "role": role,
        "exp": expire,
        "type": TOKEN_TYPE,
        "iat": now,
    }

    return jwt.encode(payload, settings.secret_key, algorithm=ALGORITHM)


def verify_token(token: str) -> Optional[dict]:
    """
    Verify and decode a JWT token.

    Returns:
        Dict with 'user_id' and 'role', or None if token is invalid/expired
    """
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[ALGORITHM],
        )
    except JWTError:
        return None

    if payload.get("type") != TOKEN_TYPE:
        return None

    user_id = payload.get("sub")
    role = payload.get("role")
    if not user_id or not role:
        return None

    return {
        "user_id": int(user_id),
        "role": role,
    }


def get_token_from_cookie(request) -> Optional[str]:
    """Extract JWT token from httpOnly cookie."""
    return request.cookies.get(COOKIE_NAME)
