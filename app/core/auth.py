"""
Authentication and JWT session token management module.

Rules:
- Sign tokens with a private signing key from environment variables
- NEVER hardcode secrets or keys in the repository
- Include user_id and role in JWT claims
- Set sensible expirations for access tokens
- Only accept tokens via secure headers (Authorization: Bearer <token>)
"""
from __future__ import annotations
import datetime
import jwt
from fastapi import Request
from pydantic import BaseModel
from core.config import settings
from core.errors import http_error, ErrorCode


class Authed(BaseModel):
    """Authenticated user context."""
    user_id: str
    role: str


def sign_jwt(user_id: str, role: str) -> str:
    """
    Sign a session token with user and role information.

    Args:
        user_id: User identifier
        role: User role (admin, user)

    Returns:
        Encoded JWT token string
    """
    now = datetime.datetime.now(datetime.timezone.utc)
    payload = {
        "sub": str(user_id),
        "role": str(role),
        "iat": now,
        "exp": now + datetime.timedelta(minutes=settings.JWT_EXP_MIN),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm="HS256")


def auth_required(req: Request) -> Authed:
    """
    FastAPI dependency that validates the session token from the Authorization header.

    Raises:
        HTTPException: 401 if token is missing, invalid, or expired
    """
    auth = req.headers.get("authorization")
    if not auth or not auth.lower().startswith("bearer "):
        raise http_error(
            status_code=401,
            code=ErrorCode.UNAUTHORIZED,
            message="Missing bearer token",
        )

    token = auth.split(" ", 1)[1].strip()
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=["HS256"])
    except jwt.ExpiredSignatureError:
        raise http_error(
            status_code=401,
            code=ErrorCode.UNAUTHORIZED,
            message="Token has expired",
        )
    except jwt.InvalidTokenError:
        raise http_error(
            status_code=401,
            code=ErrorCode.UNAUTHORIZED,
            message="Invalid or expired token",
        )

    return Authed(
        user_id=str(payload.get("sub", "")),
        role=str(payload.get("role", "")),
    )
