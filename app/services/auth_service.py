"""
Authentication service for user login and registration.

Rules:
- Validates credentials securely
- Returns minimal information on failure (no "user not found vs wrong password" distinction)
- A malformed stored credential is logged as an integrity error and denied like a wrong password
- Logs security events (login attempts)
- NEVER logs plaintext passwords or stored credentials
"""
from __future__ import annotations
from core.auth import sign_jwt
from core.errors import http_error, ErrorCode
from core.logger import log_security_event
from core.security import MalformedCredentialError, burn_derivation, verify_password
from domain.models import PublicUser
from domain.sqlalchemy_models import UserRoleEnum
from repositories.user_repo import get_user_by_id, get_user_by_username
from schemas.users import RegisterIn
from services import users_service

INVALID_CREDENTIALS = "Invalid username or password"


def _invalid_credentials() -> Exception:
    return http_error(
        status_code=401,
        code=ErrorCode.UNAUTHORIZED,
        message=INVALID_CREDENTIALS,
    )


def _session_payload(user: PublicUser) -> dict:
    return {
        "ok": True,
        "token": sign_jwt(str(user.id), user.role),
        "user": user,
    }


def login_issue_token(
    username: str,
    password: str,
    user_agent: str | None,
    ip: str | None
) -> dict:
    """
    Authenticate user and issue a session token.

    Args:
        username: Username as typed at login
        password: Plaintext password (re-derived and compared, never stored)
        user_agent: HTTP User-Agent header (optional, for logging)
        ip: Client IP address (optional, for logging)

    Returns:
        Dict with ok, token and the public user

    Raises:
        HTTPException: 401 with the same message for unknown user, wrong password
            or corrupt stored credential
    """
    client = {"ip": ip, "user_agent": user_agent}
    user = get_user_by_username(username)
    if not user:
        burn_derivation(password)
        log_security_event(
            action="login",
            result="failure",
            meta={"reason": "user_not_found", "username": username, **client},
        )
        raise _invalid_credentials()

    try:
        matched = verify_password(password, user.password)
    except MalformedCredentialError as e:
        burn_derivation(password)
        log_security_event(
            action="login",
            result="error",
            user_id=str(user.id),
            meta={"reason": "malformed_credential", "detail": str(e), **client},
            level="error",
        )
        raise _invalid_credentials()

    if not matched:
        log_security_event(
            action="login",
            result="failure",
            user_id=str(user.id),
            meta={"reason": "invalid_password", **client},
        )
        raise _invalid_credentials()

    public = PublicUser.model_validate(user)
    log_security_event(
        action="login",
        result="success",
        user_id=str(user.id),
        meta={"role": user.role, **client},
    )
    return _session_payload(public)


def register(data: RegisterIn) -> dict:
    """
    Create a regular user account and open a session for it.

    Raises:
        HTTPException: 409 if the username or email is already in use
    """
    user = users_service.create_user(
        username=data.username,
        password=data.password,
        email=data.email,
        display_name=data.display_name,
        role=UserRoleEnum.USER.value,
    )
    log_security_event(
        action="register",
        result="success",
        user_id=str(user.id),
    )
    return _session_payload(user)


def current_user(user_id: str) -> PublicUser:
    """
    Resolve the user behind a session token.

    Raises:
        HTTPException: 401 if the account no longer exists
    """
    user = get_user_by_id(int(user_id)) if user_id.isdigit() else None
    if not user:
        raise http_error(
            status_code=401,
            code=ErrorCode.UNAUTHORIZED,
            message="Authentication is required.",
        )
    return PublicUser.model_validate(user)
