"""
Service layer for user accounts.

Rules:
- Data access MUST be routed through repository/service layers
- Keep clean separation: API → service → repository → DB
- Plaintext passwords only ever reach `hash_password`; repositories receive credentials
- Uniqueness checks are read-then-write (the DB unique constraints are the backstop)
"""
from __future__ import annotations
from typing import List, Optional
from core.errors import http_error, ErrorCode
from core.logger import log_security_event
from core.security import hash_password
from domain.models import PublicUser
from domain.sqlalchemy_models import UserRoleEnum
from repositories import user_repo
from schemas.users import UserUpdateIn


def _to_public(user) -> PublicUser:
    return PublicUser.model_validate(user)


def _not_found() -> Exception:
    return http_error(
        status_code=404,
        code=ErrorCode.NOT_FOUND,
        message="User not found",
    )


def _ensure_username_free(username: str, exclude_id: Optional[int] = None) -> None:
    existing = user_repo.get_user_by_username(username)
    if existing and existing.id != exclude_id:
        raise http_error(
            status_code=409,
            code=ErrorCode.CONFLICT,
            message="Username already taken",
            meta={"field": "username"},
        )


def _ensure_email_free(email: str, exclude_id: Optional[int] = None) -> None:
    existing = user_repo.get_user_by_email(email)
    if existing and existing.id != exclude_id:
        raise http_error(
            status_code=409,
            code=ErrorCode.CONFLICT,
            message="Email already registered",
            meta={"field": "email"},
        )


def list_users() -> List[PublicUser]:
    return [_to_public(u) for u in user_repo.list_users()]


def get_user(user_id: int) -> PublicUser:
    user = user_repo.get_user_by_id(user_id)
    if not user:
        raise _not_found()
    return _to_public(user)


def create_user(
    *,
    username: str,
    password: str,
    email: str,
    display_name: str,
    role: str = UserRoleEnum.USER.value,
    actor_id: Optional[str] = None,
) -> PublicUser:
    """
    Create a user account.

    Raises:
        HTTPException: 409 if the username or email is already in use
    """
    _ensure_username_free(username)
    _ensure_email_free(email)

    user = user_repo.create_user(
        username=username,
        password=hash_password(password),
        email=email,
        display_name=display_name,
        role=role,
    )
    log_security_event(
        action="user_create",
        result="success",
        user_id=actor_id or str(user.id),
        meta={"created_user_id": user.id, "role": role},
    )
    return _to_public(user)


def update_user(user_id: int, data: UserUpdateIn, actor_id: Optional[str] = None) -> PublicUser:
    """
    Partially update a user. A new password replaces the stored credential wholesale.

    Raises:
        HTTPException: 404 if the user does not exist, 409 on username/email clash
    """
    existing = user_repo.get_user_by_id(user_id)
    if not existing:
        raise _not_found()

    changes = data.model_dump(exclude_unset=True, exclude_none=True)

    if "username" in changes and changes["username"] != existing.username:
        _ensure_username_free(changes["username"], exclude_id=user_id)
    if "email" in changes and changes["email"] != existing.email:
        _ensure_email_free(changes["email"], exclude_id=user_id)
    if "password" in changes:
        changes["password"] = hash_password(changes["password"])
    if "role" in changes:
        changes["role"] = UserRoleEnum(changes["role"]).value

    updated = user_repo.update_user(user_id, changes)
    if not updated:
        raise _not_found()

    log_security_event(
        action="user_update",
        result="success",
        user_id=actor_id,
        meta={"target_user_id": user_id, "fields": sorted(changes)},
    )
    return _to_public(updated)


def delete_user(user_id: int, actor_id: Optional[str] = None) -> None:
    """
    Delete a user account (and with it the stored credential).

    Raises:
        HTTPException: 403 when deleting the current user, 404 if missing
    """
    if actor_id is not None and str(user_id) == str(actor_id):
        log_security_event(
            action="user_delete",
            result="denied",
            user_id=actor_id,
            meta={"reason": "self_delete"},
            level="warning",
        )
        raise http_error(
            status_code=403,
            code=ErrorCode.FORBIDDEN,
            message="You cannot delete the current user",
        )

    if not user_repo.delete_user(user_id):
        raise _not_found()

    log_security_event(
        action="user_delete",
        result="success",
        user_id=actor_id,
        meta={"target_user_id": user_id},
    )
