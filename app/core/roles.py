"""
Role checks for the FULLSCO back office.

Rules:
- Roles are: admin, user (lowercase)
- Every user-management endpoint MUST require the admin role
- Role logic lives in this module, not scattered across routers
- Never trust role information from the client; always from JWT claims
"""
from __future__ import annotations
from fastapi import Depends
from core.auth import Authed, auth_required
from core.errors import http_error, ErrorCode
from domain.sqlalchemy_models import UserRoleEnum


def is_admin(role: str | None) -> bool:
    return (role or "").strip().lower() == UserRoleEnum.ADMIN.value


def require_admin(auth: Authed = Depends(auth_required)) -> Authed:
    """
    FastAPI dependency that only lets admins through.

    Example:
        @router.get("/users")
        def users(auth: Authed = Depends(require_admin)):
            ...
    """
    if not is_admin(auth.role):
        raise http_error(
            status_code=403,
            code=ErrorCode.FORBIDDEN,
            message="You do not have permission for this action",
            meta={"required_role": UserRoleEnum.ADMIN.value, "current_role": auth.role or None},
        )
    return auth
