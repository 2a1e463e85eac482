"""
Authentication endpoints.

Rules:
- Validate input with Pydantic schemas
- Return minimal information on failure
- ALWAYS use Pydantic models for request/response
"""
from __future__ import annotations
from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel
from core.auth import auth_required, Authed
from core.logger import log_security_event
from schemas.users import AuthOut, LoginIn, RegisterIn, UserOut
from services.auth_service import current_user, login_issue_token, register

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


class LogoutOut(BaseModel):
    """Response schema for logout."""
    ok: bool
    message: str


@router.post("/login", response_model=AuthOut)
def login(body: LoginIn, req: Request) -> dict:
    """
    Authenticate user and issue a session token.

    Unknown username and wrong password produce the same 401 response.
    """
    ua = req.headers.get("user-agent")
    ip = req.client.host if req.client else None
    return login_issue_token(body.username, body.password, ua, ip)


@router.post("/register", response_model=AuthOut, status_code=201)
def signup(body: RegisterIn) -> dict:
    return register(body)


@router.get("/me", response_model=UserOut)
def me(auth: Authed = Depends(auth_required)):
    """Get the current authenticated user (without credential)."""
    return current_user(auth.user_id)


@router.post("/logout", response_model=LogoutOut)
def logout(auth: Authed = Depends(auth_required)) -> dict:
    # tokens are stateless; the client drops it
    log_security_event(action="logout", result="success", user_id=auth.user_id)
    return {"ok": True, "message": "Logged out"}
