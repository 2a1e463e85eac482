"""
Pydantic schemas for auth and user-management endpoints.

Rules:
- ALWAYS use Pydantic models for request/response
- Validate input at the boundary (username, email, password policy)
- Response schemas never expose the stored credential
"""
from __future__ import annotations
from pydantic import BaseModel, Field, field_validator
from typing import Optional
from core.security import is_valid_email, is_valid_password, is_valid_username, MIN_PASSWORD_LENGTH
from domain.models import PublicUser
from domain.sqlalchemy_models import UserRoleEnum


def _check_username(v: str) -> str:
    if not is_valid_username(v):
        raise ValueError("Username must be 3-30 letters, digits or underscores")
    return v


def _check_email(v: str) -> str:
    v = v.strip()
    if not is_valid_email(v):
        raise ValueError("Invalid email address")
    return v


def _check_password(v: str) -> str:
    if not is_valid_password(v):
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    return v


class LoginIn(BaseModel):
    """Request schema for user login."""
    username: str = Field(..., min_length=1, description="Username")
    password: str = Field(..., min_length=1, description="Password")


class RegisterIn(BaseModel):
    """Request schema for self-registration."""
    username: str = Field(..., description="Unique username")
    password: str = Field(..., description="Plaintext password (min 8 chars)")
    email: str = Field(..., description="Unique email address")
    display_name: str = Field(..., min_length=1, description="Display name")

    @field_validator("username")
    @classmethod
    def check_username(cls, v: str) -> str:
        return _check_username(v)

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        return _check_email(v)

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        return _check_password(v)


class UserCreateIn(RegisterIn):
    """Request schema for admin-side user creation."""
    role: UserRoleEnum = Field(default=UserRoleEnum.USER, description="admin or user")


class UserUpdateIn(BaseModel):
    """Request schema for partial user updates (all fields optional)."""
    username: Optional[str] = Field(default=None, description="New username")
    password: Optional[str] = Field(default=None, description="New plaintext password")
    email: Optional[str] = Field(default=None, description="New email address")
    display_name: Optional[str] = Field(default=None, min_length=1, description="New display name")
    role: Optional[UserRoleEnum] = Field(default=None, description="New role")

    @field_validator("username")
    @classmethod
    def check_username(cls, v: Optional[str]) -> Optional[str]:
        return v if v is None else _check_username(v)

    @field_validator("email")
    @classmethod
    def check_email(cls, v: Optional[str]) -> Optional[str]:
        return v if v is None else _check_email(v)

    @field_validator("password")
    @classmethod
    def check_password(cls, v: Optional[str]) -> Optional[str]:
        return v if v is None else _check_password(v)


# Response schema for a single user
UserOut = PublicUser


class AuthOut(BaseModel):
    """Response schema for login/registration."""
    ok: bool
    token: str
    user: UserOut
