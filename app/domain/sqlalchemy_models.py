"""
SQLAlchemy models for FULLSCO user accounts.

The schema is owned by Alembic (see alembic/versions); keep both in sync.
"""
from __future__ import annotations
from enum import Enum as PyEnum
from sqlalchemy import Column, String, Integer, Text, TIMESTAMP
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class UserRoleEnum(str, PyEnum):
    """Roles a user account can hold."""
    ADMIN = "admin"
    USER = "user"


class User(Base):
    """
    User model representing site accounts (admins and registered users).

    `password` holds the stored credential "<digest-hex>.<salt-hex>",
    never a plaintext password.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(Text, unique=True, nullable=False, index=True)
    password = Column(Text, nullable=False)
    email = Column(Text, unique=True, nullable=False, index=True)
    display_name = Column(Text, nullable=False)
    role = Column(String(20), nullable=False, default=UserRoleEnum.USER.value, server_default=UserRoleEnum.USER.value)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username})>"
