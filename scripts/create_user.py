#!/usr/bin/env python3
"""Create a back-office account from the command line.

Run after `alembic upgrade head`:
  python scripts/create_user.py
"""
from __future__ import annotations

import sys
from getpass import getpass
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "app"))

from fastapi import HTTPException  # noqa: E402

from core.security import is_valid_email, is_valid_password, is_valid_username  # noqa: E402
from domain.sqlalchemy_models import UserRoleEnum  # noqa: E402
from services.users_service import create_user  # noqa: E402


def main() -> None:
    username = input("Username: ").strip()
    if not is_valid_username(username):
        raise SystemExit("Username must be 3-30 letters, digits or underscores")
    email = input("Email: ").strip()
    if not is_valid_email(email):
        raise SystemExit("Invalid email address")
    display_name = input("Display name: ").strip() or username
    role = (input("Role [admin/user]: ").strip().lower() or UserRoleEnum.ADMIN.value)
    if role not in {r.value for r in UserRoleEnum}:
        raise SystemExit(f"Unknown role: {role}")

    pw1 = getpass("Password: ")
    pw2 = getpass("Repeat password: ")
    if pw1 != pw2:
        raise SystemExit("Passwords do not match")
    if not is_valid_password(pw1):
        raise SystemExit("Password must be at least 8 characters")

    try:
        user = create_user(username=username, password=pw1, email=email, display_name=display_name, role=role)
    except HTTPException as e:
        raise SystemExit(e.detail["message"])
    print(f"OK -> user #{user.id} ({user.username}, {user.role})")


if __name__ == "__main__":
    main()
