# app/repositories/user_repo.py
from typing import Any, Dict, List, Optional
from sqlalchemy import select
from core.db import get_session
from domain.sqlalchemy_models import User


def get_user_by_id(user_id: int) -> Optional[User]:
    with get_session() as s:
        return s.get(User, user_id)


def get_user_by_username(username: str) -> Optional[User]:
    with get_session() as s:
        return s.execute(select(User).where(User.username == username).limit(1)).scalar_one_or_none()


def get_user_by_email(email: str) -> Optional[User]:
    with get_session() as s:
        return s.execute(select(User).where(User.email == email).limit(1)).scalar_one_or_none()


def list_users() -> List[User]:
    with get_session() as s:
        return list(s.execute(select(User).order_by(User.id)).scalars())


def create_user(*, username: str, password: str, email: str, display_name: str, role: str) -> User:
    """`password` must already be a stored credential."""
    with get_session() as s:
        user = User(username=username, password=password, email=email, display_name=display_name, role=role)
        s.add(user)
        s.flush()
        s.refresh(user)
        return user


def update_user(user_id: int, fields: Dict[str, Any]) -> Optional[User]:
    with get_session() as s:
        user = s.get(User, user_id)
        if not user:
            return None
        for k, v in fields.items():
            setattr(user, k, v)
        s.flush()
        s.refresh(user)
        return user


def delete_user(user_id: int) -> bool:
    with get_session() as s:
        user = s.get(User, user_id)
        if not user:
            return False
        s.delete(user)
        return True
