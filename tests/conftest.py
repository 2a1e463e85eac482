import os
import sys
from pathlib import Path as _Path
sys.path.insert(0, str(_Path(__file__).resolve().parents[1] / "app"))

os.environ["JWT_SECRET"] = "test-secret-not-for-production"
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"

import pytest
from fastapi.testclient import TestClient

from core.auth import sign_jwt
from core.db import engine
from domain.sqlalchemy_models import Base


@pytest.fixture(autouse=True)
def db():
    """Fresh schema for every test."""
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def client():
    from main import app
    return TestClient(app)


@pytest.fixture()
def make_user():
    """Create a user through the service layer; returns the public user."""
    from services.users_service import create_user

    counter = {"n": 0}

    def _make(role: str = "user", password: str = "s3cret-pass", username: str | None = None):
        counter["n"] += 1
        name = username or f"{role}_{counter['n']}"
        return create_user(
            username=name,
            password=password,
            email=f"{name}@example.org",
            display_name=name.title(),
            role=role,
        )

    return _make


@pytest.fixture()
def auth_header():
    def _hdr(user) -> dict:
        return {"Authorization": f"Bearer {sign_jwt(str(user.id), user.role)}"}

    return _hdr
