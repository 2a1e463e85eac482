import statistics
import time

import pytest
from fastapi.testclient import TestClient

import core.security as security
import services.auth_service as auth_service
from repositories import user_repo

GENERIC = {"code": "unauthorized", "message": "Invalid username or password"}


def _register(client, **over):
    body = {
        "username": "mona",
        "password": "Tr0ub4dor&3",
        "email": "mona@example.org",
        "display_name": "Mona A.",
    }
    body.update(over)
    return client.post("/api/v1/auth/register", json=body)


def test_health(client):
    assert client.get("/health").json() == {"ok": True}


def test_register_then_login(client):
    r = _register(client)
    assert r.status_code == 201
    data = r.json()
    assert data["ok"] is True and data["token"]
    assert data["user"]["username"] == "mona"
    assert data["user"]["role"] == "user"
    assert "password" not in data["user"]

    r = client.post("/api/v1/auth/login", json={"username": "mona", "password": "Tr0ub4dor&3"})
    assert r.status_code == 200
    assert r.json()["user"]["email"] == "mona@example.org"


def test_stored_credential_is_salted_digest(client):
    _register(client)
    stored = user_repo.get_user_by_username("mona").password
    assert stored != "Tr0ub4dor&3"
    digest, salt = stored.split(".")
    assert len(digest) == 128 and len(salt) == 32
    assert security.verify_password("Tr0ub4dor&3", stored)


def test_register_cannot_choose_role(client):
    r = _register(client, role="admin")
    assert r.status_code == 201
    assert r.json()["user"]["role"] == "user"


def test_unknown_user_and_wrong_password_look_identical(client):
    _register(client)
    wrong = client.post("/api/v1/auth/login", json={"username": "mona", "password": "wrongpass"})
    unknown = client.post("/api/v1/auth/login", json={"username": "nobody", "password": "wrongpass"})
    assert wrong.status_code == unknown.status_code == 401
    assert wrong.json() == unknown.json() == {"detail": GENERIC}


def test_malformed_stored_credential_fails_closed_and_is_logged(client, monkeypatch):
    user_repo.create_user(
        username="legacy",
        password="not-a-valid-credential-string",
        email="legacy@example.org",
        display_name="Legacy",
        role="user",
    )
    events = []
    monkeypatch.setattr(auth_service, "log_security_event", lambda **kw: events.append(kw))

    r = client.post("/api/v1/auth/login", json={"username": "legacy", "password": "whatever1"})
    assert r.status_code == 401
    assert r.json() == {"detail": GENERIC}
    assert events[-1]["result"] == "error"
    assert events[-1]["level"] == "error"
    assert events[-1]["meta"]["reason"] == "malformed_credential"
    assert "not-a-valid-credential-string" not in repr(events)


def test_derivation_failure_is_a_generic_server_error(client, monkeypatch):
    _register(client)

    def boom(password, salt):
        raise ValueError("memory limit exceeded")

    monkeypatch.setattr(security, "derive_digest", boom)
    c = TestClient(client.app, raise_server_exceptions=False)
    r = c.post("/api/v1/auth/login", json={"username": "mona", "password": "Tr0ub4dor&3"})
    assert r.status_code == 500
    assert r.json() == {"detail": {"code": "internal_error", "message": "Internal server error"}}


def test_login_requires_both_fields(client):
    assert client.post("/api/v1/auth/login", json={"username": "mona"}).status_code == 422
    assert client.post("/api/v1/auth/login", json={"username": "", "password": "x"}).status_code == 422


def test_register_duplicates_conflict(client):
    assert _register(client).status_code == 201

    r = _register(client, email="other@example.org")
    assert r.status_code == 409
    assert r.json()["detail"]["message"] == "Username already taken"

    r = _register(client, username="mona2")
    assert r.status_code == 409
    assert r.json()["detail"]["message"] == "Email already registered"


def test_register_validation(client):
    assert _register(client, password="short").status_code == 422
    assert _register(client, username="a b").status_code == 422
    assert _register(client, email="not-an-email").status_code == 422


def test_me_and_logout(client):
    token = _register(client).json()["token"]
    hdr = {"Authorization": f"Bearer {token}"}

    r = client.get("/api/v1/auth/me", headers=hdr)
    assert r.status_code == 200
    assert r.json()["username"] == "mona"
    assert "password" not in r.json()

    r = client.post("/api/v1/auth/logout", headers=hdr)
    assert r.json()["ok"] is True


def test_me_without_or_with_bad_token(client):
    assert client.get("/api/v1/auth/me").status_code == 401
    r = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer nope"})
    assert r.status_code == 401
    assert r.json()["detail"]["code"] == "unauthorized"


def test_me_after_account_deleted(client, make_user, auth_header):
    u = make_user()
    hdr = auth_header(u)
    user_repo.delete_user(u.id)
    assert client.get("/api/v1/auth/me", headers=hdr).status_code == 401


def test_public_user_uses_display_name(client):
    r = _register(client)
    assert r.json()["user"]["display_name"] == "Mona A."
    assert "full_name" not in r.json()["user"]

    body = {"username": "omar", "password": "Tr0ub4dor&3", "email": "omar@example.org", "full_name": "Omar"}
    assert client.post("/api/v1/auth/register", json=body).status_code == 422


def test_every_failed_login_runs_one_derivation(client, monkeypatch):
    _register(client)
    user_repo.create_user(
        username="legacy",
        password="not-a-valid-credential-string",
        email="legacy@example.org",
        display_name="Legacy",
        role="user",
    )
    real = security.derive_digest
    calls = []

    def counting(password, salt):
        calls.append(salt)
        return real(password, salt)

    monkeypatch.setattr(security, "derive_digest", counting)
    for username in ("mona", "nobody", "legacy"):
        calls.clear()
        r = client.post("/api/v1/auth/login", json={"username": username, "password": "wrongpass"})
        assert r.status_code == 401
        assert len(calls) == 1, username


@pytest.mark.slow
def test_unknown_username_costs_the_same_as_wrong_password(client):
    _register(client)

    def sample(username):
        runs = []
        for _ in range(7):
            t0 = time.perf_counter()
            client.post("/api/v1/auth/login", json={"username": username, "password": "wrongpass"})
            runs.append(time.perf_counter() - t0)
        return statistics.median(runs)

    sample("mona")
    known, unknown = sample("mona"), sample("nobody")
    assert 0.5 < known / unknown < 2.0
