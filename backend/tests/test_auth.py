"""Tests for registration, login and session endpoints."""
from sqlalchemy.exc import OperationalError

from daily_checkin.config import settings
from daily_checkin.database import get_db
from daily_checkin.models.user import User
from tests.conftest import login, register_user


class TestRegister:

    def test_register(self, client):
        user = register_user(client, username="alice", email="alice@example.com")
        assert user["username"] == "alice"
        assert user["email"] == "alice@example.com"
        assert "id" in user
        assert settings.COOKIE_NAME in client.cookies

    def test_register_stores_hash_not_password(self, client, db):
        register_user(client, username="alice", password="secret123")
        stored = db.query(User).filter(User.username == "alice").one()
        assert stored.password_hash != "secret123"
        assert stored.role.value == "user"

    def test_blank_email_is_treated_as_none(self, client):
        resp = client.post("/api/auth/register", json={"username": "alice", "password": "secret123", "email": ""})
        assert resp.status_code == 201
        assert resp.json()["user"]["email"] is None

    def test_duplicate_username(self, client):
        register_user(client, username="alice")
        resp = client.post("/api/auth/register", json={"username": "alice", "password": "other123"})
        assert resp.status_code == 409

    def test_invalid_username(self, client):
        for username in ("ab", "has space", "dash-ed", "x" * 51):
            resp = client.post("/api/auth/register", json={"username": username, "password": "secret123"})
            assert resp.status_code == 422, username

    def test_short_password(self, client):
        resp = client.post("/api/auth/register", json={"username": "alice", "password": "12345"})
        assert resp.status_code == 422

    def test_invalid_email(self, client):
        resp = client.post("/api/auth/register", json={
            "username": "alice", "password": "secret123", "email": "not-an-email",
        })
        assert resp.status_code == 422


class TestLogin:

    def test_login(self, client):
        register_user(client, username="alice")
        client.cookies.clear()
        user = login(client, "alice")
        assert user["username"] == "alice"
        assert client.get("/api/auth/me").json()["username"] == "alice"

    def test_wrong_password(self, client):
        register_user(client, username="alice")
        resp = client.post("/api/auth/login", json={"username": "alice", "password": "wrong-pass"})
        assert resp.status_code == 401

    def test_unknown_user_same_message(self, client):
        register_user(client, username="alice")
        wrong_pw = client.post("/api/auth/login", json={"username": "alice", "password": "wrong-pass"})
        unknown = client.post("/api/auth/login", json={"username": "nobody", "password": "wrong-pass"})
        assert unknown.status_code == 401
        assert unknown.json()["detail"] == wrong_pw.json()["detail"]


class TestSession:

    def test_me_without_session(self, client):
        resp = client.get("/api/auth/me")
        assert resp.status_code == 200
        assert resp.json() is None

    def test_me(self, client):
        register_user(client, username="alice", email="alice@example.com")
        data = client.get("/api/auth/me").json()
        assert data["username"] == "alice"
        assert data["email"] == "alice@example.com"
        assert data["role"] == "user"

    def test_me_with_garbage_token(self, client):
        headers = {"Cookie": f"{settings.COOKIE_NAME}=not-a-jwt"}
        assert client.get("/api/auth/me", headers=headers).json() is None
        resp = client.get("/api/check-ins/status", headers=headers)
        assert resp.status_code == 401

    def test_token_for_deleted_user(self, client, db):
        user = register_user(client, username="alice")
        db.query(User).filter(User.id == user["id"]).delete()
        db.commit()
        assert client.get("/api/auth/me").json() is None
        assert client.get("/api/check-ins/status").status_code == 401

    def test_logout(self, client):
        register_user(client)
        resp = client.post("/api/auth/logout")
        assert resp.status_code == 200
        assert resp.json() == {"success": True}
        assert client.get("/api/auth/me").json() is None


class TestChangePassword:

    def test_change_password(self, client):
        register_user(client, username="alice", password="secret123")
        resp = client.post("/api/auth/change-password", json={
            "current_password": "secret123", "new_password": "newsecret456",
        })
        assert resp.status_code == 200
        assert resp.json()["success"] is True

        client.cookies.clear()
        bad = client.post("/api/auth/login", json={"username": "alice", "password": "secret123"})
        assert bad.status_code == 401
        login(client, "alice", "newsecret456")

    def test_wrong_current_password(self, client):
        register_user(client, username="alice", password="secret123")
        resp = client.post("/api/auth/change-password", json={
            "current_password": "nope", "new_password": "newsecret456",
        })
        assert resp.status_code == 401

    def test_requires_login(self, client):
        resp = client.post("/api/auth/change-password", json={
            "current_password": "secret123", "new_password": "newsecret456",
        })
        assert resp.status_code == 401


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_storage_unavailable(client):
    class DownSession:
        def query(self, *args):
            raise OperationalError("SELECT 1", {}, Exception("connection refused"))

        def close(self):
            pass

    register_user(client)
    client.app.dependency_overrides[get_db] = lambda: DownSession()
    resp = client.get("/api/check-ins/status")
    assert resp.status_code == 503
    assert resp.json() == {"detail": "Storage unavailable"}
