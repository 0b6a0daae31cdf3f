"""Tests for signup, login, session validation and role gating."""
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import select

from app.helpers.exceptions import Forbidden, Unauthorized
from app.helpers.time import as_utc, utcnow
from app.main import create_app
from app.users.auth_services import authorize, validate_session
from app.users.auth_session_model.session_model import Session
from app.users.user_models.user_model import User
from config.appconfig import AppSettings
from tests.conftest import PASSWORD, login, signup, sqlite_url

LIFETIME = timedelta(days=30)


class TestSignup:

    def test_signup_returns_public_fields(self, client):
        response = client.post(
            "/api/auth/signup",
            json={"email": "Nurse@Clinic.com ", "password": PASSWORD, "role": "nurse"},
        )
        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "User created successfully"
        assert body["user"]["email"] == "nurse@clinic.com"
        assert body["user"]["role"] == "nurse"
        assert "hashedPassword" not in body["user"]
        assert "hashed_password" not in body["user"]
        assert "password" not in body["user"]

    def test_default_role(self, client):
        user = client.post(
            "/api/auth/signup", json={"email": "helper@clinic.com", "password": PASSWORD}
        ).json()["user"]
        assert user["role"] == "assistant"

    def test_duplicate_email(self, client):
        signup(client, "doctor@clinic.com")
        response = client.post(
            "/api/auth/signup", json={"email": "DOCTOR@clinic.com", "password": PASSWORD}
        )
        assert response.status_code == 409
        assert response.json()["error"] == "DuplicateEmail"

    def test_short_password_rejected(self, client):
        response = client.post("/api/auth/signup", json={"email": "a@clinic.com", "password": "short"})
        assert response.status_code == 400
        assert response.json()["details"][0]["field"] == "password"

    def test_password_is_hashed_with_argon2(self, client, app):
        signup(client, "doctor@clinic.com")

        async def fetch_hash():
            async with app.state.database.session_factory() as session:
                result = await session.execute(select(User.hashed_password))
                return result.scalar_one()

        hashed = client.portal.call(fetch_hash)
        assert hashed.startswith("$argon2")
        assert PASSWORD not in hashed


class TestLogin:

    def test_login_sets_session_cookie(self, client):
        signup(client, "doctor@clinic.com")
        response = login(client, "doctor@clinic.com")

        assert response.json()["user"]["email"] == "doctor@clinic.com"
        cookie = response.headers["set-cookie"]
        assert cookie.startswith("session=")
        assert "HttpOnly" in cookie
        assert "SameSite=lax" in cookie or "samesite=lax" in cookie.lower()
        assert "Path=/" in cookie

    def test_failures_are_indistinguishable(self, client):
        signup(client, "doctor@clinic.com")

        wrong_password = client.post(
            "/api/auth/login", json={"email": "doctor@clinic.com", "password": "not-the-password"}
        )
        unknown_email = client.post(
            "/api/auth/login", json={"email": "ghost@clinic.com", "password": PASSWORD}
        )

        assert wrong_password.status_code == unknown_email.status_code == 401
        first, second = wrong_password.json(), unknown_email.json()
        first.pop("timestamp")
        second.pop("timestamp")
        assert first == second == {"error": "InvalidCredentials", "message": "Incorrect email or password"}

    def test_oversized_password_is_rejected_before_hashing(self, client):
        response = client.post("/api/auth/login", json={"email": "doctor@clinic.com", "password": "x" * 101})
        assert response.status_code == 400
        assert [d["field"] for d in response.json()["details"]] == ["password"]

    def test_me_and_logout(self, client):
        signup(client, "doctor@clinic.com")
        login(client, "doctor@clinic.com")

        me = client.get("/api/auth/me")
        assert me.status_code == 200
        assert me.json()["user"]["role"] == "doctor"

        logout = client.post("/api/auth/logout")
        assert logout.status_code == 200

        assert client.get("/api/auth/me").status_code == 401

    def test_old_cookie_is_dead_after_logout(self, client):
        signup(client, "doctor@clinic.com")
        token = login(client, "doctor@clinic.com").cookies["session"]
        client.post("/api/auth/logout")

        assert client.get("/api/auth/me", headers={"Cookie": f"session={token}"}).status_code == 401

    def test_each_login_is_an_independent_session(self, client):
        signup(client, "doctor@clinic.com")
        first = login(client, "doctor@clinic.com").cookies["session"]
        second = login(client, "doctor@clinic.com").cookies["session"]
        assert first != second

        client.post("/api/auth/logout")  # logs out `second`
        assert client.get("/api/auth/me", headers={"Cookie": f"session={first}"}).status_code == 200


class TestValidateSession:

    async def _user_with_session(self, db, expires_in):
        user = User(email="nurse@clinic.com", hashed_password="x", role="nurse")
        db.add(user)
        await db.commit()
        session = Session(id="token-123", user_id=user.id, expires_at=utcnow() + expires_in)
        db.add(session)
        await db.commit()
        return user, session

    async def test_anonymous(self, db):
        assert await validate_session(None, db, LIFETIME) == (None, None, False)
        assert await validate_session("unknown", db, LIFETIME) == (None, None, False)

    async def test_valid_session(self, db):
        user, _ = await self._user_with_session(db, timedelta(days=29))
        found, session, refreshed = await validate_session("token-123", db, LIFETIME)
        assert found.id == user.id
        assert session.id == "token-123"
        assert refreshed is False

    async def test_expired_session_is_purged(self, db):
        await self._user_with_session(db, timedelta(seconds=-1))
        assert await validate_session("token-123", db, LIFETIME) == (None, None, False)
        assert await db.get(Session, "token-123") is None

    async def test_session_is_extended_past_half_life(self, db):
        await self._user_with_session(db, timedelta(days=2))
        _, session, refreshed = await validate_session("token-123", db, LIFETIME)
        assert refreshed is True
        assert session.expires_at > utcnow() + timedelta(days=29)

    async def test_deleted_user_invalidates_session(self, db):
        user, _ = await self._user_with_session(db, timedelta(days=29))
        await db.delete(user)
        await db.commit()
        assert await validate_session("token-123", db, LIFETIME) == (None, None, False)


class TestAuthorize:

    def test_anonymous_is_unauthorized(self):
        with pytest.raises(Unauthorized):
            authorize(None)

    def test_role_outside_allowed_set_is_forbidden(self):
        user = User(email="n@clinic.com", role="nurse")
        with pytest.raises(Forbidden):
            authorize(user, ("admin", "doctor"))
        assert authorize(user) is user
        assert authorize(user, ("nurse",)) is user


class TestAppSettings:

    @pytest.fixture
    def production_app(self, tmp_path):
        return create_app(
            AppSettings(DATABASE_URL=sqlite_url(tmp_path), ENVIRONMENT="production", SESSION_EXPIRY_DAYS=2)
        )

    def test_cookie_and_lifetime_follow_app_settings(self, production_app):
        with TestClient(production_app, base_url="https://testserver") as client:
            signup(client, "doctor@clinic.com")
            response = login(client, "doctor@clinic.com")
            assert "secure" in response.headers["set-cookie"].lower()

            async def fetch_expiry():
                async with production_app.state.database.session_factory() as session:
                    result = await session.execute(select(Session.expires_at))
                    return result.scalar_one()

            expires_at = as_utc(client.portal.call(fetch_expiry))
            assert expires_at < utcnow() + timedelta(days=2, minutes=1)

            logout = client.post("/api/auth/logout")
            assert "secure" in logout.headers["set-cookie"].lower()

    def test_production_hides_error_detail(self, production_app, monkeypatch):
        async def explode(db):
            raise RuntimeError("postgres://admin:pw@db")

        monkeypatch.setattr("app.system_services.system_routes.get_patient_stats", explode)

        with TestClient(production_app, base_url="https://testserver", raise_server_exceptions=False) as client:
            signup(client, "doctor@clinic.com")
            login(client, "doctor@clinic.com")
            response = client.get("/api/stats")

        assert response.status_code == 500
        body = response.json()
        assert body["message"] == "An unexpected error occurred"
        assert "postgres" not in response.text
        assert body["correlationId"]
