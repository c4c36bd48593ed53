"""
Tests for authentication endpoints and token handling.
"""

from datetime import datetime, timedelta

import pytest
from httpx import AsyncClient
from jose import jwt

from recipebox.core.config import settings
from recipebox.services.auth_service import auth_service
from recipebox.utils.exceptions import AuthenticationError


class TestRegister:

    async def test_register(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/auth/register",
            json={
                "username": "newcook",
                "email": "newcook@example.com",
                "password": "s3cretpass",
                "full_name": "New Cook",
            },
        )

        assert response.status_code == 201
        data = response.json()
        assert data["username"] == "newcook"
        assert data["is_admin"] is False
        assert "hashed_password" not in data

    async def test_duplicate_username(self, client: AsyncClient, test_user):
        response = await client.post(
            "/api/v1/auth/register",
            json={"username": "testuser", "email": "fresh@example.com", "password": "s3cretpass"},
        )

        assert response.status_code == 400
        assert response.json()["field"] == "username"

    async def test_invalid_email(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/auth/register",
            json={"username": "newcook", "email": "not-an-email", "password": "s3cretpass"},
        )

        assert response.status_code == 422


class TestLogin:

    async def test_login_returns_usable_token(self, client: AsyncClient, test_user):
        response = await client.post(
            "/api/v1/auth/login",
            json={"username": "testuser", "password": "testpassword123"},
        )

        assert response.status_code == 200
        token = response.json()["access_token"]
        assert response.json()["token_type"] == "bearer"

        me = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert me.status_code == 200
        assert me.json()["id"] == test_user.id

    async def test_wrong_password(self, client: AsyncClient, test_user):
        response = await client.post(
            "/api/v1/auth/login",
            json={"username": "testuser", "password": "wrongpassword"},
        )

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"

    async def test_refresh(self, client: AsyncClient, test_user, auth_headers):
        response = await client.post("/api/v1/auth/refresh", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["user"]["username"] == "testuser"


class TestTokens:

    def test_round_trip(self):
        token = auth_service.create_access_token(42)

        assert auth_service.decode_access_token(token) == 42

    def test_expired_token(self):
        now = datetime.utcnow()
        token = jwt.encode(
            {
                "sub": "1",
                "iat": now - timedelta(hours=2),
                "exp": now - timedelta(hours=1),
                "iss": settings.TOKEN_ISSUER,
                "type": "access",
            },
            settings.SECRET_KEY,
            algorithm=settings.ALGORITHM,
        )

        with pytest.raises(AuthenticationError):
            auth_service.decode_access_token(token)

    def test_wrong_issuer(self):
        token = jwt.encode(
            {"sub": "1", "iss": "someone-else", "type": "access"},
            settings.SECRET_KEY,
            algorithm=settings.ALGORITHM,
        )

        with pytest.raises(AuthenticationError):
            auth_service.decode_access_token(token)

    def test_long_password(self):
        password = "p" * 100
        hashed = auth_service.hash_password(password)

        assert auth_service.verify_password(password, hashed)
        assert not auth_service.verify_password("p" * 99, hashed)

    async def test_garbage_token_rejected(self, client: AsyncClient):
        response = await client.get(
            "/api/v1/auth/me", headers={"Authorization": "Bearer not-a-token"}
        )

        assert response.status_code == 401

    async def test_garbage_token_is_anonymous_for_search(self, client: AsyncClient):
        response = await client.get(
            "/api/v1/search", headers={"Authorization": "Bearer not-a-token"}
        )

        assert response.status_code == 200
