"""
Testes dos endpoints de autenticação.
"""

from unittest.mock import AsyncMock, patch

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.anyio


class TestSignup:

    async def test_signup_creates_student(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/auth/signup",
            json={
                "name": "Carla Dias",
                "email": "carla@icp.edu",
                "password": "Carla1234",
                "student_id": "CS2024001",
            },
        )

        assert response.status_code == 201
        data = response.json()
        assert data["email"] == "carla@icp.edu"
        assert data["role"] == "student"
        assert data["student_id"] == "CS2024001"
        assert "password" not in data
        assert "password_hash" not in data

    async def test_signup_duplicate_email(self, client: AsyncClient, student):
        response = await client.post(
            "/api/v1/auth/signup",
            json={"name": "Outra Ana", "email": student.email, "password": "Outra1234"},
        )

        assert response.status_code == 409
        data = response.json()
        assert data["success"] is False
        assert data["error"] == "conflict"
        assert "já cadastrado" in data["message"]

    async def test_signup_weak_password(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/auth/signup",
            json={"name": "Fraca", "email": "fraca@icp.edu", "password": "semnumero"},
        )

        assert response.status_code == 422
        data = response.json()
        assert data["success"] is False
        assert data["error"] == "validation_error"
        assert data["message"].startswith("password")


class TestLogin:

    async def test_login_returns_token(self, client: AsyncClient, student):
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": student.email, "password": "Student123!"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["user"]["id"] == str(student.id)
        assert data["token"]["token_type"] == "bearer"
        assert data["token"]["access_token"]

    async def test_login_wrong_password(self, client: AsyncClient, student):
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": student.email, "password": "Errada123"},
        )

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"
        assert response.json() == {
            "success": False,
            "error": "unauthorized",
            "message": "Email ou senha incorretos",
        }

    async def test_login_unknown_email(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": "ninguem@icp.edu", "password": "Student123!"},
        )

        assert response.status_code == 401


class TestMe:

    async def test_me_returns_current_user(self, client: AsyncClient, librarian, librarian_headers):
        response = await client.get("/api/v1/auth/me", headers=librarian_headers)

        assert response.status_code == 200
        assert response.json()["role"] == "librarian"

    async def test_me_without_token(self, client: AsyncClient):
        response = await client.get("/api/v1/auth/me")

        assert response.status_code in (401, 403)
        assert response.json()["success"] is False

    async def test_me_with_invalid_token(self, client: AsyncClient):
        response = await client.get(
            "/api/v1/auth/me",
            headers={"Authorization": "Bearer token-invalido"},
        )

        assert response.status_code == 401
        data = response.json()
        assert data["error"] == "unauthorized"
        assert data["message"] == "Token inválido ou expirado"


class TestRateLimit:

    async def test_login_over_limit_is_rate_limited(self, client: AsyncClient, student):
        redis = AsyncMock()
        redis.incr.return_value = 11
        redis.ttl.return_value = 42

        with patch("lms.db.redis.redis_client", redis):
            response = await client.post(
                "/api/v1/auth/login",
                json={"email": student.email, "password": "Student123!"},
            )

        assert response.status_code == 429
        assert response.headers["Retry-After"] == "42"
        data = response.json()
        assert data["success"] is False
        assert data["error"] == "rate_limited"
