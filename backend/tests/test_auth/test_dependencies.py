"""Tests for principal resolution via the token validation endpoint."""

from datetime import timedelta

from httpx import AsyncClient
from jose import jwt

from hotelbook.auth.jwt import create_access_token
from hotelbook.config import settings


class TestGetOptionalPrincipal:
    """Test get_optional_principal via /api/v1/auth/validate-token."""

    async def test_bearer_token(self, client: AsyncClient, guest_headers: dict, guest_id: str):
        response = await client.get("/api/v1/auth/validate-token", headers=guest_headers)
        assert response.status_code == 200
        assert response.json() == {"user_id": guest_id}

    async def test_cookie_token(self, client: AsyncClient):
        client.cookies.set(settings.auth_cookie_name, create_access_token("cookie-user"))
        response = await client.get("/api/v1/auth/validate-token")
        assert response.status_code == 200
        assert response.json() == {"user_id": "cookie-user"}

    async def test_header_wins_over_cookie(
        self, client: AsyncClient, guest_headers: dict, guest_id: str
    ):
        client.cookies.set(settings.auth_cookie_name, create_access_token("cookie-user"))
        response = await client.get("/api/v1/auth/validate-token", headers=guest_headers)
        assert response.json() == {"user_id": guest_id}

    async def test_no_token(self, client: AsyncClient):
        response = await client.get("/api/v1/auth/validate-token")
        assert response.status_code == 401
        assert response.json() == {"detail": "unauthorized"}
        assert response.headers["www-authenticate"] == "Bearer"

    async def test_expired_token_rejected(self, client: AsyncClient):
        token = create_access_token("user-123", expires_delta=timedelta(seconds=-1))
        response = await client.get(
            "/api/v1/auth/validate-token", headers={"Authorization": f"Bearer {token}"}
        )
        assert response.status_code == 401

    async def test_invalid_token_format(self, client: AsyncClient):
        response = await client.get(
            "/api/v1/auth/validate-token", headers={"Authorization": "Bearer not.a.valid.jwt"}
        )
        assert response.status_code == 401

    async def test_refresh_token_type_rejected(self, client: AsyncClient):
        token = jwt.encode(
            {"sub": "user-123", "type": "refresh"},
            settings.jwt_secret_key,
            algorithm=settings.jwt_algorithm,
        )
        response = await client.get(
            "/api/v1/auth/validate-token", headers={"Authorization": f"Bearer {token}"}
        )
        assert response.status_code == 401
