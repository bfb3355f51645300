"""
Conftest for API integration tests
Defines fixtures specific to API testing

Note: These tests use ASGI transport for testing without requiring a running server.
"""

import uuid

import pytest
from httpx import AsyncClient


@pytest.fixture
def test_user():
    """
    Test user data for authentication
    Uses unique email to avoid conflicts
    """
    return {
        "email": f"test_{uuid.uuid4().hex[:8]}@example.com",
        "password": "test_password_123",
        "first_name": "Test",
        "last_name": "User",
    }


@pytest.fixture
def register(client: AsyncClient):
    """
    Factory registering a fresh user through the API

    Returns (headers, user) where user is the registered user's JSON.
    """

    async def _register(first_name: str = "Test"):
        response = await client.post(
            "/api/v1/auth/register",
            json={
                "email": f"{first_name.lower()}_{uuid.uuid4().hex[:8]}@example.com",
                "password": "test_password_123",
                "first_name": first_name,
                "last_name": "User",
            },
        )
        assert response.status_code == 201, response.text
        result = response.json()
        return {"Authorization": f"Bearer {result['access_token']}"}, result["user"]

    return _register


@pytest.fixture
def default_space_id(client: AsyncClient):
    """Factory returning the caller's default space id"""

    async def _default_space_id(headers: dict) -> str:
        response = await client.get("/api/v1/spaces", headers=headers)
        assert response.status_code == 200, response.text
        return response.json()["spaces"][0]["space_id"]

    return _default_space_id
