#!/usr/bin/env python3
"""
Integration Tests for Admin API
Tests for braincache/api/v1/admin.py endpoints
"""

import uuid

import pytest
from httpx import AsyncClient

from braincache.db import session as db_session_module
from braincache.db.models import User


@pytest.fixture
def make_admin(register):
    """Register a user and promote them to admin"""

    async def _make_admin():
        headers, user = await register("Admin")
        async with db_session_module.async_session_maker() as session:
            admin = await session.get(User, uuid.UUID(user["user_id"]))
            admin.role = "admin"
            await session.commit()
        return headers, user

    return _make_admin


@pytest.mark.integration
class TestAdminAccess:
    """Test the admin role gate"""

    @pytest.mark.asyncio
    async def test_regular_user_gets_403(self, client: AsyncClient, register):
        headers, _ = await register()

        for path in ("/api/v1/admin/stats", "/api/v1/admin/users", "/api/v1/admin/metrics"):
            response = await client.get(path, headers=headers)
            assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_anonymous_gets_401(self, client: AsyncClient):
        response = await client.get("/api/v1/admin/stats")
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_admin_does_not_bypass_sharing(
        self, client: AsyncClient, register, make_admin, default_space_id
    ):
        """Test the admin role grants no access to other users' spaces"""
        owner_headers, _ = await register("Owner")
        admin_headers, _ = await make_admin()
        space_id = await default_space_id(owner_headers)

        response = await client.get(
            "/api/v1/content", headers=admin_headers, params={"space_id": space_id}
        )

        assert response.status_code == 403


@pytest.mark.integration
class TestAdminEndpoints:
    """Test admin statistics, users and metrics"""

    @pytest.mark.asyncio
    async def test_stats(self, client: AsyncClient, register, make_admin):
        admin_headers, _ = await make_admin()
        await register("Other")

        response = await client.get("/api/v1/admin/stats", headers=admin_headers)

        assert response.status_code == 200
        result = response.json()
        assert result["users"]["total"] == 2
        assert result["spaces"]["total"] == 2
        assert result["reports"]["pending"] == 0

    @pytest.mark.asyncio
    async def test_list_users(self, client: AsyncClient, make_admin):
        admin_headers, admin = await make_admin()

        response = await client.get("/api/v1/admin/users", headers=admin_headers)

        assert response.status_code == 200
        result = response.json()
        assert result["total"] == 1
        assert result["results"][0]["email"] == admin["email"]
        assert result["results"][0]["role"] == "admin"

    @pytest.mark.asyncio
    async def test_admin_sees_all_reports(self, client: AsyncClient, register, make_admin):
        owner_headers, _ = await register("Owner")
        bob_headers, bob = await register("Bob")
        admin_headers, _ = await make_admin()
        item = (
            await client.post(
                "/api/v1/content",
                headers=owner_headers,
                json={"title": "Dodgy", "type": "note", "body": "x"},
            )
        ).json()
        await client.post(
            "/api/v1/share/with-users",
            headers=owner_headers,
            json={
                "resource_type": "content",
                "resource_id": item["content_id"],
                "user_ids": [bob["user_id"]],
            },
        )
        await client.post(
            f"/api/v1/content/{item['content_id']}/report",
            headers=bob_headers,
            json={"reason": "Spam"},
        )

        reports = (await client.get("/api/v1/reports", headers=admin_headers)).json()["reports"]

        assert [r["content_title"] for r in reports] == ["Dodgy"]
        assert reports[0]["reported_by"]["email"] == bob["email"]

    @pytest.mark.asyncio
    async def test_metrics_exposition(self, client: AsyncClient, make_admin):
        admin_headers, _ = await make_admin()

        response = await client.get("/api/v1/admin/metrics", headers=admin_headers)

        assert response.status_code == 200
        assert "access_decisions_total" in response.text
