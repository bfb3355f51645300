#!/usr/bin/env python3
"""
Integration Tests for Space API
Tests for braincache/api/v1/spaces.py and subscription.py endpoints
"""

import uuid

import pytest
from httpx import AsyncClient


@pytest.mark.integration
class TestSpacesAPI:
    """Test space CRUD and plan limits"""

    @pytest.mark.asyncio
    async def test_create_space(self, client: AsyncClient, register):
        headers, user = await register()

        response = await client.post(
            "/api/v1/spaces", headers=headers, json={"name": "Work", "description": "Links"}
        )

        assert response.status_code == 201
        result = response.json()
        assert result["name"] == "Work"
        assert result["owner_id"] == user["user_id"]
        assert result["share_hash"] is None

    @pytest.mark.asyncio
    async def test_free_plan_limit_returns_402(self, client: AsyncClient, register):
        headers, _ = await register()
        await client.get("/api/v1/spaces", headers=headers)
        for name in ("Work", "Recipes"):
            response = await client.post("/api/v1/spaces", headers=headers, json={"name": name})
            assert response.status_code == 201

        response = await client.post("/api/v1/spaces", headers=headers, json={"name": "Travel"})

        assert response.status_code == 402
        error = response.json()["error"]
        assert error["code"] == "payment_required"
        assert error["details"]["limit"] == 3

    @pytest.mark.asyncio
    async def test_pro_plan_lifts_limit(self, client: AsyncClient, register):
        headers, _ = await register()
        upgrade = await client.post("/api/v1/subscription", headers=headers, json={"plan": "pro"})
        assert upgrade.status_code == 200
        assert upgrade.json()["limit"] == 100

        for name in ("One", "Two", "Three"):
            response = await client.post("/api/v1/spaces", headers=headers, json={"name": name})
            assert response.status_code == 201

        subscription = (await client.get("/api/v1/subscription", headers=headers)).json()
        assert subscription["plan"] == "pro"
        assert subscription["current_count"] == 4

    @pytest.mark.asyncio
    async def test_duplicate_space_name_returns_409(self, client: AsyncClient, register):
        headers, _ = await register()
        await client.post("/api/v1/spaces", headers=headers, json={"name": "Work"})

        response = await client.post("/api/v1/spaces", headers=headers, json={"name": "Work"})

        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_blank_space_name_rejected(self, client: AsyncClient, register, default_space_id):
        headers, _ = await register()
        space_id = await default_space_id(headers)

        created = await client.post("/api/v1/spaces", headers=headers, json={"name": "   "})
        renamed = await client.patch(
            f"/api/v1/spaces/{space_id}", headers=headers, json={"name": "   "}
        )

        assert created.status_code == 400
        assert renamed.status_code == 400

    @pytest.mark.asyncio
    async def test_space_name_is_trimmed(self, client: AsyncClient, register):
        headers, _ = await register()

        created = await client.post("/api/v1/spaces", headers=headers, json={"name": "  Work  "})
        duplicate = await client.post("/api/v1/spaces", headers=headers, json={"name": "Work"})

        assert created.json()["name"] == "Work"
        assert duplicate.status_code == 409

    @pytest.mark.asyncio
    async def test_rename_space_owner_only(self, client: AsyncClient, register, default_space_id):
        owner_headers, _ = await register("Owner")
        other_headers, _ = await register("Other")
        space_id = await default_space_id(owner_headers)

        denied = await client.patch(
            f"/api/v1/spaces/{space_id}", headers=other_headers, json={"name": "Mine"}
        )
        renamed = await client.patch(
            f"/api/v1/spaces/{space_id}", headers=owner_headers, json={"name": "Archive"}
        )

        assert denied.status_code == 403
        assert renamed.status_code == 200
        assert renamed.json()["name"] == "Archive"

    @pytest.mark.asyncio
    async def test_unknown_space_is_forbidden(self, client: AsyncClient, register):
        """Test a missing space cannot be told apart from someone else's"""
        headers, _ = await register()

        response = await client.delete(f"/api/v1/spaces/{uuid.uuid4()}", headers=headers)

        assert response.status_code == 403
        assert response.json()["error"]["message"] == "Only the owner can perform this action"

    @pytest.mark.asyncio
    async def test_malformed_space_id_returns_400(self, client: AsyncClient, register):
        headers, _ = await register()

        response = await client.delete("/api/v1/spaces/not-a-uuid", headers=headers)

        assert response.status_code == 400


@pytest.mark.integration
class TestSpaceShareLinks:
    """Test whole-brain share links"""

    @pytest.mark.asyncio
    async def test_share_lifecycle(self, client: AsyncClient, register, default_space_id):
        headers, user = await register()
        space_id = await default_space_id(headers)
        await client.post(
            "/api/v1/content",
            headers=headers,
            json={"title": "Note", "type": "note", "body": "hello", "space_id": space_id},
        )

        enabled = await client.post(f"/api/v1/spaces/{space_id}/share", headers=headers)
        token = enabled.json()["hash"]
        assert enabled.status_code == 200
        assert len(token) == 10

        again = await client.post(f"/api/v1/spaces/{space_id}/share", headers=headers)
        assert again.json()["hash"] == token

        status = await client.get(f"/api/v1/spaces/{space_id}/share", headers=headers)
        assert status.json() == {"shared": True, "hash": token}

        listed = (await client.get("/api/v1/spaces", headers=headers)).json()
        assert listed["spaces"][0]["share_hash"] == token

        resolved = await client.get(f"/api/v1/content/share/{token}")
        assert resolved.status_code == 200
        body = resolved.json()
        assert body["is_single_item"] is False
        assert body["owner_id"] == user["user_id"]
        assert [c["title"] for c in body["contents"]] == ["Note"]

        disabled = await client.delete(f"/api/v1/spaces/{space_id}/share", headers=headers)
        assert disabled.json() == {"shared": False, "hash": None}

        gone = await client.get(f"/api/v1/content/share/{token}")
        assert gone.status_code == 404

    @pytest.mark.asyncio
    async def test_legacy_brain_share_toggle(self, client: AsyncClient, register):
        headers, _ = await register()

        on = await client.post("/api/v1/brain/share", headers=headers, json={"share": True})
        assert on.status_code == 200
        token = on.json()["hash"]

        assert (await client.get(f"/api/v1/content/share/{token}")).status_code == 200

        off = await client.post("/api/v1/brain/share", headers=headers, json={"share": False})
        assert off.json()["shared"] is False
        assert (await client.get(f"/api/v1/content/share/{token}")).status_code == 404

    @pytest.mark.asyncio
    async def test_legacy_brain_resolve(self, client: AsyncClient, register, default_space_id):
        headers, user = await register()
        space_id = await default_space_id(headers)
        note = (
            await client.post(
                "/api/v1/content",
                headers=headers,
                json={"title": "Note", "type": "note", "body": "hello", "space_id": space_id},
            )
        ).json()
        token = (
            await client.post("/api/v1/brain/share", headers=headers, json={"share": True})
        ).json()["hash"]

        resolved = await client.get(f"/api/v1/brain/{token}")

        assert resolved.status_code == 200
        assert resolved.json()["owner_id"] == user["user_id"]
        assert [c["title"] for c in resolved.json()["contents"]] == ["Note"]

        item_token = (
            await client.post(f"/api/v1/content/{note['content_id']}/share", headers=headers)
        ).json()["hash"]
        assert (await client.get(f"/api/v1/brain/{item_token}")).status_code == 404
        assert (await client.get("/api/v1/brain/unknowntoken")).status_code == 404

    @pytest.mark.asyncio
    async def test_deleting_space_kills_its_link(self, client: AsyncClient, register):
        headers, _ = await register()
        space = (await client.post("/api/v1/spaces", headers=headers, json={"name": "Temp"})).json()
        token = (
            await client.post(f"/api/v1/spaces/{space['space_id']}/share", headers=headers)
        ).json()["hash"]

        deleted = await client.delete(f"/api/v1/spaces/{space['space_id']}", headers=headers)

        assert deleted.status_code == 200
        assert (await client.get(f"/api/v1/content/share/{token}")).status_code == 404

    @pytest.mark.asyncio
    async def test_non_owner_cannot_share(self, client: AsyncClient, register, default_space_id):
        owner_headers, _ = await register("Owner")
        other_headers, _ = await register("Other")
        space_id = await default_space_id(owner_headers)

        response = await client.post(f"/api/v1/spaces/{space_id}/share", headers=other_headers)

        assert response.status_code == 403
