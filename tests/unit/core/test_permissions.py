#!/usr/bin/env python3
"""
Unit Tests for Permission System
Tests for braincache/core/permissions.py
"""

import uuid
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from braincache.core.exceptions import AuthorizationException, ValidationException
from braincache.core.permissions import (
    AccessLevel,
    PermissionChecker,
    is_owner,
    parse_resource_type,
)
from braincache.db.models import Content, ResourceType, Space


def _user():
    return SimpleNamespace(id=uuid.uuid4(), email="u@example.com")


def _grant_result(permission=None):
    result = MagicMock()
    result.scalar_one_or_none.return_value = (
        SimpleNamespace(permission=permission) if permission else None
    )
    return result


def _db(objects=None, grants=None):
    """AsyncMock session resolving db.get by model and db.execute in order"""
    objects = objects or {}
    db = AsyncMock()
    db.get.side_effect = lambda model, _id: objects.get(model)
    db.execute.side_effect = [_grant_result(p) for p in (grants or [])]
    return db


class TestAccessLevel:
    """Test the access level ordering"""

    def test_levels_are_ordered(self):
        ranks = [level.rank for level in AccessLevel]
        assert ranks == sorted(ranks)
        assert AccessLevel.OWNER.rank > AccessLevel.READ_WRITE.rank > AccessLevel.READ.rank

    def test_read_and_write_capabilities(self):
        assert not AccessLevel.NONE.can_read
        assert AccessLevel.READ.can_read and not AccessLevel.READ.can_write
        assert AccessLevel.READ_WRITE.can_write
        assert AccessLevel.OWNER.can_write

    def test_values_match_grant_permissions(self):
        assert AccessLevel("read-write") is AccessLevel.READ_WRITE


class TestHelpers:
    """Test resource type parsing and ownership"""

    def test_parse_resource_type(self):
        assert parse_resource_type("space") is ResourceType.SPACE
        assert parse_resource_type(ResourceType.CONTENT) is ResourceType.CONTENT

    def test_parse_resource_type_rejects_unknown(self):
        with pytest.raises(ValidationException):
            parse_resource_type("brain")

    def test_is_owner(self):
        user = _user()
        assert is_owner(user, SimpleNamespace(owner_id=user.id))
        assert not is_owner(user, SimpleNamespace(owner_id=uuid.uuid4()))
        assert not is_owner(None, SimpleNamespace(owner_id=user.id))
        assert not is_owner(user, None)


@pytest.mark.unit
class TestPermissionChecker:
    """Test PermissionChecker class methods"""

    @pytest.mark.asyncio
    async def test_owner_resolves_to_owner_without_grant_lookup(self):
        """Test ownership wins before any grant is consulted"""
        user = _user()
        space = SimpleNamespace(id=uuid.uuid4(), owner_id=user.id)
        db = _db({Space: space})

        level = await PermissionChecker.effective_permission(db, user, "space", space.id)

        assert level is AccessLevel.OWNER
        db.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_grant_permission_is_returned(self):
        """Test a direct grant gives its permission"""
        user = _user()
        space = SimpleNamespace(id=uuid.uuid4(), owner_id=uuid.uuid4())
        db = _db({Space: space}, grants=["read-write"])

        level = await PermissionChecker.effective_permission(db, user, "space", space.id)

        assert level is AccessLevel.READ_WRITE

    @pytest.mark.asyncio
    async def test_no_grant_resolves_to_none(self):
        user = _user()
        space = SimpleNamespace(id=uuid.uuid4(), owner_id=uuid.uuid4())
        db = _db({Space: space}, grants=[None])

        assert await PermissionChecker.effective_permission(db, user, "space", space.id) is AccessLevel.NONE

    @pytest.mark.asyncio
    async def test_missing_resource_resolves_to_none(self):
        db = _db()
        level = await PermissionChecker.effective_permission(db, _user(), "content", uuid.uuid4())
        assert level is AccessLevel.NONE

    @pytest.mark.asyncio
    async def test_anonymous_user_resolves_to_none(self):
        space = SimpleNamespace(id=uuid.uuid4(), owner_id=uuid.uuid4())
        db = _db({Space: space})
        assert await PermissionChecker.effective_permission(db, None, "space", space.id) is AccessLevel.NONE

    @pytest.mark.asyncio
    async def test_admin_role_does_not_bypass(self):
        """Test admins resolve like everyone else"""
        admin = SimpleNamespace(id=uuid.uuid4(), role="admin", is_admin=True)
        space = SimpleNamespace(id=uuid.uuid4(), owner_id=uuid.uuid4())
        db = _db({Space: space}, grants=[None])

        assert await PermissionChecker.effective_permission(db, admin, "space", space.id) is AccessLevel.NONE

    @pytest.mark.asyncio
    async def test_content_inherits_space_grant(self):
        """Test a space grant opens content filed in that space"""
        user = _user()
        owner_id = uuid.uuid4()
        space = SimpleNamespace(id=uuid.uuid4(), owner_id=owner_id)
        content = SimpleNamespace(id=uuid.uuid4(), owner_id=owner_id, space_id=space.id)
        # no content grant, read grant on the space
        db = _db({Space: space}, grants=[None, "read"])

        assert await PermissionChecker.content_level(db, user, content) is AccessLevel.READ

    @pytest.mark.asyncio
    async def test_content_takes_strongest_of_content_and_space(self):
        user = _user()
        owner_id = uuid.uuid4()
        space = SimpleNamespace(id=uuid.uuid4(), owner_id=owner_id)
        content = SimpleNamespace(id=uuid.uuid4(), owner_id=owner_id, space_id=space.id)
        db = _db({Space: space}, grants=["read-write", "read"])

        assert await PermissionChecker.content_level(db, user, content) is AccessLevel.READ_WRITE

    @pytest.mark.asyncio
    async def test_space_grant_ignored_for_foreign_owned_content(self):
        """Test a space grant only covers items owned by the space owner"""
        user = _user()
        space = SimpleNamespace(id=uuid.uuid4(), owner_id=uuid.uuid4())
        content = SimpleNamespace(id=uuid.uuid4(), owner_id=uuid.uuid4(), space_id=space.id)
        db = _db({Space: space}, grants=[None])

        assert await PermissionChecker.content_level(db, user, content) is AccessLevel.NONE
        assert db.execute.await_count == 1

    @pytest.mark.asyncio
    async def test_require_access_denies_write_with_read(self):
        user = _user()
        space = SimpleNamespace(id=uuid.uuid4(), owner_id=uuid.uuid4())
        db = _db({Space: space}, grants=["read"])

        with pytest.raises(AuthorizationException):
            await PermissionChecker.require_access(db, user, "space", space.id, write=True)

    @pytest.mark.asyncio
    async def test_require_access_returns_resource_and_level(self):
        user = _user()
        space = SimpleNamespace(id=uuid.uuid4(), owner_id=uuid.uuid4())
        db = _db({Space: space}, grants=["read"])

        resource, level = await PermissionChecker.require_access(db, user, "space", space.id)

        assert resource is space
        assert level is AccessLevel.READ

    @pytest.mark.asyncio
    async def test_require_access_hides_missing_resource(self):
        """Test a missing resource looks the same as a forbidden one"""
        with pytest.raises(AuthorizationException) as exc_info:
            await PermissionChecker.require_access(_db(), _user(), "content", uuid.uuid4())
        assert exc_info.value.message == "You do not have access to this resource"

    @pytest.mark.asyncio
    async def test_require_owner_rejects_grantee(self):
        user = _user()
        content = SimpleNamespace(id=uuid.uuid4(), owner_id=uuid.uuid4(), space_id=None)
        db = _db({Content: content})

        with pytest.raises(AuthorizationException):
            await PermissionChecker.require_owner(db, user, "content", content.id)

    @pytest.mark.asyncio
    async def test_require_owner_returns_resource(self):
        user = _user()
        content = SimpleNamespace(id=uuid.uuid4(), owner_id=user.id, space_id=None)
        db = _db({Content: content})

        assert await PermissionChecker.require_owner(db, user, "content", content.id) is content
