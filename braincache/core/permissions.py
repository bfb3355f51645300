"""
Permission Service
Ownership resolution, effective permission and the access gate for
spaces and content items
"""

import enum
import uuid
from typing import Optional, Tuple, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from braincache.core.exceptions import AuthorizationException, ValidationException
from braincache.core.logging import get_logger
from braincache.db.models import Content, ResourceType, ShareAccess, Space, User
from braincache.monitoring.metrics import access_decisions_total

logger = get_logger(__name__)

Resource = Union[Space, Content]


class AccessLevel(str, enum.Enum):
    """Resolved access of a user to one resource, weakest first"""

    NONE = "none"
    READ = "read"
    READ_WRITE = "read-write"
    OWNER = "owner"

    @property
    def rank(self) -> int:
        return _RANKS[self]

    @property
    def can_read(self) -> bool:
        return self is not AccessLevel.NONE

    @property
    def can_write(self) -> bool:
        return self in (AccessLevel.READ_WRITE, AccessLevel.OWNER)


_RANKS = {
    AccessLevel.NONE: 0,
    AccessLevel.READ: 1,
    AccessLevel.READ_WRITE: 2,
    AccessLevel.OWNER: 3,
}


def parse_resource_type(value: Union[str, ResourceType]) -> ResourceType:
    """Validate a resource type tag"""
    try:
        return ResourceType(value)
    except ValueError:
        raise ValidationException(
            message="Invalid resource type",
            details={
                "resource_type": value,
                "valid_resource_types": [t.value for t in ResourceType],
            },
        )


def is_owner(user: Optional[User], resource: Optional[Resource]) -> bool:
    """True when the user owns the resource; False for missing either side"""
    if user is None or resource is None:
        return False
    return resource.owner_id == user.id


class PermissionChecker:
    """Resolve and enforce access to spaces and content items

    Precedence is owner > direct grant > none. Share links never feed into
    this resolution; they are a separate read-only path.
    """

    @staticmethod
    async def get_resource(
        db: AsyncSession,
        resource_type: ResourceType,
        resource_id: uuid.UUID,
    ) -> Optional[Resource]:
        """Load a space or content item by id"""
        model = Space if ResourceType(resource_type) is ResourceType.SPACE else Content
        return await db.get(model, resource_id)

    @staticmethod
    async def get_grant(
        db: AsyncSession,
        resource_type: ResourceType,
        resource_id: uuid.UUID,
        user_id: uuid.UUID,
    ) -> Optional[ShareAccess]:
        """Fetch the grant held by a user on a resource, if any"""
        result = await db.execute(
            select(ShareAccess).where(
                ShareAccess.resource_type == ResourceType(resource_type).value,
                ShareAccess.resource_id == resource_id,
                ShareAccess.shared_with_id == user_id,
            )
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def level_for(
        db: AsyncSession,
        user: Optional[User],
        resource_type: ResourceType,
        resource: Optional[Resource],
    ) -> AccessLevel:
        """Effective permission against an already loaded resource"""
        if user is None or resource is None:
            return AccessLevel.NONE

        if is_owner(user, resource):
            return AccessLevel.OWNER

        grant = await PermissionChecker.get_grant(db, resource_type, resource.id, user.id)
        if grant is None:
            return AccessLevel.NONE

        return AccessLevel(grant.permission)

    @staticmethod
    async def effective_permission(
        db: AsyncSession,
        user: Optional[User],
        resource_type: Union[str, ResourceType],
        resource_id: uuid.UUID,
    ) -> AccessLevel:
        """
        Resolve a user's access to one resource

        Returns OWNER if the user owns it, else the permission of their
        direct grant, else NONE. Missing resources resolve to NONE.
        """
        resource_type = parse_resource_type(resource_type)
        resource = await PermissionChecker.get_resource(db, resource_type, resource_id)
        return await PermissionChecker.level_for(db, user, resource_type, resource)

    @staticmethod
    async def content_level(
        db: AsyncSession,
        user: Optional[User],
        content: Optional[Content],
    ) -> AccessLevel:
        """
        Access to a content item, taking the containing space into account

        A space grant opens every item filed in that space; a content grant
        opens only that item.
        """
        level = await PermissionChecker.level_for(db, user, ResourceType.CONTENT, content)
        if level is AccessLevel.OWNER or content is None or content.space_id is None:
            return level

        space = await db.get(Space, content.space_id)
        # Items are only reachable through a space owned by the same user
        if space is None or space.owner_id != content.owner_id:
            return level

        space_level = await PermissionChecker.level_for(db, user, ResourceType.SPACE, space)
        return max(level, space_level, key=lambda lvl: lvl.rank)

    @staticmethod
    async def require_access(
        db: AsyncSession,
        user: User,
        resource_type: Union[str, ResourceType],
        resource_id: uuid.UUID,
        write: bool = False,
    ) -> Tuple[Resource, AccessLevel]:
        """
        Require read (or write) access or raise

        Raises:
            AuthorizationException: If the resource is missing, the user has
                no access, or a write is attempted with read access
        """
        resource_type = parse_resource_type(resource_type)
        resource = await PermissionChecker.get_resource(db, resource_type, resource_id)

        if resource_type is ResourceType.CONTENT:
            level = await PermissionChecker.content_level(db, user, resource)
        else:
            level = await PermissionChecker.level_for(db, user, resource_type, resource)

        allowed = level.can_write if write else level.can_read
        access_decisions_total.labels(
            resource_type=resource_type.value,
            level=level.value,
            allowed=str(allowed).lower(),
        ).inc()

        if not allowed:
            logger.debug(
                f"User {user.id} denied {'write' if write else 'read'} on "
                f"{resource_type.value} {resource_id} (level={level.value})"
            )
            raise AuthorizationException()

        return resource, level

    @staticmethod
    async def require_owner(
        db: AsyncSession,
        user: User,
        resource_type: Union[str, ResourceType],
        resource_id: uuid.UUID,
    ) -> Resource:
        """
        Require the user to own the resource

        Raises:
            AuthorizationException: If the resource is missing or owned by
                someone else
        """
        resource_type = parse_resource_type(resource_type)
        resource = await PermissionChecker.get_resource(db, resource_type, resource_id)

        if not is_owner(user, resource):
            access_decisions_total.labels(
                resource_type=resource_type.value,
                level="not-owner",
                allowed="false",
            ).inc()
            raise AuthorizationException(
                message="Only the owner can perform this action"
            )

        return resource
