"""
Grant Store
Direct user-to-user read / read-write grants on spaces and content items
"""

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional, Union

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from braincache.core.exceptions import ConflictException, NotFoundException, ValidationException
from braincache.core.logging import get_logger
from braincache.core.permissions import (
    PermissionChecker,
    Resource,
    parse_resource_type,
)
from braincache.db.models import GrantPermission, ResourceType, ShareAccess, User
from braincache.monitoring.metrics import grants_total

logger = get_logger(__name__)


def parse_permission(value: Union[str, GrantPermission]) -> GrantPermission:
    """Validate a grant permission level"""
    try:
        return GrantPermission(value)
    except ValueError:
        raise ValidationException(
            message="Invalid permission level",
            details={
                "permission": value,
                "valid_permissions": [p.value for p in GrantPermission],
            },
        )


@dataclass
class GrantEntry:
    """A grant together with the grantee's display info"""

    grant: ShareAccess
    grantee: User


@dataclass
class SharedResource:
    """A resource shared with the caller, with its owner and permission"""

    resource_type: ResourceType
    resource: Resource
    owner: User
    permission: GrantPermission
    granted_at: datetime


class GrantStore:
    """Create, update, revoke and enumerate grants

    Every mutation and the per-resource listing are owner-only. At most one
    grant exists per (resource, grantee); granting again overwrites the
    permission in place.
    """

    effective_permission = staticmethod(PermissionChecker.effective_permission)

    @staticmethod
    async def _find(
        db: AsyncSession,
        resource_type: ResourceType,
        resource_id: uuid.UUID,
        grantee_id: uuid.UUID,
    ) -> Optional[ShareAccess]:
        return await PermissionChecker.get_grant(db, resource_type, resource_id, grantee_id)

    @staticmethod
    async def grant(
        db: AsyncSession,
        owner: User,
        resource_type: Union[str, ResourceType],
        resource_id: uuid.UUID,
        grantee_id: uuid.UUID,
        permission: Union[str, GrantPermission] = GrantPermission.READ,
    ) -> ShareAccess:
        """
        Grant a user access to a resource, or overwrite their permission

        Raises:
            ValidationException: Malformed resource type or permission
            AuthorizationException: Caller does not own the resource
            ConflictException: Caller tried to grant to themselves
            NotFoundException: Grantee does not exist
        """
        grants = await GrantStore.grant_many(
            db, owner, resource_type, resource_id, [grantee_id], permission
        )
        return grants[0]

    @staticmethod
    async def grant_many(
        db: AsyncSession,
        owner: User,
        resource_type: Union[str, ResourceType],
        resource_id: uuid.UUID,
        grantee_ids: Iterable[uuid.UUID],
        permission: Union[str, GrantPermission] = GrantPermission.READ,
    ) -> List[ShareAccess]:
        """
        Grant the same permission to several users in one transaction

        Every grantee is checked before anything is written, so one bad id
        rejects the whole request.
        """
        resource_type = parse_resource_type(resource_type)
        permission = parse_permission(permission)
        resource = await PermissionChecker.require_owner(db, owner, resource_type, resource_id)

        grantee_ids = list(dict.fromkeys(grantee_ids))
        for grantee_id in grantee_ids:
            if grantee_id == owner.id:
                raise ConflictException(
                    message="You cannot share a resource with yourself",
                    details={"user_id": str(grantee_id)},
                )
            grantee = await db.get(User, grantee_id)
            if grantee is None or not grantee.is_active:
                raise NotFoundException("User", details={"user_id": str(grantee_id)})

        grants, actions = [], []
        try:
            for grantee_id in grantee_ids:
                grant = await GrantStore._find(db, resource_type, resource.id, grantee_id)
                if grant:
                    grant.permission = permission.value
                    actions.append("update")
                else:
                    grant = ShareAccess(
                        resource_type=resource_type.value,
                        resource_id=resource.id,
                        owner_id=owner.id,
                        shared_with_id=grantee_id,
                        permission=permission.value,
                    )
                    db.add(grant)
                    actions.append("create")
                grants.append(grant)
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise ConflictException(
                message="Resource was shared with one of these users concurrently",
                details={"user_ids": [str(g) for g in grantee_ids]},
            )

        for action in actions:
            grants_total.labels(resource_type=resource_type.value, action=action).inc()
        logger.info(
            f"Granted {permission.value} on {resource_type.value} {resource.id} "
            f"to {len(grants)} user(s) by {owner.email}"
        )
        return grants

    @staticmethod
    async def update_permission(
        db: AsyncSession,
        owner: User,
        resource_type: Union[str, ResourceType],
        resource_id: uuid.UUID,
        grantee_id: uuid.UUID,
        permission: Union[str, GrantPermission],
    ) -> ShareAccess:
        """
        Change the permission of an existing grant

        Raises:
            NotFoundException: No grant exists for this user
        """
        resource_type = parse_resource_type(resource_type)
        permission = parse_permission(permission)
        await PermissionChecker.require_owner(db, owner, resource_type, resource_id)

        grant = await GrantStore._find(db, resource_type, resource_id, grantee_id)
        if grant is None:
            raise NotFoundException("Grant")

        grant.permission = permission.value
        await db.commit()

        grants_total.labels(resource_type=resource_type.value, action="update").inc()
        logger.info(
            f"Changed grant on {resource_type.value} {resource_id} for user {grantee_id} "
            f"to {permission.value}"
        )
        return grant

    @staticmethod
    async def revoke(
        db: AsyncSession,
        owner: User,
        resource_type: Union[str, ResourceType],
        resource_id: uuid.UUID,
        grantee_id: uuid.UUID,
    ) -> bool:
        """Revoke a grant; revoking a grant that does not exist is a no-op"""
        resource_type = parse_resource_type(resource_type)
        await PermissionChecker.require_owner(db, owner, resource_type, resource_id)

        grant = await GrantStore._find(db, resource_type, resource_id, grantee_id)
        if grant is None:
            return False

        await db.delete(grant)
        await db.commit()

        grants_total.labels(resource_type=resource_type.value, action="revoke").inc()
        logger.info(f"Revoked grant on {resource_type.value} {resource_id} from user {grantee_id}")
        return True

    @staticmethod
    async def list_grants_for_resource(
        db: AsyncSession,
        owner: User,
        resource_type: Union[str, ResourceType],
        resource_id: uuid.UUID,
    ) -> List[GrantEntry]:
        """List all grants on a resource with grantee info (owner only)"""
        resource_type = parse_resource_type(resource_type)
        await PermissionChecker.require_owner(db, owner, resource_type, resource_id)

        result = await db.execute(
            select(ShareAccess, User)
            .join(User, User.id == ShareAccess.shared_with_id)
            .where(
                ShareAccess.resource_type == resource_type.value,
                ShareAccess.resource_id == resource_id,
            )
            .order_by(ShareAccess.created_at.desc())
        )
        return [GrantEntry(grant=grant, grantee=grantee) for grant, grantee in result.all()]

    @staticmethod
    async def list_resources_shared_with_me(
        db: AsyncSession,
        user: User,
        resource_type: Union[str, ResourceType],
    ) -> List[SharedResource]:
        """
        List every resource of one type on which the user holds a grant

        Grants whose resource has been deleted, and grants on the user's own
        resources, are skipped.
        """
        resource_type = parse_resource_type(resource_type)

        result = await db.execute(
            select(ShareAccess, User)
            .join(User, User.id == ShareAccess.owner_id)
            .where(
                ShareAccess.resource_type == resource_type.value,
                ShareAccess.shared_with_id == user.id,
            )
            .order_by(ShareAccess.created_at.desc())
        )

        shared = []
        for grant, owner in result.all():
            resource = await PermissionChecker.get_resource(db, resource_type, grant.resource_id)
            if resource is None or resource.owner_id == user.id:
                continue
            shared.append(
                SharedResource(
                    resource_type=resource_type,
                    resource=resource,
                    owner=owner,
                    permission=GrantPermission(grant.permission),
                    granted_at=grant.created_at,
                )
            )
        return shared

