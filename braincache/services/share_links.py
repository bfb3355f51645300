"""
Share-Link Resolver
Public hash links giving anonymous read-only access to a whole brain
(space-scoped) or to a single content item
"""

import secrets
import string
import uuid
from dataclasses import dataclass, field
from typing import List, Optional, Union

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from braincache.core.config import settings
from braincache.core.exceptions import ConflictException, NotFoundException
from braincache.core.logging import get_logger
from braincache.core.permissions import PermissionChecker, parse_resource_type
from braincache.db.models import Content, ResourceType, ShareLink, User
from braincache.monitoring.metrics import share_links_total

logger = get_logger(__name__)

HASH_ALPHABET = string.ascii_letters + string.digits


def generate_share_hash(length: Optional[int] = None) -> str:
    """Generate an opaque random share token"""
    length = length or settings.SHARE_HASH_LENGTH
    return "".join(secrets.choice(HASH_ALPHABET) for _ in range(length))


@dataclass(frozen=True)
class ShareScope:
    """What a share link exposes: a space (whole brain) or one content item"""

    resource_type: ResourceType
    resource_id: uuid.UUID

    @classmethod
    def of(cls, resource_type: Union[str, ResourceType], resource_id: uuid.UUID) -> "ShareScope":
        return cls(parse_resource_type(resource_type), resource_id)

    @property
    def column(self):
        if self.resource_type is ResourceType.SPACE:
            return ShareLink.space_id
        return ShareLink.content_id


@dataclass
class ShareResolution:
    """Read-only view of what a share token points at"""

    link: ShareLink
    contents: List[Content] = field(default_factory=list)

    @property
    def is_single_item(self) -> bool:
        return self.link.content_id is not None

    @property
    def owner_id(self) -> uuid.UUID:
        return self.link.owner_id

    @property
    def scope(self) -> ShareScope:
        return ShareScope(self.link.resource_type, self.link.resource_id)


class ShareLinkResolver:
    """Enable, disable and resolve share links

    Per scope the lifecycle is Unshared -> Shared -> Unshared -> Shared.
    Enabling an already shared scope returns its token unchanged; enabling
    after a disable always mints a new token, and disabled tokens never
    resolve again.
    """

    @staticmethod
    async def _find(db: AsyncSession, scope: ShareScope) -> Optional[ShareLink]:
        result = await db.execute(select(ShareLink).where(scope.column == scope.resource_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def status(db: AsyncSession, owner: User, scope: ShareScope) -> Optional[str]:
        """Return the active token for a scope, or None (owner only)"""
        await PermissionChecker.require_owner(db, owner, scope.resource_type, scope.resource_id)
        link = await ShareLinkResolver._find(db, scope)
        return link.hash if link else None

    @staticmethod
    async def enable(db: AsyncSession, owner: User, scope: ShareScope) -> str:
        """
        Share a scope publicly and return its token

        Raises:
            AuthorizationException: Caller does not own the resource
        """
        await PermissionChecker.require_owner(db, owner, scope.resource_type, scope.resource_id)

        existing = await ShareLinkResolver._find(db, scope)
        if existing:
            return existing.hash

        link = ShareLink(hash=generate_share_hash(), owner_id=owner.id)
        if scope.resource_type is ResourceType.SPACE:
            link.space_id = scope.resource_id
        else:
            link.content_id = scope.resource_id

        db.add(link)
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise ConflictException(
                message="Sharing was changed concurrently, please retry",
                details={"resource_type": scope.resource_type.value},
            )

        share_links_total.labels(resource_type=scope.resource_type.value, action="enable").inc()
        logger.info(f"Enabled share link for {scope.resource_type.value} {scope.resource_id}")
        return link.hash

    @staticmethod
    async def disable(db: AsyncSession, owner: User, scope: ShareScope) -> bool:
        """Stop sharing a scope; a no-op when it was not shared"""
        await PermissionChecker.require_owner(db, owner, scope.resource_type, scope.resource_id)

        result = await db.execute(delete(ShareLink).where(scope.column == scope.resource_id))
        await db.commit()

        disabled = bool(result.rowcount)
        if disabled:
            share_links_total.labels(resource_type=scope.resource_type.value, action="disable").inc()
            logger.info(f"Disabled share link for {scope.resource_type.value} {scope.resource_id}")
        return disabled

    @staticmethod
    async def resolve(db: AsyncSession, token: str) -> ShareResolution:
        """
        Resolve a token to read-only content

        A content-scoped link yields that single item; a space-scoped link
        yields every content item owned by the link owner.

        Raises:
            NotFoundException: Unknown or disabled token, or the shared item
                no longer exists
        """
        result = await db.execute(select(ShareLink).where(ShareLink.hash == token))
        link = result.scalar_one_or_none()

        if link is None:
            share_links_total.labels(resource_type="unknown", action="miss").inc()
            raise NotFoundException("Shared content")

        if link.content_id is not None:
            content = await db.get(Content, link.content_id)
            if content is None:
                raise NotFoundException("Shared content")
            contents = [content]
        else:
            result = await db.execute(
                select(Content)
                .where(Content.owner_id == link.owner_id)
                .order_by(Content.created_at)
            )
            contents = list(result.scalars().all())

        share_links_total.labels(resource_type=link.resource_type.value, action="resolve").inc()
        return ShareResolution(link=link, contents=contents)
