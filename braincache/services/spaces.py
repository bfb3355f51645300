"""
Space Service
Default space provisioning, plan-based space limits and cascading deletes
"""

import uuid
from typing import List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from braincache.core.config import settings
from braincache.core.exceptions import (
    ConflictException,
    PaymentRequiredException,
    ValidationException,
)
from braincache.core.logging import get_logger
from braincache.db.models import (
    Content,
    ContentReport,
    ResourceType,
    ShareAccess,
    ShareLink,
    Space,
    SpaceComment,
    SubscriptionPlan,
    User,
)

logger = get_logger(__name__)


def get_space_limit(plan: Optional[str]) -> int:
    """Maximum number of spaces a plan may own"""
    if plan == SubscriptionPlan.PRO.value:
        return settings.PRO_SPACE_LIMIT
    return settings.FREE_SPACE_LIMIT


async def count_spaces(db: AsyncSession, owner_id: uuid.UUID) -> int:
    result = await db.execute(select(func.count(Space.id)).where(Space.owner_id == owner_id))
    return result.scalar() or 0


async def ensure_default_space(db: AsyncSession, user: User) -> Space:
    """Return the user's oldest space, creating the default one if none exist"""
    result = await db.execute(
        select(Space).where(Space.owner_id == user.id).order_by(Space.created_at).limit(1)
    )
    space = result.scalar_one_or_none()
    if space is None:
        space = Space(
            name=settings.DEFAULT_SPACE_NAME,
            description="Default space",
            owner_id=user.id,
        )
        db.add(space)
        await db.commit()
        logger.info(f"Created default space for {user.email}")
    return space


async def list_spaces(db: AsyncSession, user: User) -> List[Space]:
    await ensure_default_space(db, user)
    result = await db.execute(
        select(Space).where(Space.owner_id == user.id).order_by(Space.created_at)
    )
    return list(result.scalars().all())


async def create_space(
    db: AsyncSession,
    user: User,
    name: str,
    description: Optional[str] = None,
) -> Space:
    """
    Create a space for a user, enforcing the plan limit and unique names

    Raises:
        PaymentRequiredException: The plan's space limit is reached
        ValidationException: The name is blank
        ConflictException: The user already has a space with this name
    """
    limit = get_space_limit(user.subscription_plan)
    if await count_spaces(db, user.id) >= limit:
        if user.subscription_plan == SubscriptionPlan.PRO.value:
            message = f"Pro plan allows up to {limit} spaces."
        else:
            message = f"Free plan allows only {limit} spaces. Upgrade your subscription to add more."
        raise PaymentRequiredException(message=message, limit=limit)

    name = name.strip()
    if not name:
        raise ValidationException(message="Space name cannot be blank", details={"name": name})

    existing = await db.execute(
        select(Space.id).where(Space.owner_id == user.id, Space.name == name)
    )
    if existing.scalar_one_or_none():
        raise ConflictException(
            message="Space with this name already exists.",
            details={"name": name},
        )

    space = Space(name=name, description=description, owner_id=user.id)
    db.add(space)
    await db.commit()

    logger.info(f"Space created: {space.id} by {user.email}")
    return space


async def delete_content_records(db: AsyncSession, content_ids: List[uuid.UUID]) -> None:
    """Delete content items with their grants, share links and reports"""
    if not content_ids:
        return

    await db.execute(
        delete(ShareAccess).where(
            ShareAccess.resource_type == ResourceType.CONTENT.value,
            ShareAccess.resource_id.in_(content_ids),
        )
    )
    await db.execute(delete(ShareLink).where(ShareLink.content_id.in_(content_ids)))
    await db.execute(delete(ContentReport).where(ContentReport.content_id.in_(content_ids)))
    await db.execute(delete(Content).where(Content.id.in_(content_ids)))


async def delete_space(db: AsyncSession, space: Space) -> None:
    """Delete a space together with everything that hangs off it"""
    result = await db.execute(select(Content.id).where(Content.space_id == space.id))
    await delete_content_records(db, list(result.scalars().all()))

    await db.execute(
        delete(ShareAccess).where(
            ShareAccess.resource_type == ResourceType.SPACE.value,
            ShareAccess.resource_id == space.id,
        )
    )
    await db.execute(delete(ShareLink).where(ShareLink.space_id == space.id))
    await db.execute(delete(SpaceComment).where(SpaceComment.space_id == space.id))
    await db.delete(space)
    await db.commit()

    logger.info(f"Space deleted: {space.id}")
