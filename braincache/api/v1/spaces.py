"""
Space API Routes
Create, list, update and delete spaces, and manage their share links
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from braincache.api.dependencies import get_current_user, parse_uuid
from braincache.core.exceptions import ConflictException
from braincache.core.logging import get_logger
from braincache.core.permissions import PermissionChecker
from braincache.db.models import ResourceType, ShareLink, Space
from braincache.db.models import User as UserModel
from braincache.db.session import get_db_session
from braincache.models.common import MessageResponse
from braincache.models.space import (
    SpaceCreate,
    SpaceListResponse,
    SpaceResponse,
    SpaceUpdate,
)
from braincache.models.sharing import ShareStatusResponse
from braincache.monitoring import track_request
from braincache.services import spaces as space_service
from braincache.services.share_links import ShareLinkResolver, ShareScope

logger = get_logger(__name__)
router = APIRouter()


@router.get("", response_model=SpaceListResponse)
async def list_spaces(
    db: AsyncSession = Depends(get_db_session),
    current_user: UserModel = Depends(get_current_user),
):
    """
    List the caller's spaces with their share hashes

    The default space is created on first use.
    """
    spaces = await space_service.list_spaces(db, current_user)

    space_ids = [space.id for space in spaces]
    result = await db.execute(select(ShareLink).where(ShareLink.space_id.in_(space_ids)))
    hashes = {link.space_id: link.hash for link in result.scalars().all()}

    return SpaceListResponse(
        spaces=[SpaceResponse.from_space_model(s, hashes.get(s.id)) for s in spaces],
        current_count=len(spaces),
        limit=space_service.get_space_limit(current_user.subscription_plan),
        plan=current_user.subscription_plan,
    )


@router.post("", response_model=SpaceResponse, status_code=status.HTTP_201_CREATED)
async def create_space(
    request: SpaceCreate,
    db: AsyncSession = Depends(get_db_session),
    current_user: UserModel = Depends(get_current_user),
):
    """
    Create a space

    Free accounts are limited to a small number of spaces; creating one
    past the limit returns 402.
    """
    space = await space_service.create_space(
        db, current_user, request.name, request.description
    )
    return SpaceResponse.from_space_model(space)


@router.patch("/{space_id}", response_model=SpaceResponse)
async def update_space(
    space_id: str,
    request: SpaceUpdate,
    db: AsyncSession = Depends(get_db_session),
    current_user: UserModel = Depends(get_current_user),
):
    """Rename or re-describe a space (owner only)"""
    space = await PermissionChecker.require_owner(
        db, current_user, ResourceType.SPACE, parse_uuid(space_id, "space_id")
    )

    if request.name is not None:
        name = request.name
        result = await db.execute(
            select(Space.id).where(
                Space.owner_id == current_user.id,
                Space.name == name,
                Space.id != space.id,
            )
        )
        if result.scalar_one_or_none():
            raise ConflictException(
                message="Space with this name already exists.",
                details={"name": name},
            )
        space.name = name
    if request.description is not None:
        space.description = request.description

    await db.commit()
    return SpaceResponse.from_space_model(space)


@router.delete("/{space_id}", response_model=MessageResponse)
async def delete_space(
    space_id: str,
    db: AsyncSession = Depends(get_db_session),
    current_user: UserModel = Depends(get_current_user),
):
    """Delete a space and everything in it (owner only)"""
    space = await PermissionChecker.require_owner(
        db, current_user, ResourceType.SPACE, parse_uuid(space_id, "space_id")
    )
    await space_service.delete_space(db, space)
    return MessageResponse(message="Space deleted successfully.")


# ============================================
# Share links
# ============================================
@router.get("/{space_id}/share", response_model=ShareStatusResponse)
async def get_space_share(
    space_id: str,
    db: AsyncSession = Depends(get_db_session),
    current_user: UserModel = Depends(get_current_user),
):
    """Current public share link of a space"""
    scope = ShareScope(ResourceType.SPACE, parse_uuid(space_id, "space_id"))
    share_hash = await ShareLinkResolver.status(db, current_user, scope)
    return ShareStatusResponse(shared=share_hash is not None, hash=share_hash)


@router.post("/{space_id}/share", response_model=ShareStatusResponse)
@track_request("POST", "/spaces/{space_id}/share")
async def enable_space_share(
    space_id: str,
    db: AsyncSession = Depends(get_db_session),
    current_user: UserModel = Depends(get_current_user),
):
    """Share a space publicly; returns the existing link if already shared"""
    scope = ShareScope(ResourceType.SPACE, parse_uuid(space_id, "space_id"))
    share_hash = await ShareLinkResolver.enable(db, current_user, scope)
    return ShareStatusResponse(shared=True, hash=share_hash)


@router.delete("/{space_id}/share", response_model=ShareStatusResponse)
@track_request("DELETE", "/spaces/{space_id}/share")
async def disable_space_share(
    space_id: str,
    db: AsyncSession = Depends(get_db_session),
    current_user: UserModel = Depends(get_current_user),
):
    """Stop sharing a space; its old link stops working permanently"""
    scope = ShareScope(ResourceType.SPACE, parse_uuid(space_id, "space_id"))
    await ShareLinkResolver.disable(db, current_user, scope)
    return ShareStatusResponse(shared=False, hash=None)
