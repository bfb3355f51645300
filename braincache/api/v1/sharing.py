"""
Sharing API Routes
Direct user grants on spaces and content, and the legacy whole-brain link
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from braincache.api.dependencies import get_current_user, get_current_user_optional, parse_uuid
from braincache.api.v1.content import resolve_share
from braincache.core.exceptions import NotFoundException
from braincache.core.logging import get_logger
from braincache.core.permissions import parse_resource_type
from braincache.db.models import ResourceType
from braincache.db.models import User as UserModel
from braincache.db.session import get_db_session
from braincache.models.common import MessageResponse, UserSummary
from braincache.models.sharing import (
    BrainShareRequest,
    GrantCreateRequest,
    GrantListResponse,
    GrantResponse,
    GrantRevokeRequest,
    GrantUpdateRequest,
    SharedContentResponse,
    SharedWithMeItem,
    SharedWithMeResponse,
    ShareStatusResponse,
)
from braincache.monitoring import track_request
from braincache.services.grants import GrantStore
from braincache.services.share_links import ShareLinkResolver, ShareScope
from braincache.services.spaces import ensure_default_space

logger = get_logger(__name__)
router = APIRouter()
brain_router = APIRouter()


@router.get("/with-users", response_model=GrantListResponse)
async def list_grants(
    resource_type: str = Query(..., description="space or content"),
    resource_id: str = Query(...),
    db: AsyncSession = Depends(get_db_session),
    current_user: UserModel = Depends(get_current_user),
):
    """List who a resource is shared with (owner only)"""
    resource_type = parse_resource_type(resource_type)
    resource_uuid = parse_uuid(resource_id, "resource_id")

    entries = await GrantStore.list_grants_for_resource(
        db, current_user, resource_type, resource_uuid
    )
    return GrantListResponse(
        resource_type=resource_type.value,
        resource_id=str(resource_uuid),
        shared_with=[GrantResponse.from_grant(e.grant, e.grantee) for e in entries],
    )


@router.post("/with-users", response_model=GrantListResponse)
@track_request("POST", "/share/with-users")
async def share_with_users(
    request: GrantCreateRequest,
    db: AsyncSession = Depends(get_db_session),
    current_user: UserModel = Depends(get_current_user),
):
    """
    Share a resource with one or more users

    Users who already hold a grant get their permission overwritten.
    Returns the full list of grants on the resource afterwards.
    """
    resource_type = parse_resource_type(request.resource_type)
    resource_uuid = parse_uuid(request.resource_id, "resource_id")
    grantee_ids = [parse_uuid(user_id, "user_id") for user_id in request.user_ids]

    await GrantStore.grant_many(
        db, current_user, resource_type, resource_uuid, grantee_ids, request.permission
    )

    entries = await GrantStore.list_grants_for_resource(
        db, current_user, resource_type, resource_uuid
    )
    return GrantListResponse(
        resource_type=resource_type.value,
        resource_id=str(resource_uuid),
        shared_with=[GrantResponse.from_grant(e.grant, e.grantee) for e in entries],
    )


@router.patch("/with-users", response_model=GrantResponse)
async def update_grant(
    request: GrantUpdateRequest,
    db: AsyncSession = Depends(get_db_session),
    current_user: UserModel = Depends(get_current_user),
):
    """Change one user's permission on a resource"""
    grantee_id = parse_uuid(request.user_id, "user_id")
    grant = await GrantStore.update_permission(
        db,
        current_user,
        request.resource_type,
        parse_uuid(request.resource_id, "resource_id"),
        grantee_id,
        request.permission,
    )
    grantee = await db.get(UserModel, grantee_id)
    return GrantResponse.from_grant(grant, grantee)


@router.delete("/with-users", response_model=MessageResponse)
@track_request("DELETE", "/share/with-users")
async def revoke_grant(
    request: GrantRevokeRequest,
    db: AsyncSession = Depends(get_db_session),
    current_user: UserModel = Depends(get_current_user),
):
    """Remove one user's access to a resource"""
    revoked = await GrantStore.revoke(
        db,
        current_user,
        request.resource_type,
        parse_uuid(request.resource_id, "resource_id"),
        parse_uuid(request.user_id, "user_id"),
    )
    if not revoked:
        return MessageResponse(message="User did not have access.")
    return MessageResponse(message="Access removed.")


@router.get("/with-me", response_model=SharedWithMeResponse)
async def shared_with_me(
    resource_type: str = Query(ResourceType.SPACE.value, description="space or content"),
    db: AsyncSession = Depends(get_db_session),
    current_user: UserModel = Depends(get_current_user),
):
    """Resources other users have shared with the caller"""
    shared = await GrantStore.list_resources_shared_with_me(db, current_user, resource_type)

    return SharedWithMeResponse(
        resources=[
            SharedWithMeItem(
                resource_type=item.resource_type.value,
                resource_id=str(item.resource.id),
                name=item.resource.name if item.resource_type is ResourceType.SPACE
                else item.resource.title,
                permission=item.permission.value,
                owner=UserSummary.from_user_model(item.owner),
                granted_at=item.granted_at.isoformat() if item.granted_at else "",
            )
            for item in shared
        ]
    )


# ============================================
# Legacy whole-brain share
# ============================================
@brain_router.post("/share", response_model=ShareStatusResponse)
async def share_brain(
    request: BrainShareRequest,
    db: AsyncSession = Depends(get_db_session),
    current_user: UserModel = Depends(get_current_user),
):
    """
    Turn the whole-brain share link on or off

    Without a space_id the link goes on the caller's default space.
    """
    if request.space_id:
        space_id = parse_uuid(request.space_id, "space_id")
    else:
        space_id = (await ensure_default_space(db, current_user)).id

    scope = ShareScope(ResourceType.SPACE, space_id)
    if request.share:
        share_hash = await ShareLinkResolver.enable(db, current_user, scope)
        return ShareStatusResponse(shared=True, hash=share_hash)

    await ShareLinkResolver.disable(db, current_user, scope)
    return ShareStatusResponse(shared=False, hash=None)


@brain_router.get("/{share_hash}", response_model=SharedContentResponse)
async def resolve_brain(
    share_hash: str,
    db: AsyncSession = Depends(get_db_session),
    current_user: Optional[UserModel] = Depends(get_current_user_optional),
):
    """Resolve a whole-brain share link (no authentication required)"""
    shared = await resolve_share(share_hash, db=db, current_user=current_user)
    if shared.is_single_item:
        raise NotFoundException("Shared content")
    return shared
