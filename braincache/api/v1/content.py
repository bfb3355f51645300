"""
Content API Routes
Content items, their share links, public share resolution and reports
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from braincache.api.dependencies import (
    get_current_user,
    get_current_user_optional,
    parse_uuid,
)
from braincache.core.exceptions import ConflictException, ValidationException
from braincache.core.logging import get_logger
from braincache.core.permissions import AccessLevel, PermissionChecker
from braincache.db.models import Content, ContentReport, ContentType, ReportStatus, ResourceType
from braincache.db.models import User as UserModel
from braincache.db.session import get_db_session
from braincache.models.common import MessageResponse
from braincache.models.content import (
    ContentCreate,
    ContentListResponse,
    ContentResponse,
    ContentUpdate,
)
from braincache.models.report import ReportCreate, ReportResponse
from braincache.models.sharing import SharedContentResponse, ShareStatusResponse
from braincache.monitoring import track_request
from braincache.services.share_links import ShareLinkResolver, ShareScope
from braincache.services.spaces import delete_content_records

logger = get_logger(__name__)
router = APIRouter()


@router.post("", response_model=ContentResponse, status_code=status.HTTP_201_CREATED)
@track_request("POST", "/content")
async def create_content(
    request: ContentCreate,
    db: AsyncSession = Depends(get_db_session),
    current_user: UserModel = Depends(get_current_user),
):
    """
    Save a content item, optionally filed into a space

    Filing into someone else's space needs read-write access to it; the
    item then belongs to the space owner.
    """
    owner_id = current_user.id
    space_id = None

    if request.space_id:
        space_id = parse_uuid(request.space_id, "space_id")
        space, _ = await PermissionChecker.require_access(
            db, current_user, ResourceType.SPACE, space_id, write=True
        )
        owner_id = space.owner_id

    content = Content(
        title=request.title,
        type=request.type.value,
        link=request.link,
        body=request.body,
        owner_id=owner_id,
        space_id=space_id,
    )
    db.add(content)
    await db.commit()

    logger.info(f"Content created: {content.id} by {current_user.email}")
    return ContentResponse.from_content_model(content)


@router.get("", response_model=ContentListResponse)
async def list_content(
    space_id: Optional[str] = Query(None, description="List the content of this space"),
    db: AsyncSession = Depends(get_db_session),
    current_user: UserModel = Depends(get_current_user),
):
    """
    List content of a space the caller can read, or the caller's own content
    """
    if space_id is None:
        result = await db.execute(
            select(Content)
            .where(Content.owner_id == current_user.id)
            .order_by(Content.created_at.desc())
        )
        return ContentListResponse(
            content=[ContentResponse.from_content_model(c) for c in result.scalars().all()],
            permission=AccessLevel.OWNER.value,
        )

    space, level = await PermissionChecker.require_access(
        db, current_user, ResourceType.SPACE, parse_uuid(space_id, "space_id")
    )
    result = await db.execute(
        select(Content)
        .where(Content.space_id == space.id, Content.owner_id == space.owner_id)
        .order_by(Content.created_at.desc())
    )
    return ContentListResponse(
        content=[ContentResponse.from_content_model(c) for c in result.scalars().all()],
        space_id=str(space.id),
        permission=level.value,
    )


# ============================================
# Public share resolution
# ============================================
@router.get("/share/{share_hash}", response_model=SharedContentResponse)
@track_request("GET", "/content/share/{hash}")
async def resolve_share(
    share_hash: str,
    db: AsyncSession = Depends(get_db_session),
    current_user: Optional[UserModel] = Depends(get_current_user_optional),
):
    """
    Resolve a public share link (no authentication required)

    Signed-in viewers also get their own access level on the shared
    resource, so a client can offer editing where a grant allows it.
    """
    resolution = await ShareLinkResolver.resolve(db, share_hash)
    link = resolution.link

    viewer_permission = None
    if current_user is not None:
        if resolution.is_single_item:
            level = await PermissionChecker.content_level(
                db, current_user, resolution.contents[0]
            )
        else:
            level = await PermissionChecker.effective_permission(
                db, current_user, ResourceType.SPACE, link.space_id
            )
        viewer_permission = level.value

    return SharedContentResponse(
        contents=[ContentResponse.from_content_model(c) for c in resolution.contents],
        is_single_item=resolution.is_single_item,
        resource_type=link.resource_type.value,
        owner_id=str(resolution.owner_id),
        space_id=str(link.space_id) if link.space_id else None,
        viewer_permission=viewer_permission,
    )


@router.get("/{content_id}", response_model=ContentResponse)
async def get_content(
    content_id: str,
    db: AsyncSession = Depends(get_db_session),
    current_user: UserModel = Depends(get_current_user),
):
    """Get one content item (direct grant or access through its space)"""
    content, _ = await PermissionChecker.require_access(
        db, current_user, ResourceType.CONTENT, parse_uuid(content_id, "content_id")
    )
    return ContentResponse.from_content_model(content)


@router.patch("/{content_id}", response_model=ContentResponse)
async def update_content(
    content_id: str,
    request: ContentUpdate,
    db: AsyncSession = Depends(get_db_session),
    current_user: UserModel = Depends(get_current_user),
):
    """Edit a content item (read-write access required)"""
    content, _ = await PermissionChecker.require_access(
        db, current_user, ResourceType.CONTENT,
        parse_uuid(content_id, "content_id"), write=True,
    )

    if request.title is not None:
        content.title = request.title
    if request.link is not None:
        content.link = request.link
    if request.body is not None:
        content.body = request.body

    if content.type == ContentType.NOTE.value and not content.body:
        raise ValidationException(message="A note needs a body")
    if content.type != ContentType.NOTE.value and not content.link:
        raise ValidationException(message=f"A {content.type} item needs a link")

    await db.commit()
    return ContentResponse.from_content_model(content)


@router.delete("/{content_id}", response_model=MessageResponse)
async def delete_content(
    content_id: str,
    db: AsyncSession = Depends(get_db_session),
    current_user: UserModel = Depends(get_current_user),
):
    """Delete a content item with its grants, share link and reports"""
    content, _ = await PermissionChecker.require_access(
        db, current_user, ResourceType.CONTENT,
        parse_uuid(content_id, "content_id"), write=True,
    )
    await delete_content_records(db, [content.id])
    await db.commit()

    logger.info(f"Content deleted: {content_id} by {current_user.email}")
    return MessageResponse(message="Content deleted successfully.")


# ============================================
# Single-item share links
# ============================================
@router.get("/{content_id}/share", response_model=ShareStatusResponse)
async def get_content_share(
    content_id: str,
    db: AsyncSession = Depends(get_db_session),
    current_user: UserModel = Depends(get_current_user),
):
    """Current public share link of a content item"""
    scope = ShareScope(ResourceType.CONTENT, parse_uuid(content_id, "content_id"))
    share_hash = await ShareLinkResolver.status(db, current_user, scope)
    return ShareStatusResponse(shared=share_hash is not None, hash=share_hash)


@router.post("/{content_id}/share", response_model=ShareStatusResponse)
@track_request("POST", "/content/{content_id}/share")
async def enable_content_share(
    content_id: str,
    db: AsyncSession = Depends(get_db_session),
    current_user: UserModel = Depends(get_current_user),
):
    """Share one content item publicly"""
    scope = ShareScope(ResourceType.CONTENT, parse_uuid(content_id, "content_id"))
    share_hash = await ShareLinkResolver.enable(db, current_user, scope)
    return ShareStatusResponse(shared=True, hash=share_hash)


@router.delete("/{content_id}/share", response_model=ShareStatusResponse)
@track_request("DELETE", "/content/{content_id}/share")
async def disable_content_share(
    content_id: str,
    db: AsyncSession = Depends(get_db_session),
    current_user: UserModel = Depends(get_current_user),
):
    """Stop sharing one content item"""
    scope = ShareScope(ResourceType.CONTENT, parse_uuid(content_id, "content_id"))
    await ShareLinkResolver.disable(db, current_user, scope)
    return ShareStatusResponse(shared=False, hash=None)


# ============================================
# Reports
# ============================================
@router.post(
    "/{content_id}/report",
    response_model=ReportResponse,
    status_code=status.HTTP_201_CREATED,
)
async def report_content(
    content_id: str,
    request: ReportCreate,
    db: AsyncSession = Depends(get_db_session),
    current_user: UserModel = Depends(get_current_user),
):
    """
    Report a content item the caller can see

    Owners cannot report their own content, and a user can only have one
    pending report per item.
    """
    content, level = await PermissionChecker.require_access(
        db, current_user, ResourceType.CONTENT, parse_uuid(content_id, "content_id")
    )
    if level is AccessLevel.OWNER:
        raise ConflictException(message="You cannot report your own content")

    result = await db.execute(
        select(ContentReport.id).where(
            ContentReport.content_id == content.id,
            ContentReport.reporter_id == current_user.id,
            ContentReport.status == ReportStatus.PENDING.value,
        )
    )
    if result.scalar_one_or_none():
        raise ConflictException(message="You have already reported this content")

    report = ContentReport(
        content_id=content.id,
        reporter_id=current_user.id,
        reason=request.reason,
    )
    db.add(report)
    await db.commit()

    logger.info(f"Content {content.id} reported by {current_user.email}")
    return ReportResponse.from_report(report, content, current_user)
