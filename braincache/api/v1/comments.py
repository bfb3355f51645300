"""
Space Comment API Routes
"""

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from braincache.api.dependencies import get_current_user, parse_uuid
from braincache.core.exceptions import AuthorizationException, NotFoundException
from braincache.core.logging import get_logger
from braincache.core.permissions import PermissionChecker, is_owner
from braincache.db.models import ResourceType, SpaceComment
from braincache.db.models import User as UserModel
from braincache.db.session import get_db_session
from braincache.models.comment import CommentCreate, CommentListResponse, CommentResponse
from braincache.models.common import MessageResponse

logger = get_logger(__name__)
router = APIRouter()


async def _get_comment(db: AsyncSession, space_id: uuid.UUID, comment_id: str) -> SpaceComment:
    comment = await db.get(SpaceComment, parse_uuid(comment_id, "comment_id"))
    if comment is None or comment.space_id != space_id:
        raise NotFoundException("Comment")
    return comment


@router.get("/{space_id}/comments", response_model=CommentListResponse)
async def list_comments(
    space_id: str,
    db: AsyncSession = Depends(get_db_session),
    current_user: UserModel = Depends(get_current_user),
):
    """List comments on a space, oldest first (read access required)"""
    space, _ = await PermissionChecker.require_access(
        db, current_user, ResourceType.SPACE, parse_uuid(space_id, "space_id")
    )

    result = await db.execute(
        select(SpaceComment, UserModel)
        .join(UserModel, UserModel.id == SpaceComment.author_id)
        .where(SpaceComment.space_id == space.id)
        .order_by(SpaceComment.created_at)
    )
    return CommentListResponse(
        comments=[CommentResponse.from_comment(c, author) for c, author in result.all()]
    )


@router.post(
    "/{space_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_comment(
    space_id: str,
    request: CommentCreate,
    db: AsyncSession = Depends(get_db_session),
    current_user: UserModel = Depends(get_current_user),
):
    """Comment on a space (read access is enough)"""
    space, _ = await PermissionChecker.require_access(
        db, current_user, ResourceType.SPACE, parse_uuid(space_id, "space_id")
    )

    comment = SpaceComment(
        space_id=space.id,
        author_id=current_user.id,
        comment=request.comment,
    )
    db.add(comment)
    await db.commit()

    return CommentResponse.from_comment(comment, current_user)


@router.patch("/{space_id}/comments/{comment_id}", response_model=CommentResponse)
async def edit_comment(
    space_id: str,
    comment_id: str,
    request: CommentCreate,
    db: AsyncSession = Depends(get_db_session),
    current_user: UserModel = Depends(get_current_user),
):
    """Edit a comment (author only)"""
    space, _ = await PermissionChecker.require_access(
        db, current_user, ResourceType.SPACE, parse_uuid(space_id, "space_id")
    )
    comment = await _get_comment(db, space.id, comment_id)

    if comment.author_id != current_user.id:
        raise AuthorizationException(message="Only the author can edit this comment")

    comment.comment = request.comment
    comment.edited = True
    await db.commit()

    return CommentResponse.from_comment(comment, current_user)


@router.delete("/{space_id}/comments/{comment_id}", response_model=MessageResponse)
async def delete_comment(
    space_id: str,
    comment_id: str,
    db: AsyncSession = Depends(get_db_session),
    current_user: UserModel = Depends(get_current_user),
):
    """Delete a comment (its author or the space owner)"""
    space, _ = await PermissionChecker.require_access(
        db, current_user, ResourceType.SPACE, parse_uuid(space_id, "space_id")
    )
    comment = await _get_comment(db, space.id, comment_id)

    if comment.author_id != current_user.id and not is_owner(current_user, space):
        raise AuthorizationException(message="Only the author or space owner can delete this comment")

    await db.delete(comment)
    await db.commit()

    logger.info(f"Comment {comment.id} deleted by {current_user.email}")
    return MessageResponse(message="Comment deleted.")
