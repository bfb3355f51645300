"""
User Directory API Routes
Lookup of users to share resources with
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from braincache.api.dependencies import get_current_user
from braincache.db.models import User as UserModel
from braincache.db.session import get_db_session
from braincache.models.auth import UserSearchResponse
from braincache.models.common import UserSummary

router = APIRouter()

SEARCH_LIMIT = 10


@router.get("/search", response_model=UserSearchResponse)
async def search_users(
    email: str = Query(..., min_length=1, max_length=255),
    db: AsyncSession = Depends(get_db_session),
    current_user: UserModel = Depends(get_current_user),
):
    """Find active users by partial, case-insensitive email (excluding the caller)"""
    pattern = f"%{email.strip().lower()}%"
    result = await db.execute(
        select(UserModel)
        .where(
            func.lower(UserModel.email).like(pattern),
            UserModel.id != current_user.id,
            UserModel.is_active.is_(True),
        )
        .order_by(UserModel.email)
        .limit(SEARCH_LIMIT)
    )
    return UserSearchResponse(
        users=[UserSummary.from_user_model(user) for user in result.scalars().all()]
    )
