"""
Admin API Routes
System administration endpoints
"""

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from braincache.api.dependencies import get_current_admin
from braincache.core.config import settings
from braincache.core.exceptions import NotFoundException
from braincache.core.logging import get_logger
from braincache.db.models import (
    Content,
    ContentReport,
    ReportStatus,
    ShareAccess,
    ShareLink,
    Space,
    SubscriptionPlan,
)
from braincache.db.models import User as UserModel
from braincache.db.session import get_db_session
from braincache.monitoring import get_metrics

logger = get_logger(__name__)
router = APIRouter(dependencies=[Depends(get_current_admin)])


async def _count(db: AsyncSession, column, *where) -> int:
    query = select(func.count(column))
    if where:
        query = query.where(*where)
    result = await db.execute(query)
    return result.scalar() or 0


@router.get("/stats")
async def get_system_stats(
    db: AsyncSession = Depends(get_db_session),
):
    """Get system usage statistics"""
    return {
        "users": {
            "total": await _count(db, UserModel.id),
            "pro": await _count(
                db, UserModel.id, UserModel.subscription_plan == SubscriptionPlan.PRO.value
            ),
        },
        "spaces": {"total": await _count(db, Space.id)},
        "content": {"total": await _count(db, Content.id)},
        "sharing": {
            "grants": await _count(db, ShareAccess.id),
            "share_links": await _count(db, ShareLink.id),
        },
        "reports": {
            "pending": await _count(
                db, ContentReport.id, ContentReport.status == ReportStatus.PENDING.value
            ),
        },
    }


@router.get("/users")
async def list_users(
    limit: int = Query(20, ge=0),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db_session),
):
    """List all users (admin only)"""
    # Enforce maximum limit of 100
    limit = min(limit, 100)

    total = await _count(db, UserModel.id)
    result = await db.execute(
        select(UserModel).order_by(UserModel.created_at).offset(offset).limit(limit)
    )

    return {
        "total": total,
        "limit": limit,
        "offset": offset,
        "results": [
            {
                "user_id": str(user.id),
                "name": user.display_name,
                "email": user.email,
                "role": user.role,
                "plan": user.subscription_plan,
                "is_active": user.is_active,
                "created_at": user.created_at.isoformat(),
            }
            for user in result.scalars().all()
        ],
    }


@router.get("/metrics")
async def prometheus_metrics():
    """
    Prometheus metrics endpoint

    Returns metrics in Prometheus exposition format for scraping by Prometheus server.
    """
    if not settings.ENABLE_METRICS:
        raise NotFoundException("Metrics")
    return Response(content=get_metrics(), media_type="text/plain")
