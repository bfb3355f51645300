"""
Subscription API Routes
Plan, space limit and plan changes
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from braincache.api.dependencies import get_current_user
from braincache.core.config import settings
from braincache.core.exceptions import AuthorizationException, ValidationException
from braincache.core.logging import get_logger
from braincache.db.models import SubscriptionPlan
from braincache.db.models import User as UserModel
from braincache.db.session import get_db_session
from braincache.models.subscription import (
    PriceInfo,
    SubscriptionResponse,
    SubscriptionUpdate,
    SubscriptionUpdateResponse,
)
from braincache.services.spaces import count_spaces, get_space_limit

logger = get_logger(__name__)
router = APIRouter()


@router.get("", response_model=SubscriptionResponse)
async def get_subscription(
    db: AsyncSession = Depends(get_db_session),
    current_user: UserModel = Depends(get_current_user),
):
    """Current plan, space usage and pro pricing"""
    return SubscriptionResponse(
        plan=current_user.subscription_plan,
        limit=get_space_limit(current_user.subscription_plan),
        current_count=await count_spaces(db, current_user.id),
        price=PriceInfo(
            amount=settings.PRO_PLAN_PRICE_INR,
            currency=settings.PRO_PLAN_CURRENCY,
            display=f"₹{settings.PRO_PLAN_PRICE_INR}",
        ),
        payments_configured=settings.PAYMENTS_CONFIGURED,
    )


@router.post("", response_model=SubscriptionUpdateResponse)
async def update_subscription(
    request: SubscriptionUpdate,
    db: AsyncSession = Depends(get_db_session),
    current_user: UserModel = Depends(get_current_user),
):
    """
    Change plan

    Downgrading is always allowed and keeps existing spaces. Upgrading
    directly is only possible while payments are not configured.
    """
    plan = request.plan
    if plan.value == current_user.subscription_plan:
        raise ValidationException(
            message=f"Already on the {plan.value} plan",
            details={"plan": plan.value},
        )

    if plan is SubscriptionPlan.PRO and settings.PAYMENTS_CONFIGURED:
        raise AuthorizationException(
            message="Upgrading requires completing the payment checkout"
        )

    current_user.subscription_plan = plan.value
    await db.commit()

    logger.info(f"User {current_user.email} switched to {plan.value} plan")
    return SubscriptionUpdateResponse(
        message=f"Subscription updated to {plan.value}.",
        plan=plan.value,
        limit=get_space_limit(plan.value),
    )
