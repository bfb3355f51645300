"""
Subscription Pydantic Models
"""

from pydantic import BaseModel

from braincache.db.models import SubscriptionPlan


class PriceInfo(BaseModel):
    amount: int
    currency: str
    display: str


class SubscriptionResponse(BaseModel):
    """Current plan and space usage"""
    plan: str
    limit: int
    current_count: int
    price: PriceInfo
    payments_configured: bool


class SubscriptionUpdate(BaseModel):
    plan: SubscriptionPlan


class SubscriptionUpdateResponse(BaseModel):
    message: str
    plan: str
    limit: int
