"""
Authentication Pydantic Models
Request/response schemas for authentication endpoints
"""

from typing import List, Optional
from pydantic import BaseModel, EmailStr, Field

from braincache.models.common import UserSummary


class UserBase(BaseModel):
    """Base user fields"""
    email: EmailStr
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)


class RegisterRequest(UserBase):
    """Registration request schema"""
    password: str = Field(..., min_length=8, max_length=100)


class UserUpdate(BaseModel):
    """Profile update schema"""
    first_name: Optional[str] = Field(None, min_length=1, max_length=50)
    last_name: Optional[str] = Field(None, min_length=1, max_length=50)


class UserResponse(BaseModel):
    """User response schema"""
    user_id: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: str
    subscription_plan: str
    is_active: bool
    created_at: str
    last_login_at: Optional[str] = None

    @classmethod
    def from_user_model(cls, user) -> "UserResponse":
        """Create UserResponse from SQLAlchemy User model"""
        return cls(
            user_id=str(user.id),
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            role=user.role,
            subscription_plan=user.subscription_plan,
            is_active=user.is_active,
            created_at=user.created_at.isoformat() if user.created_at else "",
            last_login_at=user.last_login_at.isoformat() if user.last_login_at else None,
        )


class TokenResponse(BaseModel):
    """Token response schema"""
    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int
    user: UserResponse


class LoginRequest(BaseModel):
    """Login request schema"""
    email: EmailStr
    password: str


class RefreshTokenRequest(BaseModel):
    """Refresh token request schema"""
    refresh_token: str


class UserSearchResponse(BaseModel):
    """User directory search results"""
    users: List[UserSummary]
