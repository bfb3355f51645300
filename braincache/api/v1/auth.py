"""
Authentication API Routes
Register, login, token refresh and profile
"""

import uuid
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from braincache.api.dependencies import get_current_user
from braincache.core.config import settings
from braincache.core.exceptions import AuthenticationException, ConflictException
from braincache.core.logging import get_logger
from braincache.core.security import (
    create_access_token,
    create_refresh_token,
    get_password_hash,
    verify_password,
    verify_refresh_token,
)
from braincache.db.models import User as UserModel
from braincache.db.session import get_db_session
from braincache.models.auth import (
    LoginRequest,
    RefreshTokenRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
    UserUpdate,
)
from braincache.services.spaces import ensure_default_space

logger = get_logger(__name__)
router = APIRouter()


def _issue_tokens(user: UserModel) -> TokenResponse:
    token_data = {"sub": str(user.id), "email": user.email, "role": user.role}
    return TokenResponse(
        access_token=create_access_token(token_data),
        refresh_token=create_refresh_token(token_data),
        token_type="Bearer",
        expires_in=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        user=UserResponse.from_user_model(user),
    )


@router.post("/register", response_model=TokenResponse, status_code=201)
async def register(
    request: RegisterRequest,
    db: AsyncSession = Depends(get_db_session),
):
    """
    Register a new user account

    A default space is created alongside the account.
    """
    email = request.email.lower()
    result = await db.execute(select(UserModel.id).where(UserModel.email == email))
    if result.scalar_one_or_none():
        raise ConflictException(
            message="User already exists.",
            details={"email": email},
        )

    user = UserModel(
        email=email,
        first_name=request.first_name,
        last_name=request.last_name,
        hashed_password=get_password_hash(request.password),
    )
    db.add(user)
    await db.commit()

    await ensure_default_space(db, user)

    logger.info(f"New user registered: {user.email}")
    return _issue_tokens(user)


@router.post("/login", response_model=TokenResponse)
async def login(
    request: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
):
    """Authenticate user and return JWT tokens"""
    result = await db.execute(
        select(UserModel).where(UserModel.email == request.email.lower())
    )
    user = result.scalar_one_or_none()

    if not user or not verify_password(request.password, user.hashed_password):
        logger.warning(f"Failed login attempt for email: {request.email}")
        raise AuthenticationException(message="Invalid email or password")

    if not user.is_active:
        raise AuthenticationException(message="Account is disabled")

    user.last_login_at = datetime.now(timezone.utc)
    await db.commit()

    logger.info(f"User logged in: {user.email}")
    return _issue_tokens(user)


@router.post("/refresh", response_model=TokenResponse)
async def refresh_token(
    request: RefreshTokenRequest,
    db: AsyncSession = Depends(get_db_session),
):
    """Refresh access token using refresh token"""
    payload = verify_refresh_token(request.refresh_token)

    try:
        user = await db.get(UserModel, uuid.UUID(str(payload.get("sub"))))
    except ValueError:
        user = None

    if not user or not user.is_active:
        raise AuthenticationException(message="Invalid token")

    return _issue_tokens(user)


@router.get("/me", response_model=UserResponse)
async def get_me(
    current_user: UserModel = Depends(get_current_user),
):
    """Get current authenticated user information"""
    return UserResponse.from_user_model(current_user)


@router.patch("/me", response_model=UserResponse)
async def update_profile(
    request: UserUpdate,
    current_user: UserModel = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
):
    """Update current user's name"""
    if request.first_name is not None:
        current_user.first_name = request.first_name
    if request.last_name is not None:
        current_user.last_name = request.last_name

    await db.commit()

    logger.info(f"User profile updated: {current_user.email}")
    return UserResponse.from_user_model(current_user)
