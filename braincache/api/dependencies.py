"""
API Dependencies
Common dependencies for API routes
"""

import uuid
from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from braincache.core.exceptions import (
    AuthenticationException,
    AuthorizationException,
    ValidationException,
)
from braincache.core.security import verify_access_token
from braincache.db.models import User as UserModel
from braincache.db.session import get_db_session


def parse_uuid(value: str, field: str = "id") -> uuid.UUID:
    """Parse a path/body identifier or raise a validation error"""
    try:
        return uuid.UUID(str(value))
    except ValueError:
        raise ValidationException(
            message=f"Invalid {field} format",
            details={field: value, "expected_format": "UUID"},
        )


async def get_current_user(
    authorization: Optional[str] = Header(None),
    db: AsyncSession = Depends(get_db_session),
) -> UserModel:
    """
    Dependency to get current user from JWT token

    Args:
        authorization: Authorization header with Bearer token
        db: Database session

    Returns:
        Current authenticated user

    Raises:
        AuthenticationException: If token is invalid or user not found
    """
    if not authorization:
        raise AuthenticationException(message="Missing authorization header")

    if not authorization.startswith("Bearer "):
        raise AuthenticationException(message="Invalid authorization header format")

    token = authorization.split(" ", 1)[1]
    payload = verify_access_token(token)

    try:
        user_id = uuid.UUID(str(payload.get("sub")))
    except ValueError:
        raise AuthenticationException(message="Invalid token subject")

    user = await db.get(UserModel, user_id)

    if not user or not user.is_active:
        raise AuthenticationException(message="Invalid token or user inactive")

    return user


async def get_current_user_optional(
    authorization: Optional[str] = Header(None),
    db: AsyncSession = Depends(get_db_session),
) -> Optional[UserModel]:
    """
    Optional dependency to get current user from JWT token
    Returns None if not authenticated instead of raising exception
    """
    if not authorization:
        return None
    try:
        return await get_current_user(authorization, db)
    except AuthenticationException:
        return None


async def get_current_admin(
    current_user: UserModel = Depends(get_current_user),
) -> UserModel:
    """Dependency requiring the admin role"""
    if not current_user.is_admin:
        raise AuthorizationException(message="Admin access required")
    return current_user
