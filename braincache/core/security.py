"""
Security Utilities
JWT token management and password hashing
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from braincache.core.config import settings
from braincache.core.exceptions import AuthenticationException

ALGORITHM = "HS256"

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a hash"""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password"""
    return pwd_context.hash(password)


def _create_token(
    data: Dict[str, Any],
    token_type: str,
    expires_delta: timedelta,
) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + expires_delta
    to_encode.update({"exp": expire, "type": token_type})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)


def create_access_token(
    data: Dict[str, Any],
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Create a JWT access token"""
    return _create_token(
        data,
        "access",
        expires_delta or timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES),
    )


def create_refresh_token(
    data: Dict[str, Any],
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Create a JWT refresh token"""
    return _create_token(
        data,
        "refresh",
        expires_delta or timedelta(days=settings.JWT_REFRESH_TOKEN_EXPIRE_DAYS),
    )


def decode_token(token: str) -> Dict[str, Any]:
    """Decode and verify a JWT token"""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError as e:
        raise AuthenticationException(
            message="Invalid token",
            details={"error": str(e)},
        )


def _verify_token_type(token: str, expected: str) -> Dict[str, Any]:
    payload = decode_token(token)

    if payload.get("type") != expected:
        raise AuthenticationException(
            message="Invalid token type",
            details={"expected": expected, "got": payload.get("type")},
        )

    return payload


def verify_access_token(token: str) -> Dict[str, Any]:
    """Verify an access token and return its payload"""
    return _verify_token_type(token, "access")


def verify_refresh_token(token: str) -> Dict[str, Any]:
    """Verify a refresh token and return its payload"""
    return _verify_token_type(token, "refresh")
