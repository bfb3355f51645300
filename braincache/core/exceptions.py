"""
Custom Exceptions
Application-specific exception classes
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional


class AppException(Exception):
    """Base application exception"""

    def __init__(
        self,
        message: str,
        code: str = "app_error",
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(self.message)


class ValidationException(AppException):
    """Validation error exception"""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            code="validation_error",
            status_code=400,
            details=details,
        )


class AuthenticationException(AppException):
    """Authentication error exception"""

    def __init__(
        self,
        message: str = "Authentication failed",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            code="authentication_error",
            status_code=401,
            details=details,
        )


class AuthorizationException(AppException):
    """Authorization error exception

    Raised both when a resource exists but the caller may not touch it and
    when it does not exist at all, so responses never reveal existence.
    """

    def __init__(
        self,
        message: str = "You do not have access to this resource",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            code="authorization_error",
            status_code=403,
            details=details,
        )


class NotFoundException(AppException):
    """Resource not found exception"""

    def __init__(
        self,
        resource: str = "Resource",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=f"{resource} not found",
            code="not_found",
            status_code=404,
            details=details,
        )


class ConflictException(AppException):
    """Resource conflict exception"""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            code="conflict",
            status_code=409,
            details=details,
        )


class PaymentRequiredException(AppException):
    """Plan limit reached exception"""

    def __init__(
        self,
        message: str,
        limit: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        details = details or {}
        if limit is not None:
            details["limit"] = limit
        super().__init__(
            message=message,
            code="payment_required",
            status_code=402,
            details=details,
        )
