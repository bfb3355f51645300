"""
Common Pydantic Models
Shared schemas used across the application
"""

from typing import Any, Dict, Optional
from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """Error detail model"""
    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Error message")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional error details")
    timestamp: Optional[str] = Field(None, description="Error timestamp")


class ErrorResponse(BaseModel):
    """Standard error response"""
    error: ErrorDetail


class MessageResponse(BaseModel):
    """Plain acknowledgement"""
    message: str


class HealthResponse(BaseModel):
    """Health check response"""
    status: str = Field(..., description="Health status: healthy or degraded")
    version: str = Field(..., description="Application version")
    services: Optional[Dict[str, str]] = Field(None, description="Service health status")


class UserSummary(BaseModel):
    """Public display info of a user"""
    user_id: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    @classmethod
    def from_user_model(cls, user) -> "UserSummary":
        return cls(
            user_id=str(user.id),
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
        )
