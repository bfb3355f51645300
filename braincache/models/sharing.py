"""
Sharing Pydantic Models
Share links and direct user grants
"""

from typing import List, Optional
from pydantic import BaseModel, Field

from braincache.models.common import UserSummary
from braincache.models.content import ContentResponse


class ShareStatusResponse(BaseModel):
    """Whether a resource currently has a public share link"""
    shared: bool
    hash: Optional[str] = None


class BrainShareRequest(BaseModel):
    """Legacy whole-brain share toggle"""
    share: bool
    space_id: Optional[str] = Field(None, description="Defaults to the caller's first space")


class SharedContentResponse(BaseModel):
    """Read-only content resolved from a share link"""
    contents: List[ContentResponse]
    is_single_item: bool
    resource_type: str
    owner_id: str
    space_id: Optional[str] = None
    viewer_permission: Optional[str] = Field(
        None,
        description="Authenticated caller's own access to the shared space, if any",
    )


class GrantCreateRequest(BaseModel):
    """Share a resource with one or more users"""
    resource_type: str = Field(..., description="space or content")
    resource_id: str
    user_ids: List[str] = Field(..., min_length=1, max_length=50)
    permission: str = Field("read", description="read or read-write")


class GrantUpdateRequest(BaseModel):
    """Change one user's permission"""
    resource_type: str
    resource_id: str
    user_id: str
    permission: str


class GrantRevokeRequest(BaseModel):
    """Remove one user's access"""
    resource_type: str
    resource_id: str
    user_id: str


class GrantResponse(BaseModel):
    """A grant with grantee display info"""
    grant_id: str
    resource_type: str
    resource_id: str
    permission: str
    user: UserSummary
    granted_at: str

    @classmethod
    def from_grant(cls, grant, grantee) -> "GrantResponse":
        return cls(
            grant_id=str(grant.id),
            resource_type=grant.resource_type,
            resource_id=str(grant.resource_id),
            permission=grant.permission,
            user=UserSummary.from_user_model(grantee),
            granted_at=grant.created_at.isoformat() if grant.created_at else "",
        )


class GrantListResponse(BaseModel):
    """All grants on one resource"""
    resource_type: str
    resource_id: str
    shared_with: List[GrantResponse]


class SharedWithMeItem(BaseModel):
    """A resource someone else shared with the caller"""
    resource_type: str
    resource_id: str
    name: str
    permission: str
    owner: UserSummary
    granted_at: str


class SharedWithMeResponse(BaseModel):
    """Resources shared with the caller"""
    resources: List[SharedWithMeItem]
