"""
Space Pydantic Models
"""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class SpaceCreate(BaseModel):
    """Space creation schema"""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=60)
    description: Optional[str] = Field(None, max_length=240)


class SpaceUpdate(BaseModel):
    """Space update schema"""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(None, min_length=1, max_length=60)
    description: Optional[str] = Field(None, max_length=240)


class SpaceResponse(BaseModel):
    """Space response schema"""
    space_id: str
    name: str
    description: Optional[str] = None
    owner_id: str
    share_hash: Optional[str] = None
    created_at: str

    @classmethod
    def from_space_model(cls, space, share_hash: Optional[str] = None) -> "SpaceResponse":
        return cls(
            space_id=str(space.id),
            name=space.name,
            description=space.description,
            owner_id=str(space.owner_id),
            share_hash=share_hash,
            created_at=space.created_at.isoformat() if space.created_at else "",
        )


class SpaceListResponse(BaseModel):
    """Owned spaces with plan usage"""
    spaces: List[SpaceResponse]
    current_count: int
    limit: int
    plan: str
