"""
Content Pydantic Models
"""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator

from braincache.db.models import ContentType


class ContentCreate(BaseModel):
    """Content creation schema"""
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=200)
    type: ContentType
    link: Optional[str] = Field(None, min_length=1)
    body: Optional[str] = Field(None, min_length=1)
    space_id: Optional[str] = Field(None, description="Space to file the item in")

    @model_validator(mode="after")
    def check_target(self) -> "ContentCreate":
        if self.type == ContentType.NOTE and not self.body:
            raise ValueError("A note needs a body")
        if self.type != ContentType.NOTE and not self.link:
            raise ValueError(f"A {self.type.value} item needs a link")
        return self


class ContentUpdate(BaseModel):
    """Content update schema"""
    model_config = ConfigDict(str_strip_whitespace=True)

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    link: Optional[str] = Field(None, min_length=1)
    body: Optional[str] = Field(None, min_length=1)


class ContentResponse(BaseModel):
    """Content response schema"""
    content_id: str
    title: str
    type: str
    link: Optional[str] = None
    body: Optional[str] = None
    owner_id: str
    space_id: Optional[str] = None
    created_at: str

    @classmethod
    def from_content_model(cls, content) -> "ContentResponse":
        return cls(
            content_id=str(content.id),
            title=content.title,
            type=content.type,
            link=content.link,
            body=content.body,
            owner_id=str(content.owner_id),
            space_id=str(content.space_id) if content.space_id else None,
            created_at=content.created_at.isoformat() if content.created_at else "",
        )


class ContentListResponse(BaseModel):
    """Content listing"""
    content: List[ContentResponse]
    space_id: Optional[str] = None
    permission: str = Field(..., description="Caller's access level on the listed space")
