"""
Space Comment Pydantic Models
"""

from typing import List
from pydantic import BaseModel, ConfigDict, Field

from braincache.models.common import UserSummary


class CommentCreate(BaseModel):
    """Comment body"""
    model_config = ConfigDict(str_strip_whitespace=True)

    comment: str = Field(..., min_length=1, max_length=2000)


class CommentResponse(BaseModel):
    """Comment with author info"""
    comment_id: str
    space_id: str
    comment: str
    edited: bool
    author: UserSummary
    created_at: str
    updated_at: str

    @classmethod
    def from_comment(cls, comment, author) -> "CommentResponse":
        return cls(
            comment_id=str(comment.id),
            space_id=str(comment.space_id),
            comment=comment.comment,
            edited=comment.edited,
            author=UserSummary.from_user_model(author),
            created_at=comment.created_at.isoformat() if comment.created_at else "",
            updated_at=comment.updated_at.isoformat() if comment.updated_at else "",
        )


class CommentListResponse(BaseModel):
    comments: List[CommentResponse]
