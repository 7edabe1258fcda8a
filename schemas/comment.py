from typing import Optional, List
from datetime import datetime

from pydantic import BaseModel, Field


class CommentCreate(BaseModel):
    post_id: int = Field(..., alias="postId")
    text: str = Field(..., min_length=1, description="Comment text")

    class Config:
        validate_by_name = True


class CommentLikeRequest(BaseModel):
    comment_id: int = Field(..., alias="commentId")

    class Config:
        validate_by_name = True


class CommentRead(BaseModel):
    id: int
    post_id: int = Field(..., alias="postId")
    user_id: int = Field(..., alias="userId")
    text: str
    user_name: Optional[str] = Field(None, alias="userName")
    user_image_url: Optional[str] = Field(None, alias="userImageUrl")
    likes: List[int] = Field([], description="Ids of users who liked the comment")
    created_at: datetime = Field(..., alias="createdAt")

    class Config:
        from_attributes = True
        validate_by_name = True
