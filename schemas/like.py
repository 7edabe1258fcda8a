from typing import Optional
from datetime import datetime

from pydantic import BaseModel, Field


class LikeCreate(BaseModel):
    post_id: int = Field(..., alias="postId")

    class Config:
        validate_by_name = True


class LikeDelete(BaseModel):
    like_id: int = Field(..., alias="likeId")

    class Config:
        validate_by_name = True


class LikeRead(BaseModel):
    id: int
    user_id: int = Field(..., alias="userId")
    post_id: Optional[int] = Field(None, alias="postId")
    comment_id: Optional[int] = Field(None, alias="commentId")
    created_at: datetime = Field(..., alias="createdAt")

    class Config:
        from_attributes = True
        validate_by_name = True
