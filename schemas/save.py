from typing import Optional
from datetime import datetime

from pydantic import BaseModel, Field

from schemas.post import PostRead


class SaveCreate(BaseModel):
    post_id: int = Field(..., alias="postId")

    class Config:
        validate_by_name = True


class SaveRead(BaseModel):
    id: int
    user_id: int = Field(..., alias="userId")
    post_id: int = Field(..., alias="postId")
    post: Optional[PostRead] = None
    created_at: datetime = Field(..., alias="createdAt")

    class Config:
        from_attributes = True
        validate_by_name = True
