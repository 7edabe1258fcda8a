from typing import Optional, List
from datetime import datetime

from pydantic import BaseModel, Field

from schemas.user import UserRead


class PostRead(BaseModel):
    id: int = Field(..., description="PK in the database")
    creator_id: int = Field(..., alias="userId", description="Author id")
    creator: Optional[UserRead] = Field(None, description="Author profile")
    caption: str = Field("", description="Post text")
    location: Optional[str] = None
    tags: List[str] = []
    image_urls: List[str] = Field([], alias="imageUrl", description="Public media URLs")
    image_ids: List[str] = Field([], alias="imageId", description="Stored media file ids")
    likes: List[int] = Field([], description="Ids of users who liked the post")
    saves: List[int] = Field([], description="Ids of users who saved the post")
    comments_count: int = Field(0, alias="commentsCount")
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime = Field(..., alias="updatedAt")

    class Config:
        from_attributes = True
        validate_by_name = True


class PostPage(BaseModel):
    documents: List[PostRead]
    total: int
    next_cursor: Optional[int] = Field(None, alias="nextCursor")

    class Config:
        validate_by_name = True


class LikeToggleResponse(BaseModel):
    liked: bool
    likes: List[int]


class SaveToggleResponse(BaseModel):
    saved: bool
    save_id: Optional[int] = Field(None, alias="saveId")

    class Config:
        validate_by_name = True
