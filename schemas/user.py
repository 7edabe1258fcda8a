from typing import Optional, List
from datetime import datetime

from pydantic import BaseModel, Field


class UserCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100, description="Display name")
    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$", description="Login email")
    username: Optional[str] = Field(None, max_length=64, description="Public handle")
    password: str = Field(..., min_length=1, description="Plain-text password, stored as a bcrypt hash")

    class Config:
        from_attributes = True
        validate_by_name = True


class UserRead(BaseModel):
    id: int = Field(..., description="PK in the database")
    name: str = Field(..., description="Display name")
    username: Optional[str] = Field(None, description="Public handle")
    email: str = Field(..., description="Login email")
    image_url: str = Field("", alias="imageUrl", description="Avatar URL")
    image_id: Optional[str] = Field(None, alias="imageId", description="Stored avatar file id")
    bio: str = Field("", description="About the user")
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    class Config:
        from_attributes = True
        validate_by_name = True


class TopUserRead(UserRead):
    total_likes: int = Field(..., alias="totalLikes", description="Likes received on the user's posts")


class TotalLikes(BaseModel):
    total_likes: int = Field(..., alias="totalLikes")

    class Config:
        validate_by_name = True


class RelationshipCounts(BaseModel):
    followers: int
    following: int


class RelationshipLists(BaseModel):
    followers: List[UserRead] = []
    following: List[UserRead] = []
