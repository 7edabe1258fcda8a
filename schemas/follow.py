from datetime import datetime

from pydantic import BaseModel, Field


class FollowCreate(BaseModel):
    follows_user_id: int = Field(..., alias="followsUserId", description="User to follow")

    class Config:
        validate_by_name = True


class FollowRead(BaseModel):
    id: int
    user_id: int = Field(..., alias="userId", description="Follower")
    follows_user_id: int = Field(..., alias="followsUserId", description="Followee")
    created_at: datetime = Field(..., alias="createdAt")

    class Config:
        from_attributes = True
        validate_by_name = True


class FollowToggleResponse(BaseModel):
    following: bool
    followers: int
