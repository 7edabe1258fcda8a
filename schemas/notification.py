from typing import Optional, List, Literal
from datetime import datetime

from pydantic import BaseModel, Field

NotificationType = Literal["message", "comment", "comment-like", "post-like", "follow", "unfollow"]


class NotificationCreate(BaseModel):
    user_id: int = Field(..., alias="userId", description="Recipient")
    type: NotificationType
    related_id: Optional[str] = Field(None, alias="relatedId")
    reference_id: Optional[str] = Field(None, alias="referenceId")
    content: Optional[str] = None

    class Config:
        validate_by_name = True


class NotificationRead(BaseModel):
    id: int
    user_id: int = Field(..., alias="userId")
    sender_id: int = Field(..., alias="senderId")
    type: str
    related_id: Optional[str] = Field(None, alias="relatedId")
    reference_id: Optional[str] = Field(None, alias="referenceId")
    content: Optional[str] = None
    is_read: bool = Field(False, alias="isRead")
    sender_name: Optional[str] = Field(None, alias="senderName")
    sender_image_url: Optional[str] = Field(None, alias="senderImageUrl")
    created_at: datetime = Field(..., alias="createdAt")

    class Config:
        from_attributes = True
        validate_by_name = True


class NotificationPage(BaseModel):
    documents: List[NotificationRead]
    total: int
    next_cursor: Optional[int] = Field(None, alias="nextCursor")

    class Config:
        validate_by_name = True


class BulkResult(BaseModel):
    updated: int = 0
    deleted: int = 0
