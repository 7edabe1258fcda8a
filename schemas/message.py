from typing import Optional, List
from datetime import datetime

from pydantic import BaseModel, Field

from schemas.user import UserRead


class MessageCreate(BaseModel):
    recipient_id: int = Field(..., alias="recipientId")
    content: str = Field(..., description="Trimmed and cut to 220 characters")
    username: Optional[str] = Field(None, description="Sender display name override")

    class Config:
        validate_by_name = True


class MessageRead(BaseModel):
    id: int
    user_id: int = Field(..., alias="userId", description="Sender")
    recipient_id: int = Field(..., alias="recipientId")
    content: str
    username: Optional[str] = None
    sender_image_url: Optional[str] = Field(None, alias="senderImageUrl")
    is_read: bool = Field(False, alias="isRead")
    created_at: datetime = Field(..., alias="createdAt")

    class Config:
        from_attributes = True
        validate_by_name = True


class MessageThread(BaseModel):
    total: int
    documents: List[MessageRead]


class MarkReadRequest(BaseModel):
    sender_id: int = Field(..., alias="senderId")
    recipient_id: int = Field(..., alias="recipientId")

    class Config:
        validate_by_name = True


class MarkReadResponse(BaseModel):
    updated: int


class Contact(BaseModel):
    peer_id: int = Field(..., alias="peerId")
    peer: Optional[UserRead] = None
    last_message: MessageRead = Field(..., alias="lastMessage")

    class Config:
        validate_by_name = True


class ContactList(BaseModel):
    documents: List[Contact]
