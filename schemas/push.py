from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class PushKeys(BaseModel):
    p256dh: str = Field(..., min_length=1)
    auth: str = Field(..., min_length=1)


class PushSubscriptionCreate(BaseModel):
    """
    PushSubscription.toJSON() as produced by the browser.
    """
    endpoint: str = Field(..., min_length=1)
    keys: PushKeys


class PushSubscriptionRead(BaseModel):
    id: int
    user_id: int = Field(..., alias="userId")
    endpoint: str
    created_at: datetime = Field(..., alias="createdAt")

    class Config:
        from_attributes = True
        validate_by_name = True


class VapidPublicKey(BaseModel):
    public_key: Optional[str] = Field(None, alias="publicKey")

    class Config:
        validate_by_name = True
