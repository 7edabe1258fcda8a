from datetime import datetime

from pydantic import BaseModel, Field


class ContactRequestCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=1, max_length=255)
    message: str = Field(..., min_length=1)


class ContactRequestRead(BaseModel):
    id: int
    name: str
    email: str
    message: str
    created_at: datetime = Field(..., alias="createdAt")

    class Config:
        from_attributes = True
        validate_by_name = True
