from pydantic import BaseModel, Field
from typing import Literal

from schemas.user import UserRead


class SignInRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    """
    Successful sign-in response.
    """
    access_token: str = Field(..., alias="accessToken")
    token_type: Literal["bearer"] = Field(..., alias="tokenType")
    expires_in_ms: int = Field(..., alias="expiresInMs")
    user: UserRead

    class Config:
        validate_by_name = True
