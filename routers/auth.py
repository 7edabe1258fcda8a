# routers/auth.py
from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from core.config import settings
from core.database import get_db
from core.security import (
    TOKEN_COOKIE,
    create_access_token,
    get_current_user,
    verify_password,
)
from models.user import User
from services.accounts import register_user
from schemas.auth import SignInRequest, TokenResponse
from schemas.user import UserCreate, UserRead
from utils.user_helpers import to_user_read

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post(
    "/signup",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create an account",
)
async def sign_up(
    payload: UserCreate,
    db: AsyncSession = Depends(get_db),
) -> UserRead:
    user = await register_user(payload, db)
    return to_user_read(user)


@router.post(
    "/signin",
    response_model=TokenResponse,
    summary="Email + password → JWT (also set as the jwt_token cookie)",
)
async def sign_in(
    credentials: SignInRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
) -> TokenResponse:
    stmt = select(User).where(User.email == credentials.email.strip().lower())
    result = await db.execute(stmt)
    user = result.scalar_one_or_none()
    if not user or not verify_password(credentials.password, user.password_hash):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    access_token, expires = create_access_token(user)
    response.set_cookie(
        TOKEN_COOKIE,
        access_token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        samesite="lax",
        secure=not settings.DEBUG,
    )

    return TokenResponse(
        access_token=access_token,
        token_type="bearer",
        expires_in_ms=int(expires.timestamp() * 1000),
        user=to_user_read(user),
    )


@router.post("/signout", summary="Drop the session cookie")
async def sign_out(response: Response):
    response.delete_cookie(TOKEN_COOKIE)
    return {"message": "Signed out"}


@router.get(
    "/current-user",
    response_model=UserRead,
    summary="The authenticated user",
)
async def current_user(
    user: User = Depends(get_current_user),
) -> UserRead:
    return to_user_read(user)
