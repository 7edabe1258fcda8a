from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.params import Path
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from core.security import get_current_user
from models.like import Like
from models.user import User
from schemas.like import LikeCreate, LikeDelete, LikeRead
from schemas.user import TotalLikes
from services.social_graph import get_post_or_404, like_post, total_likes_received

router = APIRouter(prefix="/api/likes", tags=["likes"])


@router.post(
    "/",
    response_model=LikeRead,
    status_code=status.HTTP_201_CREATED,
    summary="Like a post",
)
async def create_like(
    payload: LikeCreate,
    response: Response,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> LikeRead:
    post = await get_post_or_404(db, payload.post_id)
    like, created = await like_post(db, current_user, post)
    if not created:
        response.status_code = status.HTTP_200_OK
    return LikeRead.model_validate(like)


@router.delete(
    "/",
    summary="Remove a like by its id",
)
async def delete_like(
    payload: LikeDelete,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    like = await db.get(Like, payload.like_id)
    if not like:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Like not found")
    if like.user_id != current_user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not your like")
    await db.delete(like)
    await db.commit()
    return {"message": "Like removed"}


@router.get(
    "/post/{post_id}",
    response_model=List[LikeRead],
    summary="Likes of a post",
)
async def post_likes(
    post_id: int = Path(..., description="Post ID"),
    db: AsyncSession = Depends(get_db),
) -> List[LikeRead]:
    result = await db.execute(
        select(Like).where(Like.post_id == post_id).order_by(Like.created_at.asc())
    )
    return [LikeRead.model_validate(like) for like in result.scalars().all()]


@router.get(
    "/user/{user_id}/total",
    response_model=TotalLikes,
    summary="Likes received on all of the user's posts",
)
async def user_total(
    user_id: int = Path(..., description="User ID"),
    db: AsyncSession = Depends(get_db),
) -> TotalLikes:
    return TotalLikes(total_likes=await total_likes_received(db, user_id))
