from typing import List

from fastapi import APIRouter, Depends, Response, status
from fastapi.params import Path
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from core.security import get_current_user
from models.post import Post
from models.save import Save
from models.user import User
from schemas.save import SaveCreate, SaveRead
from services.social_graph import delete_save, get_post_or_404, save_post
from utils.post_helpers import to_post_read

router = APIRouter(prefix="/api/saves", tags=["saves"])


async def to_save_read(save: Save, db: AsyncSession, with_post: bool = False) -> SaveRead:
    post = None
    if with_post:
        saved_post = await db.get(Post, save.post_id)
        if saved_post is not None:
            post = await to_post_read(saved_post, db)
    return SaveRead(
        id=save.id,
        user_id=save.user_id,
        post_id=save.post_id,
        post=post,
        created_at=save.created_at,
    )


@router.post(
    "/",
    response_model=SaveRead,
    status_code=status.HTTP_201_CREATED,
    summary="Save a post",
)
async def create_save(
    payload: SaveCreate,
    response: Response,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> SaveRead:
    post = await get_post_or_404(db, payload.post_id)
    save, created = await save_post(db, current_user, post)
    if not created:
        response.status_code = status.HTTP_200_OK
    return await to_save_read(save, db)


@router.delete(
    "/{save_id}",
    summary="Remove a saved post",
)
async def remove_save(
    save_id: int = Path(..., description="Save ID"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    await delete_save(db, current_user, save_id)
    return {"message": "Saved post deleted"}


@router.get(
    "/user/{user_id}",
    response_model=List[SaveRead],
    summary="Posts saved by a user, newest first",
)
async def user_saves(
    user_id: int = Path(..., description="User ID"),
    db: AsyncSession = Depends(get_db),
) -> List[SaveRead]:
    result = await db.execute(
        select(Save).where(Save.user_id == user_id).order_by(Save.created_at.desc())
    )
    saves = result.scalars().all()
    return [await to_save_read(save, db, with_post=True) for save in saves]
