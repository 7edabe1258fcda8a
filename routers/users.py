from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status, UploadFile, File, Form, Query
from fastapi.params import Path
from sqlalchemy import select, desc, func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from core.config import settings
from core.database import get_db
from core.security import get_current_user
from models.like import Like
from models.post import Post
from models.user import User
from schemas.user import (
    RelationshipCounts,
    RelationshipLists,
    TopUserRead,
    TotalLikes,
    UserCreate,
    UserRead,
)
from services.accounts import register_user
from services.social_graph import (
    follower_ids,
    following_ids,
    get_user_or_404,
    total_likes_received,
    users_by_ids,
)
from utils import local_storage
from utils.search import LIKE_ESCAPE, contains_pattern
from utils.user_helpers import to_top_user_read, to_user_read, to_user_reads

router = APIRouter(prefix="/api", tags=["users"])


@router.post(
    "/users",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a user",
)
async def create_user(
    payload: UserCreate,
    db: AsyncSession = Depends(get_db),
) -> UserRead:
    return to_user_read(await register_user(payload, db))


@router.get(
    "/users/search",
    response_model=List[UserRead],
    summary="Search users by name or username",
)
async def search_users(
    q: str = Query(..., min_length=1),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
) -> List[UserRead]:
    term = q.strip()
    if not term:
        return []
    pattern = contains_pattern(term)
    result = await db.execute(
        select(User)
        .where(or_(
            User.name.ilike(pattern, escape=LIKE_ESCAPE),
            User.username.ilike(pattern, escape=LIKE_ESCAPE),
        ))
        .order_by(User.name.asc())
        .limit(limit)
    )
    return to_user_reads(result.scalars().all())


@router.get(
    "/users/top",
    response_model=List[TopUserRead],
    summary="Top members by likes received",
)
async def top_members(
    limit: int = Query(10, ge=1, le=50),
    db: AsyncSession = Depends(get_db),
) -> List[TopUserRead]:
    res = await db.execute(
        select(User, func.count(Like.id).label("total_likes"))
        .join(Post, Post.creator_id == User.id)
        .join(Like, Like.post_id == Post.id)
        .group_by(User.id)
        .order_by(desc("total_likes"))
        .limit(limit)
    )
    return [to_top_user_read(user, total_likes) for user, total_likes in res.all()]


@router.get(
    "/users",
    response_model=List[UserRead],
    summary="List users, newest first",
)
async def list_users(
    limit: Optional[int] = Query(None, ge=1, le=200),
    db: AsyncSession = Depends(get_db),
) -> List[UserRead]:
    stmt = select(User).order_by(User.created_at.desc())
    if limit:
        stmt = stmt.limit(limit)
    result = await db.execute(stmt)
    return to_user_reads(result.scalars().all())


@router.get(
    "/users/{user_id}/relationships",
    response_model=RelationshipCounts,
    summary="Follower and following counts",
)
async def relationship_counts(
    user_id: int = Path(..., description="User ID"),
    db: AsyncSession = Depends(get_db),
) -> RelationshipCounts:
    await get_user_or_404(db, user_id)
    return RelationshipCounts(
        followers=len(await follower_ids(db, user_id)),
        following=len(await following_ids(db, user_id)),
    )


@router.get(
    "/users/{user_id}/relationships/list",
    response_model=RelationshipLists,
    summary="Followers and followed users",
)
async def relationship_lists(
    user_id: int = Path(..., description="User ID"),
    db: AsyncSession = Depends(get_db),
) -> RelationshipLists:
    await get_user_or_404(db, user_id)
    followers = await users_by_ids(db, await follower_ids(db, user_id))
    following = await users_by_ids(db, await following_ids(db, user_id))
    return RelationshipLists(
        followers=to_user_reads(followers),
        following=to_user_reads(following),
    )


@router.get(
    "/users/{user_id}/followers",
    response_model=List[UserRead],
    summary="Users following this user",
)
async def followers_list(
    user_id: int = Path(..., description="User ID"),
    db: AsyncSession = Depends(get_db),
) -> List[UserRead]:
    await get_user_or_404(db, user_id)
    return to_user_reads(await users_by_ids(db, await follower_ids(db, user_id)))


@router.get(
    "/users/{user_id}/likes/total",
    response_model=TotalLikes,
    summary="Likes received on all of the user's posts",
)
async def user_total_likes(
    user_id: int = Path(..., description="User ID"),
    db: AsyncSession = Depends(get_db),
) -> TotalLikes:
    return TotalLikes(total_likes=await total_likes_received(db, user_id))


@router.get(
    "/users/by-account/{account_id}",
    response_model=UserRead,
    summary="Find a user by email or username",
)
async def user_by_account(
    account_id: str,
    db: AsyncSession = Depends(get_db),
) -> UserRead:
    key = account_id.strip().lower()
    result = await db.execute(
        select(User).where(or_(User.email == key, User.username == key)).limit(1)
    )
    user = result.scalar_one_or_none()
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return to_user_read(user)


@router.get(
    "/users/{user_id}",
    response_model=UserRead,
    summary="Public profile of a user",
)
async def read_user(
    user_id: int = Path(..., description="User ID"),
    db: AsyncSession = Depends(get_db),
) -> UserRead:
    return to_user_read(await get_user_or_404(db, user_id))


@router.patch(
    "/users/{user_id}",
    response_model=UserRead,
    summary="Update own profile (optional avatar upload)",
)
async def update_user(
    user_id: int = Path(..., description="User ID"),
    name: Optional[str] = Form(None),
    username: Optional[str] = Form(None),
    bio: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> UserRead:
    if user_id != current_user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You can only edit your own profile")

    if name is not None:
        if not name.strip():
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="name cannot be empty")
        current_user.name = name.strip()
    if username is not None:
        current_user.username = username
    if bio is not None:
        current_user.bio = bio

    old_image_id = None
    if file is not None and file.filename:
        image_id = await run_in_threadpool(
            local_storage.save_image, file.file, "file", settings.MAX_UPLOAD_SIZE
        )
        old_image_id = current_user.image_id
        current_user.image_id = image_id
        current_user.image_url = local_storage.public_url(image_id)

    db.add(current_user)
    await db.commit()
    await db.refresh(current_user)

    if old_image_id:
        await run_in_threadpool(local_storage.delete_file, old_image_id)

    return to_user_read(current_user)
