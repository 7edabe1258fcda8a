from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status, Form
from fastapi.params import Path
from sqlalchemy import select, func, and_, or_
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from core.config import settings
from core.database import get_db
from core.security import get_current_user
from models.post import Post
from models.user import User
from schemas.post import LikeToggleResponse, PostPage, PostRead, SaveToggleResponse
from services.social_graph import (
    delete_post_cascade,
    delete_save,
    follower_ids,
    following_ids,
    get_post_or_404,
    toggle_post_like,
    toggle_post_save,
)
from utils import local_storage
from utils.post_helpers import to_post_read, to_post_reads
from utils.search import LIKE_ESCAPE, contains_pattern
from utils.uploads import collect_files, store_images

router = APIRouter(prefix="/api", tags=["posts"])

MEDIA_FIELDS = ("files", "file")
PAGE_SIZE = 9
RECENT_LIMIT = 20


def parse_tags(tags: Optional[str]) -> List[str]:
    if not tags:
        return []
    return [tag.strip() for tag in tags.split(",") if tag.strip()]


async def posts_by_creators(db: AsyncSession, creator_ids: List[int], limit: int, offset: int = 0) -> List[Post]:
    if not creator_ids:
        return []
    result = await db.execute(
        select(Post)
        .where(Post.creator_id.in_(creator_ids))
        .order_by(Post.created_at.desc())
        .offset(offset)
        .limit(limit)
    )
    return list(result.scalars().all())


def ensure_owner(post: Post, user: User) -> None:
    if post.creator_id != user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You can only modify your own posts")


@router.get(
    "/posts",
    response_model=PostPage,
    summary="Search and page through posts, most recently updated first",
)
async def list_posts(
    q: Optional[str] = Query(None, description="Substring of the caption"),
    cursor: Optional[int] = Query(None, description="Id of the last post of the previous page"),
    limit: int = Query(PAGE_SIZE, ge=1, le=50),
    db: AsyncSession = Depends(get_db),
) -> PostPage:
    filters = []
    if q and q.strip():
        filters.append(Post.caption.ilike(contains_pattern(q.strip()), escape=LIKE_ESCAPE))

    total = (await db.execute(select(func.count(Post.id)).where(*filters))).scalar_one()

    stmt = select(Post).where(*filters)
    if cursor is not None:
        anchor = await db.get(Post, cursor)
        if not anchor:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid cursor")
        stmt = stmt.where(
            or_(
                Post.updated_at < anchor.updated_at,
                and_(Post.updated_at == anchor.updated_at, Post.id < anchor.id),
            )
        )
    stmt = stmt.order_by(Post.updated_at.desc(), Post.id.desc()).limit(limit + 1)
    posts = list((await db.execute(stmt)).scalars().all())

    next_cursor = None
    if len(posts) > limit:
        posts = posts[:limit]
        next_cursor = posts[-1].id

    return PostPage(
        documents=await to_post_reads(posts, db),
        total=total,
        next_cursor=next_cursor,
    )


@router.get(
    "/posts/recent",
    response_model=List[PostRead],
    summary="Newest posts",
)
async def recent_posts(
    db: AsyncSession = Depends(get_db),
) -> List[PostRead]:
    result = await db.execute(
        select(Post).order_by(Post.created_at.desc()).limit(RECENT_LIMIT)
    )
    return await to_post_reads(result.scalars().all(), db)


@router.get(
    "/posts/feed/{user_id}",
    response_model=List[PostRead],
    summary="Feed: own, followers' and followed users' posts, newest first",
)
async def feed(
    user_id: int = Path(..., description="User ID"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
) -> List[PostRead]:
    creators = {user_id}
    creators.update(await follower_ids(db, user_id))
    creators.update(await following_ids(db, user_id))
    posts = await posts_by_creators(db, list(creators), limit, offset)
    return await to_post_reads(posts, db)


@router.get(
    "/posts/following/{user_id}",
    response_model=List[PostRead],
    summary="Posts of users this user follows",
)
async def following_posts(
    user_id: int = Path(..., description="User ID"),
    limit: int = Query(50, ge=1, le=200),
    db: AsyncSession = Depends(get_db),
) -> List[PostRead]:
    posts = await posts_by_creators(db, await following_ids(db, user_id), limit)
    return await to_post_reads(posts, db)


@router.get(
    "/posts/followers/{user_id}",
    response_model=List[PostRead],
    summary="Posts of users following this user",
)
async def followers_posts(
    user_id: int = Path(..., description="User ID"),
    limit: int = Query(50, ge=1, le=200),
    db: AsyncSession = Depends(get_db),
) -> List[PostRead]:
    posts = await posts_by_creators(db, await follower_ids(db, user_id), limit)
    return await to_post_reads(posts, db)


@router.get(
    "/posts/user/{user_id}",
    response_model=List[PostRead],
    summary="Posts of a user, newest first",
)
@router.get(
    "/users/{user_id}/posts",
    response_model=List[PostRead],
    summary="Posts of a user, newest first (legacy path)",
)
async def user_posts(
    user_id: int = Path(..., description="User ID"),
    db: AsyncSession = Depends(get_db),
) -> List[PostRead]:
    result = await db.execute(
        select(Post).where(Post.creator_id == user_id).order_by(Post.created_at.desc())
    )
    return await to_post_reads(result.scalars().all(), db)


@router.get(
    "/posts/{post_id}",
    response_model=PostRead,
    summary="A single post",
)
async def read_post(
    post_id: int = Path(..., description="Post ID"),
    db: AsyncSession = Depends(get_db),
) -> PostRead:
    return await to_post_read(await get_post_or_404(db, post_id), db)


@router.post(
    "/posts",
    response_model=PostRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a post; images under the 'files' or 'file' fields",
)
async def create_post(
    request: Request,
    caption: str = Form(""),
    location: Optional[str] = Form(None),
    tags: Optional[str] = Form(None, description="Comma-separated"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> PostRead:
    uploads = await collect_files(request, MEDIA_FIELDS, settings.MAX_FILES)
    image_ids = await store_images(uploads)

    post = Post(
        creator_id=current_user.id,
        caption=caption.strip(),
        location=location.strip() if location else None,
        tags=parse_tags(tags),
        image_ids=image_ids,
        image_urls=[local_storage.public_url(i) for i in image_ids],
    )
    db.add(post)
    await db.commit()
    await db.refresh(post)
    return await to_post_read(post, db)


@router.patch(
    "/posts/{post_id}",
    response_model=PostRead,
    summary="Update own post; new files replace the old media",
)
async def update_post(
    request: Request,
    post_id: int = Path(..., description="Post ID"),
    caption: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    tags: Optional[str] = Form(None, description="Comma-separated"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> PostRead:
    post = await get_post_or_404(db, post_id)
    ensure_owner(post, current_user)

    uploads = await collect_files(request, MEDIA_FIELDS, settings.MAX_FILES)

    if caption is not None:
        post.caption = caption.strip()
    if location is not None:
        post.location = location.strip() or None
    if tags is not None:
        post.tags = parse_tags(tags)

    old_image_ids: List[str] = []
    if uploads:
        image_ids = await store_images(uploads)
        old_image_ids = list(post.image_ids or [])
        post.image_ids = image_ids
        post.image_urls = [local_storage.public_url(i) for i in image_ids]

    db.add(post)
    await db.commit()
    await db.refresh(post)

    for file_id in old_image_ids:
        await run_in_threadpool(local_storage.delete_file, file_id)

    return await to_post_read(post, db)


@router.delete(
    "/posts/{post_id}",
    summary="Delete own post with its media, comments, likes and saves",
)
async def delete_post(
    post_id: int = Path(..., description="Post ID"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    post = await get_post_or_404(db, post_id)
    ensure_owner(post, current_user)
    await delete_post_cascade(db, post)
    return {"message": "Post deleted successfully"}


@router.post(
    "/posts/{post_id}/like",
    response_model=LikeToggleResponse,
    summary="Like or unlike a post",
)
async def like_post(
    post_id: int = Path(..., description="Post ID"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> LikeToggleResponse:
    liked, likes = await toggle_post_like(db, current_user, post_id)
    return LikeToggleResponse(liked=liked, likes=likes)


@router.post(
    "/posts/{post_id}/save",
    response_model=SaveToggleResponse,
    summary="Save or unsave a post",
)
async def save_post(
    post_id: int = Path(..., description="Post ID"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> SaveToggleResponse:
    saved, save_id = await toggle_post_save(db, current_user, post_id)
    return SaveToggleResponse(saved=saved, save_id=save_id)


@router.delete(
    "/posts/saved/{save_id}",
    summary="Remove a saved post",
)
async def delete_saved_post(
    save_id: int = Path(..., description="Save ID"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    await delete_save(db, current_user, save_id)
    return {"message": "Saved post deleted"}
