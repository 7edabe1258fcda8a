"""Helpers turning posts and comments into Pydantic schemas with their like/save arrays."""
from collections.abc import Iterable
from typing import List

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from models.comment import Comment
from models.like import Like
from models.post import Post
from models.save import Save
from models.user import User
from schemas.comment import CommentRead
from schemas.post import PostRead
from utils.user_helpers import to_user_read


async def post_like_ids(post_id: int, db: AsyncSession) -> List[int]:
    result = await db.execute(
        select(Like.user_id).where(Like.post_id == post_id).order_by(Like.created_at.asc())
    )
    return [row[0] for row in result.all()]


async def to_post_read(post: Post, db: AsyncSession) -> PostRead:
    """Convert a Post model into PostRead with likes, saves and the author profile."""
    likes = await post_like_ids(post.id, db)
    saves = (await db.execute(
        select(Save.user_id).where(Save.post_id == post.id).order_by(Save.created_at.asc())
    )).scalars().all()
    comments_count = (await db.execute(
        select(func.count(Comment.id)).where(Comment.post_id == post.id)
    )).scalar_one()
    creator = await db.get(User, post.creator_id)

    return PostRead(
        id=post.id,
        creator_id=post.creator_id,
        creator=to_user_read(creator) if creator else None,
        caption=post.caption or "",
        location=post.location,
        tags=list(post.tags or []),
        image_urls=list(post.image_urls or []),
        image_ids=list(post.image_ids or []),
        likes=likes,
        saves=list(saves),
        comments_count=comments_count,
        created_at=post.created_at,
        updated_at=post.updated_at,
    )


async def to_post_reads(posts: Iterable[Post], db: AsyncSession) -> List[PostRead]:
    return [await to_post_read(post, db) for post in posts]


async def to_comment_read(comment: Comment, db: AsyncSession) -> CommentRead:
    likes = (await db.execute(
        select(Like.user_id).where(Like.comment_id == comment.id).order_by(Like.created_at.asc())
    )).scalars().all()
    return CommentRead(
        id=comment.id,
        post_id=comment.post_id,
        user_id=comment.user_id,
        text=comment.text,
        user_name=comment.user_name,
        user_image_url=comment.user_image_url,
        likes=list(likes),
        created_at=comment.created_at,
    )
