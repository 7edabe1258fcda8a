"""
Canonical follow, like and save operations.

Several routers expose the same relation under different paths (the /likes and
/posts/{id}/like routes, /relationships and /follow). They all go through the
functions here so each relation has exactly one write path.
"""
from typing import List, Optional, Tuple

from fastapi import HTTPException, status
from sqlalchemy import delete, select, func
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from models.comment import Comment
from models.follow import Follow
from models.like import Like
from models.post import Post
from models.save import Save
from models.user import User
from services.notifications import create_notification
from utils import local_storage
from utils.post_helpers import post_like_ids


async def get_user_or_404(db: AsyncSession, user_id: int) -> User:
    user = await db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


async def users_by_ids(db: AsyncSession, ids: List[int]) -> List[User]:
    """Loads users keeping the order of ids; unknown ids are skipped."""
    if not ids:
        return []
    result = await db.execute(select(User).where(User.id.in_(ids)))
    by_id = {user.id: user for user in result.scalars().all()}
    return [by_id[i] for i in ids if i in by_id]


async def get_post_or_404(db: AsyncSession, post_id: int) -> Post:
    post = await db.get(Post, post_id)
    if not post:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
    return post


async def get_comment_or_404(db: AsyncSession, comment_id: int) -> Comment:
    comment = await db.get(Comment, comment_id)
    if not comment:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Comment not found")
    return comment


# ---------------------------------------------------------------- follows

async def find_follow(db: AsyncSession, user_id: int, follows_user_id: int) -> Optional[Follow]:
    result = await db.execute(
        select(Follow).where(
            Follow.user_id == user_id,
            Follow.follows_user_id == follows_user_id,
        )
    )
    return result.scalar_one_or_none()


async def follow_user(db: AsyncSession, user: User, follows_user_id: int) -> Tuple[Follow, bool]:
    """Creates the user → follows_user_id edge. Returns (edge, created)."""
    if follows_user_id == user.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You cannot follow yourself")
    await get_user_or_404(db, follows_user_id)

    existing = await find_follow(db, user.id, follows_user_id)
    if existing:
        return existing, False

    follow = Follow(user_id=user.id, follows_user_id=follows_user_id)
    db.add(follow)
    await db.commit()
    await db.refresh(follow)

    await create_notification(
        db,
        recipient_id=follows_user_id,
        sender=user,
        type_="follow",
        content=f"{user.name} started following you",
        related_id=user.id,
        reference_id=follow.id,
    )
    return follow, True


async def remove_follow(db: AsyncSession, user: User, follow: Follow) -> None:
    if follow.user_id != user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not your relationship")
    followee_id = follow.follows_user_id
    await db.delete(follow)
    await db.commit()

    await create_notification(
        db,
        recipient_id=followee_id,
        sender=user,
        type_="unfollow",
        content=f"{user.name} unfollowed you",
        related_id=user.id,
    )


async def unfollow_user(db: AsyncSession, user: User, follows_user_id: int) -> bool:
    follow = await find_follow(db, user.id, follows_user_id)
    if not follow:
        return False
    await remove_follow(db, user, follow)
    return True


async def toggle_follow(db: AsyncSession, user: User, follows_user_id: int) -> Tuple[bool, int]:
    """Returns (following, follower count of the target) after the toggle."""
    if await unfollow_user(db, user, follows_user_id):
        following = False
    else:
        await follow_user(db, user, follows_user_id)
        following = True
    return following, len(await follower_ids(db, follows_user_id))


async def follower_ids(db: AsyncSession, user_id: int) -> List[int]:
    result = await db.execute(
        select(Follow.user_id)
        .where(Follow.follows_user_id == user_id)
        .order_by(Follow.created_at.desc())
    )
    return [row[0] for row in result.all()]


async def following_ids(db: AsyncSession, user_id: int) -> List[int]:
    result = await db.execute(
        select(Follow.follows_user_id)
        .where(Follow.user_id == user_id)
        .order_by(Follow.created_at.desc())
    )
    return [row[0] for row in result.all()]


# ---------------------------------------------------------------- likes

async def like_post(db: AsyncSession, user: User, post: Post) -> Tuple[Like, bool]:
    existing = (await db.execute(
        select(Like).where(Like.user_id == user.id, Like.post_id == post.id)
    )).scalar_one_or_none()
    if existing:
        return existing, False

    like = Like(user_id=user.id, post_id=post.id)
    db.add(like)
    await db.commit()
    await db.refresh(like)

    await create_notification(
        db,
        recipient_id=post.creator_id,
        sender=user,
        type_="post-like",
        content=f"{user.name} liked your post",
        related_id=post.id,
        reference_id=like.id,
    )
    return like, True


async def unlike_post(db: AsyncSession, user: User, post_id: int) -> bool:
    result = await db.execute(
        delete(Like).where(Like.user_id == user.id, Like.post_id == post_id)
    )
    await db.commit()
    return result.rowcount > 0


async def toggle_post_like(db: AsyncSession, user: User, post_id: int) -> Tuple[bool, List[int]]:
    """Returns (liked, ids of users liking the post) after the toggle."""
    post = await get_post_or_404(db, post_id)
    if await unlike_post(db, user, post.id):
        liked = False
    else:
        await like_post(db, user, post)
        liked = True
    return liked, await post_like_ids(post.id, db)


async def like_comment(db: AsyncSession, user: User, comment: Comment) -> bool:
    existing = (await db.execute(
        select(Like.id).where(Like.user_id == user.id, Like.comment_id == comment.id)
    )).scalar_one_or_none()
    if existing:
        return False

    db.add(Like(user_id=user.id, comment_id=comment.id))
    await db.commit()

    await create_notification(
        db,
        recipient_id=comment.user_id,
        sender=user,
        type_="comment-like",
        content=f"{user.name} liked your comment",
        related_id=comment.post_id,
        reference_id=comment.id,
    )
    return True


async def unlike_comment(db: AsyncSession, user: User, comment: Comment) -> bool:
    result = await db.execute(
        delete(Like).where(Like.user_id == user.id, Like.comment_id == comment.id)
    )
    await db.commit()
    return result.rowcount > 0


async def total_likes_received(db: AsyncSession, user_id: int) -> int:
    result = await db.execute(
        select(func.count(Like.id))
        .join(Post, Post.id == Like.post_id)
        .where(Post.creator_id == user_id)
    )
    return result.scalar_one()


# ---------------------------------------------------------------- saves

async def save_post(db: AsyncSession, user: User, post: Post) -> Tuple[Save, bool]:
    existing = (await db.execute(
        select(Save).where(Save.user_id == user.id, Save.post_id == post.id)
    )).scalar_one_or_none()
    if existing:
        return existing, False

    save = Save(user_id=user.id, post_id=post.id)
    db.add(save)
    await db.commit()
    await db.refresh(save)
    return save, True


async def delete_save(db: AsyncSession, user: User, save_id: int) -> None:
    save = await db.get(Save, save_id)
    if not save:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Saved post not found")
    if save.user_id != user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not your saved post")
    await db.delete(save)
    await db.commit()


async def toggle_post_save(db: AsyncSession, user: User, post_id: int) -> Tuple[bool, Optional[int]]:
    """Returns (saved, save id or None) after the toggle."""
    post = await get_post_or_404(db, post_id)
    result = await db.execute(
        delete(Save).where(Save.user_id == user.id, Save.post_id == post.id)
    )
    await db.commit()
    if result.rowcount > 0:
        return False, None
    save, _ = await save_post(db, user, post)
    return True, save.id


# ---------------------------------------------------------------- posts

async def delete_post_cascade(db: AsyncSession, post: Post) -> None:
    """
    Deletes the post with its comments, likes, saves and media files.
    Sequential best-effort writes; media is removed after the rows are gone.
    """
    comment_ids = select(Comment.id).where(Comment.post_id == post.id)
    await db.execute(delete(Like).where(Like.comment_id.in_(comment_ids)))
    await db.execute(delete(Like).where(Like.post_id == post.id))
    await db.execute(delete(Save).where(Save.post_id == post.id))
    await db.execute(delete(Comment).where(Comment.post_id == post.id))
    image_ids = list(post.image_ids or [])
    await db.delete(post)
    await db.commit()

    for file_id in image_ids:
        await run_in_threadpool(local_storage.delete_file, file_id)
