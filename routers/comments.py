from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.params import Path
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from core.security import get_current_user
from models.comment import Comment
from models.like import Like
from models.post import Post
from models.user import User
from schemas.comment import CommentCreate, CommentLikeRequest, CommentRead
from services.notifications import create_notification
from services.social_graph import (
    get_comment_or_404,
    get_post_or_404,
    like_comment,
    unlike_comment,
)
from utils.post_helpers import to_comment_read

router = APIRouter(prefix="/api/comments", tags=["comments"])

PREVIEW_LENGTH = 80


@router.get(
    "/post/{post_id}",
    response_model=List[CommentRead],
    summary="Comments of a post, newest first",
)
async def post_comments(
    post_id: int = Path(..., description="Post ID"),
    db: AsyncSession = Depends(get_db),
) -> List[CommentRead]:
    await get_post_or_404(db, post_id)
    result = await db.execute(
        select(Comment)
        .where(Comment.post_id == post_id)
        .order_by(Comment.created_at.desc(), Comment.id.desc())
    )
    return [await to_comment_read(comment, db) for comment in result.scalars().all()]


@router.post(
    "/",
    response_model=CommentRead,
    status_code=status.HTTP_201_CREATED,
    summary="Comment on a post",
)
async def create_comment(
    payload: CommentCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> CommentRead:
    text = payload.text.strip()
    if not text:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Comment text is required")
    post = await get_post_or_404(db, payload.post_id)

    comment = Comment(
        post_id=post.id,
        user_id=current_user.id,
        text=text,
        user_name=current_user.name,
        user_image_url=current_user.image_url or None,
    )
    db.add(comment)
    await db.commit()
    await db.refresh(comment)

    preview = text if len(text) <= PREVIEW_LENGTH else text[:PREVIEW_LENGTH] + "..."
    await create_notification(
        db,
        recipient_id=post.creator_id,
        sender=current_user,
        type_="comment",
        content=f"{current_user.name} commented: {preview}",
        related_id=post.id,
        reference_id=comment.id,
    )
    return await to_comment_read(comment, db)


@router.post(
    "/like",
    response_model=CommentRead,
    summary="Like a comment",
)
async def like(
    payload: CommentLikeRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> CommentRead:
    comment = await get_comment_or_404(db, payload.comment_id)
    await like_comment(db, current_user, comment)
    return await to_comment_read(comment, db)


@router.post(
    "/unlike",
    response_model=CommentRead,
    summary="Remove a like from a comment",
)
async def unlike(
    payload: CommentLikeRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> CommentRead:
    comment = await get_comment_or_404(db, payload.comment_id)
    await unlike_comment(db, current_user, comment)
    return await to_comment_read(comment, db)


@router.delete(
    "/{comment_id}",
    summary="Delete a comment (its author or the post creator)",
)
async def delete_comment(
    comment_id: int = Path(..., description="Comment ID"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    comment = await get_comment_or_404(db, comment_id)
    post = await db.get(Post, comment.post_id)
    allowed = {comment.user_id}
    if post is not None:
        allowed.add(post.creator_id)
    if current_user.id not in allowed:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You cannot delete this comment")

    await db.execute(delete(Like).where(Like.comment_id == comment.id))
    await db.delete(comment)
    await db.commit()
    return {"message": "Comment deleted"}
