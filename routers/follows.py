from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from fastapi.params import Path
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from core.security import get_current_user
from models.follow import Follow
from models.user import User
from schemas.follow import FollowCreate, FollowRead, FollowToggleResponse
from schemas.user import RelationshipCounts
from services.social_graph import (
    find_follow,
    follow_user,
    follower_ids,
    following_ids,
    remove_follow,
    toggle_follow,
    unfollow_user,
)

router = APIRouter(prefix="/api/relationships", tags=["follows"])
legacy_router = APIRouter(prefix="/api/follow", tags=["follows"])


def to_follow_read(follow: Follow) -> FollowRead:
    return FollowRead(
        id=follow.id,
        user_id=follow.user_id,
        follows_user_id=follow.follows_user_id,
        created_at=follow.created_at,
    )


@router.post(
    "",
    response_model=FollowRead,
    status_code=status.HTTP_201_CREATED,
    summary="Follow a user",
)
@legacy_router.post(
    "/",
    response_model=FollowRead,
    status_code=status.HTTP_201_CREATED,
    summary="Follow a user (legacy path)",
)
async def follow(
    payload: FollowCreate,
    response: Response,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> FollowRead:
    edge, created = await follow_user(db, current_user, payload.follows_user_id)
    if not created:
        response.status_code = status.HTTP_200_OK
    return to_follow_read(edge)


@router.post(
    "/toggle",
    response_model=FollowToggleResponse,
    summary="Follow or unfollow depending on the current state",
)
async def toggle(
    payload: FollowCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> FollowToggleResponse:
    following, followers = await toggle_follow(db, current_user, payload.follows_user_id)
    return FollowToggleResponse(following=following, followers=followers)


@router.get(
    "/check",
    response_model=Optional[FollowRead],
    summary="The follow edge between two users, or null",
)
@legacy_router.get(
    "/status",
    response_model=Optional[FollowRead],
    summary="The follow edge between two users, or null (legacy path)",
)
async def check_follow_status(
    user_id: int = Query(..., alias="userId"),
    follows_user_id: int = Query(..., alias="followsUserId"),
    db: AsyncSession = Depends(get_db),
) -> Optional[FollowRead]:
    edge = await find_follow(db, user_id, follows_user_id)
    return to_follow_read(edge) if edge else None


@router.delete(
    "/{doc_id}",
    summary="Unfollow by relationship id",
)
@legacy_router.delete(
    "/{doc_id}",
    summary="Unfollow by relationship id (legacy path)",
)
async def unfollow_by_doc_id(
    doc_id: int = Path(..., description="Relationship ID"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    edge = await db.get(Follow, doc_id)
    if not edge:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Relationship not found")
    await remove_follow(db, current_user, edge)
    return {"message": "Unfollowed successfully."}


@router.delete(
    "",
    summary="Unfollow by user pair",
)
async def unfollow_by_pair(
    follows_user_id: int = Query(..., alias="followsUserId"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if not await unfollow_user(db, current_user, follows_user_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Relationship not found")
    return {"message": "Unfollowed successfully."}


@legacy_router.get(
    "/relationships/{user_id}",
    response_model=RelationshipCounts,
    summary="Follower and following counts (legacy path)",
)
async def legacy_relationship_counts(
    user_id: int = Path(..., description="User ID"),
    db: AsyncSession = Depends(get_db),
) -> RelationshipCounts:
    return RelationshipCounts(
        followers=len(await follower_ids(db, user_id)),
        following=len(await following_ids(db, user_id)),
    )
