"""Helpers turning user models into Pydantic schemas."""
from collections.abc import Iterable
from typing import List

from models.user import User
from schemas.user import TopUserRead, UserRead


def to_user_read(user: User) -> UserRead:
    """Convert a User model into UserRead."""
    return UserRead(
        id=user.id,
        name=user.name,
        username=user.username,
        email=user.email,
        image_url=user.image_url or "",
        image_id=user.image_id,
        bio=user.bio or "",
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


def to_user_reads(users: Iterable[User]) -> List[UserRead]:
    """Convert a list of User models into UserRead."""
    return [to_user_read(user) for user in users]


def to_top_user_read(user: User, total_likes: int) -> TopUserRead:
    """Convert a User model into TopUserRead."""
    return TopUserRead(
        **to_user_read(user).model_dump(),
        total_likes=total_likes,
    )
