from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.params import Path
from sqlalchemy import select, func, and_, or_, delete, update
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from core.security import get_current_user
from models.notification import Notification
from models.user import User
from schemas.notification import BulkResult, NotificationCreate, NotificationPage, NotificationRead
from services.notifications import create_notification
from services.social_graph import get_user_or_404

router = APIRouter(prefix="/api/notifications", tags=["notifications"])

PAGE_SIZE = 20


async def notification_page(
    db: AsyncSession,
    user_id: int,
    limit: int,
    cursor: Optional[int],
) -> NotificationPage:
    total = (await db.execute(
        select(func.count(Notification.id)).where(Notification.user_id == user_id)
    )).scalar_one()

    stmt = select(Notification).where(Notification.user_id == user_id)
    if cursor is not None:
        anchor = await db.get(Notification, cursor)
        if not anchor or anchor.user_id != user_id:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid cursor")
        stmt = stmt.where(
            or_(
                Notification.created_at < anchor.created_at,
                and_(Notification.created_at == anchor.created_at, Notification.id < anchor.id),
            )
        )
    stmt = stmt.order_by(Notification.created_at.desc(), Notification.id.desc()).limit(limit + 1)
    items = list((await db.execute(stmt)).scalars().all())

    next_cursor = None
    if len(items) > limit:
        items = items[:limit]
        next_cursor = items[-1].id

    return NotificationPage(
        documents=[NotificationRead.model_validate(n) for n in items],
        total=total,
        next_cursor=next_cursor,
    )


def resolve_owner(user_id: Optional[int], current_user: User) -> int:
    if user_id is not None and user_id != current_user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not your notifications")
    return current_user.id


async def get_own_notification(db: AsyncSession, notification_id: int, user: User) -> Notification:
    notification = await db.get(Notification, notification_id)
    if not notification:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found")
    if notification.user_id != user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not your notification")
    return notification


@router.get(
    "/",
    response_model=NotificationPage,
    summary="Notifications of the current user, newest first",
)
async def list_notifications(
    user_id: Optional[int] = Query(None, alias="userId"),
    limit: int = Query(PAGE_SIZE, ge=1, le=100),
    cursor: Optional[int] = Query(None, description="Id of the last notification of the previous page"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> NotificationPage:
    return await notification_page(db, resolve_owner(user_id, current_user), limit, cursor)


@router.get(
    "/{user_id}",
    response_model=NotificationPage,
    summary="Notifications of a user (legacy path)",
)
async def list_notifications_legacy(
    user_id: int = Path(..., description="User ID"),
    limit: int = Query(PAGE_SIZE, ge=1, le=100),
    cursor: Optional[int] = Query(None),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> NotificationPage:
    return await notification_page(db, resolve_owner(user_id, current_user), limit, cursor)


@router.post(
    "/",
    response_model=NotificationRead,
    status_code=status.HTTP_201_CREATED,
    summary="Send a notification from the current user",
)
async def create(
    payload: NotificationCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> NotificationRead:
    await get_user_or_404(db, payload.user_id)
    notification = await create_notification(
        db,
        recipient_id=payload.user_id,
        sender=current_user,
        type_=payload.type,
        content=payload.content,
        related_id=payload.related_id,
        reference_id=payload.reference_id,
    )
    if notification is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You cannot notify yourself")
    return NotificationRead.model_validate(notification)


@router.patch(
    "/read-all",
    response_model=BulkResult,
    summary="Mark all notifications of the current user as read",
)
async def read_all(
    user_id: Optional[int] = Query(None, alias="userId"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> BulkResult:
    owner_id = resolve_owner(user_id, current_user)
    result = await db.execute(
        update(Notification)
        .where(Notification.user_id == owner_id, Notification.is_read.is_(False))
        .values(is_read=True)
    )
    await db.commit()
    return BulkResult(updated=result.rowcount)


@router.patch(
    "/{notification_id}/read",
    response_model=NotificationRead,
    summary="Mark a notification as read",
)
async def read_one(
    notification_id: int = Path(..., description="Notification ID"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> NotificationRead:
    notification = await get_own_notification(db, notification_id, current_user)
    notification.is_read = True
    await db.commit()
    await db.refresh(notification)
    return NotificationRead.model_validate(notification)


@router.delete(
    "/{notification_id}",
    response_model=BulkResult,
    summary="Delete a notification",
)
async def delete_one(
    notification_id: int = Path(..., description="Notification ID"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> BulkResult:
    notification = await get_own_notification(db, notification_id, current_user)
    await db.delete(notification)
    await db.commit()
    return BulkResult(deleted=1)


@router.delete(
    "/",
    response_model=BulkResult,
    summary="Clear all notifications of the current user",
)
async def clear_all(
    user_id: Optional[int] = Query(None, alias="userId"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> BulkResult:
    owner_id = resolve_owner(user_id, current_user)
    result = await db.execute(delete(Notification).where(Notification.user_id == owner_id))
    await db.commit()
    return BulkResult(deleted=result.rowcount)
