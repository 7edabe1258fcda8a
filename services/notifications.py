from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from models.notification import Notification
from models.user import User
from services.push_service import build_payload, schedule_push


def click_url(notification: Notification) -> str:
    """Where the service worker sends the user when the push is clicked."""
    if notification.type == "message":
        return f"/chat/{notification.sender_id}"
    if notification.type in ("follow", "unfollow"):
        return f"/profile/{notification.sender_id}"
    if notification.related_id:
        return f"/posts/{notification.related_id}"
    return "/notifications"


def push_notification(notification: Notification) -> None:
    payload = build_payload(
        body=notification.content or "You have a new update from BoxFit",
        url=click_url(notification),
        tag=f"{notification.type}-{notification.related_id or notification.id}",
    )
    schedule_push(notification.user_id, payload)


async def create_notification(
    db: AsyncSession,
    recipient_id: int,
    sender: User,
    type_: str,
    content: Optional[str] = None,
    related_id: Optional[int] = None,
    reference_id: Optional[int] = None,
) -> Optional[Notification]:
    """
    Stores a notification for recipient_id and schedules its web push.
    Users are never notified about their own actions; returns None then.
    """
    if recipient_id == sender.id:
        return None

    notification = Notification(
        user_id=recipient_id,
        sender_id=sender.id,
        type=type_,
        related_id=str(related_id) if related_id is not None else None,
        reference_id=str(reference_id) if reference_id is not None else None,
        content=content,
        sender_name=sender.name,
        sender_image_url=sender.image_url,
    )
    db.add(notification)
    await db.commit()
    await db.refresh(notification)

    push_notification(notification)
    return notification
