import asyncio
import json
import logging
from typing import Optional

from pywebpush import webpush, WebPushException
from sqlalchemy import select
from starlette.concurrency import run_in_threadpool

from core.config import settings
from core.database import AsyncSessionLocal
from models.push_subscription import PushSubscription

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "BoxFit Notification"
DEFAULT_ICON = "/assets/icons/logo2.jpeg"

# hard references so scheduled sends are not garbage-collected mid-flight
_background_tasks: set = set()


def push_enabled() -> bool:
    return bool(settings.VAPID_PRIVATE_KEY and settings.VAPID_PUBLIC_KEY)


def build_payload(
    body: str,
    url: str = "",
    tag: str = "",
    title: Optional[str] = None,
) -> dict:
    """Payload shape read by the service worker's push handler."""
    return {
        "title": title or DEFAULT_TITLE,
        "body": body,
        "icon": DEFAULT_ICON,
        "badge": DEFAULT_ICON,
        "url": url,
        "tag": tag,
    }


def _send(subscription_info: dict, data: str) -> None:
    webpush(
        subscription_info=subscription_info,
        data=data,
        vapid_private_key=settings.VAPID_PRIVATE_KEY,
        vapid_claims={"sub": settings.VAPID_CLAIMS_EMAIL},
        timeout=10,
    )


async def send_push_to_user(user_id: int, payload: dict) -> int:
    """
    Delivers payload to every subscription of the user.
    Subscriptions the push service reports as gone (404/410) are deleted.
    Returns the number of successful deliveries.
    """
    if not push_enabled():
        return 0

    data = json.dumps(payload)
    delivered = 0
    async with AsyncSessionLocal() as db:
        result = await db.execute(
            select(PushSubscription).where(PushSubscription.user_id == user_id)
        )
        for sub in result.scalars().all():
            try:
                await run_in_threadpool(_send, sub.as_subscription_info(), data)
                delivered += 1
            except WebPushException as exc:
                status_code = exc.response.status_code if exc.response is not None else None
                if status_code in (404, 410):
                    logger.info(f"Pruning expired push subscription {sub.id} of user {user_id}")
                    await db.delete(sub)
                else:
                    logger.warning(f"Web push to user {user_id} failed: {exc}")
        await db.commit()
    return delivered


def schedule_push(user_id: int, payload: dict) -> None:
    if not push_enabled():
        return
    task = asyncio.create_task(send_push_to_user(user_id, payload))
    _background_tasks.add(task)
    task.add_done_callback(_background_tasks.discard)
