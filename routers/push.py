from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.database import get_db
from core.security import get_current_user
from models.push_subscription import PushSubscription
from models.user import User
from schemas.push import PushSubscriptionCreate, PushSubscriptionRead, VapidPublicKey

router = APIRouter(prefix="/api/push", tags=["push"])


@router.get(
    "/vapid-public-key",
    response_model=VapidPublicKey,
    summary="Application server key for PushManager.subscribe",
)
async def vapid_public_key() -> VapidPublicKey:
    return VapidPublicKey(public_key=settings.VAPID_PUBLIC_KEY)


@router.post(
    "/subscriptions",
    response_model=PushSubscriptionRead,
    status_code=status.HTTP_201_CREATED,
    summary="Register the browser subscription of the current user",
)
async def subscribe(
    payload: PushSubscriptionCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> PushSubscriptionRead:
    result = await db.execute(
        select(PushSubscription).where(PushSubscription.endpoint == payload.endpoint)
    )
    subscription = result.scalar_one_or_none()
    if subscription is None:
        subscription = PushSubscription(endpoint=payload.endpoint)
        db.add(subscription)

    # an endpoint belongs to whoever subscribed with it last
    subscription.user_id = current_user.id
    subscription.p256dh = payload.keys.p256dh
    subscription.auth = payload.keys.auth
    await db.commit()
    await db.refresh(subscription)
    return PushSubscriptionRead.model_validate(subscription)


@router.delete(
    "/subscriptions",
    summary="Remove a subscription of the current user",
)
async def unsubscribe(
    endpoint: str = Query(..., min_length=1),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    result = await db.execute(
        delete(PushSubscription).where(
            PushSubscription.endpoint == endpoint,
            PushSubscription.user_id == current_user.id,
        )
    )
    await db.commit()
    if result.rowcount == 0:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Subscription not found")
    return {"message": "Unsubscribed"}
