from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.params import Path
from sqlalchemy import select, func, or_, and_, update
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from core.security import get_current_user
from models.message import MAX_CONTENT_LENGTH, Message
from models.user import User
from schemas.message import (
    Contact,
    ContactList,
    MarkReadRequest,
    MarkReadResponse,
    MessageCreate,
    MessageRead,
    MessageThread,
)
from services.notifications import create_notification
from services.social_graph import get_user_or_404, users_by_ids
from utils.user_helpers import to_user_read

router = APIRouter(prefix="/api/messages", tags=["messages"])

THREAD_LIMIT = 50
THREAD_MAX = 100
CONTACTS_SCAN = 200
READ_BATCH = 100


def own_user_id(user_id: Optional[int], current_user: User) -> int:
    if user_id is not None and user_id != current_user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not your conversations")
    return current_user.id


def between(user_id: int, peer_id: int):
    return or_(
        and_(Message.user_id == user_id, Message.recipient_id == peer_id),
        and_(Message.user_id == peer_id, Message.recipient_id == user_id),
    )


@router.get(
    "/thread",
    response_model=MessageThread,
    summary="Conversation of the current user with a peer, oldest first",
)
async def thread(
    user_id: Optional[int] = Query(None, alias="userId"),
    peer_id: Optional[int] = Query(None, alias="peerId"),
    limit: int = Query(THREAD_LIMIT, ge=1),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> MessageThread:
    user_id = own_user_id(user_id, current_user)
    if peer_id is None:
        return MessageThread(total=0, documents=[])
    limit = min(limit, THREAD_MAX)

    condition = between(user_id, peer_id)
    total = (await db.execute(select(func.count(Message.id)).where(condition))).scalar_one()

    # newest `limit` messages, returned oldest first
    result = await db.execute(
        select(Message)
        .where(condition)
        .order_by(Message.created_at.desc(), Message.id.desc())
        .limit(limit)
    )
    messages = list(reversed(result.scalars().all()))
    return MessageThread(
        total=total,
        documents=[MessageRead.model_validate(m) for m in messages],
    )


@router.get(
    "/contacts",
    response_model=ContactList,
    summary="Conversation partners with the last message, newest first",
)
async def contacts(
    user_id: Optional[int] = Query(None, alias="userId"),
    q: Optional[str] = Query(None, description="Filter by peer name or username"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ContactList:
    user_id = own_user_id(user_id, current_user)

    result = await db.execute(
        select(Message)
        .where(or_(Message.user_id == user_id, Message.recipient_id == user_id))
        .order_by(Message.created_at.desc(), Message.id.desc())
        .limit(CONTACTS_SCAN)
    )

    last_by_peer: Dict[int, Message] = {}
    for message in result.scalars().all():
        peer_id = message.recipient_id if message.user_id == user_id else message.user_id
        last_by_peer.setdefault(peer_id, message)

    peers = {peer.id: peer for peer in await users_by_ids(db, list(last_by_peer))}
    needle = q.strip().lower() if q else ""

    documents: List[Contact] = []
    for peer_id, message in last_by_peer.items():
        peer = peers.get(peer_id)
        if needle:
            names = [peer.name, peer.username] if peer else []
            if not any(needle in (name or "").lower() for name in names):
                continue
        documents.append(
            Contact(
                peer_id=peer_id,
                peer=to_user_read(peer) if peer else None,
                last_message=MessageRead.model_validate(message),
            )
        )
    return ContactList(documents=documents)


@router.post(
    "/",
    response_model=MessageRead,
    status_code=status.HTTP_201_CREATED,
    summary="Send a message",
)
async def send_message(
    payload: MessageCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> MessageRead:
    content = payload.content.strip()[:MAX_CONTENT_LENGTH]
    if not content:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Message content is required")
    await get_user_or_404(db, payload.recipient_id)

    message = Message(
        user_id=current_user.id,
        recipient_id=payload.recipient_id,
        content=content,
        username=payload.username or current_user.username or current_user.name,
        sender_image_url=current_user.image_url or None,
    )
    db.add(message)
    await db.commit()
    await db.refresh(message)

    await create_notification(
        db,
        recipient_id=payload.recipient_id,
        sender=current_user,
        type_="message",
        content=f"{current_user.name}: {content}",
        related_id=current_user.id,
        reference_id=message.id,
    )
    return MessageRead.model_validate(message)


@router.patch(
    "/read",
    response_model=MarkReadResponse,
    summary="Mark messages from sender to recipient as read",
)
async def mark_read(
    payload: MarkReadRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> MarkReadResponse:
    if payload.recipient_id != current_user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only the recipient can mark messages read")

    unread_ids = (await db.execute(
        select(Message.id)
        .where(
            Message.user_id == payload.sender_id,
            Message.recipient_id == payload.recipient_id,
            Message.is_read.is_(False),
        )
        .order_by(Message.created_at.asc())
        .limit(READ_BATCH)
    )).scalars().all()
    if not unread_ids:
        return MarkReadResponse(updated=0)

    await db.execute(
        update(Message).where(Message.id.in_(unread_ids)).values(is_read=True)
    )
    await db.commit()
    return MarkReadResponse(updated=len(unread_ids))


@router.delete(
    "/{message_id}",
    summary="Delete own message",
)
async def delete_message(
    message_id: int = Path(..., description="Message ID"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    message = await db.get(Message, message_id)
    if not message:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Message not found")
    if message.user_id != current_user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You can only delete your own messages")
    await db.delete(message)
    await db.commit()
    return {"message": "Message deleted"}
