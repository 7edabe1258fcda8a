from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.params import Path
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from models.contact_request import ContactRequest
from schemas.contact_request import ContactRequestCreate, ContactRequestRead

router = APIRouter(prefix="/api/contact-requests", tags=["contact-requests"])


@router.post(
    "/",
    response_model=ContactRequestRead,
    status_code=status.HTTP_201_CREATED,
    summary="Leave a contact request",
)
async def create_contact_request(
    payload: ContactRequestCreate,
    db: AsyncSession = Depends(get_db),
) -> ContactRequestRead:
    contact = ContactRequest(
        name=payload.name.strip(),
        email=payload.email.strip().lower(),
        message=payload.message.strip(),
    )
    db.add(contact)
    await db.commit()
    await db.refresh(contact)
    return ContactRequestRead.model_validate(contact)


@router.get(
    "/",
    response_model=List[ContactRequestRead],
    summary="All contact requests, newest first",
)
async def list_contact_requests(
    db: AsyncSession = Depends(get_db),
) -> List[ContactRequestRead]:
    result = await db.execute(
        select(ContactRequest).order_by(ContactRequest.created_at.desc())
    )
    return [ContactRequestRead.model_validate(c) for c in result.scalars().all()]


@router.delete(
    "/{request_id}",
    summary="Delete a contact request",
)
async def delete_contact_request(
    request_id: int = Path(..., description="Contact request ID"),
    db: AsyncSession = Depends(get_db),
):
    contact = await db.get(ContactRequest, request_id)
    if not contact:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Contact request not found")
    await db.delete(contact)
    await db.commit()
    return {"message": "Contact request deleted"}
