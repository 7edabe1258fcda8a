from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from core.security import get_current_user
from models.upload import Upload
from models.user import User
from schemas.file import PreviewResponse, UploadedFile, UploadResponse
from utils import local_storage
from utils.uploads import collect_files

router = APIRouter(prefix="/api/uploads", tags=["uploads"])


@router.post(
    "/",
    response_model=UploadResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Store one image or video on local disk (field 'file')",
)
async def upload(
    request: Request,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> UploadResponse:
    files = await collect_files(request, ("file",), 1)
    if not files:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")
    upload_file = files[0]

    file_id, size = await run_in_threadpool(
        local_storage.save_upload,
        upload_file.file,
        upload_file.filename,
        upload_file.content_type,
    )
    record = Upload(
        file_id=file_id,
        user_id=current_user.id,
        name=upload_file.filename[:255],
        mime_type=upload_file.content_type or local_storage.guess_mime_type(file_id),
        size=size,
    )
    db.add(record)
    await db.commit()

    return UploadResponse(
        file=UploadedFile(
            id=file_id,
            name=record.name,
            mime_type=record.mime_type,
            size=size,
            url=local_storage.public_url(file_id),
        )
    )


@router.get(
    "/{file_id}/preview",
    response_model=PreviewResponse,
    summary="Public URL of an uploaded file",
)
async def preview(file_id: str) -> PreviewResponse:
    if local_storage.resolve(file_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found")
    return PreviewResponse(preview_url=local_storage.public_url(file_id))


@router.delete(
    "/{file_id}",
    summary="Delete a file the current user uploaded",
)
async def delete(
    file_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    # post media and avatars have no Upload row, so they can only go through their owners' routes
    result = await db.execute(select(Upload).where(Upload.file_id == file_id))
    record = result.scalar_one_or_none()
    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found")
    if record.user_id != current_user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You can only delete your own files")

    await db.delete(record)
    await db.commit()
    await run_in_threadpool(local_storage.delete_file, file_id)
    return {"message": "File deleted"}
