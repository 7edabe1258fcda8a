from io import BytesIO
from typing import List

from fastapi import APIRouter, HTTPException, Request, Response, status
from starlette.concurrency import run_in_threadpool

from core.config import settings
from schemas.file import ObjectPreview, ObjectUrl, PreviewsRequest, StoredObject
from utils.local_storage import read_limited
from utils.s3 import (
    ObjectNotFound,
    bucket_configured,
    delete_file_from_s3,
    object_url,
    stat_object,
    upload_file_to_s3,
)
from utils.uploads import collect_files

router = APIRouter(prefix="/api/files", tags=["files"])


def require_bucket() -> str:
    if not bucket_configured():
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="File storage is not configured")
    return settings.AWS_S3_BUCKET_NAME


async def put_upload(upload, field: str, bucket: str) -> StoredObject:
    data = read_limited(upload.file, settings.MAX_FILE_SIZE, field=field)
    meta = await run_in_threadpool(
        upload_file_to_s3,
        BytesIO(data),
        upload.filename,
        upload.content_type,
        bucket,
    )
    return StoredObject(**meta)


async def stat_or_404(file_id: str, bucket: str) -> dict:
    try:
        return await run_in_threadpool(stat_object, file_id, bucket)
    except ObjectNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found")


@router.post(
    "",
    response_model=StoredObject,
    status_code=status.HTTP_201_CREATED,
    summary="Upload one file to the bucket (field 'file')",
)
async def upload_one(request: Request) -> StoredObject:
    bucket = require_bucket()
    uploads = await collect_files(request, ("file",), 1)
    if not uploads:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")
    return await put_upload(uploads[0], "file", bucket)


@router.post(
    "/batch",
    response_model=List[StoredObject],
    status_code=status.HTTP_201_CREATED,
    summary="Upload several files to the bucket (field 'files')",
)
async def upload_batch(request: Request) -> List[StoredObject]:
    bucket = require_bucket()
    uploads = await collect_files(request, ("files",), settings.MAX_FILES)
    if not uploads:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No files uploaded")
    return [await put_upload(upload, "files", bucket) for upload in uploads]


@router.post(
    "/previews",
    response_model=List[ObjectPreview],
    response_model_exclude_none=True,
    summary="Public URLs for several stored files",
)
async def previews(payload: PreviewsRequest) -> List[ObjectPreview]:
    if not payload.ids:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="ids must be a non-empty array")
    bucket = require_bucket()

    result: List[ObjectPreview] = []
    for file_id in payload.ids:
        try:
            meta = await run_in_threadpool(stat_object, file_id, bucket)
        except ObjectNotFound:
            result.append(ObjectPreview(id=file_id, error="not_found"))
            continue
        result.append(
            ObjectPreview(
                id=file_id,
                url=meta["url"],
                mime_type=meta["mime_type"],
                size_original=meta["size_original"],
            )
        )
    return result


@router.get(
    "/{file_id}",
    response_model=StoredObject,
    summary="Metadata of a stored file",
)
async def get_file(file_id: str) -> StoredObject:
    bucket = require_bucket()
    return StoredObject(**await stat_or_404(file_id, bucket))


@router.get(
    "/{file_id}/url",
    response_model=ObjectUrl,
    summary="Public URL of a stored file",
)
async def get_file_url(file_id: str) -> ObjectUrl:
    bucket = require_bucket()
    await stat_or_404(file_id, bucket)
    return ObjectUrl(url=object_url(file_id))


@router.delete(
    "/{file_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a stored file",
)
async def delete_file(file_id: str) -> Response:
    bucket = require_bucket()
    try:
        await run_in_threadpool(delete_file_from_s3, file_id, bucket)
    except ObjectNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
