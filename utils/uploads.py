"""Multipart helpers shared by the routers that accept files."""
from typing import Iterable, List

from fastapi import Request
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from core.errors import UploadError
from utils import local_storage


async def collect_files(request: Request, allowed: Iterable[str], max_count: int) -> List[UploadFile]:
    """
    Returns the uploaded files of the allowed fields, in form order.
    Raises UploadError for files under any other field or above max_count.
    """
    allowed = set(allowed)
    form = await request.form()
    files: List[UploadFile] = []
    for field, value in form.multi_items():
        if not isinstance(value, UploadFile):
            continue
        if field not in allowed:
            raise UploadError("LIMIT_UNEXPECTED_FILE", field=field)
        if value.filename:
            files.append(value)
    if len(files) > max_count:
        raise UploadError("LIMIT_FILE_COUNT")
    return files


async def store_images(files: List[UploadFile]) -> List[str]:
    """
    Compresses and stores every image; on failure the ones already written are removed.
    """
    stored: List[str] = []
    try:
        for upload in files:
            stored.append(await run_in_threadpool(local_storage.save_image, upload.file))
    except UploadError:
        for file_id in stored:
            await run_in_threadpool(local_storage.delete_file, file_id)
        raise
    return stored
