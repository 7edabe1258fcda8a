"""Disk storage for uploaded media, served by the app under /uploads."""
import mimetypes
import os
import secrets
from pathlib import Path
from typing import BinaryIO, Optional

from core.config import settings
from core.errors import UploadError
from utils.image_tools import compress_image_bytes

PUBLIC_PREFIX = "/uploads"

MIMETYPE_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
    "image/gif": ".gif",
    "video/mp4": ".mp4",
    "video/webm": ".webm",
    "video/quicktime": ".mov",
}

# only media is served back from /uploads
ALLOWED_EXTENSIONS = set(MIMETYPE_EXTENSIONS.values()) | {".jpeg"}


def uploads_dir() -> Path:
    path = Path(settings.UPLOADS_DIR)
    path.mkdir(parents=True, exist_ok=True)
    return path


def extension_for(filename: Optional[str], content_type: Optional[str]) -> str:
    """
    Extension of the stored file: the original one when it is a media type,
    else the one matching the mimetype. Empty when neither is allowed.
    """
    ext = os.path.splitext(filename or "")[1].lower()
    if ext in ALLOWED_EXTENSIONS:
        return ext
    return MIMETYPE_EXTENSIONS.get((content_type or "").lower(), "")


def public_url(file_id: str) -> str:
    return f"{settings.PUBLIC_BASE_URL.rstrip('/')}{PUBLIC_PREFIX}/{file_id}"


def read_limited(file_like: BinaryIO, max_size: int, field: Optional[str] = None) -> bytes:
    """Reads at most max_size bytes, raising UploadError(LIMIT_FILE_SIZE) past the cap."""
    data = file_like.read(max_size + 1)
    if len(data) > max_size:
        raise UploadError("LIMIT_FILE_SIZE", field=field)
    return data


def save_bytes(data: bytes, ext: str) -> str:
    file_id = f"{secrets.token_hex(16)}{ext}"
    (uploads_dir() / file_id).write_bytes(data)
    return file_id


def save_upload(file_like: BinaryIO, filename: Optional[str], content_type: Optional[str]) -> tuple[str, int]:
    """
    Stores an image or video upload as-is under a random hex name.
    Returns (file_id, size). Other file types raise UploadError(UNSUPPORTED_FILE).
    """
    ext = extension_for(filename, content_type)
    if not ext:
        raise UploadError("UNSUPPORTED_FILE", field="file")
    data = read_limited(file_like, settings.MAX_UPLOAD_SIZE, field="file")
    file_id = save_bytes(data, ext)
    return file_id, len(data)


def save_image(file_like: BinaryIO, field: str = "files", max_size: Optional[int] = None) -> str:
    """
    Compresses an image upload with Pillow and stores it.
    max_size defaults to the per-file cap of post media (MAX_FILE_SIZE).
    Raises UploadError(UNSUPPORTED_FILE) when the file is not an image.
    """
    data = read_limited(file_like, max_size or settings.MAX_FILE_SIZE, field=field)
    try:
        compressed, ext = compress_image_bytes(data)
    except ValueError as exc:
        raise UploadError("UNSUPPORTED_FILE", field=field, message=str(exc))
    return save_bytes(compressed, f".{ext}")


def resolve(file_id: str) -> Optional[Path]:
    # ids are bare file names; anything with a path component is rejected
    if not file_id or os.path.basename(file_id) != file_id or file_id.startswith("."):
        return None
    path = uploads_dir() / file_id
    return path if path.is_file() else None


def guess_mime_type(file_id: str) -> Optional[str]:
    return mimetypes.guess_type(file_id)[0]


def delete_file(file_id: Optional[str]) -> bool:
    if not file_id:
        return False
    path = resolve(file_id)
    if path is None:
        return False
    path.unlink()
    return True
