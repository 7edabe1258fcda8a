import uuid
from io import BytesIO
from typing import BinaryIO, Optional

from minio import Minio
from minio.error import S3Error

from core.config import settings

# ==== MinIO client ====
_endpoint = settings.AWS_S3_ENDPOINT_URL.replace("https://", "").replace("http://", "")
_s3 = Minio(
    _endpoint,
    access_key=settings.AWS_ACCESS_KEY_ID,
    secret_key=settings.AWS_SECRET_ACCESS_KEY,
    region=settings.AWS_S3_REGION,
    secure=settings.AWS_S3_ENDPOINT_URL.startswith("https://"),
)


class ObjectNotFound(Exception):
    pass


def bucket_configured() -> bool:
    return bool(settings.AWS_S3_BUCKET_NAME)


def object_url(key: str) -> str:
    return f"{settings.s3_base_url}/{key}"


def upload_file_to_s3(
    file_like: BinaryIO,
    file_name: Optional[str],
    content_type: Optional[str],
    bucket_name: str,
) -> dict:
    """
    Puts the upload into the bucket under a random key.
    Returns the object metadata (id, name, mimeType, sizeOriginal, url).
    Raises Exception when S3 fails.
    """
    data = file_like.read()
    ext = ""
    if file_name and "." in file_name:
        ext = "." + file_name.rsplit(".", 1)[1].lower()
    key = f"{uuid.uuid4().hex}{ext}"

    try:
        _s3.put_object(
            bucket_name,
            key,
            BytesIO(data),
            length=len(data),
            content_type=content_type or "application/octet-stream",
            metadata={"original-name": file_name or key},
        )
    except S3Error as e:
        raise Exception(f"S3 upload failed: {e}")

    return {
        "id": key,
        "name": file_name or key,
        "mime_type": content_type,
        "size_original": len(data),
        "url": object_url(key),
    }


def stat_object(key: str, bucket_name: str) -> dict:
    """
    Object metadata; raises ObjectNotFound when the key is missing.
    """
    try:
        stat = _s3.stat_object(bucket_name, key)
    except S3Error as e:
        if e.code in ("NoSuchKey", "NoSuchObject", "ResourceNotFound"):
            raise ObjectNotFound(key)
        raise Exception(f"S3 stat failed: {e}")

    metadata = stat.metadata or {}
    return {
        "id": key,
        "name": metadata.get("x-amz-meta-original-name", key),
        "mime_type": stat.content_type,
        "size_original": stat.size,
        "url": object_url(key),
    }


def delete_file_from_s3(key: str, bucket_name: str) -> None:
    """
    Removes an object from MinIO/S3; missing objects raise ObjectNotFound.
    """
    stat_object(key, bucket_name)
    try:
        _s3.remove_object(bucket_name, key)
    except S3Error as e:
        raise Exception(f"S3 delete failed: {e}")
