import pytest

import routers.files as files_router
from core.config import settings
from utils.s3 import ObjectNotFound


@pytest.fixture
def bucket(monkeypatch):
    """In-memory stand-in for the MinIO bucket."""
    objects = {}
    monkeypatch.setattr(settings, "AWS_S3_BUCKET_NAME", "boxfit-test")

    def fake_upload(file_like, file_name, content_type, bucket_name):
        key = f"obj{len(objects) + 1}"
        data = file_like.read()
        objects[key] = {
            "id": key,
            "name": file_name,
            "mime_type": content_type,
            "size_original": len(data),
            "url": f"http://minio/{bucket_name}/{key}",
        }
        return objects[key]

    def fake_stat(key, bucket_name):
        if key not in objects:
            raise ObjectNotFound(key)
        return objects[key]

    def fake_delete(key, bucket_name):
        fake_stat(key, bucket_name)
        del objects[key]

    monkeypatch.setattr(files_router, "upload_file_to_s3", fake_upload)
    monkeypatch.setattr(files_router, "stat_object", fake_stat)
    monkeypatch.setattr(files_router, "delete_file_from_s3", fake_delete)
    return objects


def test_upload_then_fetch(client, bucket):
    response = client.post("/api/files", files={"file": ("report.pdf", b"%PDF-1.4", "application/pdf")})
    assert response.status_code == 201
    stored = response.json()
    assert stored == {
        "$id": "obj1",
        "name": "report.pdf",
        "mimeType": "application/pdf",
        "sizeOriginal": 8,
        "url": "http://minio/boxfit-test/obj1",
    }

    assert client.get("/api/files/obj1").json() == stored
    assert client.get("/api/files/obj1/url").json() == {"url": f"{settings.s3_base_url}/obj1"}


def test_batch_and_previews(client, bucket):
    batch = client.post(
        "/api/files/batch",
        files=[("files", ("a.txt", b"a", "text/plain")), ("files", ("b.txt", b"bb", "text/plain"))],
    )
    assert batch.status_code == 201
    assert [f["$id"] for f in batch.json()] == ["obj1", "obj2"]

    previews = client.post("/api/files/previews", json={"ids": ["obj2", "missing"]}).json()
    assert previews == [
        {"id": "obj2", "url": "http://minio/boxfit-test/obj2", "mimeType": "text/plain", "sizeOriginal": 2},
        {"id": "missing", "error": "not_found"},
    ]

    assert client.post("/api/files/previews", json={"ids": []}).status_code == 400


def test_file_limits(client, bucket, monkeypatch):
    monkeypatch.setattr(settings, "MAX_FILE_SIZE", 4)
    too_big = client.post("/api/files", files={"file": ("a.bin", b"12345", "application/octet-stream")})
    assert too_big.status_code == 400
    assert too_big.json()["code"] == "LIMIT_FILE_SIZE"

    monkeypatch.setattr(settings, "MAX_FILES", 1)
    too_many = client.post(
        "/api/files/batch",
        files=[("files", ("a", b"1", "text/plain")), ("files", ("b", b"2", "text/plain"))],
    )
    assert too_many.json()["code"] == "LIMIT_FILE_COUNT"
    assert bucket == {}


def test_delete_and_missing(client, bucket):
    client.post("/api/files", files={"file": ("a.txt", b"a", "text/plain")})

    assert client.delete("/api/files/obj1").status_code == 204
    assert client.delete("/api/files/obj1").status_code == 404
    assert client.get("/api/files/obj1").status_code == 404
    assert client.get("/api/files/obj1/url").status_code == 404


def test_unconfigured_bucket_is_503(client):
    assert client.get("/api/files/anything").status_code == 503
