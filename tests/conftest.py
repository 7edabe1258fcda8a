import itertools
import os
import shutil
import tempfile

import pytest

_TMP_DIR = tempfile.mkdtemp(prefix="boxfit-tests-")

# settings are read at import time, so the environment goes first
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TMP_DIR}/test.db"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["UPLOADS_DIR"] = os.path.join(_TMP_DIR, "uploads")
os.environ["CORS_ORIGINS"] = "http://localhost:5173"

from fastapi.testclient import TestClient  # noqa: E402

from core.database import engine  # noqa: E402
from main import app  # noqa: E402
from models.base import Base  # noqa: E402

PASSWORD = "secret123"


async def _drop_tables():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture(scope="session", autouse=True)
def _cleanup_tmp_dir():
    yield
    shutil.rmtree(_TMP_DIR, ignore_errors=True)


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c
        c.portal.call(_drop_tables)


@pytest.fixture
def make_user(client):
    """
    Registers and signs in a new user.
    Returns (user json, auth headers).
    """
    counter = itertools.count(1)

    def _make(name=None):
        n = next(counter)
        email = f"member{n}@example.com"
        response = client.post(
            "/api/auth/signup",
            json={
                "name": name or f"Member {n}",
                "email": email,
                "username": f"member{n}",
                "password": PASSWORD,
            },
        )
        assert response.status_code == 201, response.text
        token = client.post("/api/auth/signin", json={"email": email, "password": PASSWORD})
        assert token.status_code == 200, token.text
        return response.json(), {"Authorization": f"Bearer {token.json()['accessToken']}"}

    return _make


@pytest.fixture
def image_bytes():
    from io import BytesIO

    from PIL import Image

    def _make(fmt="PNG", size=(32, 24), color=(200, 40, 40)):
        buf = BytesIO()
        Image.new("RGB", size, color).save(buf, fmt)
        return buf.getvalue()

    return _make
