from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
from fastapi import HTTPException
from jose import jwt

from core.config import settings
from core.security import (
    ALGORITHM,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


def test_password_hash_roundtrip():
    hashed = hash_password("hunter22")
    assert hashed != "hunter22"
    assert hashed.startswith("$2")
    assert verify_password("hunter22", hashed)
    assert not verify_password("hunter23", hashed)


def test_verify_password_handles_missing_or_malformed_hash():
    assert not verify_password("hunter22", None)
    assert not verify_password("", hash_password("x"))
    assert not verify_password("hunter22", "not-a-bcrypt-hash")


def test_access_token_carries_user_id():
    user = SimpleNamespace(id=123401, email="a@example.com")
    token, expires = create_access_token(user)

    assert decode_access_token(token) == 123401
    assert expires > datetime.now(timezone.utc)


def test_expired_token_is_rejected():
    token = jwt.encode(
        {"user_id": 1, "exp": datetime.now(timezone.utc) - timedelta(minutes=1)},
        settings.JWT_SECRET,
        algorithm=ALGORITHM,
    )
    with pytest.raises(HTTPException) as exc:
        decode_access_token(token)
    assert exc.value.status_code == 401


def test_token_signed_with_other_secret_is_rejected():
    token = jwt.encode(
        {"user_id": 1, "exp": datetime.now(timezone.utc) + timedelta(minutes=5)},
        "another-secret",
        algorithm=ALGORITHM,
    )
    with pytest.raises(HTTPException) as exc:
        decode_access_token(token)
    assert exc.value.status_code == 401


def test_token_without_user_id_is_rejected():
    token = jwt.encode(
        {"email": "a@example.com", "exp": datetime.now(timezone.utc) + timedelta(minutes=5)},
        settings.JWT_SECRET,
        algorithm=ALGORITHM,
    )
    with pytest.raises(HTTPException):
        decode_access_token(token)
