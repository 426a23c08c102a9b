from uuid import uuid4

import pytest
from fastapi import HTTPException
from jose import jwt

from peptide_store.config import get_settings
from peptide_store.core.auth import create_access_token, decode_user_id
from peptide_store.models.user import User, UserRole


@pytest.fixture
def admin() -> User:
    return User(id=uuid4(), email="admin@example.com", hashed_password="x", role=UserRole.ADMIN)


def test_token_carries_user_claims(admin):
    token = create_access_token(admin)
    settings = get_settings()
    claims = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])

    assert claims["sub"] == str(admin.id)
    assert claims["email"] == "admin@example.com"
    assert claims["role"] == "admin"
    assert decode_user_id(token) == admin.id


@pytest.mark.parametrize(
    "token",
    [
        "not-a-token",
        jwt.encode({"sub": "00000000-0000-0000-0000-000000000000"}, "some-other-secret", algorithm="HS256"),
    ],
)
def test_invalid_tokens_rejected(token):
    with pytest.raises(HTTPException) as exc:
        decode_user_id(token)
    assert exc.value.status_code == 401


def test_token_without_subject_rejected():
    settings = get_settings()
    token = jwt.encode({"role": "admin"}, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)
    with pytest.raises(HTTPException):
        decode_user_id(token)
