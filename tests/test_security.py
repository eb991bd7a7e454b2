"""
Tests for password hashing, session tokens and the authorization gate.
"""

from datetime import timedelta

import jwt
import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from app.core.config import settings
from app.core.security import (
    TokenData,
    authenticate,
    create_access_token,
    decode_token,
    has_role,
    hash_password,
    verify_password,
)
from app.models.user import Role

pytestmark = pytest.mark.unit


def _bearer(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


def test_password_hash_is_one_way_and_verifiable():
    hashed = hash_password("pw123")

    assert hashed != "pw123"
    assert verify_password("pw123", hashed)
    assert not verify_password("wrong", hashed)


def test_verify_password_rejects_garbage_hash():
    assert not verify_password("pw123", "not-a-hash")


def test_token_carries_id_role_and_one_hour_expiry():
    token = create_access_token(7, "admin")
    payload = jwt.decode(token, settings.JWT_SECRET, algorithms=["HS256"])

    assert payload["id"] == 7
    assert payload["role"] == "admin"
    assert payload["exp"] - payload["iat"] == 3600


def test_decode_token_round_trip():
    data = decode_token(create_access_token(3, "user"))

    assert data.id == 3
    assert data.role == "user"
    assert not data.is_admin


def test_expired_token_is_rejected():
    token = create_access_token(1, "user", expires_delta=timedelta(seconds=-10))

    with pytest.raises(HTTPException) as exc:
        decode_token(token)
    assert exc.value.status_code == 401
    assert exc.value.detail == "Token has expired"


def test_token_signed_with_other_secret_is_rejected():
    token = create_access_token(1, "user", secret="someone-else")

    with pytest.raises(HTTPException) as exc:
        decode_token(token)
    assert exc.value.status_code == 401


def test_token_without_role_is_rejected():
    token = jwt.encode({"id": 1, "exp": 9999999999}, settings.JWT_SECRET, algorithm="HS256")

    with pytest.raises(HTTPException) as exc:
        decode_token(token)
    assert exc.value.status_code == 401


def test_authenticate_requires_credentials():
    with pytest.raises(HTTPException) as exc:
        authenticate(None)
    assert exc.value.status_code == 401
    assert exc.value.headers == {"WWW-Authenticate": "Bearer"}


def test_authenticate_accepts_valid_bearer():
    data = authenticate(_bearer(create_access_token(5, "admin")))

    assert data.id == 5
    assert data.is_admin


def test_has_role_is_a_pure_predicate():
    admin = TokenData(id=1, role="admin")
    user = TokenData(id=2, role="user")
    other = TokenData(id=3, role="manager")

    assert has_role(admin, {Role.ADMIN})
    assert not has_role(user, {Role.ADMIN})
    assert has_role(user, {Role.ADMIN, Role.USER})
    assert not has_role(other, {Role.ADMIN, Role.USER})
