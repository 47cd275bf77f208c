# ABOUTME: Unit tests for provider token verification: decode_access_token and get_current_user_id.
# ABOUTME: Does not call the API; tests core.auth directly.

from uuid import uuid4

import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials
from jose import jwt

from core.auth import decode_access_token, get_current_user_id


def test_decode_access_token_returns_subject(make_token):
    """Token issued for a user id decodes to the same id."""
    user_id = uuid4()
    assert decode_access_token(make_token(user_id)) == user_id


def test_decode_access_token_invalid_returns_none():
    """Invalid or malformed token decodes to None."""
    assert decode_access_token("not-a-jwt") is None
    assert decode_access_token("") is None


def test_decode_access_token_expired_returns_none(make_token):
    assert decode_access_token(make_token(minutes=-5)) is None


def test_decode_access_token_wrong_audience_returns_none(make_token):
    assert decode_access_token(make_token(audience="someone-else")) is None


def test_decode_access_token_wrong_secret_returns_none():
    token = jwt.encode({"sub": str(uuid4())}, "another-secret", algorithm="HS256")
    assert decode_access_token(token) is None


def test_decode_access_token_non_uuid_subject_returns_none():
    from core.config import AUTH_JWT_SECRET

    token = jwt.encode({"sub": "not-uuid"}, AUTH_JWT_SECRET, algorithm="HS256")
    assert decode_access_token(token) is None


def test_get_current_user_id_requires_credentials():
    with pytest.raises(HTTPException) as exc_info:
        get_current_user_id(None)
    assert exc_info.value.status_code == 401
    assert exc_info.value.headers == {"WWW-Authenticate": "Bearer"}


def test_get_current_user_id_rejects_bad_token():
    creds = HTTPAuthorizationCredentials(scheme="Bearer", credentials="garbage")
    with pytest.raises(HTTPException) as exc_info:
        get_current_user_id(creds)
    assert exc_info.value.detail == "Invalid or expired token"


def test_get_current_user_id_returns_user_id(make_token):
    user_id = uuid4()
    creds = HTTPAuthorizationCredentials(scheme="Bearer", credentials=make_token(user_id))
    assert get_current_user_id(creds) == user_id
