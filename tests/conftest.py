# ABOUTME: Pytest hooks and shared fixtures. Sets AUTH_JWT_SECRET for tests before app/config load.
# ABOUTME: Loads .env so integration tests (e.g. test_evals) have AI_GATEWAY_API_KEY when run via pytest.

import os
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest
from dotenv import load_dotenv

load_dotenv()

# Required by core.config before any test imports api.main.
os.environ.setdefault("AUTH_JWT_SECRET", "test-secret-for-pytest")


@pytest.fixture
def make_token():
    """Build a provider-style HS256 JWT for a user id (random when omitted)."""
    from jose import jwt

    from core.config import AUTH_JWT_ALGORITHM, AUTH_JWT_AUDIENCE, AUTH_JWT_SECRET

    def _make(user_id=None, *, minutes: int = 60, audience: str = AUTH_JWT_AUDIENCE) -> str:
        payload = {
            "sub": str(user_id or uuid4()),
            "aud": audience,
            "exp": datetime.now(timezone.utc) + timedelta(minutes=minutes),
        }
        return jwt.encode(payload, AUTH_JWT_SECRET, algorithm=AUTH_JWT_ALGORITHM)

    return _make
