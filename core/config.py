# ABOUTME: Shared app configuration and constants used across API, generator and UI (core package).
# ABOUTME: Gateway settings are read per call via load_gateway_settings() so tests can inject their own.

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

DEFAULT_DREAMS_PAGE_SIZE = 20
MAX_DREAMS_PAGE_SIZE = 100
DREAM_TITLE_MAX_CHARS = 100

# Auth: tokens are issued by the external auth provider and signed with this shared secret.
_AUTH_JWT_SECRET = os.environ.get("AUTH_JWT_SECRET")
if not _AUTH_JWT_SECRET:
    raise ValueError(
        "AUTH_JWT_SECRET environment variable must be set. For local dev, add AUTH_JWT_SECRET=your-secret to .env."
    )
AUTH_JWT_SECRET = _AUTH_JWT_SECRET
AUTH_JWT_ALGORITHM = "HS256"
AUTH_JWT_AUDIENCE = os.environ.get("AUTH_JWT_AUDIENCE", "authenticated")

# Every response carries these, including errors and preflight answers.
CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
    "Access-Control-Allow-Methods": "GET, POST, PATCH, DELETE, OPTIONS",
}

DEFAULT_GATEWAY_URL = "https://ai.gateway.lovable.dev/v1/chat/completions"
DEFAULT_GATEWAY_MODEL = "google/gemini-2.5-flash"
_DEFAULT_GATEWAY_TIMEOUT_SECONDS = 60.0


@dataclass(frozen=True)
class GatewaySettings:
    """Connection settings for the AI gateway. api_key is None when not configured."""

    api_key: str | None
    url: str = DEFAULT_GATEWAY_URL
    model: str = DEFAULT_GATEWAY_MODEL
    timeout_seconds: float = _DEFAULT_GATEWAY_TIMEOUT_SECONDS


def _parse_timeout_seconds() -> float:
    raw = os.environ.get(
        "AI_GATEWAY_TIMEOUT_SECONDS", str(_DEFAULT_GATEWAY_TIMEOUT_SECONDS)
    )
    try:
        value = float(raw)
    except ValueError:
        return _DEFAULT_GATEWAY_TIMEOUT_SECONDS
    return value if value > 0 else _DEFAULT_GATEWAY_TIMEOUT_SECONDS


def load_gateway_settings() -> GatewaySettings:
    """Read gateway settings from the environment at call time (FastAPI dependency)."""
    return GatewaySettings(
        api_key=os.environ.get("AI_GATEWAY_API_KEY") or None,
        url=os.environ.get("AI_GATEWAY_URL", DEFAULT_GATEWAY_URL),
        model=os.environ.get("AI_GATEWAY_MODEL", DEFAULT_GATEWAY_MODEL),
        timeout_seconds=_parse_timeout_seconds(),
    )
