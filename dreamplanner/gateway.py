# ABOUTME: Adapter for the OpenAI-compatible AI gateway: payload with the create_action_steps tool, HTTP POST, envelope parsing.
# ABOUTME: The gateway's response envelope shape is known only to this module.

import json
import logging
from typing import Any

import requests

from core.config import GatewaySettings
from core.errors import (
    MalformedResponseError,
    TransportError,
    UpstreamBillingError,
    UpstreamRateLimitError,
    UpstreamServiceError,
)
from core.schemas import MAX_STEPS, MIN_STEPS

logger = logging.getLogger(__name__)

TOOL_NAME = "create_action_steps"

ACTION_STEPS_TOOL = {
    "type": "function",
    "function": {
        "name": TOOL_NAME,
        "description": "Create a structured list of actionable steps to achieve a dream",
        "parameters": {
            "type": "object",
            "properties": {
                "steps": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "title": {
                                "type": "string",
                                "description": "Short, action-oriented title",
                            },
                            "description": {
                                "type": "string",
                                "description": "Detailed explanation of what to do and why",
                            },
                        },
                        "required": ["title", "description"],
                        "additionalProperties": False,
                    },
                    "minItems": MIN_STEPS,
                    "maxItems": MAX_STEPS,
                }
            },
            "required": ["steps"],
            "additionalProperties": False,
        },
    },
}

# Upstream error bodies are logged, truncated to this many characters.
_MAX_LOGGED_BODY_CHARS = 1000


def build_chat_payload(model: str, system_prompt: str, user_prompt: str) -> dict:
    """Chat-completions body forcing a single create_action_steps function call."""
    return {
        "model": model,
        "messages": [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ],
        "tools": [ACTION_STEPS_TOOL],
        "tool_choice": {"type": "function", "function": {"name": TOOL_NAME}},
    }


def post_chat_completion(settings: GatewaySettings, payload: dict) -> dict:
    """POST the payload to the gateway and return the decoded JSON envelope.

    Raises UpstreamRateLimitError (429), UpstreamBillingError (402), UpstreamServiceError
    (other non-2xx), TransportError (connection failure or timeout) and MalformedResponseError
    (2xx body that is not a JSON object). No retries.
    """
    headers = {
        "Authorization": f"Bearer {settings.api_key}",
        "Content-Type": "application/json",
    }
    try:
        response = requests.post(
            settings.url,
            headers=headers,
            json=payload,
            timeout=settings.timeout_seconds,
        )
    except requests.Timeout as exc:
        raise TransportError(
            f"AI gateway timed out after {settings.timeout_seconds}s"
        ) from exc
    except requests.RequestException as exc:
        raise TransportError(
            f"AI gateway request failed: {exc.__class__.__name__}"
        ) from exc

    status = response.status_code
    if not 200 <= status < 300:
        logger.error(
            "AI gateway error: %s %s", status, response.text[:_MAX_LOGGED_BODY_CHARS]
        )
        if status == 429:
            raise UpstreamRateLimitError("AI gateway rate limited the request")
        if status == 402:
            raise UpstreamBillingError("AI gateway reported exhausted credits")
        raise UpstreamServiceError(f"AI gateway returned HTTP {status}", status)

    try:
        envelope = response.json()
    except ValueError as exc:
        raise MalformedResponseError("AI gateway response is not JSON") from exc
    if not isinstance(envelope, dict):
        raise MalformedResponseError("AI gateway response is not a JSON object")
    return envelope


def extract_tool_arguments(envelope: dict) -> str:
    """Return the raw JSON arguments of the first function call in the envelope.

    Raises MalformedResponseError when the envelope carries no function call.
    """
    try:
        call = envelope["choices"][0]["message"]["tool_calls"][0]
        arguments = call["function"]["arguments"]
    except (KeyError, IndexError, TypeError) as exc:
        raise MalformedResponseError("No tool call in AI response") from exc
    # Some gateways hand back the arguments already decoded.
    if isinstance(arguments, dict):
        return json.dumps(arguments)
    if not isinstance(arguments, str):
        raise MalformedResponseError("Tool call arguments are not a JSON string")
    return arguments


def extract_usage(envelope: dict) -> tuple[int, int]:
    """Return (prompt_tokens, completion_tokens); zeros when the gateway omits usage."""
    usage: Any = envelope.get("usage") or {}
    if not isinstance(usage, dict):
        return (0, 0)
    return (
        _token_count(usage.get("prompt_tokens")),
        _token_count(usage.get("completion_tokens")),
    )


def _token_count(raw: Any) -> int:
    """Usage is telemetry only; unreadable counts become 0 rather than failing the call."""
    try:
        return max(0, int(raw or 0))
    except (TypeError, ValueError, OverflowError):
        return 0
